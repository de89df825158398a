"""
Contract errors

Exceptions raised by contract registration and call verification, plus a
taxonomy that explains each error code in plain language (for the people who
read the logs or the RPC fault message).

Every error carries enough structured detail (position, expected vs actual)
to be rendered by the dispatcher without re-deriving any state.
"""
from enum import Enum
from typing import Any, Optional

from .schemas import ErrorDetail


class ValidationErrorKind(str, Enum):
    UNKNOWN_TYPE = "UNKNOWN_TYPE"
    INVALID_OPTIONS = "INVALID_OPTIONS"
    INVALID_PARAMS = "INVALID_PARAMS"


class ContractError(Exception):
    """Base class of every error raised by the contract layer."""

    code = "CONTRACT_ERROR"

    def __init__(self, message: str, method_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.method_id = method_id

    def to_detail(self) -> ErrorDetail:
        return ErrorDetail(code=self.code, message=self.message, field=self.method_id)


class ContractValidationError(ContractError, ValueError):
    """Raised at registration time when a contract declaration is rejected."""

    def __init__(
        self,
        kind: ValidationErrorKind,
        message: str,
        *,
        method_id: Optional[str] = None,
        token: Any = None,
        position: Optional[int] = None,
    ):
        super().__init__(message, method_id=method_id)
        self.kind = kind
        self.token = token
        self.position = position

    @property
    def code(self) -> str:
        return self.kind.value

    @classmethod
    def unknown_type(cls, method_id: Optional[str], token: Any, position: int) -> "ContractValidationError":
        return cls(
            ValidationErrorKind.UNKNOWN_TYPE,
            f"rpc option params of {method_id} is incorrect, the type {token!r} "
            f"at position {position} is unknown",
            method_id=method_id,
            token=token,
            position=position,
        )

    def to_detail(self) -> ErrorDetail:
        return ErrorDetail(
            code=self.code,
            message=self.message,
            field=self.method_id,
            position=self.position,
            actual=None if self.token is None else repr(self.token),
        )


class TypeMismatchError(ContractError, TypeError):
    """Raised at call time when an argument does not match its declared category."""

    code = "TYPE_MISMATCH"

    def __init__(
        self,
        *,
        position: int,
        method_id: str,
        expected_category,
        actual_kind: str,
        expected_token=None,
    ):
        message = (
            f"{position}. parameter of {method_id} has wrong type "
            f"<{actual_kind}> use type <{expected_category.value}> instead"
        )
        super().__init__(message, method_id=method_id)
        self.position = position
        self.expected_category = expected_category
        self.actual_kind = actual_kind
        self.expected_token = expected_token

    def to_detail(self) -> ErrorDetail:
        return ErrorDetail(
            code=self.code,
            message=self.message,
            field=self.method_id,
            position=self.position,
            expected=self.expected_category.value,
            actual=self.actual_kind,
        )


class UnknownMethodError(ContractError, LookupError):
    """Raised when a dispatched method has no implementation."""

    code = "UNKNOWN_METHOD"

    def __init__(self, method_id: str, qualified_name: Optional[str] = None):
        name = qualified_name or method_id
        super().__init__(f"method {name} is not implemented by this service", method_id=method_id)


class ErrorTaxonomy:
    """Map error codes to severity and a plain-language explanation."""

    CODES = {
        'UNKNOWN_TYPE': {
            'severity': 'critical',
            'stage': 'registration',
            'pattern': 'A declared param token has no supported value category',
            'example': "rpc('add', params=['int', 'bogus']) or params=['struct']",
            'impact': 'The method contract is not stored; calls are not checked until it is fixed',
        },
        'INVALID_OPTIONS': {
            'severity': 'critical',
            'stage': 'registration',
            'pattern': 'Method options are not a mapping',
            'example': "register('check_balance', 'options')",
            'impact': 'The method contract is not stored',
        },
        'INVALID_PARAMS': {
            'severity': 'critical',
            'stage': 'registration',
            'pattern': 'params is an unordered collection (mapping or set)',
            'example': "rpc('add', params={'int', 'float'})",
            'impact': 'The method contract is not stored; positions would be ambiguous',
        },
        'TYPE_MISMATCH': {
            'severity': 'high',
            'stage': 'call',
            'pattern': 'An argument does not match the declared category, or is missing',
            'example': "add('as', 'b') against params=['int', 'int']",
            'impact': 'The call is rejected before the method body runs',
        },
        'UNKNOWN_METHOD': {
            'severity': 'medium',
            'stage': 'call',
            'pattern': 'The dispatched method has no implementation',
            'example': "call('sin', [8]) on a service that never defined sin",
            'impact': 'The call is rejected',
        },
    }

    @classmethod
    def classify(cls, code: str) -> dict:
        """
        Retrieve the explanation for an error code.

        Args:
            code: One of the keys of CODES

        Returns:
            Dict with severity, stage, pattern, example, impact
        """
        if code in cls.CODES:
            return cls.CODES[code]
        return {
            'severity': 'unknown',
            'stage': 'unknown',
            'pattern': 'Unknown error code',
            'example': '',
            'impact': 'See logs for details',
        }

    @classmethod
    def all_codes(cls) -> list:
        return list(cls.CODES.keys())

    @classmethod
    def severity_level(cls, code: str) -> str:
        return cls.classify(code).get('severity', 'unknown')
