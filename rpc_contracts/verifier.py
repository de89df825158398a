"""
Call-time verification of arguments against stored method contracts.

Verification is short-circuiting: the first violation raises and nothing
else is checked. Only the declared prefix of the argument list is checked.

Auxiliary contract options are verified by routines looked up per option
key; keys without a routine are skipped.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

from .errors import TypeMismatchError
from .schemas import MethodContract
from .settings import settings
from .store import ContractStore
from .type_catalog import MISSING_KIND, TypeToken, category_of, classify, runtime_kind
from .validator import PARAMS_KEY

logger = logging.getLogger(__name__)

# routine(method_id, args, option_value); raises a ContractError on violation
OptionVerifier = Callable[[str, Sequence[Any], Any], None]


class CallVerifier:
    """Check actual call arguments against the contracts of one store."""

    def __init__(
        self,
        store: ContractStore,
        option_verifiers: Optional[Mapping[str, OptionVerifier]] = None,
    ):
        self._store = store
        self._option_verifiers: Dict[str, OptionVerifier] = {}
        for key, routine in (option_verifiers or {}).items():
            self.register_option(key, routine)

    def register_option(self, key: str, routine: OptionVerifier) -> None:
        if key == PARAMS_KEY:
            raise ValueError(f"option key '{PARAMS_KEY}' is reserved")
        if not callable(routine):
            raise TypeError(f"verifier for option '{key}' must be callable")
        self._option_verifiers[key] = routine

    def option_keys(self) -> list:
        return list(self._option_verifiers)

    def verify(self, method_id: str, args: Optional[Sequence[Any]] = None) -> None:
        """
        Verify args against the contract registered for method_id.

        Methods without a contract accept any arguments.

        Raises:
            TypeMismatchError: first positional mismatch (or missing argument)
            ContractError: raised by an auxiliary option routine
        """
        contract = self._store.get(method_id)
        if contract is None:
            return

        args = tuple(args) if args is not None else ()
        self.verify_params(method_id, args, contract.params)
        self._verify_options(method_id, args, contract)

        if settings.trace_calls:
            logger.debug("verified %s with %d argument(s)", method_id, len(args))

    def verify_params(self, method_id: str, args: Sequence[Any], params: Sequence[TypeToken]) -> None:
        for index, token in enumerate(params):
            expected = category_of(token)
            if index >= len(args):
                raise TypeMismatchError(
                    position=index + 1,
                    method_id=method_id,
                    expected_category=expected,
                    actual_kind=MISSING_KIND,
                    expected_token=token,
                )

            value = args[index]
            if classify(value) is not expected:
                raise TypeMismatchError(
                    position=index + 1,
                    method_id=method_id,
                    expected_category=expected,
                    actual_kind=runtime_kind(value),
                    expected_token=token,
                )

    def _verify_options(self, method_id: str, args: Sequence[Any], contract: MethodContract) -> None:
        for key, option_value in contract.options.items():
            routine = self._option_verifiers.get(key)
            if routine is not None:
                routine(method_id, args, option_value)
