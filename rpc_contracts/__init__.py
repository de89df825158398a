# RPC parameter contracts
# Declare a type signature per exposed method and verify call arguments
# against it before the method body runs

from .errors import (
    ContractError,
    ContractValidationError,
    ErrorTaxonomy,
    TypeMismatchError,
    UnknownMethodError,
    ValidationErrorKind,
)
from .schemas import MethodContract
from .service import Service
from .store import ContractStore
from .type_catalog import TypeToken, ValueCategory, classify, parse_token, resolve
from .validator import normalize_and_validate
from .verifier import CallVerifier

__all__ = [
    'CallVerifier',
    'ContractError',
    'ContractStore',
    'ContractValidationError',
    'ErrorTaxonomy',
    'MethodContract',
    'Service',
    'TypeMismatchError',
    'TypeToken',
    'UnknownMethodError',
    'ValidationErrorKind',
    'ValueCategory',
    'classify',
    'normalize_and_validate',
    'parse_token',
    'resolve',
]
__version__ = '1.0.0'
