"""Registration-time validation of raw method options."""
from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence, Set
from typing import Any, List, Optional

from .errors import ContractValidationError, ValidationErrorKind
from .schemas import MethodContract
from .type_catalog import TypeToken, ValueCategory, category_of, parse_token

logger = logging.getLogger(__name__)

PARAMS_KEY = "params"


def _normalize_params(method_id: Optional[str], params: Any) -> List[Any]:
    if params is None:
        return []
    if isinstance(params, (Mapping, Set)):
        raise ContractValidationError(
            ValidationErrorKind.INVALID_PARAMS,
            f"rpc option params of {method_id} has to be a token or an ordered sequence "
            f"of tokens, got {type(params).__name__}",
            method_id=method_id,
        )
    # str and bytes are sequences but stand for a single token here
    if isinstance(params, (str, bytes)):
        return [params]
    if isinstance(params, (Sequence, Iterator)):
        return list(params)
    return [params]


def normalize_and_validate(method_id: Optional[str], raw_options: Any = None) -> MethodContract:
    """
    Turn raw method options into an immutable MethodContract.

    Args:
        method_id: Method the options are declared for
        raw_options: Mapping of options; only 'params' is interpreted

    Returns:
        MethodContract with canonical TypeTokens

    Raises:
        ContractValidationError: options are not a mapping, params is unordered,
            or a token is unknown/unsupported (first offending token only)
    """
    if raw_options is None:
        raw_options = {}
    if not isinstance(raw_options, Mapping):
        raise ContractValidationError(
            ValidationErrorKind.INVALID_OPTIONS,
            f"options of {method_id} have to be a mapping, got {type(raw_options).__name__}",
            method_id=method_id,
        )
    bad_keys = [key for key in raw_options if not isinstance(key, str)]
    if bad_keys:
        raise ContractValidationError(
            ValidationErrorKind.INVALID_OPTIONS,
            f"option names of {method_id} have to be strings, got {bad_keys!r}",
            method_id=method_id,
        )

    tokens: List[TypeToken] = []
    for position, raw in enumerate(_normalize_params(method_id, raw_options.get(PARAMS_KEY)), start=1):
        token = parse_token(raw)
        if token is None or category_of(token) is ValueCategory.UNSUPPORTED:
            logger.warning("rejected contract for %s: unknown type %r at position %d", method_id, raw, position)
            raise ContractValidationError.unknown_type(method_id, raw, position)
        tokens.append(token)

    options = {key: value for key, value in raw_options.items() if key != PARAMS_KEY}
    return MethodContract(method=str(method_id), params=tuple(tokens), options=options)
