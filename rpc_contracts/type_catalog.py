"""
Type Catalog

Maps declared parameter type tokens to runtime value categories.

A token can be spelled several ways:
- Symbolic name: 'int', 'i4', 'integer', 'dateTime.iso8601', ...
- Native type: int, bool, datetime.datetime, numpy.float64, ...
- Canonical TypeToken member

Aliases are resolved once (parse_token). Everything past that boundary works
with the canonical TypeToken only.

The same categories are used to classify actual call arguments, so the tables
below are the only place where type meaning is defined.
"""
from __future__ import annotations

import datetime
import xmlrpc.client
from enum import Enum
from types import MappingProxyType
from typing import Any, Optional

import numpy as np
import pandas as pd


class TypeToken(str, Enum):
    """Canonical parameter type of a method contract."""

    INTEGER = "integer"
    STRING = "string"
    ARRAY = "array"
    STRUCT = "struct"  # reserved, never matches
    BOOLEAN = "boolean"
    BASE64 = "base64"
    DATETIME = "datetime"
    FLOAT = "float"


class ValueCategory(str, Enum):
    """Runtime classification bucket of a value."""

    INTEGER = "integer"
    TEXT = "text"
    SEQUENCE = "sequence"
    BOOLEAN = "boolean"
    TIME = "time"
    FLOAT = "float"
    UNSUPPORTED = "unsupported"


MISSING_KIND = "missing"


_NAME_ALIASES = MappingProxyType({
    "int": TypeToken.INTEGER,
    "i4": TypeToken.INTEGER,
    "integer": TypeToken.INTEGER,
    "string": TypeToken.STRING,
    "str": TypeToken.STRING,
    "array": TypeToken.ARRAY,
    "list": TypeToken.ARRAY,
    "struct": TypeToken.STRUCT,
    "boolean": TypeToken.BOOLEAN,
    "bool": TypeToken.BOOLEAN,
    "base64": TypeToken.BASE64,
    "datetime": TypeToken.DATETIME,
    "datetime.iso8601": TypeToken.DATETIME,
    "time": TypeToken.DATETIME,
    "double": TypeToken.FLOAT,
    "float": TypeToken.FLOAT,
    "real": TypeToken.FLOAT,
})

# Native types per token, used both to resolve declared types and to
# classify actual values. Order matters: bool is an int subclass.
_NATIVE_TYPES = (
    ((bool, np.bool_), TypeToken.BOOLEAN),
    ((int, np.integer), TypeToken.INTEGER),
    ((float, np.floating), TypeToken.FLOAT),
    ((str,), TypeToken.STRING),
    ((list, tuple, np.ndarray, pd.Series), TypeToken.ARRAY),
    ((dict,), TypeToken.STRUCT),
    ((datetime.date, np.datetime64, xmlrpc.client.DateTime), TypeToken.DATETIME),
)

_CATEGORIES = MappingProxyType({
    TypeToken.INTEGER: ValueCategory.INTEGER,
    TypeToken.STRING: ValueCategory.TEXT,
    TypeToken.ARRAY: ValueCategory.SEQUENCE,
    TypeToken.STRUCT: ValueCategory.UNSUPPORTED,
    TypeToken.BOOLEAN: ValueCategory.BOOLEAN,
    TypeToken.BASE64: ValueCategory.TEXT,
    TypeToken.DATETIME: ValueCategory.TIME,
    TypeToken.FLOAT: ValueCategory.FLOAT,
})


def parse_token(raw: Any) -> Optional[TypeToken]:
    """Resolve any accepted spelling of a type token to its canonical member.

    Returns None for unknown spellings instead of raising.
    """
    if isinstance(raw, TypeToken):
        return raw
    if isinstance(raw, str):
        return _NAME_ALIASES.get(raw.strip().lower())
    if isinstance(raw, type):
        for native_types, token in _NATIVE_TYPES:
            if issubclass(raw, native_types):
                return token
    return None


def category_of(token: TypeToken) -> ValueCategory:
    return _CATEGORIES[token]


def resolve(raw: Any) -> Optional[ValueCategory]:
    """Return the value category a declared token stands for (None if unknown)."""
    token = parse_token(raw)
    if token is None:
        return None
    return category_of(token)


def classify(value: Any) -> Optional[ValueCategory]:
    """
    Classify an actual argument value.

    Uses the same native type table as parse_token, so classify(v) is always
    resolve(type(v)). Booleans come first: True/False never pass as integers
    and integers never pass as booleans. A dict classifies as UNSUPPORTED;
    values outside every category (None, bytes, ...) return None.
    """
    for native_types, token in _NATIVE_TYPES:
        if isinstance(value, native_types):
            return category_of(token)
    return None


def runtime_kind(value: Any) -> str:
    """Type name of an actual argument, used in error messages."""
    return type(value).__name__
