"""
Pydantic models for method contracts and error payloads.
These define the exact shape the dispatch layer reads back from the core.
"""
import copy
from collections.abc import Mapping, Set
from types import MappingProxyType
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from .type_catalog import TypeToken


def _freeze(value: Any) -> Any:
    """Read-only deep copy: mappings -> mappingproxy, lists -> tuples, sets -> frozensets."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    if isinstance(value, Set):
        return frozenset(_freeze(item) for item in value)
    return copy.deepcopy(value)


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _thaw(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [_thaw(item) for item in value]
    if isinstance(value, frozenset):
        return [_thaw(item) for item in value]
    return value


class MethodContract(BaseModel):
    """Declared contract of one exposed method.

    Fully immutable: options are a read-only deep copy of what was declared,
    so a stored contract only changes by registering a new one.
    """
    model_config = ConfigDict(frozen=True)

    method: str = Field(..., description="Method identifier the contract belongs to")
    params: Tuple[TypeToken, ...] = Field(
        default=(),
        description="Expected type token per positional parameter, in declaration order",
    )
    options: Mapping[str, Any] = Field(
        default_factory=dict,
        description="Auxiliary options other than 'params' (opaque to the core, read-only)",
    )

    @field_validator("options", mode="after")
    @classmethod
    def _freeze_options(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return _freeze(value)

    @field_serializer("options")
    def _serialize_options(self, value: Mapping[str, Any]) -> dict:
        return _thaw(value)

    def to_dict(self) -> dict:
        return {
            "method": self.method,
            "params": [token.value for token in self.params],
            "options": _thaw(self.options),
        }


class ErrorDetail(BaseModel):
    """Structured error details, renderable without re-deriving any state."""
    code: str = Field(..., description="Error code, e.g. UNKNOWN_TYPE or TYPE_MISMATCH")
    message: str = Field(..., description="Human-readable message")
    field: Optional[str] = Field(None, description="Method identifier the error refers to")
    position: Optional[int] = Field(None, ge=1, description="1-based parameter position")
    expected: Optional[str] = Field(None, description="Expected token or value category")
    actual: Optional[str] = Field(None, description="Offending token or runtime kind")


class MethodSignature(BaseModel):
    """Introspection entry for one configured method."""
    name: str
    qualified_name: str = Field(..., description="Method name prefixed with the service domain")
    params: List[str] = Field(default_factory=list, description="Canonical param tokens")


class ServiceDescription(BaseModel):
    """Introspection summary of a service."""
    domain: Optional[str] = Field(None, description="Service domain (method name prefix)")
    methods: List[MethodSignature] = Field(default_factory=list)
