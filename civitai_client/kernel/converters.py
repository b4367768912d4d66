"""
Converter table for enum-valued DTO fields.

Each enum type gets one EnumConverter, cached in a table keyed by the type.
WireEnum(SomeEnum) returns an Annotated pydantic type whose validator and
serializer go through the converter, which in turn dispatches through the
EnumStringRegistry.

The registry used for decoding is taken from the validation context when
provided (Model.model_validate(data, context={"registry": reg})), otherwise
the process registry.
"""

import threading
from enum import Enum
from typing import Annotated, Any, Dict, Generic, Optional, Type, TypeVar

from pydantic import BeforeValidator, PlainSerializer, ValidationInfo

from civitai_client.kernel.registry import EnumStringRegistry, get_registry

E = TypeVar("E", bound=Enum)

REGISTRY_CONTEXT_KEY = "registry"


def registry_from_context(info: Optional[ValidationInfo]) -> EnumStringRegistry:
    context = info.context if info is not None else None
    if isinstance(context, dict):
        registry = context.get(REGISTRY_CONTEXT_KEY)
        if isinstance(registry, EnumStringRegistry):
            return registry
    return get_registry()


class EnumConverter(Generic[E]):
    """Encode/decode one enum type through a registry."""

    def __init__(self, enum_type: Type[E]):
        self.enum_type = enum_type

    def decode(self, value: Any, registry: Optional[EnumStringRegistry] = None) -> Any:
        # Members pass through; None and non-strings are left for pydantic to judge
        if isinstance(value, self.enum_type) or not isinstance(value, str):
            return value
        return (registry or get_registry()).from_wire(self.enum_type, value)

    def encode(self, value: E, registry: Optional[EnumStringRegistry] = None) -> str:
        return (registry or get_registry()).to_wire(self.enum_type, value)

    def validator(self, value: Any, info: ValidationInfo) -> Any:
        return self.decode(value, registry_from_context(info))

    def serializer(self, value: E) -> str:
        return self.encode(value)

    def __repr__(self) -> str:
        return f"EnumConverter({self.enum_type.__name__})"


_converters: Dict[type, EnumConverter] = {}
_converters_lock = threading.Lock()


def converter_for(enum_type: Type[E]) -> EnumConverter[E]:
    """Cached converter for an enum type."""
    converter = _converters.get(enum_type)
    if converter is None:
        with _converters_lock:
            converter = _converters.setdefault(enum_type, EnumConverter(enum_type))
    return converter


def WireEnum(enum_type: Type[E]) -> Any:
    """Annotated type for a DTO field carrying a registry-mapped enum."""
    converter = converter_for(enum_type)
    return Annotated[
        enum_type,
        BeforeValidator(converter.validator),
        PlainSerializer(converter.serializer, return_type=str, when_used="json"),
    ]
