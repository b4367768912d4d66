"""
Kernel Layer

Leaf components everything else builds on:
- Enum String Registry (bidirectional enum <-> wire string table)
- Converter table (registry-backed pydantic field types)
- Result model (Success / Failure tagged union)
- Error taxonomy
"""

from civitai_client.kernel.converters import EnumConverter, WireEnum, converter_for
from civitai_client.kernel.errors import (
    CivitaiClientError,
    DuplicateMappingConflict,
    ErrorCode,
    InvalidQueryParameter,
    UnknownWireValue,
    UnmappedVariant,
)
from civitai_client.kernel.registry import EnumStringRegistry, get_registry, reset_registry
from civitai_client.kernel.result import Error, Failure, Result, Success, failure

__all__ = [
    # Registry
    "EnumStringRegistry",
    "get_registry",
    "reset_registry",
    # Converters
    "EnumConverter",
    "WireEnum",
    "converter_for",
    # Result
    "Error",
    "Failure",
    "Result",
    "Success",
    "failure",
    # Errors
    "ErrorCode",
    "CivitaiClientError",
    "DuplicateMappingConflict",
    "InvalidQueryParameter",
    "UnknownWireValue",
    "UnmappedVariant",
]
