"""
Error taxonomy for the client.

ErrorCode values travel inside Failure results. The exception classes are
raised internally (registry lookups, query validation) and converted to
Failure at the execute() boundary. DuplicateMappingConflict is the one
exception allowed to reach callers: it signals a programming error in a
feature module's startup mappings.
"""

from enum import Enum
from typing import Any, Optional


class ErrorCode(str, Enum):
    """Origin of a Failure."""
    UNMAPPED_VARIANT = "unmapped_variant"
    UNKNOWN_WIRE_VALUE = "unknown_wire_value"
    INVALID_QUERY_PARAMETER = "invalid_query_parameter"
    TRANSPORT_FAILURE = "transport_failure"
    REMOTE_ERROR = "remote_error"
    DECODE_FAILURE = "decode_failure"
    CANCELLED = "cancelled"
    DUPLICATE_MAPPING_CONFLICT = "duplicate_mapping_conflict"  # raised only


class CivitaiClientError(Exception):
    """Base class for client exceptions."""

    code: ErrorCode

    def __init__(self, message: str, *, field: Optional[str] = None, value: Any = None):
        super().__init__(message)
        self.message = message
        self.field = field
        self.value = value


class DuplicateMappingConflict(CivitaiClientError):
    """A (type, variant) or (type, wire string) pair was registered twice with different partners."""

    code = ErrorCode.DUPLICATE_MAPPING_CONFLICT


class UnmappedVariant(CivitaiClientError, LookupError):
    """An enum variant has no wire string in the registry."""

    code = ErrorCode.UNMAPPED_VARIANT


class UnknownWireValue(CivitaiClientError, ValueError):
    """A wire string does not map back to any variant of the target enum.

    Subclasses ValueError so pydantic reports it as a field validation
    error while keeping the original exception in the error context.
    """

    code = ErrorCode.UNKNOWN_WIRE_VALUE


class InvalidQueryParameter(CivitaiClientError, ValueError):
    """Builder state violates a documented constraint."""

    code = ErrorCode.INVALID_QUERY_PARAMETER
