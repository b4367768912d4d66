"""
Typed async client for the Civitai REST API.

    from civitai_client import CivitaiClient, Success, Failure
    from civitai_client.schemas import ModelType
"""

from civitai_client.client import CivitaiClient, initialize_registry
from civitai_client.config import Settings, get_settings
from civitai_client.generation.air import AirIdentifier
from civitai_client.http.transport import ApiRequest, HttpxTransport, Transport, TransportResponse
from civitai_client.kernel import (
    CivitaiClientError,
    DuplicateMappingConflict,
    EnumStringRegistry,
    Error,
    ErrorCode,
    Failure,
    Result,
    Success,
    get_registry,
    reset_registry,
)
from civitai_client.logging_config import configure_logging
from civitai_client.query.pagination import iterate_pages
from civitai_client.schemas.common import PagedResult, PaginationMetadata

__version__ = "0.1.0"

__all__ = [
    "AirIdentifier",
    "ApiRequest",
    "CivitaiClient",
    "CivitaiClientError",
    "DuplicateMappingConflict",
    "EnumStringRegistry",
    "Error",
    "ErrorCode",
    "Failure",
    "HttpxTransport",
    "PagedResult",
    "PaginationMetadata",
    "Result",
    "Settings",
    "Success",
    "Transport",
    "TransportResponse",
    "configure_logging",
    "get_registry",
    "get_settings",
    "initialize_registry",
    "iterate_pages",
    "reset_registry",
    "__version__",
]
