"""
Turns a TransportResponse into a typed Result.

Order of checks:
1. Non-JSON content type -> Cloudflare/HTML page or unexpected content type
2. Non-2xx -> REMOTE_ERROR via the error mapper
3. Empty/null body -> DECODE_FAILURE (empty_response)
4. Pydantic validation with the registry in the validation context;
   registry misses surface as UNKNOWN_WIRE_VALUE, other shape problems
   as DECODE_FAILURE naming the first offending field.
"""

import json
from functools import lru_cache
from typing import Any, Optional, Type, TypeVar

from pydantic import TypeAdapter, ValidationError

from civitai_client.http.error_mapper import is_json_content_type, map_error_response, map_non_json_response
from civitai_client.http.transport import TransportResponse
from civitai_client.kernel.converters import REGISTRY_CONTEXT_KEY
from civitai_client.kernel.errors import CivitaiClientError, ErrorCode, UnknownWireValue
from civitai_client.kernel.registry import EnumStringRegistry, get_registry
from civitai_client.kernel.result import Error, Failure, Result, Success, failure
from civitai_client.logging_config import get_logger
from civitai_client.schemas.common import PagedResult, PaginationMetadata

logger = get_logger(__name__)

T = TypeVar("T")

NEXT_CURSOR_HEADER = "x-next-cursor"
MAX_REPORTED_ERRORS = 5


@lru_cache(maxsize=None)
def _adapter(target: Any) -> TypeAdapter:
    return TypeAdapter(target)


def _loc(loc: tuple) -> str:
    return ".".join(str(part) for part in loc)


def error_from_validation(exc: ValidationError) -> Error:
    """Map a pydantic ValidationError to UNKNOWN_WIRE_VALUE or DECODE_FAILURE."""
    errors = exc.errors()
    for err in errors:
        cause = (err.get("ctx") or {}).get("error")
        if isinstance(cause, UnknownWireValue):
            return Error(
                code=ErrorCode.UNKNOWN_WIRE_VALUE,
                message=cause.message,
                detail=repr(cause.value),
                field=_loc(err["loc"]),
            )

    summary = "; ".join(f"{_loc(err['loc'])}: {err['msg']}" for err in errors[:MAX_REPORTED_ERRORS])
    if len(errors) > MAX_REPORTED_ERRORS:
        summary += f"; ... {len(errors) - MAX_REPORTED_ERRORS} more"
    return Error(
        code=ErrorCode.DECODE_FAILURE,
        message=f"Response did not match the expected shape ({exc.error_count()} error(s)).",
        detail=summary,
        sub_code="shape_mismatch",
        field=_loc(errors[0]["loc"]) if errors else None,
    )


def parse_json(response: TransportResponse) -> Result[Any]:
    """Check status and content type, then parse the body as JSON."""
    if not is_json_content_type(response.content_type):
        return Failure(map_non_json_response(response))
    if not response.is_success:
        return Failure(map_error_response(response))

    text = response.text or ""
    if not text.strip():
        return failure(
            ErrorCode.DECODE_FAILURE,
            "The response body was empty.",
            sub_code="empty_response",
            status_code=response.status_code,
        )
    try:
        data = json.loads(text)
    except ValueError as e:
        return failure(
            ErrorCode.DECODE_FAILURE,
            f"Failed to parse JSON response: {e}",
            sub_code="invalid_json",
            status_code=response.status_code,
        )
    if data is None:
        return failure(
            ErrorCode.DECODE_FAILURE,
            "JSON body was null (possible empty or null response).",
            sub_code="empty_response",
            status_code=response.status_code,
        )
    return Success(data)


def handle_response(
    response: TransportResponse,
    target: Type[T],
    registry: Optional[EnumStringRegistry] = None,
) -> Result[T]:
    """Decode a response body into `target` (a model class or typing construct)."""
    parsed = parse_json(response)
    if isinstance(parsed, Failure):
        return parsed

    context = {REGISTRY_CONTEXT_KEY: registry or get_registry()}
    try:
        value = _adapter(target).validate_python(parsed.value, context=context)
    except ValidationError as e:
        error = error_from_validation(e)
        logger.warning("Could not decode %s: %s", getattr(target, "__name__", target), error)
        return Failure(error)
    except CivitaiClientError as e:
        return Failure(Error.from_exception(e))
    return Success(value)


def handle_paged_response(
    response: TransportResponse,
    item_type: Type[T],
    registry: Optional[EnumStringRegistry] = None,
) -> Result[PagedResult[T]]:
    """Decode an {items, metadata} body; metadata falls back to the X-Next-Cursor header."""
    result = handle_response(response, PagedResult[item_type], registry)
    if isinstance(result, Failure):
        return result

    page = result.value
    header_cursor = response.header(NEXT_CURSOR_HEADER)
    if page.metadata is None and header_cursor and header_cursor.strip():
        page = page.model_copy(
            update={"metadata": PaginationMetadata(next_cursor=header_cursor.strip())}
        )
    return Success(page)
