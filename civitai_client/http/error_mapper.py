"""
Mapping of remote error responses to Error values.

Every non-2xx response, and every HTML page served in place of JSON,
becomes an Error with code REMOTE_ERROR. The HTTP status is carried as a
sub-code ("not_found", "rate_limited", ...) and the remote's own message
is preserved verbatim when the body has one.
"""

import json
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Dict, Optional, Tuple

from pydantic import ValidationError

from civitai_client.http.transport import TransportResponse
from civitai_client.kernel.errors import ErrorCode
from civitai_client.kernel.result import Error
from civitai_client.schemas.common import ApiErrorResponse

STATUS_SUB_CODES: Dict[int, str] = {
    204: "no_content",
    301: "moved_permanently",
    307: "temporary_redirect",
    308: "permanent_redirect",
    400: "bad_request",
    401: "unauthorized",
    402: "insufficient_credits",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    406: "not_acceptable",
    409: "conflict",
    422: "validation_failed",
    429: "rate_limited",
    431: "request_header_fields_too_large",
    451: "unavailable_for_legal_reasons",
    500: "server_error",
    501: "not_implemented",
    502: "bad_gateway",
    503: "service_unavailable",
    504: "gateway_timeout",
    505: "http_version_not_supported",
    508: "loop_detected",
}

DEFAULT_MESSAGES: Dict[int, str] = {
    204: "The server returned no content (204).",
    400: "Bad request. The server could not understand the request.",
    401: "Unauthorized. Check API key or permissions.",
    402: "Payment required. Insufficient credits.",
    403: "Forbidden. You do not have permission to access this resource.",
    404: "Not found. The requested resource does not exist.",
    405: "Method not allowed. The HTTP method is not supported for this endpoint.",
    409: "Conflict. The request conflicts with the current state of the resource.",
    422: "Validation failed. Check the request parameters.",
    429: "Rate limit exceeded.",
    500: "Internal server error.",
    501: "Not implemented. The server does not support the requested functionality.",
    502: "Bad gateway. The server received an invalid response from an upstream server.",
    503: "Service unavailable. The server is temporarily overloaded or under maintenance.",
    504: "Gateway timeout. The server did not receive a timely response from an upstream server.",
}

CLOUDFLARE_MARKERS = ("cloudflare", "cf-ray", "__cf_")

# (markers, description) checked in order against a Cloudflare page
CLOUDFLARE_PAGES: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("error 520", "web server is returning an unknown error"), "520 - Web server returned an unknown error"),
    (("error 521", "web server is down"), "521 - Origin server is down"),
    (("error 522", "connection timed out"), "522 - Connection to origin server timed out"),
    (("error 523", "origin is unreachable"), "523 - Origin server is unreachable"),
    (("error 524", "a timeout occurred"), "524 - Origin server response timed out"),
    (("error 525", "ssl handshake failed"), "525 - SSL handshake with origin server failed"),
    (("error 526", "invalid ssl certificate"), "526 - Invalid SSL certificate on origin server"),
    (("error 530",), "530 - Origin DNS error or Cloudflare error"),
    (("checking your browser", "challenge-platform", "just a moment"),
     "Browser challenge - DDoS protection or bot detection triggered"),
    (("access denied", "error 1015"), "1015 - Rate limited by Cloudflare"),
    (("error 1020", "firewall"), "1020 - Blocked by Cloudflare firewall rules"),
)


def sub_code_for_status(status_code: int) -> str:
    return STATUS_SUB_CODES.get(status_code, "http_error")


def default_message(status_code: int) -> str:
    return DEFAULT_MESSAGES.get(status_code, f"HTTP error {status_code}.")


def is_json_content_type(content_type: Optional[str]) -> bool:
    """Missing content type is treated as JSON."""
    if not content_type:
        return True
    return "json" in content_type.lower()


def parse_retry_after(value: Optional[str]) -> Optional[float]:
    """Retry-After as seconds; accepts delta-seconds or an HTTP date."""
    if not value or not value.strip():
        return None
    value = value.strip()
    if value.isdigit():
        return float(value)
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return max((when - datetime.now(timezone.utc)).total_seconds(), 0.0)


def detect_cloudflare_page(content: str) -> Optional[str]:
    """Describe the kind of Cloudflare/HTML error page, or None for other content."""
    lowered = content.lower()
    if not any(marker in lowered for marker in CLOUDFLARE_MARKERS):
        if "<!doctype" in lowered or "<html" in lowered:
            return "HTML response (possible proxy or CDN error)"
        return None
    for markers, description in CLOUDFLARE_PAGES:
        if any(marker in lowered for marker in markers):
            return description
    return "Cloudflare error page"


def map_non_json_response(response: TransportResponse) -> Error:
    """Error for a response whose content type is not JSON."""
    content_type = response.content_type or "unknown"
    page = detect_cloudflare_page(response.text or "")
    if page is not None:
        return Error(
            code=ErrorCode.REMOTE_ERROR,
            message=(
                f"Cloudflare error: {page}. HTTP Status: {response.status_code}, "
                f"Content-Type: {content_type}. The Civitai origin server may be "
                "experiencing issues. Please try again later."
            ),
            sub_code="cloudflare",
            status_code=response.status_code,
            retry_after=parse_retry_after(response.header("retry-after")),
        )

    if response.is_success:
        return Error(
            code=ErrorCode.DECODE_FAILURE,
            message=f"Received unexpected content type: {content_type}. Expected JSON response from API.",
            sub_code="unexpected_content_type",
            status_code=response.status_code,
        )
    # Plain-text error bodies carry a usable message
    return map_error_response(response)


def _parse_error_body(text: str) -> Optional[ApiErrorResponse]:
    try:
        data = json.loads(text)
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    try:
        body = ApiErrorResponse.model_validate(data)
    except ValidationError:
        return None
    return body if body.is_recognized else None


def map_error_response(response: TransportResponse) -> Error:
    """Error for a non-2xx JSON (or body-less) response."""
    status = response.status_code
    sub_code = sub_code_for_status(status)
    retry_after = parse_retry_after(response.header("retry-after"))
    text = response.text or ""

    if text.strip():
        body = _parse_error_body(text)
        if body is not None:
            errors = body.errors or {}
            return Error(
                code=ErrorCode.REMOTE_ERROR,
                message=body.best_message or default_message(status),
                sub_code="validation_failed" if errors else sub_code,
                status_code=status,
                retry_after=retry_after,
                trace_id=body.trace_id,
                errors=errors,
            )
        return Error(
            code=ErrorCode.REMOTE_ERROR,
            message=text,
            sub_code=sub_code,
            status_code=status,
            retry_after=retry_after,
        )

    message = default_message(status)
    if status == 429 and retry_after is not None:
        message = f"{message.rstrip('.')}. Retry after {retry_after:.0f}s."
    return Error(
        code=ErrorCode.REMOTE_ERROR,
        message=message,
        sub_code=sub_code,
        status_code=status,
        retry_after=retry_after,
    )
