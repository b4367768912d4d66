"""
HTTP layer: transport, error mapping and response decoding.
"""

from civitai_client.http.error_mapper import map_error_response, map_non_json_response, parse_retry_after
from civitai_client.http.response_handler import handle_paged_response, handle_response
from civitai_client.http.transport import ApiRequest, HttpxTransport, Transport, TransportResponse

__all__ = [
    "ApiRequest",
    "HttpxTransport",
    "Transport",
    "TransportResponse",
    "handle_paged_response",
    "handle_response",
    "map_error_response",
    "map_non_json_response",
    "parse_retry_after",
]
