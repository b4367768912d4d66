"""
HTTP transport.

The query layer depends only on the Transport protocol: one async send()
that never raises for network problems and returns a Result instead.
HttpxTransport is the default implementation on top of httpx.AsyncClient.

Retry policy: exponential backoff for 5xx and timeouts/connection errors;
on 429, wait for Retry-After (or the backoff step) while attempts remain.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol, Sequence, Tuple

import httpx

from civitai_client.config import Settings, get_settings
from civitai_client.kernel.errors import ErrorCode
from civitai_client.kernel.result import Result, Success, failure
from civitai_client.logging_config import get_logger, new_request_id, request_id_var

logger = get_logger(__name__)

RETRY_BACKOFF = (1.0, 2.0, 4.0)  # seconds


@dataclass(frozen=True)
class ApiRequest:
    """
    One outgoing call.

    `path` is relative to `base_url` (the public API host when None).
    `params` keeps order and allows repeated keys.
    """

    method: str
    path: str
    params: List[Tuple[str, str]] = field(default_factory=list)
    body: Optional[Any] = None
    base_url: Optional[str] = None


@dataclass(frozen=True)
class TransportResponse:
    """Raw response handed to the response handler. Header names are lower-cased."""

    status_code: int
    headers: Dict[str, str] = field(default_factory=dict)
    content_type: Optional[str] = None
    text: str = ""

    def header(self, name: str) -> Optional[str]:
        return self.headers.get(name.lower())

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


class Transport(Protocol):
    async def send(self, request: ApiRequest) -> Result[TransportResponse]:
        ...


def _numeric_retry_after(response: httpx.Response) -> Optional[float]:
    retry_after = response.headers.get("Retry-After")
    if retry_after and retry_after.strip().isdigit():
        return float(retry_after.strip())
    return None


class HttpxTransport:
    """
    Transport backed by httpx.AsyncClient.

    Pass `client` to reuse a configured AsyncClient (tests pass one built on
    httpx.MockTransport); it is then not closed by aclose().
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
        backoff: Sequence[float] = RETRY_BACKOFF,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.settings = settings or get_settings()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(float(self.settings.timeout_seconds)),
        )
        self._backoff = tuple(backoff) or RETRY_BACKOFF
        self._sleep = sleep

    @property
    def headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "User-Agent": self.settings.user_agent,
        }
        if self.settings.api_key:
            headers["Authorization"] = f"Bearer {self.settings.api_key}"
        return headers

    def _delay(self, attempt: int) -> float:
        return self._backoff[min(attempt, len(self._backoff) - 1)]

    async def _request_with_retry(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Perform request with exponential backoff for 5xx and timeouts. On 429, wait and retry."""
        attempts = self.settings.max_retries
        for attempt in range(attempts):
            try:
                response = await self._client.request(method, url, **kwargs)
                if response.status_code == 429:
                    if attempt < attempts - 1:
                        wait = _numeric_retry_after(response)
                        if wait is None:
                            wait = self._delay(attempt)
                        logger.warning("Rate limited on %s, retrying in %.1fs", url, wait)
                        await self._sleep(wait)
                        continue
                    return response
                if response.status_code >= 500 and attempt < attempts - 1:
                    logger.warning(
                        "Server error %d on %s, retrying (attempt %d/%d)",
                        response.status_code, url, attempt + 1, attempts,
                        extra={"status_code": response.status_code, "attempt": attempt + 1},
                    )
                    await self._sleep(self._delay(attempt))
                    continue
                return response
            except (httpx.TimeoutException, httpx.ConnectError) as e:
                if attempt == attempts - 1:
                    raise
                logger.warning(
                    "%s on %s, retrying (attempt %d/%d)",
                    type(e).__name__, url, attempt + 1, attempts,
                    extra={"attempt": attempt + 1},
                )
                await self._sleep(self._delay(attempt))
        raise ValueError(f"max_retries must be >= 1, got {attempts}")

    async def send(self, request: ApiRequest) -> Result[TransportResponse]:
        token = request_id_var.set(new_request_id())
        url = f"{request.base_url or self.settings.base_url}{request.path}"
        try:
            logger.debug("%s %s params=%s", request.method, url, request.params)
            try:
                response = await self._request_with_retry(
                    request.method,
                    url,
                    params=request.params or None,
                    json=request.body,
                    headers=self.headers,
                )
            except httpx.TimeoutException as e:
                logger.warning("Request to %s timed out: %s", url, e)
                return failure(
                    ErrorCode.TRANSPORT_FAILURE,
                    "The request timed out.",
                    sub_code="timeout",
                    detail=str(e) or type(e).__name__,
                )
            except httpx.ConnectError as e:
                logger.warning("Could not connect to %s: %s", url, e)
                return failure(
                    ErrorCode.TRANSPORT_FAILURE,
                    f"Could not connect to {url}.",
                    sub_code="connect",
                    detail=str(e) or type(e).__name__,
                )
            except httpx.HTTPError as e:
                logger.warning("HTTP request to %s failed: %s", url, e)
                return failure(
                    ErrorCode.TRANSPORT_FAILURE,
                    f"HTTP request failed: {e}",
                    sub_code="network",
                    detail=type(e).__name__,
                )
            except httpx.InvalidURL as e:
                logger.warning("Invalid request URL %s: %s", url, e)
                return failure(
                    ErrorCode.TRANSPORT_FAILURE,
                    f"Invalid request URL: {e}",
                    sub_code="invalid_url",
                    detail=type(e).__name__,
                )

            logger.debug("%s %s -> %d", request.method, url, response.status_code)
            return Success(TransportResponse(
                status_code=response.status_code,
                headers={k.lower(): v for k, v in response.headers.items()},
                content_type=response.headers.get("content-type"),
                text=response.text,
            ))
        finally:
            request_id_var.reset(token)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
