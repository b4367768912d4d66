"""
Immutable query builders.

A builder holds a frozen QueryState. Every where_*/with_*/order_by call
returns a new builder around a new state; the receiver is never touched,
so a partially configured builder can be branched freely and executed
concurrently from several call sites.

Invalid input is not raised at the call site. It is recorded on the state
(keyed by the parameter it concerns) and reported by params()/execute() as
Failure(INVALID_QUERY_PARAMETER) before any transport call.
"""

import asyncio
import contextlib
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Generic, Iterable, List, Mapping, Optional, Tuple, Type, TypeVar

from civitai_client.config import Settings, get_settings
from civitai_client.http.response_handler import handle_paged_response, handle_response
from civitai_client.http.transport import ApiRequest, Transport, TransportResponse
from civitai_client.kernel.errors import CivitaiClientError, ErrorCode, InvalidQueryParameter
from civitai_client.kernel.registry import EnumStringRegistry, get_registry
from civitai_client.kernel.result import Error, Failure, Result, Success, failure
from civitai_client.logging_config import get_logger
from civitai_client.schemas.common import PagedResult

logger = get_logger(__name__)

T = TypeVar("T")
B = TypeVar("B", bound="QueryBuilder")

Params = List[Tuple[str, str]]

LIMIT_PARAM = "limit"
CURSOR_PARAM = "cursor"
SORT_PARAM = "sort"
PAGE_PARAM = "page"

_EMPTY: Mapping[str, Any] = MappingProxyType({})


def _frozen(mapping: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class QueryState:
    """
    Snapshot of a builder's configuration.

    filters: wire key -> scalar value, or tuple of values for repeatable keys
    problems: wire key -> the InvalidQueryParameter recorded for it
    """

    filters: Mapping[str, Any] = field(default_factory=lambda: _EMPTY)
    sort: Optional[Enum] = None
    results_limit: Optional[int] = None
    page_index: Optional[int] = None
    problems: Mapping[str, InvalidQueryParameter] = field(default_factory=lambda: _EMPTY)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QueryState):
            return NotImplemented
        return (
            dict(self.filters) == dict(other.filters)
            and self.sort == other.sort
            and self.results_limit == other.results_limit
            and self.page_index == other.page_index
            and {k: v.message for k, v in self.problems.items()}
            == {k: v.message for k, v in other.problems.items()}
        )


def cancelled_failure() -> Failure:
    return failure(ErrorCode.CANCELLED, "The operation was cancelled.")


async def send_cancellable(
    transport: Transport,
    request: ApiRequest,
    cancel: Optional[asyncio.Event] = None,
) -> Result[TransportResponse]:
    """
    Send through the transport, racing it against a cancellation event.

    When `cancel` is set first, the transport task is cancelled and the call
    resolves to Failure(CANCELLED). Cancelling the awaiting task itself
    propagates CancelledError after cancelling the transport task.
    """
    if cancel is None:
        return await transport.send(request)
    if cancel.is_set():
        return cancelled_failure()

    send_task = asyncio.ensure_future(transport.send(request))
    cancel_task = asyncio.ensure_future(cancel.wait())
    try:
        done, _ = await asyncio.wait(
            {send_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED
        )
    except asyncio.CancelledError:
        send_task.cancel()
        cancel_task.cancel()
        raise

    if send_task in done:
        cancel_task.cancel()
        return send_task.result()

    send_task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await send_task
    logger.debug("Request to %s cancelled", request.path)
    return cancelled_failure()


class QueryBuilder:
    """Shared plumbing: state evolution, filter policies and parameter encoding."""

    def __init__(
        self,
        transport: Transport,
        settings: Optional[Settings] = None,
        registry: Optional[EnumStringRegistry] = None,
        state: Optional[QueryState] = None,
    ):
        self._transport = transport
        self._settings = settings or get_settings()
        self._registry = registry or get_registry()
        self._state = state or QueryState()

    @property
    def state(self) -> QueryState:
        return self._state

    def _evolve(self: B, **changes: Any) -> B:
        return type(self)(
            self._transport,
            self._settings,
            self._registry,
            replace(self._state, **changes),
        )

    # ------------------------------------------------------------------
    # Filter policies
    # ------------------------------------------------------------------

    def _set_filter(self: B, key: str, value: Any) -> B:
        """Replace policy: the new value overwrites any earlier one for `key`."""
        filters = dict(self._state.filters)
        filters[key] = value
        problems = {k: v for k, v in self._state.problems.items() if k != key}
        return self._evolve(filters=_frozen(filters), problems=_frozen(problems))

    def _add_filter_values(self: B, key: str, values: Iterable[Any]) -> B:
        """Cumulative policy: union with earlier values, duplicates dropped, order kept.

        A valid add clears any problem an earlier call recorded for `key`.
        """
        existing = self._state.filters.get(key, ())
        merged = list(existing)
        for value in values:
            if value not in merged:
                merged.append(value)
        filters = dict(self._state.filters)
        filters[key] = tuple(merged)
        problems = {k: v for k, v in self._state.problems.items() if k != key}
        return self._evolve(filters=_frozen(filters), problems=_frozen(problems))

    def _reject(self: B, key: str, message: str, value: Any, replaces: bool = True) -> B:
        """Record a problem for `key`; with `replaces`, also drop the earlier value."""
        filters = dict(self._state.filters)
        if replaces:
            filters.pop(key, None)
        problems = dict(self._state.problems)
        problems[key] = InvalidQueryParameter(message, field=key, value=value)
        return self._evolve(filters=_frozen(filters), problems=_frozen(problems))

    def _set_text(self: B, key: str, value: Optional[str], label: str) -> B:
        if value is None or not str(value).strip():
            return self._reject(key, f"{label} cannot be empty.", value)
        return self._set_filter(key, value)

    def _set_positive_id(self: B, key: str, value: int, label: str) -> B:
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            return self._reject(key, f"{label} must be a positive integer.", value)
        return self._set_filter(key, value)

    def _set_enum(self: B, key: str, enum_type: Type[Enum], value: Any, label: str) -> B:
        if not isinstance(value, enum_type):
            return self._reject(key, f"{label} must be a {enum_type.__name__}.", value)
        return self._set_filter(key, value)

    def _add_checked(self: B, key: str, values: Tuple[Any, ...], label: str, check: Any) -> B:
        """Cumulative add of `values`; any value failing `check` is recorded as a problem."""
        if not values:
            return self._reject(key, f"At least one {label} must be provided.", values, replaces=False)
        bad = [v for v in values if not check(v)]
        if bad:
            return self._reject(key, f"Invalid {label}: {bad[0]!r}.", bad[0], replaces=False)
        return self._add_filter_values(key, values)

    def _add_texts(self: B, key: str, values: Tuple[Any, ...], label: str) -> B:
        return self._add_checked(key, values, label, lambda v: isinstance(v, str) and bool(v.strip()))

    def _add_ids(self: B, key: str, values: Tuple[Any, ...], label: str) -> B:
        return self._add_checked(
            key, values, label, lambda v: isinstance(v, int) and not isinstance(v, bool) and v >= 1
        )

    def _add_enums(self: B, key: str, enum_type: Type[Enum], values: Tuple[Any, ...], label: str) -> B:
        return self._add_checked(key, values, label, lambda v: isinstance(v, enum_type))

    # ------------------------------------------------------------------
    # Encoding
    # ------------------------------------------------------------------

    def _format_value(self, value: Any) -> str:
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, Enum):
            return self._registry.to_wire(type(value), value)
        return str(value)

    def _filter_params(self) -> Params:
        params: Params = []
        for key, value in self._state.filters.items():
            if value is None:
                continue
            if isinstance(value, tuple):
                params.extend((key, self._format_value(item)) for item in value)
            else:
                params.append((key, self._format_value(value)))
        return params

    def _validate(self) -> Optional[Error]:
        problems = list(self._state.problems.values())
        if not problems:
            return None
        first = problems[0]
        error = Error.from_exception(first)
        if len(problems) > 1:
            others = "; ".join(p.message for p in problems[1:])
            error = replace(error, detail=f"{error.detail}; also: {others}" if error.detail else others)
        return error

    def _encode(self, build: Any) -> Result[Params]:
        invalid = self._validate()
        if invalid is not None:
            logger.debug("Rejected %s: %s", type(self).__name__, invalid)
            return Failure(invalid)
        try:
            return Success(build())
        except CivitaiClientError as e:
            return Failure(Error.from_exception(e))


class RequestBuilder(QueryBuilder, Generic[T]):
    """
    Builder for a paged list endpoint of the public API.

    Subclasses set ENDPOINT, ITEM_TYPE and the results-limit bounds, and add
    their own where_* methods on top of _set_filter/_add_filter_values.
    """

    ENDPOINT: str = ""
    ITEM_TYPE: Type[Any] = object
    MIN_RESULTS_LIMIT = 1
    MAX_RESULTS_LIMIT = 100
    SUPPORTS_SORTING = False

    def with_results_limit(self: B, limit: int) -> B:
        """Page size; checked against the endpoint bounds at execution."""
        return self._evolve(results_limit=limit)

    def with_page_index(self: B, page_index: int) -> B:
        """1-based page number. Ignored when execute() is given a cursor."""
        return self._evolve(page_index=page_index)

    def _order_by(self: B, sort: Enum) -> B:
        problems = {k: v for k, v in self._state.problems.items() if k != SORT_PARAM}
        return self._evolve(sort=sort, problems=_frozen(problems))

    def _validate(self) -> Optional[Error]:
        limit = self._state.results_limit
        if limit is not None and (
            isinstance(limit, bool)
            or not isinstance(limit, int)
            or not self.MIN_RESULTS_LIMIT <= limit <= self.MAX_RESULTS_LIMIT
        ):
            return Error.from_exception(InvalidQueryParameter(
                f"Results limit must be between {self.MIN_RESULTS_LIMIT} and "
                f"{self.MAX_RESULTS_LIMIT}, got {limit!r}.",
                field=LIMIT_PARAM,
                value=limit,
            ))
        page_index = self._state.page_index
        if page_index is not None and (
            isinstance(page_index, bool) or not isinstance(page_index, int) or page_index < 1
        ):
            return Error.from_exception(InvalidQueryParameter(
                f"Page index must be >= 1, got {page_index!r}.",
                field=PAGE_PARAM,
                value=page_index,
            ))
        return super()._validate()

    def params(self, cursor: Optional[str] = None) -> Result[Params]:
        """The wire parameters execute() would send, or the reason it would not send."""
        cursor = cursor.strip() if cursor else None

        def build() -> Params:
            params: Params = []
            if self._state.results_limit is not None:
                params.append((LIMIT_PARAM, str(self._state.results_limit)))
            if cursor:
                params.append((CURSOR_PARAM, cursor))
            if self.SUPPORTS_SORTING and self._state.sort is not None:
                params.append((SORT_PARAM, self._format_value(self._state.sort)))
            params.extend(self._filter_params())
            if not cursor and self._state.page_index is not None:
                params.append((PAGE_PARAM, str(self._state.page_index)))
            return params

        return self._encode(build)

    async def execute(
        self,
        cursor: Optional[str] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> Result[PagedResult[T]]:
        """Run the query and decode one page of results."""
        prepared = self.params(cursor)
        if isinstance(prepared, Failure):
            return prepared

        request = ApiRequest(
            method="GET",
            path=self._settings.api_path(self.ENDPOINT),
            params=prepared.value,
            base_url=self._settings.base_url,
        )
        sent = await send_cancellable(self._transport, request, cancel)
        if isinstance(sent, Failure):
            return sent
        return handle_paged_response(sent.value, self.ITEM_TYPE, self._registry)

    async def first(self, cancel: Optional[asyncio.Event] = None) -> Result[Optional[T]]:
        """First matching item, or Success(None) when there is none."""
        result = await self.with_results_limit(1).execute(cancel=cancel)
        return result.map(lambda page: page.items[0] if page.items else None)


async def fetch_one(
    transport: Transport,
    request: ApiRequest,
    target: Type[T],
    registry: Optional[EnumStringRegistry] = None,
    cancel: Optional[asyncio.Event] = None,
) -> Result[T]:
    """Send a single-resource request and decode the body into `target`."""
    sent = await send_cancellable(transport, request, cancel)
    if isinstance(sent, Failure):
        return sent
    return handle_response(sent.value, target, registry)
