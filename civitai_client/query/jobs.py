"""
Generation job status on the orchestration API.

    GET  /v1/consumer/jobs/{jobId}       one job
    GET  /v1/consumer/jobs?token=...     every job of a submission batch
    POST /v1/consumer/jobs/query         jobs whose properties match

Submitting, cancelling and tainting jobs are not part of this client.
"""

import asyncio
import json
from datetime import datetime
from typing import Any, Mapping, Optional, Union
from uuid import UUID

from civitai_client.config import Settings, get_settings
from civitai_client.http.transport import ApiRequest, Transport
from civitai_client.kernel.errors import ErrorCode, InvalidQueryParameter
from civitai_client.kernel.registry import EnumStringRegistry, get_registry
from civitai_client.kernel.result import Failure, Result, failure
from civitai_client.query.base import Params, QueryBuilder, _frozen, fetch_one
from civitai_client.schemas.jobs import ConsumptionDetails, JobStatus, JobStatusCollection

WAIT_PARAM = "wait"
DETAILED_PARAM = "detailed"
PROPERTIES_FILTER = "properties"
TOKEN_PARAM = "token"


def _is_json_value(value: Any) -> bool:
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return False
    return True


class JobQuery(QueryBuilder):
    """
    Builder for job status lookups.

    with_wait / with_detailed apply to every lookup. Property filters are
    only used by execute(); where_property replaces the value of a key that
    was already set, other keys are kept (all must match).
    """

    ENDPOINT = "jobs"

    def with_wait(self) -> "JobQuery":
        """Let the server hold the request until the jobs finish (up to about ten minutes)."""
        return self._set_filter(WAIT_PARAM, True)

    def with_detailed(self) -> "JobQuery":
        """Include the full job definition in each status."""
        return self._set_filter(DETAILED_PARAM, True)

    def where_property(self, key: str, value: Any) -> "JobQuery":
        if not isinstance(key, str) or not key.strip():
            return self._reject(PROPERTIES_FILTER, "Property key cannot be empty.", key, replaces=False)
        if not _is_json_value(value):
            return self._reject(
                PROPERTIES_FILTER, f"Value of property {key!r} is not JSON-serializable.", value, replaces=False
            )
        properties = dict(self._state.filters.get(PROPERTIES_FILTER) or {})
        properties[key] = value
        return self._set_filter(PROPERTIES_FILTER, _frozen(properties))

    def where_properties(self, properties: Mapping[str, Any]) -> "JobQuery":
        query = self
        for key, value in properties.items():
            query = query.where_property(key, value)
        return query

    def _flag_params(self, token: Optional[str] = None) -> Params:
        params: Params = []
        if token:
            params.append((TOKEN_PARAM, token))
        for key in (WAIT_PARAM, DETAILED_PARAM):
            if self._state.filters.get(key):
                params.append((key, self._format_value(True)))
        return params

    def _request(self, method: str, relative_path: str, params: Params, body: Any = None) -> ApiRequest:
        return ApiRequest(
            method=method,
            path=self._settings.orchestration_path(relative_path),
            params=params,
            body=body,
            base_url=self._settings.orchestration_base_url,
        )

    async def get_by_id(
        self,
        job_id: Union[UUID, str],
        cancel: Optional[asyncio.Event] = None,
    ) -> Result[JobStatus]:
        try:
            parsed = job_id if isinstance(job_id, UUID) else UUID(str(job_id))
        except ValueError:
            parsed = None
        if parsed is None or parsed.int == 0:
            return failure(
                ErrorCode.INVALID_QUERY_PARAMETER,
                f"Job id must be a non-nil UUID, got {job_id!r}.",
                field="jobId",
            )

        prepared = self._encode(self._flag_params)
        if isinstance(prepared, Failure):
            return prepared
        request = self._request("GET", f"{self.ENDPOINT}/{parsed}", prepared.value)
        return await fetch_one(self._transport, request, JobStatus, self._registry, cancel)

    async def get_by_token(
        self,
        token: str,
        cancel: Optional[asyncio.Event] = None,
    ) -> Result[JobStatusCollection]:
        """Status of every job submitted under `token`."""
        def build() -> Params:
            if not isinstance(token, str) or not token.strip():
                raise InvalidQueryParameter("Token cannot be empty.", field=TOKEN_PARAM, value=token)
            return self._flag_params(token.strip())

        prepared = self._encode(build)
        if isinstance(prepared, Failure):
            return prepared
        request = self._request("GET", self.ENDPOINT, prepared.value)
        return await fetch_one(self._transport, request, JobStatusCollection, self._registry, cancel)

    async def execute(self, cancel: Optional[asyncio.Event] = None) -> Result[JobStatusCollection]:
        """Jobs matching every configured property filter. At least one filter is required."""
        def build() -> Params:
            if not self._state.filters.get(PROPERTIES_FILTER):
                raise InvalidQueryParameter(
                    "At least one property filter is required. Use where_property().",
                    field=PROPERTIES_FILTER,
                )
            return self._flag_params()

        prepared = self._encode(build)
        if isinstance(prepared, Failure):
            return prepared
        body = {PROPERTIES_FILTER: dict(self._state.filters[PROPERTIES_FILTER])}
        request = self._request("POST", f"{self.ENDPOINT}/query", prepared.value, body)
        return await fetch_one(self._transport, request, JobStatusCollection, self._registry, cancel)


class UsageLookup:
    """Account consumption on the orchestration API: GET /v1/consumer/consumption."""

    ENDPOINT = "consumption"

    def __init__(
        self,
        transport: Transport,
        settings: Optional[Settings] = None,
        registry: Optional[EnumStringRegistry] = None,
    ):
        self._transport = transport
        self._settings = settings or get_settings()
        self._registry = registry or get_registry()

    async def get_consumption(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> Result[ConsumptionDetails]:
        """Consumption between two datetimes; either bound may be omitted."""
        for name, value in (("startDate", start_date), ("endDate", end_date)):
            if value is not None and not isinstance(value, datetime):
                return failure(
                    ErrorCode.INVALID_QUERY_PARAMETER,
                    f"{name} must be a datetime, got {value!r}.",
                    field=name,
                )
        if start_date is not None and end_date is not None and start_date > end_date:
            return failure(
                ErrorCode.INVALID_QUERY_PARAMETER,
                "start_date must not be after end_date.",
                field="startDate",
            )

        params: Params = []
        if start_date is not None:
            params.append(("startDate", start_date.isoformat()))
        if end_date is not None:
            params.append(("endDate", end_date.isoformat()))
        request = ApiRequest(
            method="GET",
            path=self._settings.orchestration_path(self.ENDPOINT),
            params=params,
            base_url=self._settings.orchestration_base_url,
        )
        return await fetch_one(self._transport, request, ConsumptionDetails, self._registry, cancel)
