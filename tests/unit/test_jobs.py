"""Unit tests for job status queries and the usage lookup on the orchestration API."""

from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID

import pytest

from civitai_client.client import CivitaiClient
from civitai_client.kernel.errors import ErrorCode
from civitai_client.kernel.result import Failure, Success
from tests.fakes import json_response

JOB_ID = "0b7a2e4c-3f1d-4c55-9a1e-2f5d8c9b6a01"


def job_payload(job_id=JOB_ID, available=False, **extra):
    payload = {
        "jobId": job_id,
        "cost": 1.25,
        "scheduled": True,
        "result": {"blobKey": "abc", "available": available, "blobUrl": "https://blob.test/abc" if available else None},
    }
    payload.update(extra)
    return payload


@pytest.fixture
def client(settings, transport):
    return CivitaiClient(settings=settings, transport=transport)


class TestGetById:
    @pytest.mark.asyncio
    async def test_request_and_decoding(self, client, transport, settings):
        transport.queue(json_response(job_payload(available=True, position=0)))

        result = await client.jobs.with_detailed().get_by_id(JOB_ID)

        assert isinstance(result, Success)
        assert result.value.job_id == UUID(JOB_ID)
        assert result.value.cost == Decimal("1.25")
        assert result.value.is_complete
        request = transport.requests[0]
        assert request.method == "GET"
        assert request.base_url == settings.orchestration_base_url
        assert request.path == f"/v1/consumer/jobs/{JOB_ID}"
        assert request.params == [("detailed", "true")]

    @pytest.mark.asyncio
    async def test_accepts_uuid_instance(self, client, transport):
        transport.queue(json_response(job_payload()))
        result = await client.jobs.get_by_id(UUID(JOB_ID))
        assert not result.value.is_complete
        assert transport.requests[0].params == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("job_id", ["not-a-uuid", "", "../jobs?token=x", "00000000-0000-0000-0000-000000000000"])
    async def test_invalid_or_nil_id_rejected(self, client, transport, job_id):
        """Malformed and nil ids never reach the transport."""
        result = await client.jobs.get_by_id(job_id)
        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.INVALID_QUERY_PARAMETER
        assert result.error.field == "jobId"
        assert transport.call_count == 0


class TestGetByToken:
    @pytest.mark.asyncio
    async def test_request_and_decoding(self, client, transport):
        other = "5c1d9e2a-7b3f-4d8e-a6c2-1e9f0b4d7a32"
        transport.queue(json_response({"token": "batch-1", "jobs": [job_payload(), job_payload(other)]}))

        result = await client.jobs.with_wait().get_by_token(" batch-1 ")

        assert result.value.token == "batch-1"
        assert [job.job_id for job in result.value.jobs] == [UUID(JOB_ID), UUID(other)]
        request = transport.requests[0]
        assert request.path == "/v1/consumer/jobs"
        assert request.params == [("token", "batch-1"), ("wait", "true")]

    @pytest.mark.asyncio
    async def test_null_jobs_decode_as_empty(self, client, transport):
        transport.queue(json_response({"token": "batch-1", "jobs": None}))
        result = await client.jobs.get_by_token("batch-1")
        assert result.value.jobs == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", ["", "   ", None])
    async def test_empty_token_rejected(self, client, transport, token):
        result = await client.jobs.get_by_token(token)
        assert result.error.code == ErrorCode.INVALID_QUERY_PARAMETER
        assert result.error.field == "token"
        assert transport.call_count == 0

    @pytest.mark.asyncio
    async def test_remote_not_found(self, client, transport):
        transport.queue(json_response({"error": "Token not found"}, status_code=404))
        result = await client.jobs.get_by_token("missing")
        assert result.error.code == ErrorCode.REMOTE_ERROR
        assert result.error.status_code == 404


class TestPropertyQuery:
    """execute() posts the property filters to jobs/query."""

    @pytest.mark.asyncio
    async def test_posts_properties(self, client, transport):
        transport.queue(json_response({"jobs": [job_payload()]}))

        result = await client.jobs.where_property("userId", 42).where_properties({"batch": "b1"}).execute()

        assert len(result.value.jobs) == 1
        request = transport.requests[0]
        assert request.method == "POST"
        assert request.path == "/v1/consumer/jobs/query"
        assert request.body == {"properties": {"userId": 42, "batch": "b1"}}

    @pytest.mark.asyncio
    async def test_requires_a_property(self, client, transport):
        result = await client.jobs.with_wait().execute()
        assert result.error.code == ErrorCode.INVALID_QUERY_PARAMETER
        assert result.error.field == "properties"
        assert transport.call_count == 0

    @pytest.mark.asyncio
    async def test_unserializable_value_rejected(self, client, transport):
        result = await client.jobs.where_property("when", object()).execute()
        assert result.error.field == "properties"
        assert transport.call_count == 0

    @pytest.mark.asyncio
    async def test_empty_key_rejected(self, client, transport):
        result = await client.jobs.where_property(" ", 1).execute()
        assert result.error.code == ErrorCode.INVALID_QUERY_PARAMETER
        assert transport.call_count == 0

    def test_same_key_replaces_value(self, client):
        query = client.jobs.where_property("userId", 1).where_property("userId", 2)
        assert dict(query.state.filters["properties"]) == {"userId": 2}

    def test_builders_are_immutable(self, client):
        base = client.jobs.where_property("a", 1)
        branch = base.where_property("b", 2)
        assert dict(base.state.filters["properties"]) == {"a": 1}
        assert dict(branch.state.filters["properties"]) == {"a": 1, "b": 2}

    def test_valid_property_clears_earlier_problem(self, client):
        query = client.jobs.where_property("", 1).where_property("userId", 1)
        assert dict(query.state.problems) == {}


class TestUsage:
    @pytest.mark.asyncio
    async def test_request_and_decoding(self, client, transport, settings):
        transport.queue(json_response({
            "totalCost": 12.5,
            "totalCredits": 100,
            "remainingCredits": 87.5,
            "jobCount": 5,
            "averageCostPerJob": 2.5,
            "periodStart": "2026-01-01T00:00:00Z",
        }))
        start = datetime(2026, 1, 1, tzinfo=timezone.utc)
        end = datetime(2026, 2, 1, tzinfo=timezone.utc)

        result = await client.usage.get_consumption(start, end)

        assert result.value.remaining_credits == Decimal("87.5")
        assert result.value.job_count == 5
        assert result.value.period_start == start
        request = transport.requests[0]
        assert request.base_url == settings.orchestration_base_url
        assert request.path == "/v1/consumer/consumption"
        assert request.params == [("startDate", start.isoformat()), ("endDate", end.isoformat())]

    @pytest.mark.asyncio
    async def test_bounds_are_optional(self, client, transport):
        transport.queue(json_response({}))
        result = await client.usage.get_consumption()
        assert result.value.total_cost == Decimal(0)
        assert transport.requests[0].params == []

    @pytest.mark.asyncio
    async def test_start_after_end_rejected(self, client, transport):
        result = await client.usage.get_consumption(datetime(2026, 3, 1), datetime(2026, 2, 1))
        assert result.error.code == ErrorCode.INVALID_QUERY_PARAMETER
        assert result.error.field == "startDate"
        assert transport.call_count == 0

    @pytest.mark.asyncio
    async def test_non_datetime_rejected(self, client, transport):
        result = await client.usage.get_consumption(end_date="2026-02-01")
        assert result.error.field == "endDate"
        assert transport.call_count == 0
