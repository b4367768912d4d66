"""
Integration tests: CivitaiClient over the real HttpxTransport.

The network is replaced by httpx.MockTransport, so requests go through
httpx URL building, retries and response handling end to end.
"""

import json
from unittest.mock import AsyncMock

import httpx
import pytest

from civitai_client import CivitaiClient
from civitai_client.generation.air import AirAssetType, AirEcosystem, AirIdentifier
from civitai_client.generation.enums import AvailabilityStatus
from civitai_client.http.transport import HttpxTransport
from civitai_client.kernel.errors import ErrorCode
from civitai_client.kernel.result import Failure, Success
from civitai_client.query.pagination import iterate_pages
from civitai_client.schemas.enums import ImageSort, ModelSort, ModelType
from tests.fakes import model_item

pytestmark = pytest.mark.integration


class Api:
    """Routes requests to canned handlers and records what was sent."""

    def __init__(self, handler):
        self.handler = handler
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)


def make_client(settings, handler):
    api = Api(handler)
    transport = HttpxTransport(
        settings,
        client=httpx.AsyncClient(transport=httpx.MockTransport(api)),
        sleep=AsyncMock(),
    )
    return CivitaiClient(settings=settings, transport=transport), api


class TestModelSearch:
    @pytest.mark.asyncio
    async def test_query_reaches_the_wire(self, settings):
        client, api = make_client(
            settings,
            lambda r: httpx.Response(200, json={"items": [model_item(1), model_item(2, model_type="Checkpoint")]}),
        )
        result = await (
            client.models.where_type(ModelType.LORA, ModelType.CHECKPOINT)
            .where_tag("anime")
            .order_by(ModelSort.HIGHEST_RATED)
            .with_results_limit(2)
            .execute()
        )

        assert isinstance(result, Success)
        assert [m.type for m in result.value.items] == [ModelType.LORA, ModelType.CHECKPOINT]

        sent = api.requests[0]
        assert sent.url.host == "civitai.test"
        assert sent.url.path == "/api/v1/models"
        assert sent.url.params.get_list("types") == ["LORA", "Checkpoint"]
        assert sent.url.params["tag"] == "anime"
        assert sent.url.params["sort"] == "Highest Rated"
        assert sent.url.params["limit"] == "2"
        assert sent.headers["Authorization"] == "Bearer test-key"

    @pytest.mark.asyncio
    async def test_invalid_query_never_hits_network(self, settings):
        client, api = make_client(settings, lambda r: httpx.Response(200, json={"items": []}))
        result = await client.models.with_results_limit(500).execute()
        assert result.error.code == ErrorCode.INVALID_QUERY_PARAMETER
        assert api.requests == []

    @pytest.mark.asyncio
    async def test_get_by_id(self, settings):
        client, api = make_client(settings, lambda r: httpx.Response(200, json=model_item(42)))
        result = await client.models.get_by_id(42)
        assert result.value.id == 42
        assert api.requests[0].url.path == "/api/v1/models/42"


class TestPagination:
    @pytest.mark.asyncio
    async def test_iterate_follows_cursor(self, settings):
        def handler(request):
            cursor = request.url.params.get("cursor")
            if cursor is None:
                return httpx.Response(200, json={"items": [{"id": 1, "url": "https://img/1"}], "metadata": {"nextCursor": "c2"}})
            # Cursor only in the response header on the second page
            if cursor == "c2":
                return httpx.Response(200, json={"items": [{"id": 2, "url": "https://img/2"}]}, headers={"X-Next-Cursor": "c3"})
            return httpx.Response(200, json={"items": [{"id": 3, "url": "https://img/3"}], "metadata": {}})

        client, api = make_client(settings, handler)
        ids = []
        async for result in iterate_pages(client.images.order_by(ImageSort.NEWEST).with_results_limit(1)):
            assert isinstance(result, Success)
            ids.extend(image.id for image in result.value.items)

        assert ids == [1, 2, 3]
        assert [r.url.params.get("cursor") for r in api.requests] == [None, "c2", "c3"]
        assert all(r.url.path == "/api/v1/images" for r in api.requests)


class TestRemoteErrors:
    @pytest.mark.asyncio
    async def test_not_found(self, settings):
        client, _ = make_client(settings, lambda r: httpx.Response(404, json={"error": "No model with id 7"}))
        result = await client.models.get_by_id(7)
        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.REMOTE_ERROR
        assert result.error.sub_code == "not_found"
        assert result.error.message == "No model with id 7"

    @pytest.mark.asyncio
    async def test_cloudflare_page_after_retries(self, settings):
        page = "<html><head><title>civitai.com | 524: A timeout occurred</title></head><body>cloudflare</body></html>"
        client, api = make_client(
            settings,
            lambda r: httpx.Response(524, text=page, headers={"Content-Type": "text/html"}),
        )
        result = await client.tags.execute()
        assert result.error.code == ErrorCode.REMOTE_ERROR
        assert result.error.sub_code == "cloudflare"
        assert "524 - Origin server response timed out" in result.error.message
        assert len(api.requests) == settings.max_retries

    @pytest.mark.asyncio
    async def test_unknown_enum_in_payload(self, settings):
        client, _ = make_client(
            settings,
            lambda r: httpx.Response(200, json={"items": [model_item(1, model_type="Hologram")]}),
        )
        result = await client.models.execute()
        assert result.error.code == ErrorCode.UNKNOWN_WIRE_VALUE
        assert result.error.field == "items.0.type"


class TestCoverage:
    @pytest.mark.asyncio
    async def test_coverage_uses_orchestration_host(self, settings):
        air = AirIdentifier.create(AirEcosystem.STABLE_DIFFUSION_XL, AirAssetType.LORA, 328553, 368189)
        client, api = make_client(
            settings,
            lambda r: httpx.Response(200, json={str(air): {"availability": "Available", "workers": 4}}),
        )
        result = await client.coverage.get(air)

        assert result.value.availability is AvailabilityStatus.AVAILABLE
        assert result.value.workers == 4
        sent = api.requests[0]
        assert sent.url.host == "orchestration.civitai.test"
        assert sent.url.path == "/v1/consumer/coverage"
        assert sent.url.params.get_list("model") == ["urn:air:sdxl:lora:civitai:328553@368189"]


class TestJobs:
    @pytest.mark.asyncio
    async def test_job_query_posts_json_body(self, settings):
        job_id = "0b7a2e4c-3f1d-4c55-9a1e-2f5d8c9b6a01"
        client, api = make_client(
            settings,
            lambda r: httpx.Response(200, json={"token": "t1", "jobs": [{"jobId": job_id, "cost": 0.5}]}),
        )
        result = await client.jobs.where_property("userId", 7).with_wait().execute()

        assert str(result.value.jobs[0].job_id) == job_id
        sent = api.requests[0]
        assert sent.method == "POST"
        assert sent.url.host == "orchestration.civitai.test"
        assert sent.url.path == "/v1/consumer/jobs/query"
        assert sent.url.params["wait"] == "true"
        assert json.loads(sent.content) == {"properties": {"userId": 7}}

    @pytest.mark.asyncio
    async def test_hash_lookup_with_path_characters_never_hits_network(self, settings):
        client, api = make_client(settings, lambda r: httpx.Response(200, json={}))
        result = await client.model_versions.get_by_hash("../models/1?x=y")
        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.INVALID_QUERY_PARAMETER
        assert api.requests == []
