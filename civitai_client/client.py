"""
CivitaiClient - entry point tying settings, registry, transport and builders together.

    async with CivitaiClient() as client:
        result = await client.models.where_type(ModelType.LORA).with_results_limit(10).execute()
        match result:
            case Success(page):
                for model in page.items:
                    print(model.name)
            case Failure(error):
                print(error)
"""

from typing import Any, Optional

from civitai_client.config import Settings, get_settings
from civitai_client.generation import air
from civitai_client.generation import enums as generation_enums
from civitai_client.http.transport import HttpxTransport, Transport
from civitai_client.kernel.registry import EnumStringRegistry, get_registry
from civitai_client.logging_config import get_logger
from civitai_client.query.coverage import CoverageQuery
from civitai_client.query.creators import CreatorQuery
from civitai_client.query.images import ImageQuery
from civitai_client.query.jobs import JobQuery, UsageLookup
from civitai_client.query.models import ModelQuery, ModelVersionLookup
from civitai_client.query.tags import TagQuery
from civitai_client.schemas import enums as core_enums

logger = get_logger(__name__)


def initialize_registry(registry: Optional[EnumStringRegistry] = None) -> EnumStringRegistry:
    """Run every feature module's registrations. Safe to call repeatedly."""
    registry = registry or get_registry()
    core_enums.initialize(registry)
    generation_enums.initialize(registry)
    air.initialize(registry)
    return registry


class CivitaiClient:
    """
    Facade exposing one fresh builder per resource family.

    Each property returns a new, empty builder; builders never share state.
    The client owns the default transport and closes it on aclose().
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[Transport] = None,
        registry: Optional[EnumStringRegistry] = None,
    ):
        self.settings = settings or get_settings()
        self.registry = initialize_registry(registry)
        self._owns_transport = transport is None
        self.transport = transport or HttpxTransport(self.settings)
        logger.debug(
            "Client ready (base_url=%s, orchestration=%s, authenticated=%s)",
            self.settings.base_url,
            self.settings.orchestration_base_url,
            self.settings.api_key is not None,
        )

    @property
    def models(self) -> ModelQuery:
        return ModelQuery(self.transport, self.settings, self.registry)

    @property
    def model_versions(self) -> ModelVersionLookup:
        return ModelVersionLookup(self.transport, self.settings, self.registry)

    @property
    def images(self) -> ImageQuery:
        return ImageQuery(self.transport, self.settings, self.registry)

    @property
    def tags(self) -> TagQuery:
        return TagQuery(self.transport, self.settings, self.registry)

    @property
    def creators(self) -> CreatorQuery:
        return CreatorQuery(self.transport, self.settings, self.registry)

    @property
    def coverage(self) -> CoverageQuery:
        return CoverageQuery(self.transport, self.settings, self.registry)

    @property
    def jobs(self) -> JobQuery:
        return JobQuery(self.transport, self.settings, self.registry)

    @property
    def usage(self) -> UsageLookup:
        return UsageLookup(self.transport, self.settings, self.registry)

    async def aclose(self) -> None:
        if self._owns_transport and isinstance(self.transport, HttpxTransport):
            await self.transport.aclose()

    async def __aenter__(self) -> "CivitaiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
