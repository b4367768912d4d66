"""
Model queries: GET /api/v1/models, /models/{id} and /model-versions.

Filter policy:
- Cumulative (union, duplicates removed): where_tag, where_type, where_ids,
  where_base_models, where_commercial_use
- Replace: everything else
"""

import asyncio
import re
from typing import Optional

from civitai_client.config import Settings, get_settings
from civitai_client.http.transport import ApiRequest, Transport
from civitai_client.kernel.errors import ErrorCode
from civitai_client.kernel.registry import EnumStringRegistry, get_registry
from civitai_client.kernel.result import Result, failure
from civitai_client.query.base import RequestBuilder, fetch_one
from civitai_client.schemas.enums import CommercialUsePermission, ModelSort, ModelType, TimePeriod
from civitai_client.schemas.model import Model, ModelVersion

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")
HASH_PATTERN = re.compile(r"^[A-Za-z0-9]+$")


def is_valid_username(username: Optional[str]) -> bool:
    return bool(username) and bool(USERNAME_PATTERN.match(username))


class ModelQuery(RequestBuilder[Model]):
    """Builder for /models."""

    ENDPOINT = "models"
    ITEM_TYPE = Model
    MIN_RESULTS_LIMIT = 1
    MAX_RESULTS_LIMIT = 100
    SUPPORTS_SORTING = True

    def where_name(self, name: str) -> "ModelQuery":
        return self._set_text("query", name, "Name")

    def where_tag(self, *tags: str) -> "ModelQuery":
        """Cumulative."""
        return self._add_texts("tag", tags, "tag")

    def where_username(self, username: str) -> "ModelQuery":
        """Creator username; letters, digits and underscores only."""
        if not is_valid_username(username):
            return self._reject(
                "username",
                "Username must contain only letters, digits and underscores.",
                username,
            )
        return self._set_filter("username", username)

    def where_type(self, *types: ModelType) -> "ModelQuery":
        """Cumulative: where_type(LORA).where_type(CHECKPOINT) sends both."""
        return self._add_enums("types", ModelType, types, "model type")

    def where_ids(self, *ids: int) -> "ModelQuery":
        """Cumulative."""
        return self._add_ids("ids", ids, "model id")

    def where_base_models(self, *base_models: str) -> "ModelQuery":
        """Cumulative. Base model names are free text on the API ("SDXL 1.0", "Pony", ...)."""
        return self._add_texts("baseModels", base_models, "base model")

    def where_base_model(self, base_model: str) -> "ModelQuery":
        return self.where_base_models(base_model)

    def where_commercial_use(self, *permissions: CommercialUsePermission) -> "ModelQuery":
        """Cumulative."""
        return self._add_enums("allowCommercialUse", CommercialUsePermission, permissions, "commercial use permission")

    def where_favorites(self) -> "ModelQuery":
        """Only models favorited by the authenticated user."""
        return self._set_filter("favorites", True)

    def where_hidden(self) -> "ModelQuery":
        """Only models hidden by the authenticated user."""
        return self._set_filter("hidden", True)

    def where_primary_file_only(self) -> "ModelQuery":
        return self._set_filter("primaryFileOnly", True)

    def where_allow_no_credit(self, allowed: bool) -> "ModelQuery":
        return self._set_filter("allowNoCredit", bool(allowed))

    def where_allow_derivatives(self, allowed: bool) -> "ModelQuery":
        return self._set_filter("allowDerivatives", bool(allowed))

    def where_allow_different_licenses(self, allowed: bool) -> "ModelQuery":
        return self._set_filter("allowDifferentLicenses", bool(allowed))

    def where_nsfw(self, nsfw: bool) -> "ModelQuery":
        return self._set_filter("nsfw", bool(nsfw))

    def where_supports_generation(self, supported: bool) -> "ModelQuery":
        return self._set_filter("supportsGeneration", bool(supported))

    def where_period(self, period: TimePeriod) -> "ModelQuery":
        return self._set_enum("period", TimePeriod, period, "Period")

    def order_by(self, sort: ModelSort) -> "ModelQuery":
        if not isinstance(sort, ModelSort):
            return self._reject("sort", "Sort must be a ModelSort.", sort)
        return self._order_by(sort)

    async def get_by_id(self, model_id: int, cancel: Optional[asyncio.Event] = None) -> Result[Model]:
        """Fetch one model by id. Builder filters do not apply."""
        if isinstance(model_id, bool) or not isinstance(model_id, int) or model_id < 1:
            return failure(
                ErrorCode.INVALID_QUERY_PARAMETER,
                f"Model id must be a positive integer, got {model_id!r}.",
                field="id",
            )
        request = ApiRequest(
            method="GET",
            path=self._settings.api_path(f"models/{model_id}"),
            base_url=self._settings.base_url,
        )
        return await fetch_one(self._transport, request, Model, self._registry, cancel)


class ModelVersionLookup:
    """Direct lookups of a single model version."""

    def __init__(
        self,
        transport: Transport,
        settings: Optional[Settings] = None,
        registry: Optional[EnumStringRegistry] = None,
    ):
        self._transport = transport
        self._settings = settings or get_settings()
        self._registry = registry or get_registry()

    async def _get(self, relative_path: str, cancel: Optional[asyncio.Event]) -> Result[ModelVersion]:
        request = ApiRequest(
            method="GET",
            path=self._settings.api_path(relative_path),
            base_url=self._settings.base_url,
        )
        return await fetch_one(self._transport, request, ModelVersion, self._registry, cancel)

    async def get_by_id(self, version_id: int, cancel: Optional[asyncio.Event] = None) -> Result[ModelVersion]:
        if isinstance(version_id, bool) or not isinstance(version_id, int) or version_id < 1:
            return failure(
                ErrorCode.INVALID_QUERY_PARAMETER,
                f"Model version id must be a positive integer, got {version_id!r}.",
                field="id",
            )
        return await self._get(f"model-versions/{version_id}", cancel)

    async def get_by_hash(self, file_hash: str, cancel: Optional[asyncio.Event] = None) -> Result[ModelVersion]:
        """Look up the version owning a file hash (SHA256, AutoV2, CRC32, BLAKE3, ...)."""
        file_hash = file_hash.strip() if isinstance(file_hash, str) else ""
        if not file_hash:
            return failure(
                ErrorCode.INVALID_QUERY_PARAMETER,
                "Hash cannot be empty.",
                field="hash",
            )
        if not HASH_PATTERN.match(file_hash):
            return failure(
                ErrorCode.INVALID_QUERY_PARAMETER,
                "Hash must contain only letters and digits.",
                detail=repr(file_hash),
                field="hash",
            )
        return await self._get(f"model-versions/by-hash/{file_hash}", cancel)
