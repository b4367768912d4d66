"""
Coverage query on the orchestration API: GET /v1/consumer/coverage.

Reports, per AIR, whether the generation network can currently serve the
asset and how many workers have it.
"""

import asyncio
from typing import Any, Dict, Optional, Union

from civitai_client.generation.air import AirIdentifier
from civitai_client.http.transport import ApiRequest
from civitai_client.kernel.errors import ErrorCode, InvalidQueryParameter
from civitai_client.kernel.result import Failure, Result, Success, failure
from civitai_client.query.base import QueryBuilder, fetch_one
from civitai_client.schemas.coverage import ProviderAssetAvailability

MODEL_PARAM = "model"

CoverageMap = Dict[str, ProviderAssetAvailability]


class CoverageQuery(QueryBuilder):
    """Builder for the coverage endpoint. where_model is cumulative."""

    ENDPOINT = "coverage"

    def where_model(self, *models: Union[AirIdentifier, str]) -> "CoverageQuery":
        """Add AIR identifiers (objects or strings) to check."""
        return self._add_checked(
            MODEL_PARAM,
            models,
            "model",
            lambda m: isinstance(m, AirIdentifier) or (isinstance(m, str) and bool(m.strip())),
        )

    def _format_value(self, value: Any) -> str:
        if isinstance(value, AirIdentifier):
            return value.format(self._registry)
        return super()._format_value(value)

    def params(self) -> Result:
        def build():
            if not self._state.filters.get(MODEL_PARAM):
                raise InvalidQueryParameter("At least one model is required.", field=MODEL_PARAM)
            return self._filter_params()

        return self._encode(build)

    async def execute(self, cancel: Optional[asyncio.Event] = None) -> Result[CoverageMap]:
        prepared = self.params()
        if isinstance(prepared, Failure):
            return prepared
        request = ApiRequest(
            method="GET",
            path=self._settings.orchestration_path(self.ENDPOINT),
            params=prepared.value,
            base_url=self._settings.orchestration_base_url,
        )
        return await fetch_one(self._transport, request, CoverageMap, self._registry, cancel)

    async def get(
        self,
        model: Union[AirIdentifier, str],
        cancel: Optional[asyncio.Event] = None,
    ) -> Result[ProviderAssetAvailability]:
        """Coverage of a single model; a model missing from the response is a not_found error."""
        query = self.where_model(model)
        result = await query.execute(cancel=cancel)
        if isinstance(result, Failure):
            return result

        key = query._format_value(model) if isinstance(model, AirIdentifier) else model.strip()
        entries = result.value
        if key in entries:
            return Success(entries[key])
        folded = key.casefold()
        for name, availability in entries.items():
            if name.casefold() == folded:
                return Success(availability)
        return failure(
            ErrorCode.REMOTE_ERROR,
            f"Model '{key}' not found in coverage response.",
            sub_code="not_found",
            field=MODEL_PARAM,
        )
