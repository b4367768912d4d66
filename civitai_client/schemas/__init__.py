"""
Response records (pydantic) for the public and orchestration APIs.
"""

from civitai_client.schemas.common import ApiErrorResponse, ApiModel, PagedResult, PaginationMetadata
from civitai_client.schemas.coverage import ProviderAssetAvailability
from civitai_client.schemas.creator import Creator, Tag
from civitai_client.schemas.enums import (
    Availability,
    CommercialUsePermission,
    ImageNsfwLevel,
    ImageSort,
    MediaType,
    ModelMode,
    ModelSort,
    ModelType,
    TimePeriod,
)
from civitai_client.schemas.image import Image, ImageStats
from civitai_client.schemas.jobs import ConsumptionDetails, JobResult, JobStatus, JobStatusCollection
from civitai_client.schemas.model import (
    FileHashes,
    FileMetadata,
    Model,
    ModelFile,
    ModelStats,
    ModelVersion,
    ModelVersionImage,
    ModelVersionModel,
    ModelVersionStats,
)

__all__ = [
    "ApiErrorResponse",
    "ApiModel",
    "PagedResult",
    "PaginationMetadata",
    "ProviderAssetAvailability",
    "Creator",
    "Tag",
    "Image",
    "ImageStats",
    "JobResult",
    "JobStatus",
    "JobStatusCollection",
    "ConsumptionDetails",
    "FileHashes",
    "FileMetadata",
    "Model",
    "ModelFile",
    "ModelStats",
    "ModelVersion",
    "ModelVersionImage",
    "ModelVersionModel",
    "ModelVersionStats",
    # Enums
    "Availability",
    "CommercialUsePermission",
    "ImageNsfwLevel",
    "ImageSort",
    "MediaType",
    "ModelMode",
    "ModelSort",
    "ModelType",
    "TimePeriod",
]
