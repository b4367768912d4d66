"""
Model, model version and file records returned by /models and /model-versions.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field

from civitai_client.kernel.converters import WireEnum
from civitai_client.schemas.common import ApiModel
from civitai_client.schemas.creator import Creator
from civitai_client.schemas.enums import (
    Availability,
    CommercialUsePermission,
    MediaType,
    ModelMode,
    ModelType,
)


class ModelStats(ApiModel):
    download_count: int = Field(default=0, alias="downloadCount")
    thumbs_up_count: int = Field(default=0, alias="thumbsUpCount")
    thumbs_down_count: int = Field(default=0, alias="thumbsDownCount")
    comment_count: int = Field(default=0, alias="commentCount")
    tipped_amount_count: int = Field(default=0, alias="tippedAmountCount")


class ModelVersionStats(ApiModel):
    download_count: int = Field(default=0, alias="downloadCount")
    thumbs_up_count: int = Field(default=0, alias="thumbsUpCount")
    thumbs_down_count: Optional[int] = Field(default=None, alias="thumbsDownCount")


class FileHashes(ApiModel):
    sha256: Optional[str] = Field(default=None, alias="SHA256")
    crc32: Optional[str] = Field(default=None, alias="CRC32")
    blake3: Optional[str] = Field(default=None, alias="BLAKE3")
    auto_v1: Optional[str] = Field(default=None, alias="AutoV1")
    auto_v2: Optional[str] = Field(default=None, alias="AutoV2")
    auto_v3: Optional[str] = Field(default=None, alias="AutoV3")


class FileMetadata(ApiModel):
    format: Optional[str] = None
    size: Optional[str] = None
    precision: Optional[str] = Field(default=None, alias="fp")


class ModelFile(ApiModel):
    """A downloadable file attached to a model version."""

    id: int
    name: str
    type: Optional[str] = None
    size_kb: Optional[float] = Field(default=None, alias="sizeKB")
    pickle_scan_result: Optional[str] = Field(default=None, alias="pickleScanResult")
    virus_scan_result: Optional[str] = Field(default=None, alias="virusScanResult")
    scanned_at: Optional[datetime] = Field(default=None, alias="scannedAt")
    metadata: Optional[FileMetadata] = None
    hashes: Optional[FileHashes] = None
    download_url: Optional[str] = Field(default=None, alias="downloadUrl")
    primary: Optional[bool] = None


class ModelVersionImage(ApiModel):
    id: Optional[int] = None
    url: str
    nsfw_level: int = Field(default=0, alias="nsfwLevel")
    width: Optional[int] = None
    height: Optional[int] = None
    hash: Optional[str] = None
    type: Optional[WireEnum(MediaType)] = None
    availability: Optional[WireEnum(Availability)] = None
    has_meta: bool = Field(default=False, alias="hasMeta")
    meta: Optional[dict] = None


class ModelVersionModel(ApiModel):
    """Parent model summary embedded in a version looked up directly."""

    name: str
    type: WireEnum(ModelType)
    nsfw: bool = False
    poi: bool = False


class ModelVersion(ApiModel):
    id: int
    model_id: Optional[int] = Field(default=None, alias="modelId")
    index: Optional[int] = None
    name: str
    base_model: Optional[str] = Field(default=None, alias="baseModel")
    base_model_type: Optional[str] = Field(default=None, alias="baseModelType")
    description: Optional[str] = None
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")
    published_at: Optional[datetime] = Field(default=None, alias="publishedAt")
    status: Optional[str] = None
    availability: Optional[WireEnum(Availability)] = None
    nsfw_level: int = Field(default=0, alias="nsfwLevel")
    download_url: Optional[str] = Field(default=None, alias="downloadUrl")
    supports_generation: bool = Field(default=False, alias="supportsGeneration")
    trained_words: List[str] = Field(default_factory=list, alias="trainedWords")
    air: Optional[str] = None
    model: Optional[ModelVersionModel] = None
    files: List[ModelFile] = Field(default_factory=list)
    images: List[ModelVersionImage] = Field(default_factory=list)
    stats: Optional[ModelVersionStats] = None
    training_details: Optional[Any] = Field(default=None, alias="trainingDetails")


class Model(ApiModel):
    """A model (checkpoint, LoRA, embedding, ...) listed on the platform."""

    id: int
    name: str
    description: Optional[str] = None
    type: WireEnum(ModelType)
    nsfw: bool = False
    nsfw_level: int = Field(default=0, alias="nsfwLevel")
    tags: List[str] = Field(default_factory=list)
    creator: Optional[Creator] = None
    stats: Optional[ModelStats] = None
    model_versions: List[ModelVersion] = Field(default_factory=list, alias="modelVersions")
    allow_no_credit: bool = Field(default=True, alias="allowNoCredit")
    allow_derivatives: bool = Field(default=True, alias="allowDerivatives")
    allow_different_license: bool = Field(default=True, alias="allowDifferentLicense")
    allow_commercial_use: List[WireEnum(CommercialUsePermission)] = Field(
        default_factory=list, alias="allowCommercialUse"
    )
    poi: bool = False
    minor: bool = False
    sfw_only: bool = Field(default=False, alias="sfwOnly")
    availability: Optional[WireEnum(Availability)] = None
    mode: Optional[WireEnum(ModelMode)] = None
    supports_generation: bool = Field(default=False, alias="supportsGeneration")
    user_id: Optional[int] = Field(default=None, alias="userId")
    download_url: Optional[str] = Field(default=None, alias="downloadUrl")
