"""
Image records returned by /images.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field

from civitai_client.kernel.converters import WireEnum
from civitai_client.schemas.common import ApiModel
from civitai_client.schemas.enums import ImageNsfwLevel, MediaType


class ImageStats(ApiModel):
    cry_count: Optional[int] = Field(default=None, alias="cryCount")
    laugh_count: Optional[int] = Field(default=None, alias="laughCount")
    like_count: Optional[int] = Field(default=None, alias="likeCount")
    dislike_count: Optional[int] = Field(default=None, alias="dislikeCount")
    heart_count: Optional[int] = Field(default=None, alias="heartCount")
    comment_count: Optional[int] = Field(default=None, alias="commentCount")


class Image(ApiModel):
    """
    A generated image (or video) posted to the platform.

    `meta` holds the free-form generation parameters exactly as the API
    returns them (prompt, seed, sampler, ...); its keys vary by tool.
    """

    id: int
    url: str
    hash: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    nsfw_level: Optional[WireEnum(ImageNsfwLevel)] = Field(default=None, alias="nsfwLevel")
    type: Optional[WireEnum(MediaType)] = None
    nsfw: Optional[bool] = None
    browsing_level: Optional[int] = Field(default=None, alias="browsingLevel")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    post_id: Optional[int] = Field(default=None, alias="postId")
    stats: Optional[ImageStats] = None
    meta: Optional[Dict[str, Any]] = None
    username: Optional[str] = None
    base_model: Optional[str] = Field(default=None, alias="baseModel")
    model_version_ids: List[int] = Field(default_factory=list, alias="modelVersionIds")
