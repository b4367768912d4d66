"""
Creator and tag records.
"""

from typing import Optional

from pydantic import Field

from civitai_client.schemas.common import ApiModel


class Creator(ApiModel):
    username: str
    model_count: Optional[int] = Field(default=None, alias="modelCount")
    link: Optional[str] = None
    image: Optional[str] = None


class Tag(ApiModel):
    name: str
    model_count: Optional[int] = Field(default=None, alias="modelCount")
    link: Optional[str] = None
