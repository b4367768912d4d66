"""
Image queries: GET /api/v1/images. All filters replace.
"""

from civitai_client.query.base import RequestBuilder
from civitai_client.query.models import is_valid_username
from civitai_client.schemas.enums import ImageNsfwLevel, ImageSort, TimePeriod
from civitai_client.schemas.image import Image


class ImageQuery(RequestBuilder[Image]):
    """Builder for /images."""

    ENDPOINT = "images"
    ITEM_TYPE = Image
    MIN_RESULTS_LIMIT = 1
    MAX_RESULTS_LIMIT = 200
    SUPPORTS_SORTING = True

    def where_model_id(self, model_id: int) -> "ImageQuery":
        return self._set_positive_id("modelId", model_id, "Model id")

    def where_model_version_id(self, model_version_id: int) -> "ImageQuery":
        return self._set_positive_id("modelVersionId", model_version_id, "Model version id")

    def where_post_id(self, post_id: int) -> "ImageQuery":
        return self._set_positive_id("postId", post_id, "Post id")

    def where_username(self, username: str) -> "ImageQuery":
        if not is_valid_username(username):
            return self._reject(
                "username",
                "Username must contain only letters, digits and underscores.",
                username,
            )
        return self._set_filter("username", username)

    def where_nsfw(self, level: ImageNsfwLevel) -> "ImageQuery":
        """Maximum content level to include."""
        return self._set_enum("nsfw", ImageNsfwLevel, level, "NSFW level")

    def where_period(self, period: TimePeriod) -> "ImageQuery":
        return self._set_enum("period", TimePeriod, period, "Period")

    def order_by(self, sort: ImageSort) -> "ImageQuery":
        if not isinstance(sort, ImageSort):
            return self._reject("sort", "Sort must be an ImageSort.", sort)
        return self._order_by(sort)
