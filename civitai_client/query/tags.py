"""
Tag queries: GET /api/v1/tags.
"""

from civitai_client.query.base import RequestBuilder
from civitai_client.schemas.creator import Tag


class TagQuery(RequestBuilder[Tag]):
    ENDPOINT = "tags"
    ITEM_TYPE = Tag
    MIN_RESULTS_LIMIT = 1
    MAX_RESULTS_LIMIT = 200

    def where_name(self, name: str) -> "TagQuery":
        """Partial match on the tag name."""
        return self._set_text("query", name, "Name")
