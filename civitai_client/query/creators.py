"""
Creator queries: GET /api/v1/creators.
"""

from civitai_client.query.base import RequestBuilder
from civitai_client.schemas.creator import Creator


class CreatorQuery(RequestBuilder[Creator]):
    ENDPOINT = "creators"
    ITEM_TYPE = Creator
    MIN_RESULTS_LIMIT = 1
    MAX_RESULTS_LIMIT = 200

    def where_name(self, name: str) -> "CreatorQuery":
        """Partial match on the username."""
        return self._set_text("query", name, "Name")
