"""
Fluent, immutable query builders.
"""

from civitai_client.query.base import QueryBuilder, QueryState, RequestBuilder
from civitai_client.query.coverage import CoverageQuery
from civitai_client.query.creators import CreatorQuery
from civitai_client.query.images import ImageQuery
from civitai_client.query.jobs import JobQuery, UsageLookup
from civitai_client.query.models import ModelQuery, ModelVersionLookup
from civitai_client.query.pagination import iterate_pages
from civitai_client.query.tags import TagQuery

__all__ = [
    "CoverageQuery",
    "CreatorQuery",
    "ImageQuery",
    "JobQuery",
    "ModelQuery",
    "ModelVersionLookup",
    "QueryBuilder",
    "QueryState",
    "RequestBuilder",
    "TagQuery",
    "UsageLookup",
    "iterate_pages",
]
