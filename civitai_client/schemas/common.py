"""
Common schema types used across the API.
"""

from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

T = TypeVar("T")


class ApiModel(BaseModel):
    """Base for every response record: camelCase aliases, unknown keys ignored."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        frozen=True,
        protected_namespaces=(),
    )


class PaginationMetadata(ApiModel):
    """
    Navigation data attached to a page of results.

    Page-based fields and the cursor are independent: a response may carry
    either scheme, both, or neither.
    """

    total_items: Optional[int] = Field(default=None, alias="totalItems")
    current_page: Optional[int] = Field(default=None, alias="currentPage")
    page_size: Optional[int] = Field(default=None, alias="pageSize")
    total_pages: Optional[int] = Field(default=None, alias="totalPages")
    next_page: Optional[str] = Field(default=None, alias="nextPage")
    prev_page: Optional[str] = Field(default=None, alias="prevPage")
    next_cursor: Optional[str] = Field(default=None, alias="nextCursor")

    @field_validator("next_cursor", mode="before")
    @classmethod
    def cursor_as_string(cls, v: Any) -> Any:
        # The API sends numeric cursors on some endpoints
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        if isinstance(v, str) and not v.strip():
            return None
        return v


class PagedResult(ApiModel, Generic[T]):
    """Items of one page in server order, plus optional pagination metadata."""

    items: List[T] = Field(default_factory=list)
    metadata: Optional[PaginationMetadata] = None

    @property
    def next_cursor(self) -> Optional[str]:
        return self.metadata.next_cursor if self.metadata else None

    @property
    def has_next_cursor(self) -> bool:
        return self.next_cursor is not None


class ApiErrorResponse(ApiModel):
    """
    Error body returned by the remote.

    Covers RFC 7807 problem documents (title/detail/errors/traceId) and the
    simpler {"error": "..."} / {"message": "..."} shapes.
    """

    title: Optional[str] = None
    detail: Optional[str] = None
    status: Optional[int] = None
    trace_id: Optional[str] = Field(default=None, alias="traceId")
    errors: Optional[Dict[str, List[str]]] = None
    error: Optional[Any] = None
    message: Optional[str] = None

    @property
    def best_message(self) -> Optional[str]:
        if self.detail:
            return self.detail
        if self.title:
            return self.title
        if isinstance(self.error, str) and self.error:
            return self.error
        if isinstance(self.error, dict):
            nested = self.error.get("message") or self.error.get("detail")
            if isinstance(nested, str) and nested:
                return nested
        return self.message or None

    @property
    def is_recognized(self) -> bool:
        return self.best_message is not None or bool(self.errors)
