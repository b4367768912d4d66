"""
Result model - the universal return shape of every API operation.

A Result is either Success(value) or Failure(error). Both are frozen
dataclasses, so callers discriminate with isinstance, the is_success /
is_failure properties, or a match statement:

    match await client.models.where_name("anime").execute():
        case Success(page):
            for model in page.items:
                ...
        case Failure(error):
            logger.warning("query failed: %s", error)

There is deliberately no accessor that returns the payload or raises.
"""

from dataclasses import dataclass, field as dataclass_field
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar, Union

from civitai_client.kernel.errors import CivitaiClientError, ErrorCode

T = TypeVar("T")
U = TypeVar("U")
R = TypeVar("R")


@dataclass(frozen=True)
class Error:
    """Structured error carried by a Failure."""

    code: ErrorCode
    message: str
    detail: Optional[str] = None
    sub_code: Optional[str] = None
    status_code: Optional[int] = None
    field: Optional[str] = None
    retry_after: Optional[float] = None
    trace_id: Optional[str] = None
    errors: Dict[str, List[str]] = dataclass_field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: CivitaiClientError) -> "Error":
        """Build an Error from one of the client's own exceptions."""
        return cls(
            code=exc.code,
            message=exc.message,
            detail=None if exc.value is None else repr(exc.value),
            field=exc.field,
        )

    def __str__(self) -> str:
        parts = [self.code.value]
        if self.sub_code:
            parts.append(self.sub_code)
        if self.status_code is not None:
            parts.append(str(self.status_code))
        return f"[{'/'.join(parts)}] {self.message}"


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def is_success(self) -> bool:
        return True

    @property
    def is_failure(self) -> bool:
        return False

    def map(self, fn: Callable[[T], U]) -> "Result[U]":
        return Success(fn(self.value))

    def bind(self, fn: Callable[[T], "Result[U]"]) -> "Result[U]":
        return fn(self.value)

    def fold(self, on_success: Callable[[T], R], on_failure: Callable[[Error], R]) -> R:
        return on_success(self.value)

    def value_or(self, default: Any) -> Any:
        return self.value


@dataclass(frozen=True)
class Failure:
    error: Error

    @property
    def is_success(self) -> bool:
        return False

    @property
    def is_failure(self) -> bool:
        return True

    def map(self, fn: Callable[[Any], Any]) -> "Failure":
        return self

    def bind(self, fn: Callable[[Any], Any]) -> "Failure":
        return self

    def fold(self, on_success: Callable[[Any], R], on_failure: Callable[[Error], R]) -> R:
        return on_failure(self.error)

    def value_or(self, default: Any) -> Any:
        return default


Result = Union[Success[T], Failure]


def failure(code: ErrorCode, message: str, **kwargs: Any) -> Failure:
    """Shorthand for Failure(Error(code, message, ...))."""
    return Failure(Error(code=code, message=message, **kwargs))
