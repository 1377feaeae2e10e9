# src/loopfeed/services/pagination.py
"""Offset pagination helpers shared by list operations."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from sqlalchemy import Select
from sqlalchemy.orm import Session

from .errors import InvalidInputError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class PageRequest:
    """1-based page number and page size."""

    page: int = 1
    limit: int = 20

    def __post_init__(self) -> None:
        if self.page < 1:
            raise InvalidInputError("page must be >= 1")
        if self.limit < 1:
            raise InvalidInputError("limit must be >= 1")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class Page(Generic[T]):
    """One page of results plus the metadata clients need to continue."""

    items: list[T]
    page: int
    limit: int
    has_more: bool
    total: int | None = field(default=None)

    @classmethod
    def empty(cls, request: PageRequest) -> Page[T]:
        return cls(items=[], page=request.page, limit=request.limit, has_more=False)

    def map(self, func: Callable[[T], U]) -> Page[U]:
        """Return a page with the same metadata and transformed items."""
        return Page(
            items=[func(item) for item in self.items],
            page=self.page,
            limit=self.limit,
            has_more=self.has_more,
            total=self.total,
        )


def paginate_query(db: Session, stmt: Select[Any], request: PageRequest) -> Page[Any]:
    """Execute an ORM select for one page.

    One extra row is fetched to decide ``has_more`` without a COUNT query.
    """
    rows = list(
        db.execute(stmt.offset(request.offset).limit(request.limit + 1)).unique().scalars()
    )
    has_more = len(rows) > request.limit
    return Page(items=rows[: request.limit], page=request.page, limit=request.limit, has_more=has_more)


def paginate_sequence(items: Sequence[T], request: PageRequest) -> Page[T]:
    """Slice an in-memory sequence; the total is known so it is reported."""
    start = request.offset
    end = start + request.limit
    return Page(
        items=list(items[start:end]),
        page=request.page,
        limit=request.limit,
        has_more=end < len(items),
        total=len(items),
    )
