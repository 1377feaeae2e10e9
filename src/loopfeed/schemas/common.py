"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from collections.abc import Callable
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

from loopfeed.services.pagination import Page

T = TypeVar("T")


class PageMeta(BaseModel):
    """Pagination metadata returned by list endpoints."""

    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)
    has_more: bool
    total: int | None = Field(None, description="Only reported for subtree listings.")


class Paginated(BaseModel, Generic[T]):
    """List envelope: ``{"data": [...], "pagination": {...}}``."""

    data: list[T]
    pagination: PageMeta

    @classmethod
    def from_page(cls, page: Page[Any], build: Callable[[Any], T]) -> Paginated[T]:
        return cls(
            data=[build(item) for item in page.items],
            pagination=PageMeta(
                page=page.page,
                limit=page.limit,
                has_more=page.has_more,
                total=page.total,
            ),
        )


class MessageResponse(BaseModel):
    message: str
