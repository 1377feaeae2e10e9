# src/loopfeed/services/search.py
"""Case-insensitive substring search over users and public posts."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from loopfeed.models import Post, PostTag, User

from .errors import InvalidInputError
from .pagination import Page, PageRequest, paginate_query
from .post_service import PostView, check_kind, list_post_views

LIKE_ESCAPE = "\\"


@dataclass(frozen=True)
class SearchResults:
    users: Page[User]
    posts: Page[PostView]


def _pattern(query: str | None) -> str:
    """Turn user input into a LIKE pattern that matches it literally."""
    term = (query or "").strip()
    if not term:
        raise InvalidInputError("Search query is required")
    for char in (LIKE_ESCAPE, "%", "_"):
        term = term.replace(char, LIKE_ESCAPE + char)
    return f"%{term}%"


def search_users(db: Session, query: str, page: PageRequest) -> Page[User]:
    """Match users by username or full name."""
    pattern = _pattern(query)
    stmt = (
        select(User)
        .where(
            or_(
                User.username.ilike(pattern, escape=LIKE_ESCAPE),
                User.full_name.ilike(pattern, escape=LIKE_ESCAPE),
            )
        )
        .order_by(User.followers_count.desc(), User.id.asc())
    )
    return paginate_query(db, stmt, page)


def search_posts(
    db: Session,
    query: str,
    page: PageRequest,
    viewer_id: int | None = None,
    kind: str | None = None,
) -> Page[PostView]:
    """Match public posts by title, description or tag."""
    pattern = _pattern(query)
    check_kind(kind)
    tagged = select(PostTag.post_id).where(
        PostTag.tag_key.like(pattern.casefold(), escape=LIKE_ESCAPE)
    )
    stmt = select(Post).where(
        Post.is_public.is_(True),
        or_(
            Post.title.ilike(pattern, escape=LIKE_ESCAPE),
            Post.description.ilike(pattern, escape=LIKE_ESCAPE),
            Post.id.in_(tagged),
        ),
    )
    if kind is not None:
        stmt = stmt.where(Post.kind == kind)
    stmt = stmt.order_by(Post.created_at.desc(), Post.id.desc())
    return list_post_views(db, stmt, page, viewer_id)


def search_all(
    db: Session,
    query: str,
    page: PageRequest,
    viewer_id: int | None = None,
) -> SearchResults:
    """Run both searches with the same query and page."""
    return SearchResults(
        users=search_users(db, query, page),
        posts=search_posts(db, query, page, viewer_id),
    )
