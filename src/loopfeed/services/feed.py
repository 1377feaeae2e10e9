# src/loopfeed/services/feed.py
"""Home feed built from the follow graph."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from loopfeed.models import Post

from .follow_graph import FollowGraph
from .pagination import Page, PageRequest
from .post_service import PostView, check_kind, list_post_views


def get_feed(
    db: Session,
    viewer_id: int,
    page: PageRequest,
    kind: str | None = None,
) -> Page[PostView]:
    """Return public posts by users the viewer follows, newest first.

    The viewer's own posts never appear, even if a corrupt self-edge exists.
    """
    check_kind(kind)
    followed = FollowGraph(db).following_ids(viewer_id)
    followed.discard(viewer_id)
    if not followed:
        return Page.empty(page)

    stmt = select(Post).where(
        Post.owner_id.in_(followed),
        Post.owner_id != viewer_id,
        Post.is_public.is_(True),
    )
    if kind is not None:
        stmt = stmt.where(Post.kind == kind)
    stmt = stmt.order_by(Post.created_at.desc(), Post.id.desc())
    return list_post_views(db, stmt, page, viewer_id)
