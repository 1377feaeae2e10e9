# src/loopfeed/services/post_service.py
"""Service layer for post creation, retrieval and deletion."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from sqlalchemy import Select, delete, select
from sqlalchemy.orm import Session

from loopfeed.models import Comment, PlaylistItem, Post
from loopfeed.models.post import (
    MAX_POST_IMAGES,
    MEDIA_POST_KINDS,
    POST_KIND_SHORT,
    POST_KINDS,
)
from loopfeed.models.reaction import REACTION_TARGET_COMMENT, REACTION_TARGET_POST

from .counters import adjust_counter
from .engagement import ReactionState, clear_reactions, reaction_state, reaction_states, toggle_reaction
from .errors import ForbiddenError, InvalidInputError, NotFoundError
from .pagination import Page, PageRequest, paginate_query

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PostView:
    """A post together with the viewer-relative reaction state."""

    post: Post
    reactions: ReactionState


def check_kind(kind: str | None) -> str | None:
    """Return ``kind`` unchanged if it is a known post kind (or None)."""
    if kind is not None and kind not in POST_KINDS:
        raise InvalidInputError(f"Invalid post type: {kind}")
    return kind


def normalize_tags(tags: Iterable[str] | None) -> list[str]:
    """Trim tags and drop empty ones, keeping order."""
    return [tag.strip() for tag in tags or () if tag and tag.strip()]


def _normalize_images(images: Sequence[dict[str, Any]] | None) -> list[dict[str, Any]]:
    cleaned: list[dict[str, Any]] = []
    for image in images or ():
        url = (image.get("url") or "").strip()
        if not url:
            raise InvalidInputError("Every image needs a url")
        cleaned.append({"url": url, "caption": (image.get("caption") or "").strip()})
    return cleaned


def validate_payload(
    kind: str,
    *,
    video_url: str | None,
    images: Sequence[dict[str, Any]] | None,
) -> list[dict[str, Any]]:
    """Enforce the media payload rules for ``kind``.

    Video and short posts carry exactly one media URL and no images; image
    posts carry 1 to ``MAX_POST_IMAGES`` images and no video.

    Returns:
        The cleaned image list.
    """
    if kind not in POST_KINDS:
        raise InvalidInputError(f"Invalid post type: {kind}")
    cleaned = _normalize_images(images)
    if kind in MEDIA_POST_KINDS:
        if not (video_url or "").strip():
            raise InvalidInputError(f"A {kind} post requires a video file")
        if cleaned:
            raise InvalidInputError(f"A {kind} post cannot include images")
        return []
    if video_url:
        raise InvalidInputError("An image post cannot include a video")
    if not cleaned:
        raise InvalidInputError("At least one image is required")
    if len(cleaned) > MAX_POST_IMAGES:
        raise InvalidInputError(f"Maximum {MAX_POST_IMAGES} images allowed")
    return cleaned


def _with_reactions(db: Session, page: Page[Post], viewer_id: int | None) -> Page[PostView]:
    states = reaction_states(db, REACTION_TARGET_POST, [post.id for post in page.items], viewer_id)
    return page.map(lambda post: PostView(post=post, reactions=states[post.id]))


def list_post_views(
    db: Session,
    stmt: Select[Any],
    page: PageRequest,
    viewer_id: int | None = None,
) -> Page[PostView]:
    """Paginate a post query and attach reaction state to each item."""
    return _with_reactions(db, paginate_query(db, stmt, page), viewer_id)


def create_post(
    db: Session,
    *,
    owner_id: int,
    kind: str,
    title: str,
    description: str = "",
    video_url: str | None = None,
    thumbnail_url: str | None = None,
    duration: float | None = None,
    images: Sequence[dict[str, Any]] | None = None,
    tags: Iterable[str] | None = None,
    is_public: bool = True,
) -> PostView:
    """Create a post from metadata referencing already-stored media."""
    clean_title = (title or "").strip()
    if not clean_title:
        raise InvalidInputError("Title is required")
    cleaned_images = validate_payload(kind, video_url=video_url, images=images)

    is_media = kind in MEDIA_POST_KINDS
    post = Post(
        owner_id=owner_id,
        kind=kind,
        title=clean_title,
        description=(description or "").strip(),
        video_url=video_url.strip() if is_media and video_url else None,
        thumbnail_url=thumbnail_url if is_media else None,
        duration=duration if is_media else None,
        images=cleaned_images,
        tags=normalize_tags(tags),
        is_public=is_public,
    )
    db.add(post)
    db.commit()
    db.refresh(post)
    logger.info("User %s created %s post %s", owner_id, kind, post.id)
    return PostView(post=post, reactions=ReactionState())


def get_visible_post(db: Session, post_id: int, viewer_id: int | None) -> Post:
    """Return a post the viewer may see; private posts are hidden from everyone but the owner."""
    post = db.get(Post, post_id)
    if post is None or (not post.is_public and post.owner_id != viewer_id):
        raise NotFoundError("Post not found")
    return post


def get_post(db: Session, post_id: int, viewer_id: int | None = None) -> PostView:
    """Fetch one post and count the view."""
    post = get_visible_post(db, post_id, viewer_id)
    adjust_counter(db, Post.views, Post.id == post.id, 1)
    db.commit()
    db.refresh(post)
    return PostView(
        post=post,
        reactions=reaction_state(db, REACTION_TARGET_POST, post.id, viewer_id),
    )


def list_posts(
    db: Session,
    page: PageRequest,
    viewer_id: int | None = None,
    kind: str | None = None,
) -> Page[PostView]:
    """Return public posts, newest first."""
    stmt = select(Post).where(Post.is_public.is_(True))
    if check_kind(kind) is not None:
        stmt = stmt.where(Post.kind == kind)
    stmt = stmt.order_by(Post.created_at.desc(), Post.id.desc())
    return list_post_views(db, stmt, page, viewer_id)


def list_shorts(db: Session, page: PageRequest, viewer_id: int | None = None) -> Page[PostView]:
    return list_posts(db, page, viewer_id, kind=POST_KIND_SHORT)


def list_user_posts(
    db: Session,
    owner_id: int,
    page: PageRequest,
    viewer_id: int | None = None,
    kind: str | None = None,
) -> Page[PostView]:
    """Return one user's posts. Private posts are included only for the owner."""
    stmt = select(Post).where(Post.owner_id == owner_id)
    if viewer_id != owner_id:
        stmt = stmt.where(Post.is_public.is_(True))
    if check_kind(kind) is not None:
        stmt = stmt.where(Post.kind == kind)
    stmt = stmt.order_by(Post.created_at.desc(), Post.id.desc())
    return list_post_views(db, stmt, page, viewer_id)


def delete_post(db: Session, post_id: int, caller_id: int) -> None:
    """Delete a post with its comments, every related reaction and its playlist entries."""
    post = db.get(Post, post_id)
    if post is None:
        raise NotFoundError("Post not found")
    if post.owner_id != caller_id:
        raise ForbiddenError("Not authorized to delete this post")

    comment_ids = list(
        db.execute(select(Comment.id).where(Comment.post_id == post_id)).scalars()
    )
    clear_reactions(db, REACTION_TARGET_COMMENT, comment_ids)
    db.execute(delete(Comment).where(Comment.post_id == post_id))
    clear_reactions(db, REACTION_TARGET_POST, [post_id])
    db.execute(delete(PlaylistItem).where(PlaylistItem.post_id == post_id))
    db.delete(post)
    db.commit()
    logger.info(
        "User %s deleted post %s with %d comments", caller_id, post_id, len(comment_ids)
    )


def react_to_post(db: Session, post_id: int, user_id: int, reaction: str) -> ReactionState:
    """Toggle a like or dislike on a visible post."""
    post = get_visible_post(db, post_id, user_id)
    return toggle_reaction(db, post, user_id, reaction)


__all__ = [
    "PostView",
    "check_kind",
    "create_post",
    "delete_post",
    "get_post",
    "get_visible_post",
    "list_post_views",
    "list_posts",
    "list_shorts",
    "list_user_posts",
    "normalize_tags",
    "react_to_post",
    "validate_payload",
]
