# src/loopfeed/services/playlists.py
"""Playlists: ordered, owner-curated lists of video and short posts."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from loopfeed.models import Playlist, PlaylistItem, Post
from loopfeed.models.post import MEDIA_POST_KINDS
from loopfeed.models.reaction import REACTION_TARGET_POST

from .engagement import reaction_states
from .errors import ConflictError, ForbiddenError, InvalidInputError, NotFoundError
from .pagination import Page, PageRequest, paginate_query
from .post_service import PostView, get_visible_post

logger = logging.getLogger(__name__)

__all__ = [
    "PlaylistView",
    "add_post",
    "create_playlist",
    "delete_playlist",
    "get_playlist",
    "list_user_playlists",
    "remove_post",
]


@dataclass(frozen=True)
class PlaylistView:
    """A playlist with the posts the viewer is allowed to see, in order."""

    playlist: Playlist
    posts: list[PostView]


def _get_playlist(db: Session, playlist_id: int, viewer_id: int | None) -> Playlist:
    playlist = db.get(Playlist, playlist_id)
    if playlist is None or (not playlist.is_public and playlist.owner_id != viewer_id):
        raise NotFoundError("Playlist not found")
    return playlist


def _get_owned_playlist(db: Session, playlist_id: int, caller_id: int) -> Playlist:
    playlist = _get_playlist(db, playlist_id, caller_id)
    if playlist.owner_id != caller_id:
        raise ForbiddenError("Not authorized to modify this playlist")
    return playlist


def _view(db: Session, playlist: Playlist, viewer_id: int | None) -> PlaylistView:
    stmt = (
        select(Post)
        .join(PlaylistItem, PlaylistItem.post_id == Post.id)
        .where(PlaylistItem.playlist_id == playlist.id)
        .order_by(PlaylistItem.position, PlaylistItem.id)
    )
    if viewer_id is None:
        stmt = stmt.where(Post.is_public.is_(True))
    else:
        stmt = stmt.where(or_(Post.is_public.is_(True), Post.owner_id == viewer_id))
    posts = list(db.execute(stmt).scalars())
    states = reaction_states(db, REACTION_TARGET_POST, [post.id for post in posts], viewer_id)
    return PlaylistView(
        playlist=playlist,
        posts=[PostView(post=post, reactions=states[post.id]) for post in posts],
    )


def create_playlist(
    db: Session,
    *,
    owner_id: int,
    title: str,
    description: str = "",
    is_public: bool = True,
) -> PlaylistView:
    """Create an empty playlist."""
    clean_title = (title or "").strip()
    if not clean_title:
        raise InvalidInputError("Title is required")
    playlist = Playlist(
        owner_id=owner_id,
        title=clean_title,
        description=(description or "").strip(),
        is_public=is_public,
    )
    db.add(playlist)
    db.commit()
    db.refresh(playlist)
    logger.info("User %s created playlist %s", owner_id, playlist.id)
    return PlaylistView(playlist=playlist, posts=[])


def get_playlist(db: Session, playlist_id: int, viewer_id: int | None = None) -> PlaylistView:
    """Return a playlist; private ones exist only for their owner."""
    return _view(db, _get_playlist(db, playlist_id, viewer_id), viewer_id)


def list_user_playlists(
    db: Session,
    owner_id: int,
    page: PageRequest,
    viewer_id: int | None = None,
) -> Page[Playlist]:
    """Return one user's playlists, newest first, hiding private ones from others."""
    stmt = select(Playlist).where(Playlist.owner_id == owner_id)
    if viewer_id != owner_id:
        stmt = stmt.where(Playlist.is_public.is_(True))
    stmt = stmt.order_by(Playlist.created_at.desc(), Playlist.id.desc())
    return paginate_query(db, stmt, page)


def add_post(db: Session, playlist_id: int, caller_id: int, post_id: int) -> PlaylistView:
    """Append a video or short to the end of an owned playlist.

    Raises:
        NotFoundError: Unknown playlist, or a post the caller cannot see.
        ForbiddenError: The caller does not own the playlist.
        InvalidInputError: The post is an image set.
        ConflictError: The post is already in the playlist.
    """
    playlist = _get_owned_playlist(db, playlist_id, caller_id)
    post = get_visible_post(db, post_id, caller_id)
    if post.kind not in MEDIA_POST_KINDS:
        raise InvalidInputError("Only videos and shorts can be added to a playlist")

    exists = db.execute(
        select(PlaylistItem.id).where(
            PlaylistItem.playlist_id == playlist.id,
            PlaylistItem.post_id == post.id,
        )
    ).first()
    if exists is not None:
        raise ConflictError("Post is already in this playlist")

    last = db.execute(
        select(func.max(PlaylistItem.position)).where(PlaylistItem.playlist_id == playlist.id)
    ).scalar()
    db.add(
        PlaylistItem(
            playlist_id=playlist.id,
            post_id=post.id,
            position=0 if last is None else last + 1,
        )
    )
    try:
        db.commit()
    except IntegrityError as err:
        db.rollback()
        raise ConflictError("Post is already in this playlist") from err

    logger.info("User %s added post %s to playlist %s", caller_id, post.id, playlist.id)
    return _view(db, playlist, caller_id)


def remove_post(db: Session, playlist_id: int, caller_id: int, post_id: int) -> PlaylistView:
    """Drop a post from an owned playlist; the order of the rest is kept."""
    playlist = _get_owned_playlist(db, playlist_id, caller_id)
    result = db.execute(
        delete(PlaylistItem).where(
            PlaylistItem.playlist_id == playlist.id,
            PlaylistItem.post_id == post_id,
        )
    )
    if not result.rowcount:
        db.rollback()
        raise NotFoundError("Post is not in this playlist")
    db.commit()
    return _view(db, playlist, caller_id)


def delete_playlist(db: Session, playlist_id: int, caller_id: int) -> None:
    playlist = _get_owned_playlist(db, playlist_id, caller_id)
    db.delete(playlist)
    db.commit()
    logger.info("User %s deleted playlist %s", caller_id, playlist_id)
