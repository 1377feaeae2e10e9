# src/loopfeed/services/follow_graph.py
"""Directed follow graph with denormalized follower/following counters."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from loopfeed.models import Follow, User

from .counters import adjust_counter
from .errors import ConflictError, NotFoundError
from .pagination import Page, PageRequest, paginate_query

logger = logging.getLogger(__name__)

__all__ = [
    "FollowGraph",
    "FollowStatus",
    "FollowResult",
    "follow",
    "unfollow",
    "list_followers",
    "list_following",
    "check_status",
]


@dataclass(frozen=True)
class FollowResult:
    """Outcome of a follow or unfollow, with the target's fresh counters."""

    target_id: int
    is_following: bool
    followers_count: int
    following_count: int


@dataclass(frozen=True)
class FollowStatus:
    is_following: bool
    is_followed_by: bool


class FollowGraph:
    """Thin wrapper around the ``follow`` edge table."""

    def __init__(self, session: Session) -> None:
        """Initialize the graph with a SQLAlchemy session."""
        self.session = session

    def exists(self, follower_id: int, following_id: int) -> bool:
        """Return True when ``follower_id`` follows ``following_id``."""
        row = self.session.execute(
            select(Follow.id).where(
                Follow.follower_id == follower_id,
                Follow.following_id == following_id,
            )
        ).first()
        return row is not None

    def create(self, follower_id: int, following_id: int) -> Follow:
        """Stage a new edge. The caller commits."""
        edge = Follow(follower_id=follower_id, following_id=following_id)
        self.session.add(edge)
        return edge

    def delete(self, follower_id: int, following_id: int) -> bool:
        """Remove an edge. Returns False if there was none."""
        result = self.session.execute(
            delete(Follow).where(
                Follow.follower_id == follower_id,
                Follow.following_id == following_id,
            )
        )
        return bool(result.rowcount)

    def list_by_follower(self, follower_id: int, page: PageRequest) -> Page[User]:
        """Return the users ``follower_id`` follows, most recent edge first."""
        stmt = (
            select(User)
            .join(Follow, Follow.following_id == User.id)
            .where(Follow.follower_id == follower_id)
            .order_by(Follow.created_at.desc(), Follow.id.desc())
        )
        return paginate_query(self.session, stmt, page)

    def list_by_following(self, following_id: int, page: PageRequest) -> Page[User]:
        """Return the users following ``following_id``, most recent edge first."""
        stmt = (
            select(User)
            .join(Follow, Follow.follower_id == User.id)
            .where(Follow.following_id == following_id)
            .order_by(Follow.created_at.desc(), Follow.id.desc())
        )
        return paginate_query(self.session, stmt, page)

    def following_ids(self, follower_id: int) -> set[int]:
        """Return ids of every user ``follower_id`` follows."""
        rows = self.session.execute(
            select(Follow.following_id).where(Follow.follower_id == follower_id)
        ).scalars()
        return set(rows)


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def _result(db: Session, target: User, is_following: bool) -> FollowResult:
    db.refresh(target)
    return FollowResult(
        target_id=target.id,
        is_following=is_following,
        followers_count=target.followers_count,
        following_count=target.following_count,
    )


def follow(db: Session, caller_id: int, target_id: int) -> FollowResult:
    """Make ``caller_id`` follow ``target_id``.

    Raises:
        ConflictError: Self-follow or an edge that already exists.
        NotFoundError: If the target user does not exist.
    """
    if caller_id == target_id:
        raise ConflictError("Cannot follow yourself")
    target = _get_user_or_404(db, target_id)
    graph = FollowGraph(db)
    if graph.exists(caller_id, target_id):
        raise ConflictError("Already following this user")

    graph.create(caller_id, target_id)
    adjust_counter(db, User.following_count, User.id == caller_id, 1)
    adjust_counter(db, User.followers_count, User.id == target_id, 1)
    try:
        db.commit()
    except IntegrityError as err:
        # A concurrent request created the same edge between our check and commit.
        db.rollback()
        raise ConflictError("Already following this user") from err

    logger.info("User %s followed %s", caller_id, target_id)
    return _result(db, target, True)


def unfollow(db: Session, caller_id: int, target_id: int) -> FollowResult:
    """Remove the ``caller_id`` -> ``target_id`` edge.

    Raises:
        ConflictError: Self-unfollow or no existing edge.
        NotFoundError: If the target user does not exist.
    """
    if caller_id == target_id:
        raise ConflictError("Cannot unfollow yourself")
    target = _get_user_or_404(db, target_id)
    graph = FollowGraph(db)
    if not graph.delete(caller_id, target_id):
        db.rollback()
        raise ConflictError("Not following this user")

    adjust_counter(db, User.following_count, User.id == caller_id, -1)
    adjust_counter(db, User.followers_count, User.id == target_id, -1)
    db.commit()

    logger.info("User %s unfollowed %s", caller_id, target_id)
    return _result(db, target, False)


def list_followers(db: Session, user_id: int, page: PageRequest) -> Page[User]:
    """Return users who follow ``user_id``."""
    _get_user_or_404(db, user_id)
    return FollowGraph(db).list_by_following(user_id, page)


def list_following(db: Session, user_id: int, page: PageRequest) -> Page[User]:
    """Return users ``user_id`` follows."""
    _get_user_or_404(db, user_id)
    return FollowGraph(db).list_by_follower(user_id, page)


def check_status(db: Session, caller_id: int, target_id: int) -> FollowStatus:
    """Report whether the edge exists in each direction."""
    _get_user_or_404(db, target_id)
    graph = FollowGraph(db)
    return FollowStatus(
        is_following=graph.exists(caller_id, target_id),
        is_followed_by=graph.exists(target_id, caller_id),
    )
