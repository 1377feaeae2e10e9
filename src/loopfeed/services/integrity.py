# src/loopfeed/services/integrity.py
"""Consistency sweep for denormalized counters and the comment forest.

Counters are maintained incrementally by the request paths. This module
recomputes them from the source rows so drift (from crashes, manual edits or
bugs) can be reported and, when asked, repaired.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session, aliased

from loopfeed.models import Comment, Follow, Post, User
from loopfeed.models.reaction import REACTION_TARGET_COMMENT

from .engagement import clear_reactions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CounterDrift:
    """A stored counter that disagrees with a recount."""

    entity: str
    entity_id: int
    field: str
    stored: int
    actual: int


@dataclass
class IntegrityReport:
    orphan_comment_ids: list[int] = field(default_factory=list)
    removed_comments: int = 0
    drifts: list[CounterDrift] = field(default_factory=list)
    repaired: bool = False

    @property
    def clean(self) -> bool:
        return not self.orphan_comment_ids and not self.drifts


def find_orphan_comments(db: Session) -> list[int]:
    """Return ids of replies whose parent row no longer exists."""
    parent = aliased(Comment)
    stmt = (
        select(Comment.id)
        .outerjoin(parent, Comment.parent_id == parent.id)
        .where(Comment.parent_id.is_not(None), parent.id.is_(None))
        .order_by(Comment.id)
    )
    return list(db.execute(stmt).scalars())


def _children_map(db: Session) -> dict[int, list[int]]:
    children: dict[int, list[int]] = defaultdict(list)
    for comment_id, parent_id in db.execute(select(Comment.id, Comment.parent_id)):
        if parent_id is not None:
            children[parent_id].append(comment_id)
    return children


def _descendants(children: dict[int, list[int]], start: int) -> list[int]:
    found: list[int] = []
    seen = {start}
    stack = list(children.get(start, ()))
    while stack:
        node = stack.pop()
        if node in seen:
            continue
        seen.add(node)
        found.append(node)
        stack.extend(children.get(node, ()))
    return found


def remove_orphan_comments(db: Session, orphan_ids: list[int]) -> int:
    """Delete orphaned replies with everything below them. Does not commit."""
    if not orphan_ids:
        return 0
    children = _children_map(db)
    doomed: set[int] = set()
    for orphan_id in orphan_ids:
        doomed.add(orphan_id)
        doomed.update(_descendants(children, orphan_id))
    ids = sorted(doomed)
    clear_reactions(db, REACTION_TARGET_COMMENT, ids)
    # Detach first so row order does not matter to the self-referencing key.
    db.execute(
        update(Comment)
        .where(Comment.id.in_(ids))
        .values(parent_id=None)
        .execution_options(synchronize_session=False)
    )
    db.execute(
        delete(Comment).where(Comment.id.in_(ids)).execution_options(synchronize_session=False)
    )
    return len(ids)


def recount_reply_counts(db: Session, repair: bool = False) -> list[CounterDrift]:
    """Compare each root's ``reply_count`` with the size of its subtree."""
    children = _children_map(db)
    drifts: list[CounterDrift] = []
    roots = db.execute(
        select(Comment.id, Comment.reply_count).where(Comment.parent_id.is_(None))
    ).all()
    for root_id, stored in roots:
        actual = len(_descendants(children, root_id))
        if stored != actual:
            drifts.append(CounterDrift("comment", root_id, "reply_count", stored, actual))
            if repair:
                db.execute(update(Comment).where(Comment.id == root_id).values(reply_count=actual))
    return drifts


def recount_follow_counters(db: Session, repair: bool = False) -> list[CounterDrift]:
    """Compare user follower/following counters with the edge table."""
    followers = dict(
        db.execute(
            select(Follow.following_id, func.count()).group_by(Follow.following_id)
        ).all()
    )
    following = dict(
        db.execute(select(Follow.follower_id, func.count()).group_by(Follow.follower_id)).all()
    )
    drifts: list[CounterDrift] = []
    users = db.execute(select(User.id, User.followers_count, User.following_count)).all()
    for user_id, stored_followers, stored_following in users:
        actual_followers = int(followers.get(user_id, 0))
        actual_following = int(following.get(user_id, 0))
        changes: dict[str, int] = {}
        if stored_followers != actual_followers:
            drifts.append(
                CounterDrift("user", user_id, "followers_count", stored_followers, actual_followers)
            )
            changes["followers_count"] = actual_followers
        if stored_following != actual_following:
            drifts.append(
                CounterDrift("user", user_id, "following_count", stored_following, actual_following)
            )
            changes["following_count"] = actual_following
        if repair and changes:
            db.execute(update(User).where(User.id == user_id).values(**changes))
    return drifts


def recount_post_comment_counts(db: Session, repair: bool = False) -> list[CounterDrift]:
    """Compare each post's ``comments_count`` with its top-level comments."""
    actual_counts = dict(
        db.execute(
            select(Comment.post_id, func.count())
            .where(Comment.parent_id.is_(None))
            .group_by(Comment.post_id)
        ).all()
    )
    drifts: list[CounterDrift] = []
    for post_id, stored in db.execute(select(Post.id, Post.comments_count)).all():
        actual = int(actual_counts.get(post_id, 0))
        if stored != actual:
            drifts.append(CounterDrift("post", post_id, "comments_count", stored, actual))
            if repair:
                db.execute(update(Post).where(Post.id == post_id).values(comments_count=actual))
    return drifts


def run_integrity_check(db: Session, repair: bool = False) -> IntegrityReport:
    """Sweep orphans and counters; with ``repair`` fix everything in one commit."""
    report = IntegrityReport(orphan_comment_ids=find_orphan_comments(db))
    if repair and report.orphan_comment_ids:
        report.removed_comments = remove_orphan_comments(db, report.orphan_comment_ids)

    report.drifts.extend(recount_reply_counts(db, repair))
    report.drifts.extend(recount_post_comment_counts(db, repair))
    report.drifts.extend(recount_follow_counters(db, repair))

    if repair:
        db.commit()
        db.expire_all()
        report.repaired = True
        logger.info(
            "Integrity repair removed %d comments and fixed %d counters",
            report.removed_comments,
            len(report.drifts),
        )
    else:
        logger.info(
            "Integrity check found %d orphans and %d counter drifts",
            len(report.orphan_comment_ids),
            len(report.drifts),
        )
    return report
