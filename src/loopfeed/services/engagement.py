# src/loopfeed/services/engagement.py
"""Like/dislike toggling shared by every reactable entity.

A user's reaction to an entity is one row in the ``reaction`` table, so the
like-set and dislike-set of an entity are disjoint by construction. Switching
from dislike to like rewrites that single row, which removes the user from the
opposite set in the same write.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from loopfeed.models import Reactable, Reaction
from loopfeed.models.reaction import REACTION_DISLIKE, REACTION_LIKE

from .errors import ConflictError, InvalidInputError

logger = logging.getLogger(__name__)

REACTION_KINDS: dict[str, int] = {
    "like": REACTION_LIKE,
    "dislike": REACTION_DISLIKE,
}


@dataclass(frozen=True)
class ReactionState:
    """Set sizes of an entity plus the viewer's membership."""

    likes: int = 0
    dislikes: int = 0
    is_liked: bool = False
    is_disliked: bool = False


def _reaction_value(reaction: str) -> int:
    try:
        return REACTION_KINDS[reaction]
    except KeyError as err:
        raise InvalidInputError(f"Unknown reaction: {reaction}") from err


def toggle_reaction(
    db: Session,
    entity: Reactable,
    user_id: int,
    reaction: str,
) -> ReactionState:
    """Toggle ``user_id``'s ``reaction`` on ``entity`` and commit.

    Args:
        db: Database session
        entity: A persisted post or comment
        user_id: Caller identity
        reaction: ``"like"`` or ``"dislike"``

    Returns:
        The entity's counts and the caller's resulting state.

    Raises:
        InvalidInputError: If the reaction name is unknown.
        ConflictError: If a concurrent request inserted the same row first.
    """
    direction = _reaction_value(reaction)
    target_type = entity.reaction_target
    target_id = entity.id  # type: ignore[attr-defined]

    # Read the current row under a lock so the decision uses write-time state.
    existing = db.execute(
        select(Reaction)
        .where(
            Reaction.target_type == target_type,
            Reaction.target_id == target_id,
            Reaction.user_id == user_id,
        )
        .with_for_update()
    ).scalar_one_or_none()

    if existing is None:
        db.add(
            Reaction(
                target_type=target_type,
                target_id=target_id,
                user_id=user_id,
                kind=direction,
            )
        )
    elif existing.kind == direction:
        db.delete(existing)
    else:
        existing.kind = direction

    try:
        db.commit()
    except IntegrityError as err:
        db.rollback()
        logger.info(
            "Concurrent %s on %s %s by user %s", reaction, target_type, target_id, user_id
        )
        raise ConflictError("Reaction was changed by a concurrent request") from err

    return reaction_state(db, target_type, target_id, user_id)


def reaction_states(
    db: Session,
    target_type: str,
    target_ids: Iterable[int],
    viewer_id: int | None = None,
) -> dict[int, ReactionState]:
    """Return reaction counts for many entities in two queries.

    Entities without any reaction are still present in the result.
    """
    ids = list(dict.fromkeys(target_ids))
    if not ids:
        return {}

    likes: dict[int, int] = dict.fromkeys(ids, 0)
    dislikes: dict[int, int] = dict.fromkeys(ids, 0)
    rows = db.execute(
        select(Reaction.target_id, Reaction.kind, func.count())
        .where(Reaction.target_type == target_type, Reaction.target_id.in_(ids))
        .group_by(Reaction.target_id, Reaction.kind)
    ).all()
    for target_id, kind, count in rows:
        if kind == REACTION_LIKE:
            likes[target_id] = int(count)
        else:
            dislikes[target_id] = int(count)

    mine: dict[int, int] = {}
    if viewer_id is not None:
        mine = {
            target_id: kind
            for target_id, kind in db.execute(
                select(Reaction.target_id, Reaction.kind).where(
                    Reaction.target_type == target_type,
                    Reaction.target_id.in_(ids),
                    Reaction.user_id == viewer_id,
                )
            ).all()
        }

    return {
        target_id: ReactionState(
            likes=likes[target_id],
            dislikes=dislikes[target_id],
            is_liked=mine.get(target_id) == REACTION_LIKE,
            is_disliked=mine.get(target_id) == REACTION_DISLIKE,
        )
        for target_id in ids
    }


def reaction_state(
    db: Session,
    target_type: str,
    target_id: int,
    viewer_id: int | None = None,
) -> ReactionState:
    """Return reaction counts for a single entity."""
    return reaction_states(db, target_type, [target_id], viewer_id)[target_id]


def clear_reactions(db: Session, target_type: str, target_ids: Iterable[int]) -> None:
    """Delete every reaction row of the given entities without committing."""
    ids = list(target_ids)
    if not ids:
        return
    db.execute(
        delete(Reaction).where(
            Reaction.target_type == target_type,
            Reaction.target_id.in_(ids),
        )
    )
