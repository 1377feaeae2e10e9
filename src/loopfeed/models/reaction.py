# src/loopfeed/models/reaction.py
"""Like/dislike reactions shared by posts and comments."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    SmallInteger,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from loopfeed.db.session import Base
from loopfeed.db.time import utcnow

REACTION_LIKE = 1
REACTION_DISLIKE = -1

REACTION_TARGET_POST = "post"
REACTION_TARGET_COMMENT = "comment"


class Reactable:
    """Mixin for entities that carry a like-set and a dislike-set.

    Membership is stored in the ``reaction`` table keyed by
    ``(__reaction_target__, id, user_id)``, so a user sits in at most one of
    the two sets of any entity.
    """

    __reaction_target__ = ""

    @property
    def reaction_target(self) -> str:
        """Return the discriminator used for this entity's reaction rows."""
        return self.__reaction_target__


class Reaction(Base):
    """Membership of one user in the like-set or dislike-set of one entity."""

    __tablename__ = "reaction"
    __table_args__ = (
        CheckConstraint("kind IN (1, -1)", name="ck_reaction_kind"),
        Index("ix_reaction_target", "target_type", "target_id"),
        Index("ix_reaction_user_id", "user_id"),
    )

    # Composite primary key keeps the like and dislike sets disjoint.
    target_type: Mapped[str] = mapped_column(String(16), primary_key=True)
    target_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id", ondelete="CASCADE"),
        primary_key=True,
    )

    # 1 = like, -1 = dislike.
    kind: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
