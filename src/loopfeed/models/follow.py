# src/loopfeed/models/follow.py
"""Follow edges between users."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from loopfeed.db.session import Base
from loopfeed.db.time import utcnow

from .user import User


class Follow(Base):
    """Directed edge: ``follower`` follows ``following``.

    Edges are created and destroyed by the follow graph service and are never
    updated in place.
    """

    __tablename__ = "follow"
    __table_args__ = (
        UniqueConstraint("follower_id", "following_id", name="uq_follow_pair"),
        Index("ix_follow_follower_id", "follower_id"),
        Index("ix_follow_following_id", "following_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    follower_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id", ondelete="CASCADE"),
        nullable=False,
    )
    following_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id", ondelete="CASCADE"),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    follower: Mapped[User] = relationship("User", foreign_keys="Follow.follower_id")
    following: Mapped[User] = relationship("User", foreign_keys="Follow.following_id")
