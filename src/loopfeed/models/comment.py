# src/loopfeed/models/comment.py
"""SQLAlchemy models for threaded comments."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from loopfeed.db.session import Base
from loopfeed.db.time import utcnow

from .reaction import REACTION_TARGET_COMMENT, Reactable
from .user import User

MAX_COMMENT_LENGTH = 1000


class Comment(Reactable, Base):
    """A comment on a post, optionally replying to another comment.

    Comments form an adjacency list through ``parent_id``. The topmost comment
    of a thread (``parent_id`` is NULL) is its root, and only the root's
    ``reply_count`` is maintained: it equals the number of descendants at any
    depth.
    """

    __tablename__ = "comment"
    __reaction_target__ = REACTION_TARGET_COMMENT
    __table_args__ = (
        Index("ix_comment_post_parent_created", "post_id", "parent_id", "created_at"),
        Index("ix_comment_parent_id", "parent_id"),
        Index("ix_comment_author_id", "author_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(Integer, ForeignKey("post.id"), nullable=False)
    author_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id", ondelete="CASCADE"),
        nullable=False,
    )
    # Parent chain for replies; top-level comments have parent_id = NULL.
    parent_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("comment.id"),
        nullable=True,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    reply_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    is_edited: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    edited_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    author: Mapped[User] = relationship("User", lazy="joined")

    @property
    def is_root(self) -> bool:
        """Return True for a top-level comment."""
        return self.parent_id is None
