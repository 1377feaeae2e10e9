# src/loopfeed/models/post.py
"""SQLAlchemy models for uploaded posts."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from loopfeed.db.session import Base
from loopfeed.db.time import utcnow

from .reaction import REACTION_TARGET_POST, Reactable
from .user import User

POST_KIND_VIDEO = "video"
POST_KIND_IMAGES = "images"
POST_KIND_SHORT = "short"
POST_KINDS = (POST_KIND_VIDEO, POST_KIND_IMAGES, POST_KIND_SHORT)
# Kinds whose payload is a single media file.
MEDIA_POST_KINDS = (POST_KIND_VIDEO, POST_KIND_SHORT)

MAX_POST_IMAGES = 10


class Post(Reactable, Base):
    """Uploaded content: a video, a short, or an ordered set of images."""

    __tablename__ = "post"
    __reaction_target__ = REACTION_TARGET_POST
    __table_args__ = (
        CheckConstraint("kind IN ('video', 'images', 'short')", name="ck_post_kind"),
        Index("ix_post_owner_created", "owner_id", "created_at"),
        Index("ix_post_created_at", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id", ondelete="CASCADE"),
        nullable=False,
    )
    kind: Mapped[str] = mapped_column(String(16), nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # Video and short payload.
    video_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    thumbnail_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    duration: Mapped[float | None] = mapped_column(Float, nullable=True)

    # Image-set payload: ordered list of {"url": ..., "caption": ...}.
    images: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)

    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # Top-level comments only; replies are tracked on their root comment.
    comments_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    owner: Mapped[User] = relationship("User", lazy="joined")
    tag_entries: Mapped[list[PostTag]] = relationship(
        "PostTag",
        cascade="all, delete-orphan",
        order_by="PostTag.id",
    )

    @validates("tags")
    def _sync_tag_entries(self, key: str, value: list[str] | None) -> list[str]:
        # One searchable row per tag; replaced wholesale whenever tags change.
        tags = list(value or [])
        self.tag_entries = [PostTag(tag=tag, tag_key=tag.casefold()) for tag in tags]
        return tags


class PostTag(Base):
    """A single tag of a post, stored case-folded for substring search."""

    __tablename__ = "post_tag"
    __table_args__ = (Index("ix_post_tag_key", "tag_key"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("post.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    tag: Mapped[str] = mapped_column(Text, nullable=False)
    tag_key: Mapped[str] = mapped_column(Text, nullable=False)
