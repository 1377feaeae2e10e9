# src/loopfeed/models/user.py
"""SQLAlchemy models for user accounts."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from loopfeed.db.session import Base
from loopfeed.db.time import utcnow

ACCOUNT_TYPE_PERSONAL = "Personal"
ACCOUNT_TYPE_BUSINESS = "Business"
ACCOUNT_TYPES = (ACCOUNT_TYPE_PERSONAL, ACCOUNT_TYPE_BUSINESS)


class User(Base):
    """Registered account.

    Follow relationships are not stored here; they live in the ``follow`` edge
    table. The two counters are denormalized from that table and are only
    changed through atomic increments.
    """

    __tablename__ = "user_account"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Handles and emails are stored lower-cased so uniqueness is case-insensitive.
    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    full_name: Mapped[str] = mapped_column(Text, nullable=False)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    # Identifier of the single refresh token currently honoured; None after logout.
    refresh_token_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    account_type: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=ACCOUNT_TYPE_PERSONAL,
    )
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    cover_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    bio: Mapped[str] = mapped_column(Text, nullable=False, default="")
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    followers_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    following_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
