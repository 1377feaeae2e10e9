"""Account registration, authentication and profile helpers."""
from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from typing import Any

from jose import JWTError
from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from loopfeed.core import security
from loopfeed.models import Post, User
from loopfeed.models.user import ACCOUNT_TYPE_PERSONAL, ACCOUNT_TYPES

from .errors import ConflictError, InvalidInputError, NotFoundError, UnauthorizedError
from .follow_graph import FollowGraph

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
PROFILE_FIELDS = ("full_name", "bio", "description", "avatar_url", "cover_image_url")

__all__ = [
    "ProfileView",
    "register_user",
    "authenticate",
    "SessionTokens",
    "issue_tokens",
    "refresh_session",
    "logout",
    "get_user",
    "get_profile",
    "update_profile",
    "change_password",
]


@dataclass(frozen=True)
class ProfileView:
    """Public profile plus viewer-relative data."""

    user: User
    posts_count: int
    is_following: bool


@dataclass(frozen=True)
class SessionTokens:
    access_token: str
    refresh_token: str


def _check_password(password: str) -> None:
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise InvalidInputError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
        )


def register_user(
    db: Session,
    *,
    username: str,
    email: str,
    full_name: str,
    password: str,
    account_type: str = ACCOUNT_TYPE_PERSONAL,
) -> User:
    """Create an account. Handle and email are stored lower-cased."""
    handle = (username or "").strip().lower()
    address = (email or "").strip().lower()
    name = (full_name or "").strip()
    if not handle or not address or not name:
        raise InvalidInputError("Username, email and full name are required")
    _check_password(password)
    if account_type not in ACCOUNT_TYPES:
        raise InvalidInputError(f"Invalid account type: {account_type}")

    duplicate = db.execute(
        select(User.id).where(or_(User.username == handle, User.email == address))
    ).first()
    if duplicate is not None:
        raise ConflictError("User with this email or username already exists")

    user = User(
        username=handle,
        email=address,
        full_name=name,
        password_hash=security.hash_password(password),
        account_type=account_type,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as err:
        db.rollback()
        raise ConflictError("User with this email or username already exists") from err
    db.refresh(user)
    logger.info("Registered user %s (%s)", user.id, handle)
    return user


def authenticate(
    db: Session,
    *,
    password: str,
    username: str | None = None,
    email: str | None = None,
) -> User:
    """Return the user matching the handle or email and password.

    Raises:
        InvalidInputError: Neither handle nor email given.
        NotFoundError: No such user.
        UnauthorizedError: Wrong password.
    """
    if not username and not email:
        raise InvalidInputError("Username or email is required")
    if username:
        stmt = select(User).where(User.username == username.strip().lower())
    else:
        stmt = select(User).where(User.email == (email or "").strip().lower())
    user = db.execute(stmt).scalar_one_or_none()
    if user is None:
        raise NotFoundError("User does not exist")
    if not security.verify_password(password, user.password_hash):
        logger.info("Failed login for user %s", user.id)
        raise UnauthorizedError("Invalid user credentials")
    return user


def _new_token_id() -> str:
    return secrets.token_urlsafe(24)


def _tokens_for(user_id: int, token_id: str) -> SessionTokens:
    return SessionTokens(
        access_token=security.create_access_token(user_id),
        refresh_token=security.create_refresh_token(user_id, token_id),
    )


def issue_tokens(db: Session, user: User) -> SessionTokens:
    """Start a session for ``user``.

    The new refresh token replaces any earlier one, so only the latest login
    can be refreshed.
    """
    token_id = _new_token_id()
    user.refresh_token_id = token_id
    db.commit()
    return _tokens_for(user.id, token_id)


def refresh_session(db: Session, refresh_token: str) -> tuple[User, SessionTokens]:
    """Exchange a refresh token for a new access/refresh pair.

    Each refresh token works once: the stored identifier is swapped in a single
    conditional UPDATE, so a replayed or concurrent second use is rejected.

    Raises:
        UnauthorizedError: Invalid, expired, replaced or logged-out token.
    """
    try:
        user_id, token_id = security.decode_refresh_token(refresh_token)
    except JWTError as err:
        raise UnauthorizedError("Invalid refresh token") from err

    new_token_id = _new_token_id()
    result = db.execute(
        update(User)
        .where(User.id == user_id, User.refresh_token_id == token_id)
        .values(refresh_token_id=new_token_id)
    )
    if result.rowcount != 1:
        db.rollback()
        logger.info("Rejected stale refresh token for user %s", user_id)
        raise UnauthorizedError("Refresh token is expired or used")
    db.commit()

    user = get_user(db, user_id)
    return user, _tokens_for(user_id, new_token_id)


def logout(db: Session, user: User) -> None:
    """Forget the user's refresh token. Access tokens run until they expire."""
    user.refresh_token_id = None
    db.commit()
    logger.info("User %s logged out", user.id)


def get_user(db: Session, user_id: int) -> User:
    """Return a single user by primary key."""
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def get_profile(db: Session, user_id: int, viewer_id: int | None = None) -> ProfileView:
    """Return a user's profile with post count and the viewer's follow state."""
    user = get_user(db, user_id)
    posts_count = db.execute(
        select(func.count()).select_from(Post).where(Post.owner_id == user.id)
    ).scalar_one()
    is_following = False
    if viewer_id is not None and viewer_id != user.id:
        is_following = FollowGraph(db).exists(viewer_id, user.id)
    return ProfileView(user=user, posts_count=int(posts_count), is_following=is_following)


def update_profile(db: Session, user: User, changes: dict[str, Any]) -> User:
    """Apply partial profile updates."""
    for key, value in changes.items():
        if key not in PROFILE_FIELDS:
            raise InvalidInputError(f"Field cannot be updated: {key}")
        if key == "full_name":
            value = (value or "").strip()
            if not value:
                raise InvalidInputError("Full name cannot be empty")
        setattr(user, key, value)

    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def change_password(db: Session, user: User, current_password: str, new_password: str) -> None:
    """Replace the password after verifying the current one.

    Any outstanding refresh token is revoked.
    """
    if not security.verify_password(current_password, user.password_hash):
        raise UnauthorizedError("Current password is incorrect")
    _check_password(new_password)
    user.password_hash = security.hash_password(new_password)
    user.refresh_token_id = None
    db.commit()
    logger.info("User %s changed password", user.id)
