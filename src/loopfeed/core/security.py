"""Password hashing and access/refresh token helpers."""
from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import JWTError, jwt
from passlib.context import CryptContext

from loopfeed.core.settings import settings

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)


def hash_password(password: str) -> str:
    """Hash a plain password with bcrypt."""
    return cast(str, pwd_context.hash(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a bcrypt hash."""
    return cast(bool, pwd_context.verify(plain_password, hashed_password))


def create_access_token(user_id: int, expires_delta: timedelta | None = None) -> str:
    """Create a signed JWT whose subject is the user's identifier.

    Args:
        user_id: Identifier of the authenticated user.
        expires_delta: Optional lifetime override.

    Returns:
        Encoded JWT string.
    """
    expire_at = datetime.now(UTC) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    return _encode({"sub": str(user_id), "exp": expire_at, "type": ACCESS_TOKEN_TYPE})


def decode_access_token(token: str) -> int:
    """Return the user identifier carried by an access token.

    Raises:
        JWTError: If the token is invalid, expired, not an access token, or
            carries no usable subject.
    """
    return _subject(_decode(token, ACCESS_TOKEN_TYPE))


def create_refresh_token(
    user_id: int,
    token_id: str,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a long-lived token that can be exchanged once for a new pair.

    ``token_id`` is stored on the user; a refresh token is only honoured while
    it matches.
    """
    expire_at = datetime.now(UTC) + (
        expires_delta or timedelta(days=settings.refresh_token_expire_days)
    )
    return _encode(
        {"sub": str(user_id), "exp": expire_at, "type": REFRESH_TOKEN_TYPE, "jti": token_id}
    )


def decode_refresh_token(token: str) -> tuple[int, str]:
    """Return ``(user_id, token_id)`` from a refresh token.

    Raises:
        JWTError: If the token is invalid, expired or not a refresh token.
    """
    payload = _decode(token, REFRESH_TOKEN_TYPE)
    token_id = payload.get("jti")
    if not isinstance(token_id, str) or not token_id:
        raise JWTError("Refresh token has no identifier")
    return _subject(payload), token_id


def _encode(claims: dict[str, Any]) -> str:
    return cast(str, jwt.encode(claims, settings.secret_key, algorithm=settings.jwt_algorithm))


def _decode(token: str, token_type: str) -> dict[str, Any]:
    payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    if payload.get("type") != token_type:
        raise JWTError(f"Expected a {token_type} token")
    return cast(dict[str, Any], payload)


def _subject(payload: dict[str, Any]) -> int:
    subject = payload.get("sub")
    if not isinstance(subject, str):
        raise JWTError("Token has no subject")
    try:
        return int(subject)
    except ValueError as err:
        raise JWTError("Invalid token subject") from err
