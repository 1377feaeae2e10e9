"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from loopfeed.core.security import decode_access_token
from loopfeed.core.settings import settings
from loopfeed.db.session import get_db
from loopfeed.models import User
from loopfeed.services.pagination import PageRequest
from loopfeed.services.storage import MediaStorage, get_media_storage

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()
optional_bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def _credentials_error() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


def _user_from_token(token: str, db: Session) -> User:
    try:
        user_id = decode_access_token(token)
    except JWTError as err:
        raise _credentials_error() from err

    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    db: SessionDep,
) -> User:
    """Get the current authenticated user from JWT token.

    Args:
        credentials: HTTP Bearer token credentials
        db: Database session

    Returns:
        User object for the authenticated user

    Raises:
        HTTPException: If token is invalid or user not found
    """
    return _user_from_token(credentials.credentials, db)


def get_optional_user(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(optional_bearer_scheme)
    ],
    db: SessionDep,
) -> User | None:
    """Like :func:`get_current_user` but anonymous callers get ``None``.

    A token that is present but invalid is still rejected.
    """
    if credentials is None:
        return None
    return _user_from_token(credentials.credentials, db)


def get_page_request(
    page: int = Query(1, ge=1, description="1-based page number"),
    limit: int = Query(
        settings.default_page_size,
        ge=1,
        le=settings.max_page_size,
        description="Items per page",
    ),
) -> PageRequest:
    """Build a page request from ``page``/``limit`` query parameters."""
    return PageRequest(page=page, limit=limit)


# Type aliases for dependencies
CurrentUserDep = Annotated[User, Depends(get_current_user)]
OptionalUserDep = Annotated[User | None, Depends(get_optional_user)]
PageDep = Annotated[PageRequest, Depends(get_page_request)]
MediaStorageDep = Annotated[MediaStorage, Depends(get_media_storage)]


def viewer_id(user: User | None) -> int | None:
    return user.id if user is not None else None
