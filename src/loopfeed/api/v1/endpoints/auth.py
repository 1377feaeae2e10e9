# src/loopfeed/api/v1/endpoints/auth.py
"""Authentication endpoints for the LoopFeed API."""

from __future__ import annotations

from fastapi import APIRouter, status

from loopfeed.api.v1.dependencies import CurrentUserDep, SessionDep
from loopfeed.models import User
from loopfeed.schemas.common import MessageResponse
from loopfeed.schemas.user import (
    LoginRequest,
    PasswordChange,
    RefreshRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from loopfeed.services import user_service

router = APIRouter(prefix="/auth", tags=["authentication"])


def _token_response(user: User, tokens: user_service.SessionTokens) -> TokenResponse:
    return TokenResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        user=UserResponse.model_validate(user),
    )


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, db: SessionDep) -> TokenResponse:
    """Create an account and return a bearer token for it.

    Raises:
        InvalidInputError: Short password, unknown account type or missing fields (400)
        ConflictError: Username or email already taken (409)
    """
    user = user_service.register_user(
        db,
        username=payload.username,
        email=payload.email,
        full_name=payload.full_name,
        password=payload.password,
        account_type=payload.account_type,
    )
    return _token_response(user, user_service.issue_tokens(db, user))


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: SessionDep) -> TokenResponse:
    """Exchange a username or email plus password for a bearer token."""
    user = user_service.authenticate(
        db,
        password=payload.password,
        username=payload.username,
        email=payload.email,
    )
    return _token_response(user, user_service.issue_tokens(db, user))


@router.post("/refresh-token", response_model=TokenResponse)
def refresh_token(payload: RefreshRequest, db: SessionDep) -> TokenResponse:
    """Trade a refresh token for a new access/refresh pair.

    Raises:
        UnauthorizedError: Invalid, expired or already used refresh token (401)
    """
    user, tokens = user_service.refresh_session(db, payload.refresh_token)
    return _token_response(user, tokens)


@router.post("/logout", response_model=MessageResponse)
def logout(current_user: CurrentUserDep, db: SessionDep) -> MessageResponse:
    """Revoke the caller's refresh token."""
    user_service.logout(db, current_user)
    return MessageResponse(message="User logged out")


@router.get("/me", response_model=UserResponse)
def me(current_user: CurrentUserDep) -> User:
    """Return the authenticated account."""
    return current_user


@router.post("/change-password", response_model=MessageResponse)
def change_password(
    payload: PasswordChange,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MessageResponse:
    user_service.change_password(
        db, current_user, payload.current_password, payload.new_password
    )
    return MessageResponse(message="Password changed successfully")
