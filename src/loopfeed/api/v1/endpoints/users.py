# src/loopfeed/api/v1/endpoints/users.py
"""User profile and follow graph endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from loopfeed.api.v1.dependencies import (
    CurrentUserDep,
    OptionalUserDep,
    PageDep,
    SessionDep,
    viewer_id,
)
from loopfeed.models import User
from loopfeed.schemas.common import Paginated
from loopfeed.schemas.user import (
    FollowResponse,
    FollowStatusResponse,
    ProfileResponse,
    ProfileUpdate,
    UserResponse,
    UserSummary,
)
from loopfeed.services import follow_graph, user_service
from loopfeed.services.follow_graph import FollowResult

router = APIRouter(prefix="/users", tags=["users"])


def _follow_response(message: str, result: FollowResult) -> FollowResponse:
    return FollowResponse(
        message=message,
        is_following=result.is_following,
        followers_count=result.followers_count,
        following_count=result.following_count,
    )


@router.patch("/me", response_model=UserResponse)
def update_me(payload: ProfileUpdate, current_user: CurrentUserDep, db: SessionDep) -> User:
    """Update the caller's own profile fields."""
    return user_service.update_profile(db, current_user, payload.model_dump(exclude_unset=True))


@router.post("/follow/{user_id}", response_model=FollowResponse)
def follow_user(user_id: int, current_user: CurrentUserDep, db: SessionDep) -> FollowResponse:
    """Follow another user.

    Raises:
        ConflictError: Following yourself or someone you already follow (409)
        NotFoundError: Unknown user (404)
    """
    result = follow_graph.follow(db, current_user.id, user_id)
    return _follow_response("User followed successfully", result)


@router.post("/unfollow/{user_id}", response_model=FollowResponse)
def unfollow_user(user_id: int, current_user: CurrentUserDep, db: SessionDep) -> FollowResponse:
    result = follow_graph.unfollow(db, current_user.id, user_id)
    return _follow_response("User unfollowed successfully", result)


@router.get("/followers/{user_id}", response_model=Paginated[UserSummary])
def list_followers(user_id: int, db: SessionDep, page: PageDep) -> Paginated[UserSummary]:
    """List who follows ``user_id``, most recent first."""
    result = follow_graph.list_followers(db, user_id, page)
    return Paginated[UserSummary].from_page(result, UserSummary.model_validate)


@router.get("/following/{user_id}", response_model=Paginated[UserSummary])
def list_following(user_id: int, db: SessionDep, page: PageDep) -> Paginated[UserSummary]:
    """List who ``user_id`` follows, most recent first."""
    result = follow_graph.list_following(db, user_id, page)
    return Paginated[UserSummary].from_page(result, UserSummary.model_validate)


@router.get("/status/{user_id}", response_model=FollowStatusResponse)
def follow_status(
    user_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> FollowStatusResponse:
    status = follow_graph.check_status(db, current_user.id, user_id)
    return FollowStatusResponse(
        is_following=status.is_following,
        is_followed_by=status.is_followed_by,
    )


@router.get("/{user_id}", response_model=ProfileResponse)
def get_profile(user_id: int, db: SessionDep, current_user: OptionalUserDep) -> ProfileResponse:
    """Return a public profile with post count and the viewer's follow state."""
    view = user_service.get_profile(db, user_id, viewer_id(current_user))
    return ProfileResponse.from_view(view)
