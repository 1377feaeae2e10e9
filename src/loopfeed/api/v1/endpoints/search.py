# src/loopfeed/api/v1/endpoints/search.py
"""Search endpoints for users and posts."""

from fastapi import APIRouter, Query
from pydantic import BaseModel

from loopfeed.api.v1.dependencies import OptionalUserDep, PageDep, SessionDep, viewer_id
from loopfeed.schemas.common import Paginated
from loopfeed.schemas.post import PostResponse
from loopfeed.schemas.user import UserSummary
from loopfeed.services import search

router = APIRouter(prefix="/search", tags=["search"])


class SearchAllResponse(BaseModel):
    users: Paginated[UserSummary]
    posts: Paginated[PostResponse]


@router.get("/users", response_model=Paginated[UserSummary])
def search_users(
    db: SessionDep,
    page: PageDep,
    q: str = Query("", description="Case-insensitive text to look for"),
) -> Paginated[UserSummary]:
    result = search.search_users(db, q, page)
    return Paginated[UserSummary].from_page(result, UserSummary.model_validate)


@router.get("/posts", response_model=Paginated[PostResponse])
def search_posts(
    db: SessionDep,
    current_user: OptionalUserDep,
    page: PageDep,
    q: str = Query("", description="Case-insensitive text to look for"),
    kind: str | None = Query(None, description="Filter by video, images or short"),
) -> Paginated[PostResponse]:
    """Search public posts by title, description and tags."""
    result = search.search_posts(db, q, page, viewer_id(current_user), kind)
    return Paginated[PostResponse].from_page(result, PostResponse.from_view)


@router.get("/all", response_model=SearchAllResponse)
def search_all(
    db: SessionDep,
    current_user: OptionalUserDep,
    page: PageDep,
    q: str = Query("", description="Case-insensitive text to look for"),
) -> SearchAllResponse:
    results = search.search_all(db, q, page, viewer_id(current_user))
    return SearchAllResponse(
        users=Paginated[UserSummary].from_page(results.users, UserSummary.model_validate),
        posts=Paginated[PostResponse].from_page(results.posts, PostResponse.from_view),
    )
