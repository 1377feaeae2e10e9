"""API endpoint modules for version 1."""

from .auth import router as auth_router
from .comments import router as comments_router
from .feed import router as feed_router
from .media import router as media_router
from .playlists import router as playlists_router
from .posts import router as posts_router
from .search import router as search_router
from .users import router as users_router

__all__ = [
    "auth_router",
    "comments_router",
    "feed_router",
    "media_router",
    "playlists_router",
    "posts_router",
    "search_router",
    "users_router",
]
