# src/loopfeed/services/__init__.py
"""Business logic services for the LoopFeed application."""

from .errors import (
    ConflictError,
    ForbiddenError,
    InternalError,
    InvalidInputError,
    NotFoundError,
    ServiceError,
    UnauthorizedError,
)
from .follow_graph import FollowGraph
from .pagination import Page, PageRequest
from .storage import LocalMediaStorage, MediaStorage

__all__ = [
    "ServiceError",
    "InvalidInputError", "NotFoundError", "UnauthorizedError",
    "ForbiddenError", "ConflictError", "InternalError",
    "FollowGraph",
    "Page", "PageRequest",
    "LocalMediaStorage", "MediaStorage",
]
