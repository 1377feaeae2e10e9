# src/loopfeed/services/errors.py
"""Typed failures raised by the service layer.

Services raise these instead of returning error values; the API layer maps
each one to its HTTP status and a stable machine-readable ``kind``.
"""

from __future__ import annotations

from http import HTTPStatus


class ServiceError(RuntimeError):
    """Base class for service failures."""

    kind = "internal"
    status_code = int(HTTPStatus.INTERNAL_SERVER_ERROR)

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInputError(ServiceError):
    """Malformed or missing input supplied by the caller."""

    kind = "validation_error"
    status_code = int(HTTPStatus.BAD_REQUEST)


class NotFoundError(ServiceError):
    """A referenced entity does not exist."""

    kind = "not_found"
    status_code = int(HTTPStatus.NOT_FOUND)


class UnauthorizedError(ServiceError):
    """Credentials were supplied but do not match."""

    kind = "unauthorized"
    status_code = int(HTTPStatus.UNAUTHORIZED)


class ForbiddenError(ServiceError):
    """The caller does not own the resource it tried to change."""

    kind = "forbidden"
    status_code = int(HTTPStatus.FORBIDDEN)


class ConflictError(ServiceError):
    """The request clashes with an existing relationship or record."""

    kind = "conflict"
    status_code = int(HTTPStatus.CONFLICT)


class InternalError(ServiceError):
    """Storage or data-integrity failure that is not the caller's fault."""


__all__ = [
    "ServiceError",
    "InvalidInputError",
    "NotFoundError",
    "UnauthorizedError",
    "ForbiddenError",
    "ConflictError",
    "InternalError",
]
