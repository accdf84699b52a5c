"""
Domain errors raised by route handlers.

Every error carries the HTTP status it maps to; ``api.middleware``
turns them into ``{"status": "error", "message": ...}`` responses.
"""

from __future__ import annotations

from fastapi import status


class AppError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AppError):
    """Malformed or missing input."""


class ConflictError(AppError):
    """A unique value (the account email) is already taken."""


class AuthError(AppError):
    """Bad credentials (400) or a missing / invalid bearer token (401)."""


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN


class PolicyError(AppError):
    """Request refused by a safety guard, e.g. bulk delete on the wrong path."""
