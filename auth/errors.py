"""
Authentication error taxonomy.

Every error carries the HTTP status it maps to; ``api.errors`` turns them
into JSON responses.
"""

from __future__ import annotations

from fastapi import status


class AuthError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST
    detail: str = "Authentication error"

    def __init__(self, detail: str | None = None) -> None:
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class ValidationError(AuthError):
    detail = "Invalid email or password format"


class DuplicateEmail(AuthError):
    detail = "Email already registered"


class InvalidCredentials(AuthError):
    detail = "Invalid email or password"


class Unauthorized(AuthError):
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Not authenticated"


class InvalidToken(Exception):
    """Raised by the token service; never reaches a client directly."""
