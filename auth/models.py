"""This module re-exports the user and token models from the database package for use in authentication-related code.
"""

from database.models import AuthToken, User  # noqa: F401

__all__ = ["AuthToken", "User"]
