"""
FastAPI dependencies for authentication.

Provides ``db_session``, ``get_credential_store`` and ``get_current_auth``
dependencies that are used across all protected routes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import AsyncGenerator, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from auth.errors import InvalidToken, Unauthorized
from auth.jwt import verify_token
from auth.models import User
from database.session import get_db_session
from database.users import CredentialStore

logger = logging.getLogger(__name__)

# auto_error=False so a missing header yields our 401 instead of FastAPI's 403.
_bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class AuthContext:
    user: User
    token: str


async def db_session(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a DB session for route handlers."""
    yield session


async def get_credential_store(
    session: AsyncSession = Depends(db_session),
) -> CredentialStore:
    return CredentialStore(session)


async def get_current_auth(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    store: CredentialStore = Depends(get_credential_store),
) -> AuthContext:
    """
    Extract and verify the Bearer token, returning the owning user and
    the token itself.

    The token must carry a valid signature *and* still be present in the
    user's token collection; anything else is ``Unauthorized``.
    """
    if credentials is None or not credentials.credentials:
        raise Unauthorized("Missing Bearer token")

    token = credentials.credentials
    try:
        user_id = verify_token(token)
    except InvalidToken as exc:
        logger.debug("Rejected token: %s", exc)
        raise Unauthorized("Invalid token") from exc

    user = await store.find_by_id(user_id)
    if user is None or not await store.has_token(user.user_id, token):
        logger.debug("Token not recognised for user %s", user_id)
        raise Unauthorized("Invalid token")

    return AuthContext(user=user, token=token)
