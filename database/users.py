"""
Credential store — user records and their active auth tokens.

All methods work inside the caller's session; committing is left to the
request-scoped ``get_db_session`` dependency.
"""

from __future__ import annotations

import logging
import uuid
from typing import List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from auth.errors import DuplicateEmail
from database.models import AuthToken, User

logger = logging.getLogger(__name__)


def _to_uuid(value: str | uuid.UUID) -> Optional[uuid.UUID]:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


class CredentialStore:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, email: str, password_hash: str) -> User:
        """Insert a new user. Raises ``DuplicateEmail`` if the email is taken."""
        if await self.find_by_email(email) is not None:
            raise DuplicateEmail()

        user = User(user_id=uuid.uuid4(), email=email, password_hash=password_hash)
        self.session.add(user)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            # Lost a race with a concurrent registration.
            raise DuplicateEmail() from exc
        return user

    async def find_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def find_by_id(self, user_id: str | uuid.UUID) -> Optional[User]:
        uid = _to_uuid(user_id)
        if uid is None:
            return None
        result = await self.session.execute(select(User).where(User.user_id == uid))
        return result.scalar_one_or_none()

    async def add_token(self, user_id: str | uuid.UUID, token: str) -> None:
        self.session.add(AuthToken(user_id=_to_uuid(user_id), token=token))
        await self.session.flush()

    async def remove_token(self, user_id: str | uuid.UUID, token: str) -> bool:
        """Remove exactly ``token`` from the user's collection."""
        result = await self.session.execute(
            delete(AuthToken).where(
                AuthToken.user_id == _to_uuid(user_id),
                AuthToken.token == token,
            )
        )
        await self.session.flush()
        return result.rowcount > 0

    async def has_token(self, user_id: str | uuid.UUID, token: str) -> bool:
        uid = _to_uuid(user_id)
        if uid is None:
            return False
        result = await self.session.execute(
            select(func.count())
            .select_from(AuthToken)
            .where(AuthToken.user_id == uid, AuthToken.token == token)
        )
        return result.scalar_one() > 0

    async def list_tokens(self, user_id: str | uuid.UUID) -> List[str]:
        """Return the user's tokens in the order they were issued."""
        result = await self.session.execute(
            select(AuthToken.token)
            .where(AuthToken.user_id == _to_uuid(user_id))
            .order_by(AuthToken.id)
        )
        return list(result.scalars().all())
