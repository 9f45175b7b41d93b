"""
Auth API routes — register, login, me, logout.

Route prefix: /api/users
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field, field_validator

from auth.dependencies import AuthContext, get_credential_store, get_current_auth
from auth.errors import InvalidCredentials
from auth.jwt import create_token
from auth.models import User
from auth.password import hash_password, verify_password
from config.settings import config
from database.users import CredentialStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["users"])

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
BCRYPT_MAX_BYTES = 72


# ── Request / response schemas ─────────────────────────────────────────


class RegisterRequest(BaseModel):
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(
        ...,
        min_length=config.password_min_length,
        max_length=config.password_max_length,
    )

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > BCRYPT_MAX_BYTES:
            raise ValueError(f"password must be at most {BCRYPT_MAX_BYTES} bytes")
        return value


class LoginRequest(BaseModel):
    email: str
    password: str


class PublicUser(BaseModel):
    id: str
    email: str


class UserResponse(BaseModel):
    user: PublicUser


class MessageResponse(BaseModel):
    message: str


# ── Helpers ────────────────────────────────────────────────────────────


async def _issue_token(store: CredentialStore, user: User, response: Response) -> None:
    token = create_token(str(user.user_id))
    await store.add_token(user.user_id, token)
    response.headers["Authorization"] = f"Bearer {token}"


# ── Endpoints ──────────────────────────────────────────────────────────


@router.post("/register", response_model=UserResponse)
async def register(
    req: RegisterRequest,
    response: Response,
    store: CredentialStore = Depends(get_credential_store),
) -> Dict[str, Any]:
    """Register a new user and start their first session."""
    user = await store.create(req.email, hash_password(req.password))
    await _issue_token(store, user, response)
    logger.info("Registered user %s", user.user_id)
    return {"user": user.to_public()}


@router.post("/login", response_model=UserResponse)
async def login(
    req: LoginRequest,
    response: Response,
    store: CredentialStore = Depends(get_credential_store),
) -> Dict[str, Any]:
    """Login with email + password. Existing sessions stay valid."""
    user = await store.find_by_email(req.email)
    if user is None or not verify_password(req.password, user.password_hash):
        logger.warning("Failed login attempt")
        raise InvalidCredentials()

    await _issue_token(store, user, response)
    logger.info("Login: %s", user.user_id)
    return {"user": user.to_public()}


@router.get("/me", response_model=UserResponse)
async def me(auth: AuthContext = Depends(get_current_auth)) -> Dict[str, Any]:
    return {"user": auth.user.to_public()}


@router.delete("/logout", response_model=MessageResponse)
async def logout(
    auth: AuthContext = Depends(get_current_auth),
    store: CredentialStore = Depends(get_credential_store),
) -> Dict[str, Any]:
    """Revoke the presented token only; other sessions are untouched."""
    await store.remove_token(auth.user.user_id, auth.token)
    logger.info("Logout: %s", auth.user.user_id)
    return {"message": "Logged out"}
