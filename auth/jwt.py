"""
JWT-style token creation and verification.

Tokens are base64url-encoded JSON payloads signed with HMAC-SHA256.
Secret key is loaded from ``config.jwt_secret`` (env var: ``JWT_SECRET``).
Expiry is only enforced when ``config.token_expiry_seconds`` is set;
otherwise a token stays valid until it is removed from its user's
token collection.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import secrets
import time
from base64 import urlsafe_b64decode, urlsafe_b64encode

from auth.errors import InvalidToken
from config.settings import config


def _sign(raw: bytes, secret: str) -> str:
    return hmac.new(secret.encode(), raw, hashlib.sha256).hexdigest()


def create_token(user_id: str, secret: str | None = None) -> str:
    """Create a signed token containing ``user_id``.

    A random ``jti`` makes every token distinct, even for the same user
    within the same second.
    """
    now = int(time.time())
    payload = {
        "user_id": str(user_id),
        "iat": now,
        "jti": secrets.token_hex(8),
    }
    if config.token_expiry_seconds:
        payload["exp"] = now + config.token_expiry_seconds
    raw = json.dumps(payload, separators=(",", ":")).encode()
    sig = _sign(raw, secret or config.jwt_secret)
    return urlsafe_b64encode(raw).decode() + "." + sig


def verify_token(token: str, secret: str | None = None) -> str:
    """
    Verify token and return ``user_id``.

    Raises ``InvalidToken`` on malformed, tampered or expired tokens.
    """
    parts = token.split(".", 1)
    if len(parts) != 2:
        raise InvalidToken("bad format")
    try:
        raw = urlsafe_b64decode(parts[0].encode())
    except (ValueError, TypeError) as exc:
        raise InvalidToken("bad encoding") from exc

    expected_sig = _sign(raw, secret or config.jwt_secret)
    # Header values are latin-1 decoded and may not be ASCII.
    given_sig = parts[1].encode("utf-8", "surrogateescape")
    if not hmac.compare_digest(given_sig, expected_sig.encode()):
        raise InvalidToken("bad signature")

    try:
        payload = json.loads(raw)
    except ValueError as exc:
        raise InvalidToken("bad payload") from exc
    if not isinstance(payload, dict) or "user_id" not in payload:
        raise InvalidToken("missing user_id")
    if "exp" in payload and payload["exp"] < time.time():
        raise InvalidToken("token expired")
    return payload["user_id"]
