"""
Client-side API session.

Holds the bearer token issued by the users API and serves as the
session-state provider for ``frontend.routing.RouteGuard``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)

USERS_PREFIX = "/api/users"


def token_from_header(value: Optional[str]) -> Optional[str]:
    """``"Bearer abc"`` → ``"abc"``."""
    if not value:
        return None
    parts = value.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        return None
    return parts[1]


class ApiSession:
    def __init__(
        self,
        base_url: str = "http://127.0.0.1:8000",
        client: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ) -> None:
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout)
        self.token: Optional[str] = None
        self.user: Optional[Dict[str, Any]] = None

    def __enter__(self) -> "ApiSession":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def is_authenticated(self) -> bool:
        return self.token is not None

    def _auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    def _authenticate(self, action: str, email: str, password: str) -> Dict[str, Any]:
        resp = self._client.post(
            f"{USERS_PREFIX}/{action}",
            json={"email": email, "password": password},
        )
        resp.raise_for_status()
        self.token = token_from_header(resp.headers.get("authorization"))
        self.user = resp.json()["user"]
        logger.info("%s succeeded for %s", action, self.user.get("email"))
        return self.user

    def register(self, email: str, password: str) -> Dict[str, Any]:
        return self._authenticate("register", email, password)

    def login(self, email: str, password: str) -> Dict[str, Any]:
        return self._authenticate("login", email, password)

    def me(self) -> Optional[Dict[str, Any]]:
        """Fetch the current profile; a rejected token ends the session."""
        resp = self._client.get(f"{USERS_PREFIX}/me", headers=self._auth_headers())
        if resp.status_code == 401:
            self.token = None
            self.user = None
            return None
        resp.raise_for_status()
        self.user = resp.json()["user"]
        return self.user

    def logout(self) -> None:
        try:
            if self.token:
                resp = self._client.delete(
                    f"{USERS_PREFIX}/logout", headers=self._auth_headers()
                )
                if resp.status_code != 200:
                    logger.warning("Logout returned %d", resp.status_code)
        finally:
            self.token = None
            self.user = None
