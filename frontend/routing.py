"""
Client route guard.

Decides, for a navigated path, whether to render a view or redirect.
Session state comes from an injected provider exposing
``is_authenticated()``; the predicate is called on every resolution so a
login or logout takes effect on the next navigation.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable, Optional, Protocol


class SessionState(Protocol):
    def is_authenticated(self) -> bool: ...


class Access(str, enum.Enum):
    PUBLIC = "public"
    PROTECTED = "protected"   # signed-in users only
    GUEST = "guest"           # signed-out users only (login / register)


@dataclass(frozen=True)
class Route:
    path: str
    view: str
    access: Access = Access.PUBLIC
    exact: bool = True


@dataclass(frozen=True)
class RouteDecision:
    view: Optional[str] = None
    redirect: Optional[str] = None

    @property
    def is_redirect(self) -> bool:
        return self.redirect is not None


HOME = "/"

DEFAULT_ROUTES = (
    Route("/", "Home"),
    Route("/listing", "Listing", Access.PROTECTED),
    Route("/settings", "Settings", Access.PROTECTED),
    Route("/login", "User", Access.GUEST),
    Route("/register", "User", Access.GUEST),
)


def _normalize(path: str) -> str:
    path = (path or HOME).split("?", 1)[0].split("#", 1)[0]
    if not path.startswith("/"):
        path = "/" + path
    if len(path) > 1:
        path = path.rstrip("/") or HOME
    return path.lower()


class RouteGuard:
    def __init__(self, session: SessionState, routes: Iterable[Route] = DEFAULT_ROUTES) -> None:
        self.session = session
        self.routes = tuple(routes)

    def status_label(self) -> str:
        return "logged in" if self.session.is_authenticated() else "logged out"

    def resolve(self, path: str) -> RouteDecision:
        """Return the view to render for ``path`` or where to redirect."""
        normalized = _normalize(path)

        for route in self.routes:
            if normalized == route.path:
                return self._guard(route)

        # /listing/anything → /listing; the canonical route is guarded on arrival.
        for route in self.routes:
            if route.path != HOME and normalized.startswith(route.path + "/"):
                return RouteDecision(redirect=route.path)

        return RouteDecision(redirect=HOME)

    def _guard(self, route: Route) -> RouteDecision:
        if route.access is Access.PUBLIC:
            return RouteDecision(view=route.view)

        authenticated = self.session.is_authenticated()
        if route.access is Access.PROTECTED:
            return RouteDecision(view=route.view) if authenticated else RouteDecision(redirect=HOME)
        return RouteDecision(redirect=HOME) if authenticated else RouteDecision(view=route.view)

    def navigate(self, path: str, max_hops: int = 5) -> tuple[str, RouteDecision]:
        """Follow redirects until a view renders; returns (final path, decision)."""
        current = path
        decision = self.resolve(current)
        hops = 0
        while decision.is_redirect:
            hops += 1
            if hops > max_hops:
                raise RuntimeError(f"Redirect loop resolving {path!r}")
            current = decision.redirect
            decision = self.resolve(current)
        return current, decision
