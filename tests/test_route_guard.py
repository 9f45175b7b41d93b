"""
Tests for the client route guard.
"""

import pytest

from frontend.routing import Access, Route, RouteDecision, RouteGuard


class FakeSession:
    def __init__(self, authenticated=False):
        self.authenticated = authenticated
        self.calls = 0

    def is_authenticated(self):
        self.calls += 1
        return self.authenticated


def _view(name):
    return RouteDecision(view=name)


def _redirect(path):
    return RouteDecision(redirect=path)


class TestSignedOut:
    def setup_method(self):
        self.guard = RouteGuard(FakeSession(authenticated=False))

    @pytest.mark.parametrize(
        "path, expected",
        [
            ("/", _view("Home")),
            ("/listing", _redirect("/")),
            ("/settings", _redirect("/")),
            ("/login", _view("User")),
            ("/register", _view("User")),
        ],
    )
    def test_resolve(self, path, expected):
        assert self.guard.resolve(path) == expected

    def test_status_label(self):
        assert self.guard.status_label() == "logged out"


class TestSignedIn:
    def setup_method(self):
        self.guard = RouteGuard(FakeSession(authenticated=True))

    @pytest.mark.parametrize(
        "path, expected",
        [
            ("/", _view("Home")),
            ("/listing", _view("Listing")),
            ("/settings", _view("Settings")),
            ("/login", _redirect("/")),
            ("/register", _redirect("/")),
        ],
    )
    def test_resolve(self, path, expected):
        assert self.guard.resolve(path) == expected

    def test_status_label(self):
        assert self.guard.status_label() == "logged in"


class TestCatchAll:
    def setup_method(self):
        self.guard = RouteGuard(FakeSession(authenticated=True))

    @pytest.mark.parametrize(
        "path, target",
        [
            ("/listing/42", "/listing"),
            ("/Listing/a/b", "/listing"),
            ("/settings/profile", "/settings"),
            ("/login/extra", "/login"),
            ("/register/x", "/register"),
            ("/nowhere", "/"),
            ("/listings", "/"),
        ],
    )
    def test_redirects(self, path, target):
        assert self.guard.resolve(path) == _redirect(target)

    def test_trailing_slash_and_case(self):
        assert self.guard.resolve("/Settings/") == _view("Settings")
        assert self.guard.resolve("/listing?page=2") == _view("Listing")


def test_every_guarded_route_invokes_predicate():
    session = FakeSession(authenticated=False)
    guard = RouteGuard(session)
    for path in ("/listing", "/settings", "/login", "/register"):
        guard.resolve(path)
    assert session.calls == 4


def test_decision_follows_session_changes():
    session = FakeSession(authenticated=False)
    guard = RouteGuard(session)
    assert guard.resolve("/settings") == _redirect("/")
    session.authenticated = True
    assert guard.resolve("/settings") == _view("Settings")


def test_navigate_follows_redirects():
    guard = RouteGuard(FakeSession(authenticated=False))
    assert guard.navigate("/listing/7") == ("/", _view("Home"))
    assert guard.navigate("/login/x") == ("/login", _view("User"))


def test_custom_routes_accept_any_iterable():
    routes = (r for r in [Route("/", "Home"), Route("/admin", "Admin", Access.PROTECTED)])
    guard = RouteGuard(FakeSession(authenticated=True), routes=routes)
    assert guard.resolve("/admin") == _view("Admin")
    assert guard.resolve("/admin/users") == _redirect("/admin")
    assert guard.resolve("/listing") == _redirect("/")
