"""
Route table and navigation.

Maps concrete paths onto the application's screens and applies the guard.
"""

from typing import Optional, Sequence

from modules.session.interfaces import ISessionStore
from shared.models import UserRole

from .guard import HOME_PATH, LOGIN_PATH, decide
from .models import (
    GuardDecision,
    NavigationResult,
    Route,
    RouteMatch,
    RouteRequirement,
)

ROUTES: tuple[Route, ...] = (
    # Public only (redirect if logged in)
    Route(pattern="/login", name="login", requirement=RouteRequirement.public_only()),
    Route(pattern="/register", name="register", requirement=RouteRequirement.public_only()),
    Route(
        pattern="/forgot-password",
        name="forgot_password",
        requirement=RouteRequirement.public_only(),
    ),
    Route(
        pattern="/reset-password/:token",
        name="reset_password",
        requirement=RouteRequirement.public_only(),
    ),
    # Always public
    Route(
        pattern="/verify-email/:token",
        name="verify_email",
        requirement=RouteRequirement.always_public(),
    ),
    # Requires login
    Route(pattern="/dashboard", name="dashboard", requirement=RouteRequirement.auth_required()),
    Route(pattern="/profile", name="profile", requirement=RouteRequirement.auth_required()),
    Route(pattern="/security", name="security", requirement=RouteRequirement.auth_required()),
    Route(
        pattern="/admin",
        name="admin",
        requirement=RouteRequirement.auth_required(UserRole.ADMIN, UserRole.MODERATOR),
    ),
)


def _segments(path: str) -> list[str]:
    return [part for part in path.split("?", 1)[0].split("/") if part]


def match_route(path: str, routes: Sequence[Route] = ROUTES) -> Optional[RouteMatch]:
    """
    Find the route whose pattern matches path.

    Returns:
        RouteMatch with captured parameters, or None when nothing matches
    """
    parts = _segments(path)
    for route in routes:
        pattern = _segments(route.pattern)
        if len(pattern) != len(parts):
            continue
        params: dict[str, str] = {}
        for expected, actual in zip(pattern, parts):
            if expected.startswith(":"):
                params[expected[1:]] = actual
            elif expected != actual:
                break
        else:
            return RouteMatch(route=route, params=params)
    return None


class Navigator:
    """Resolves paths against the route table for the current session."""

    def __init__(
        self,
        store: ISessionStore,
        routes: Sequence[Route] = ROUTES,
        login_path: str = LOGIN_PATH,
        home_path: str = HOME_PATH,
    ):
        self._store = store
        self._routes = routes
        self._login_path = login_path
        self._home_path = home_path

    def resolve(self, path: str) -> NavigationResult:
        """Decide what happens when the user navigates to path."""
        match = match_route(path, self._routes)
        if match is None:
            # "/" and unknown paths land on the dashboard.
            return NavigationResult(path=path, decision=GuardDecision.redirect(self._home_path))

        decision = decide(
            self._store.session,
            match.route.requirement,
            login_path=self._login_path,
            home_path=self._home_path,
        )
        return NavigationResult(path=path, decision=decision, match=match)
