"""
Routing module.

Decides which screens render for the current session and role.

Public API:
- decide: Pure route guard
- ROUTES, match_route, Navigator: Route table and path resolution
- Route models
"""

from .guard import decide, LOGIN_PATH, HOME_PATH
from .models import (
    RouteKind,
    RouteRequirement,
    GuardOutcome,
    GuardDecision,
    Route,
    RouteMatch,
    NavigationResult,
)
from .routes import ROUTES, match_route, Navigator

__all__ = [
    # Guard
    "decide",
    "LOGIN_PATH",
    "HOME_PATH",
    # Models
    "RouteKind",
    "RouteRequirement",
    "GuardOutcome",
    "GuardDecision",
    "Route",
    "RouteMatch",
    "NavigationResult",
    # Route table
    "ROUTES",
    "match_route",
    "Navigator",
]
