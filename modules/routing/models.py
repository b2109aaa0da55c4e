"""
Routing module data models.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from shared.models import UserRole


class RouteKind(str, Enum):
    """How a route relates to the session."""

    PUBLIC_ONLY = "public_only"      # Logged-in users are sent home
    ALWAYS_PUBLIC = "always_public"  # Renders for everyone, even while bootstrapping
    AUTH_REQUIRED = "auth_required"  # Needs a full session, optionally a role


class RouteRequirement(BaseModel):
    """Access requirement attached to a route."""

    kind: RouteKind
    allowed_roles: Optional[frozenset[UserRole]] = Field(
        None,
        description="Roles allowed on an auth_required route; None means any role",
    )

    model_config = {"frozen": True}

    @classmethod
    def public_only(cls) -> "RouteRequirement":
        return cls(kind=RouteKind.PUBLIC_ONLY)

    @classmethod
    def always_public(cls) -> "RouteRequirement":
        return cls(kind=RouteKind.ALWAYS_PUBLIC)

    @classmethod
    def auth_required(cls, *roles: UserRole) -> "RouteRequirement":
        return cls(
            kind=RouteKind.AUTH_REQUIRED,
            allowed_roles=frozenset(roles) if roles else None,
        )


class GuardOutcome(str, Enum):
    """What the screen for a route should do."""

    LOADING = "loading"
    RENDER = "render"
    REDIRECT = "redirect"


class GuardDecision(BaseModel):
    """Result of applying a route requirement to a session."""

    outcome: GuardOutcome
    redirect_to: Optional[str] = None

    model_config = {"frozen": True}

    @classmethod
    def loading(cls) -> "GuardDecision":
        return cls(outcome=GuardOutcome.LOADING)

    @classmethod
    def render(cls) -> "GuardDecision":
        return cls(outcome=GuardOutcome.RENDER)

    @classmethod
    def redirect(cls, path: str) -> "GuardDecision":
        return cls(outcome=GuardOutcome.REDIRECT, redirect_to=path)


class Route(BaseModel):
    """A navigable screen. Segments starting with ':' capture parameters."""

    pattern: str
    name: str
    requirement: RouteRequirement

    model_config = {"frozen": True}


class RouteMatch(BaseModel):
    """A route matched against a concrete path."""

    route: Route
    params: dict[str, str] = Field(default_factory=dict)


class NavigationResult(BaseModel):
    """Guard decision for a concrete path, with the route it matched (if any)."""

    path: str
    decision: GuardDecision
    match: Optional[RouteMatch] = None
