"""
Route guard.

A pure decision over the session snapshot and a route requirement. Role
mismatches are expressed as redirects, never as errors.
"""

from modules.session.models import Session, SessionStatus

from .models import GuardDecision, RouteKind, RouteRequirement

LOGIN_PATH = "/login"
HOME_PATH = "/dashboard"


def decide(
    session: Session,
    requirement: RouteRequirement,
    *,
    login_path: str = LOGIN_PATH,
    home_path: str = HOME_PATH,
) -> GuardDecision:
    """
    Decide whether a route renders for the given session.

    Args:
        session: Current session snapshot
        requirement: The route's access requirement
        login_path: Where unauthenticated visitors are sent
        home_path: Where authenticated users are sent when refused

    Returns:
        GuardDecision with LOADING, RENDER or REDIRECT
    """
    if requirement.kind == RouteKind.ALWAYS_PUBLIC:
        return GuardDecision.render()

    if session.status == SessionStatus.BOOTSTRAPPING:
        return GuardDecision.loading()

    # A pending two-factor login is not a session yet.
    if session.status != SessionStatus.AUTHENTICATED:
        if requirement.kind == RouteKind.PUBLIC_ONLY:
            return GuardDecision.render()
        return GuardDecision.redirect(login_path)

    if requirement.kind == RouteKind.PUBLIC_ONLY:
        return GuardDecision.redirect(home_path)

    allowed = requirement.allowed_roles
    if allowed is not None and session.role not in allowed:
        return GuardDecision.redirect(home_path)

    return GuardDecision.render()
