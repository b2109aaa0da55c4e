"""
Session module data models.

The Session value is immutable; SessionStore replaces it on every
transition, so readers always see a consistent snapshot.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from shared.models import User, UserRole


class SessionStatus(str, Enum):
    """Lifecycle state of the browser session."""

    BOOTSTRAPPING = "bootstrapping"            # Identity probe not resolved yet
    ANONYMOUS = "anonymous"                    # No session
    AUTHENTICATED = "authenticated"            # Fully logged in
    PENDING_TWO_FACTOR = "pending_two_factor"  # Password accepted, OTP outstanding


class Session(BaseModel):
    """
    Snapshot of the current session.

    Invariants are checked on construction, so an inconsistent
    combination of status, user and token cannot exist.
    """

    status: SessionStatus = Field(default=SessionStatus.BOOTSTRAPPING)
    user: Optional[User] = Field(None, description="Logged-in user")
    pending_token: Optional[str] = Field(
        None,
        repr=False,
        description="Opaque token awaiting a one-time code",
    )
    probe_failed: bool = Field(
        default=False,
        description="Bootstrap probe failed for a reason other than 'not logged in'",
    )

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_consistency(self) -> "Session":
        if self.status == SessionStatus.PENDING_TWO_FACTOR:
            if not self.pending_token or self.user is not None:
                raise ValueError("pending_two_factor requires a pending token and no user")
        elif self.status == SessionStatus.AUTHENTICATED:
            if self.user is None or self.pending_token is not None:
                raise ValueError("authenticated requires a user and no pending token")
        elif self.user is not None or self.pending_token is not None:
            raise ValueError(f"{self.status.value} session cannot carry a user or token")

        if self.probe_failed and self.status != SessionStatus.ANONYMOUS:
            raise ValueError("probe_failed is only meaningful for anonymous sessions")
        return self

    @classmethod
    def anonymous(cls, probe_failed: bool = False) -> "Session":
        return cls(status=SessionStatus.ANONYMOUS, probe_failed=probe_failed)

    @classmethod
    def authenticated(cls, user: User) -> "Session":
        return cls(status=SessionStatus.AUTHENTICATED, user=user)

    @classmethod
    def pending_two_factor(cls, pending_token: str) -> "Session":
        return cls(status=SessionStatus.PENDING_TWO_FACTOR, pending_token=pending_token)

    @property
    def is_authenticated(self) -> bool:
        return self.status == SessionStatus.AUTHENTICATED

    @property
    def is_resolved(self) -> bool:
        """True once the bootstrap probe has finished."""
        return self.status != SessionStatus.BOOTSTRAPPING

    @property
    def role(self) -> Optional[UserRole]:
        return self.user.role if self.user else None


class LoginResult(BaseModel):
    """Outcome of a successful primary login."""

    requires_step_up: bool = Field(..., description="A one-time code is still required")
    pending_token: Optional[str] = Field(None, repr=False)

    model_config = {"frozen": True}
