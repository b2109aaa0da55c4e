"""
Session module exceptions.
"""

from shared.exceptions import ValidationError


class StepUpNotPendingError(ValidationError):
    """Raised when a one-time code is submitted without a pending login."""

    def __init__(self, status: str):
        super().__init__(
            "No two-factor login is pending",
            code="STEP_UP_NOT_PENDING",
            details={"status": status},
        )


class PendingTokenMismatchError(ValidationError):
    """Raised when the submitted pending token is not the one the session holds."""

    def __init__(self):
        super().__init__(
            "Pending token does not match the current login attempt",
            code="PENDING_TOKEN_MISMATCH",
        )
