"""
Base exception classes for the portal client.

Each module should define its own exceptions that inherit from these bases.
The backend client translates HTTP failures into this hierarchy so callers
branch on exception types instead of status codes or message text.
"""

from typing import Optional, Any


class PortalError(Exception):
    """
    Base exception for all portal errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for logging or display."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(PortalError):
    """Resource not found."""

    pass


class ValidationError(PortalError):
    """Input validation failed."""

    @classmethod
    def from_pydantic(cls, exc: Any) -> "ValidationError":
        """Wrap a pydantic ValidationError, keeping the first message for display."""
        errors = exc.errors()
        message = errors[0]["msg"] if errors else "Invalid input"
        message = message.removeprefix("Value error, ")
        return cls(message, code="VALIDATION_ERROR", details={"errors": len(errors)})


class AuthenticationError(PortalError):
    """Authentication failed (invalid or missing credentials)."""

    pass


class AuthorizationError(PortalError):
    """Authorization failed (insufficient permissions)."""

    pass


class RateLimitedError(PortalError):
    """The backend refused the request because it was sent too often."""

    def __init__(
        self,
        message: str = "Too many requests",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code="RATE_LIMITED", details=details)


class ExternalServiceError(PortalError):
    """Error communicating with an external service."""

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service


def user_message(error: PortalError, fallback: str) -> str:
    """
    Text to show the user for a failed action.

    Backend refusals carry a message meant for people; transport and
    server failures get the caller's generic fallback instead.
    """
    if isinstance(error, ExternalServiceError) or not error.message:
        return fallback
    return error.message
