"""
Backend API exceptions.

Every failed HTTP exchange is translated into one of these types by
error_from_response(), so callers never inspect status codes or message
text themselves.
"""

from typing import Any, Optional

from shared.exceptions import (
    PortalError,
    AuthenticationError,
    AuthorizationError,
    ExternalServiceError,
    NotFoundError,
    RateLimitedError,
    ValidationError,
)


class InvalidCredentialsError(AuthenticationError):
    """Raised when the backend rejects the supplied credentials or session."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message, code="INVALID_CREDENTIALS")


class UnverifiedEmailError(AuthenticationError):
    """Raised when login is refused because the email is not verified yet."""

    def __init__(self, message: str = "Please verify your email before logging in"):
        super().__init__(message, code="EMAIL_NOT_VERIFIED")


class ForbiddenError(AuthorizationError):
    """Raised when the backend refuses an action for the current session."""

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message, code="FORBIDDEN")


class BadRequestError(ValidationError):
    """Raised when the backend rejects the request payload."""

    def __init__(self, message: str = "Invalid request", status_code: int = 400):
        super().__init__(
            message,
            code="BAD_REQUEST",
            details={"status_code": status_code},
        )


class ResourceNotFoundError(NotFoundError):
    """Raised when the requested resource does not exist."""

    def __init__(self, message: str = "Not found"):
        super().__init__(message, code="NOT_FOUND")


class TransientError(ExternalServiceError):
    """Raised on server errors, timeouts, transport failures and garbled replies."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(
            message,
            service="backend",
            code="TRANSIENT_ERROR",
            details=details,
        )


def error_from_response(status_code: int, payload: dict[str, Any]) -> PortalError:
    """
    Map an error response to the matching exception.

    Args:
        status_code: HTTP status of the response
        payload: Decoded JSON body ({} when the body was empty or not JSON)

    Returns:
        The exception to raise
    """
    message = payload.get("message") if isinstance(payload.get("message"), str) else None

    if status_code == 401:
        return InvalidCredentialsError(message or "Invalid credentials")
    if status_code == 403:
        # The backend marks the unverified-email refusal only in its message.
        if message and "verify" in message.lower():
            return UnverifiedEmailError(message)
        return ForbiddenError(message or "Forbidden")
    if status_code == 404:
        return ResourceNotFoundError(message or "Not found")
    if status_code == 429:
        return RateLimitedError(message or "Too many requests")
    if status_code in (400, 409, 422):
        return BadRequestError(message or "Invalid request", status_code=status_code)
    return TransientError(
        message or f"Backend returned HTTP {status_code}",
        details={"status_code": status_code},
    )
