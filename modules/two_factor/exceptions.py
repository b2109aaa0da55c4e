"""
Two-factor module exceptions.
"""

from shared.exceptions import ValidationError


class InvalidOtpFormatError(ValidationError):
    """Raised when a one-time code is not exactly six digits."""

    def __init__(self, message: str):
        super().__init__(message, code="INVALID_OTP_FORMAT")


class HandshakeNotActiveError(ValidationError):
    """Raised when a code is submitted while no step-up is in progress."""

    def __init__(self):
        super().__init__("No verification code was requested", code="HANDSHAKE_NOT_ACTIVE")
