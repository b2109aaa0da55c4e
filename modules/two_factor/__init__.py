"""
Two-factor module.

Drives the pending-token / one-time-code exchange that follows a login
requiring a second factor.

Public API:
- TwoFactorHandshake: OTP screen state
- mask_email, validate_otp: Helpers used by the screen
- Two-factor exceptions
"""

from .handshake import TwoFactorHandshake, mask_email, validate_otp, OTP_LENGTH
from .exceptions import InvalidOtpFormatError, HandshakeNotActiveError

__all__ = [
    "TwoFactorHandshake",
    "mask_email",
    "validate_otp",
    "OTP_LENGTH",
    "InvalidOtpFormatError",
    "HandshakeNotActiveError",
]
