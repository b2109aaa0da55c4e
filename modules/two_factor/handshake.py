"""
Two-factor step-up handshake.

Sits between the login form and SessionStore: remembers the pending
token and a masked copy of the email while the user types the one-time
code. The password is never kept.
"""

import logging
import re
from typing import Optional

from modules.backend_api.models import Credentials
from modules.session.interfaces import ISessionStore
from modules.session.models import LoginResult
from shared.exceptions import PortalError
from shared.models import User

from .exceptions import HandshakeNotActiveError, InvalidOtpFormatError

logger = logging.getLogger(__name__)

OTP_LENGTH = 6
OTP_PATTERN = re.compile(r"^[0-9]{6}$")


def mask_email(email: str) -> str:
    """
    Hide most of the local part of an email address.

    Example: "johndoe@example.com" -> "jo***@example.com". Strings without
    a domain are returned unchanged.
    """
    local, _, domain = email.partition("@")
    if not domain:
        return email
    return f"{local[:2]}***@{domain}"


def validate_otp(code: Optional[str]) -> str:
    """
    Check that code is exactly six digits.

    Returns:
        The code, unchanged

    Raises:
        InvalidOtpFormatError: With a message suitable for the form
    """
    if not code:
        raise InvalidOtpFormatError("Enter the 6-digit code")
    if len(code) < OTP_LENGTH:
        raise InvalidOtpFormatError("Enter all 6 digits")
    if len(code) > OTP_LENGTH:
        raise InvalidOtpFormatError("The code has only 6 digits")
    if not OTP_PATTERN.match(code):
        raise InvalidOtpFormatError("Digits only (0-9)")
    return code


class TwoFactorHandshake:
    """
    State of the OTP screen for one login attempt.

    start() submits credentials through the store; when a second factor is
    required the handshake becomes active and submit() exchanges the code.
    """

    def __init__(self, store: ISessionStore):
        self._store = store
        self._pending_token: Optional[str] = None
        self._masked_email = ""
        self._otp_input = ""

    @property
    def is_active(self) -> bool:
        return self._pending_token is not None

    @property
    def masked_email(self) -> str:
        return self._masked_email

    @property
    def otp_input(self) -> str:
        return self._otp_input

    def enter_otp(self, value: str) -> None:
        """Record what the user typed; validated on submit."""
        self._otp_input = value

    async def start(self, credentials: Credentials) -> LoginResult:
        """
        Log in with primary credentials.

        Errors from the store propagate and leave the handshake inactive.
        """
        self._clear()
        result = await self._store.login(credentials)
        if result.requires_step_up:
            self._pending_token = result.pending_token
            self._masked_email = mask_email(credentials.email)
            logger.debug(f"Step-up required, code sent to {self._masked_email}")
        return result

    async def submit(self, code: Optional[str] = None) -> User:
        """
        Exchange the one-time code for a session.

        Args:
            code: The code; defaults to the value recorded with enter_otp()

        Raises:
            HandshakeNotActiveError: If no step-up is in progress
            InvalidOtpFormatError: If the code is not six digits
            PortalError: If the backend rejects the code; the input is
                cleared and the pending token stays valid
        """
        if self._pending_token is None:
            raise HandshakeNotActiveError()

        value = validate_otp(self._otp_input if code is None else code)
        try:
            user = await self._store.complete_step_up(value, self._pending_token)
        except PortalError:
            self._otp_input = ""
            raise

        self._clear()
        return user

    def back(self) -> None:
        """Abandon the step-up and return to the credential form."""
        self._store.abandon_step_up()
        self._clear()

    def _clear(self) -> None:
        self._pending_token = None
        self._masked_email = ""
        self._otp_input = ""
