"""
Login screen flow.

Ties the credential form, the two-factor step and the "verify your email"
banner together. Every failure is caught here and reported through the
notifier; callers only see an outcome.
"""

import logging
from enum import Enum
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from modules.backend_api.exceptions import UnverifiedEmailError
from modules.backend_api.interfaces import IAuthAPI
from modules.backend_api.models import Credentials
from modules.cooldown import CooldownTimer, DEFAULT_COOLDOWN_SECONDS, ResendAction, ResendResult
from modules.session.interfaces import ISessionStore
from modules.two_factor import TwoFactorHandshake
from shared.exceptions import PortalError, ValidationError, user_message
from shared.notifications import INotifier

logger = logging.getLogger(__name__)


class LoginOutcome(str, Enum):
    """Result of submitting the credential form."""

    AUTHENTICATED = "authenticated"
    STEP_UP_REQUIRED = "step_up_required"
    EMAIL_UNVERIFIED = "email_unverified"
    FAILED = "failed"


class LoginFlow:
    """State behind the login page."""

    def __init__(
        self,
        store: ISessionStore,
        api: IAuthAPI,
        notifier: INotifier,
        *,
        cooldown_seconds: int = DEFAULT_COOLDOWN_SECONDS,
    ):
        self._notifier = notifier
        self._handshake = TwoFactorHandshake(store)
        self._resend = ResendAction(
            api.resend_verification,
            CooldownTimer(cooldown_seconds, name="login-resend"),
            notifier,
        )
        self._unverified_email: Optional[str] = None

    @property
    def handshake(self) -> TwoFactorHandshake:
        return self._handshake

    @property
    def step_up_active(self) -> bool:
        return self._handshake.is_active

    @property
    def masked_email(self) -> str:
        return self._handshake.masked_email

    @property
    def unverified_email(self) -> Optional[str]:
        """Email whose login was refused for missing verification, if any."""
        return self._unverified_email

    @property
    def resend(self) -> ResendAction:
        return self._resend

    async def submit_credentials(self, email: str, password: str) -> LoginOutcome:
        try:
            credentials = Credentials(email=email.strip(), password=password)
        except PydanticValidationError as e:
            self._notifier.error(ValidationError.from_pydantic(e).message)
            return LoginOutcome.FAILED

        self._unverified_email = None
        try:
            result = await self._handshake.start(credentials)
        except UnverifiedEmailError as e:
            self._unverified_email = credentials.email
            self._resend.bind(credentials.email)
            self._notifier.error(e.message)
            return LoginOutcome.EMAIL_UNVERIFIED
        except PortalError as e:
            logger.info(f"Login refused: {e.code}")
            self._notifier.error(user_message(e, "Login failed"))
            return LoginOutcome.FAILED

        if result.requires_step_up:
            self._notifier.success("OTP sent to your email")
            return LoginOutcome.STEP_UP_REQUIRED

        self._notifier.success("Welcome back!")
        return LoginOutcome.AUTHENTICATED

    async def submit_otp(self, code: Optional[str] = None) -> bool:
        """Send the one-time code. Returns True once the session is authenticated."""
        try:
            await self._handshake.submit(code)
        except PortalError as e:
            self._notifier.error(user_message(e, "Invalid OTP"))
            return False

        self._notifier.success("Login successful!")
        return True

    def back_to_login(self) -> None:
        self._handshake.back()

    async def resend_verification(self) -> ResendResult:
        """Resend the verification email for the address that was just refused."""
        if self._unverified_email is None:
            return ResendResult.BLOCKED
        return await self._resend.trigger(self._unverified_email)

    def close(self) -> None:
        self._resend.timer.close()
