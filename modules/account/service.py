"""
Account self-service.

Registration, email verification, password recovery, security settings
and profile maintenance for the current user. Each public method is a
UI boundary: backend failures are reported through the notifier and the
method returns a plain success value.
"""

import asyncio
import logging
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from modules.backend_api.interfaces import IAuthAPI, IProfileAPI
from modules.backend_api.models import (
    AvatarUpload,
    LoginActivity,
    PasswordChange,
    ProfileUpdate,
    RegistrationRequest,
    check_password_strength,
)
from modules.cooldown import CooldownTimer, ResendAction, ResendResult
from modules.session.interfaces import ISessionStore
from shared.exceptions import PortalError, ValidationError, user_message
from shared.notifications import INotifier

logger = logging.getLogger(__name__)


class AccountService:
    """Operations on the current user's account."""

    def __init__(
        self,
        store: ISessionStore,
        auth_api: IAuthAPI,
        profile_api: IProfileAPI,
        notifier: INotifier,
        cooldown: CooldownTimer,
    ):
        self._store = store
        self._auth = auth_api
        self._profile = profile_api
        self._notifier = notifier
        self._verifications: dict[str, asyncio.Task[bool]] = {}
        self._resend = ResendAction(
            auth_api.resend_verification,
            cooldown,
            notifier,
            success_message="Verification email sent! Check your inbox.",
        )

    @property
    def resend(self) -> ResendAction:
        return self._resend

    def _invalid(self, exc: PydanticValidationError) -> bool:
        self._notifier.error(ValidationError.from_pydantic(exc).message)
        return False

    def _failed(self, error: PortalError, fallback: str) -> bool:
        logger.warning(f"Account action failed: {error.code}")
        self._notifier.error(user_message(error, fallback))
        return False

    # Registration and verification

    async def register(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        confirm_password: str,
    ) -> bool:
        try:
            request = RegistrationRequest(
                first_name=first_name.strip(),
                last_name=last_name.strip(),
                email=email.strip(),
                password=password,
                confirm_password=confirm_password,
            )
        except PydanticValidationError as e:
            return self._invalid(e)

        try:
            await self._auth.register(request)
        except PortalError as e:
            return self._failed(e, "Registration failed")

        self._notifier.success("Account created! Check your email to verify it.")
        return True

    async def verify_email(self, token: str) -> bool:
        """
        Confirm an email address from the link's token.

        Only the first call for a token reaches the backend; later calls
        (e.g. a re-rendered page) await the same result.
        """
        task = self._verifications.get(token)
        if task is None:
            task = asyncio.ensure_future(self._verify_email(token))
            self._verifications[token] = task
        return await asyncio.shield(task)

    async def _verify_email(self, token: str) -> bool:
        try:
            await self._auth.verify_email(token)
        except PortalError as e:
            # Usually a link that was already used.
            logger.info(f"Email verification rejected: {e.code}")
            return False

        self._store.update_user({"isEmailVerified": True})
        return True

    async def resend_verification(self) -> ResendResult:
        """Banner action: resend the verification email to the logged-in user."""
        user = self._store.session.user
        if user is None or user.is_email_verified:
            return ResendResult.BLOCKED
        return await self._resend.trigger(user.email)

    # Password recovery

    async def forgot_password(self, email: str) -> bool:
        """Request a reset link. Always reports success."""
        try:
            await self._auth.forgot_password(email.strip())
        except PortalError as e:
            logger.debug(f"Forgot-password request failed: {e.code}")
        return True

    async def reset_password(self, token: str, password: str, confirm_password: str) -> bool:
        try:
            check_password_strength(password)
        except ValueError as e:
            self._notifier.error(str(e))
            return False
        if password != confirm_password:
            self._notifier.error("Passwords do not match")
            return False

        try:
            await self._auth.reset_password(token, password)
        except PortalError as e:
            return self._failed(e, "Reset failed, the link may have expired.")

        self._notifier.success("Password reset! Please log in.")
        return True

    # Security settings

    async def change_password(
        self,
        current_password: str,
        new_password: str,
        confirm_new_password: str,
    ) -> bool:
        """Change the password, then log out so the user signs in again."""
        try:
            change = PasswordChange(
                current_password=current_password,
                new_password=new_password,
                confirm_new_password=confirm_new_password,
            )
        except PydanticValidationError as e:
            return self._invalid(e)

        try:
            await self._auth.change_password(change)
        except PortalError as e:
            return self._failed(e, "Failed to change password")

        self._notifier.success("Password changed! Logging you out…")
        await self._store.logout()
        return True

    async def toggle_two_factor(self) -> Optional[bool]:
        """
        Flip two-factor authentication for the current user.

        Enabling it logs the user out so the next login goes through the
        second factor.

        Returns:
            The new setting, or None if nothing changed
        """
        user = self._store.session.user
        if user is None:
            return None
        if not user.is_email_verified:
            self._notifier.error("Please verify your email before enabling 2FA")
            return None

        try:
            enabled = await self._auth.toggle_two_factor()
        except PortalError as e:
            self._failed(e, "Failed")
            return None

        self._store.update_user({"twoFactorEnabled": enabled})
        if enabled:
            self._notifier.success("2FA enabled! Logging you out to confirm…")
            await self._store.logout()
        else:
            self._notifier.success("2FA has been disabled.")
        return enabled

    async def login_history(self) -> list[LoginActivity]:
        try:
            return await self._auth.get_login_history()
        except PortalError as e:
            logger.debug(f"Login history unavailable: {e.code}")
            return []

    # Profile

    async def update_profile(self, **fields: Any) -> bool:
        try:
            update = ProfileUpdate(**fields)
        except PydanticValidationError as e:
            return self._invalid(e)

        try:
            user = await self._profile.update_profile(update)
        except PortalError as e:
            return self._failed(e, "Update failed")

        self._store.update_user(user.model_dump())
        self._notifier.success("Profile updated!")
        return True

    async def upload_avatar(self, filename: str, content: bytes, content_type: str) -> bool:
        upload = AvatarUpload(filename=filename, content=content, content_type=content_type)
        try:
            avatar = await self._profile.upload_avatar(upload)
        except PortalError as e:
            logger.warning(f"Avatar upload failed: {e.code}")
            self._notifier.error("Upload failed")
            return False

        self._store.update_user({"avatar": avatar.model_dump()})
        self._notifier.success("Avatar updated!")
        return True

    async def remove_avatar(self) -> bool:
        try:
            await self._profile.delete_avatar()
        except PortalError as e:
            logger.warning(f"Avatar removal failed: {e.code}")
            self._notifier.error("Failed to remove avatar")
            return False

        self._store.update_user({"avatar": {"url": "", "publicId": ""}})
        self._notifier.success("Avatar removed")
        return True

    async def request_email_change(self, new_email: str) -> bool:
        new_email = new_email.strip()
        if not new_email:
            self._notifier.error("Email is required")
            return False
        try:
            await self._profile.request_email_change(new_email)
        except PortalError as e:
            return self._failed(e, "Email change failed")

        self._notifier.success("Confirmation sent to your new email address")
        return True

    async def delete_account(self, password: str) -> bool:
        if not password:
            self._notifier.error("Password is required")
            return False
        try:
            await self._profile.delete_account(password)
        except PortalError as e:
            return self._failed(e, "Failed to delete account")

        await self._store.logout()
        self._notifier.success("Account deleted")
        return True

    def close(self) -> None:
        self._resend.timer.close()
