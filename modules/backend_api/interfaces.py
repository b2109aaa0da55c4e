"""
Backend API interfaces.

Services depend on these protocols, not on the HTTP client, so tests can
substitute AsyncMock objects or in-memory fakes.
"""

from typing import Protocol, runtime_checkable

from shared.models import Avatar, User, UserRole

from .models import (
    AdminStats,
    AvatarUpload,
    Credentials,
    LoginActivity,
    LoginResponse,
    PasswordChange,
    ProfileUpdate,
    RegistrationRequest,
    UserListQuery,
    UserListResponse,
)


@runtime_checkable
class IAuthAPI(Protocol):
    """
    Interface for the /auth endpoints.

    All calls are authenticated implicitly by the session cookie held in
    the underlying HTTP client.
    """

    async def get_me(self) -> User:
        """
        Probe the current session.

        Returns:
            The logged-in user

        Raises:
            AuthenticationError: If there is no valid session
            TransientError: On server or transport failure
        """
        ...

    async def login(self, credentials: Credentials) -> LoginResponse:
        """
        Submit primary credentials.

        Returns:
            LoginResponse carrying either the user or a pending token

        Raises:
            InvalidCredentialsError: Wrong email or password
            UnverifiedEmailError: Email address not verified yet
            TransientError: On server or transport failure
        """
        ...

    async def verify_two_factor(self, otp: str, pending_token: str) -> User:
        """
        Exchange a pending token and one-time code for a session.

        Raises:
            AuthenticationError: If the code is rejected
        """
        ...

    async def logout(self) -> None:
        """Revoke the current session."""
        ...

    async def register(self, request: RegistrationRequest) -> None:
        ...

    async def verify_email(self, token: str) -> None:
        ...

    async def resend_verification(self, email: str) -> None:
        """
        Ask for a new verification email.

        Raises:
            RateLimitedError: If the backend throttled the request (HTTP 429)
        """
        ...

    async def forgot_password(self, email: str) -> None:
        ...

    async def reset_password(self, token: str, password: str) -> None:
        ...

    async def change_password(self, change: PasswordChange) -> None:
        ...

    async def toggle_two_factor(self) -> bool:
        """
        Flip two-factor authentication for the current user.

        Returns:
            The new twoFactorEnabled value
        """
        ...

    async def get_login_history(self) -> list[LoginActivity]:
        ...


@runtime_checkable
class IProfileAPI(Protocol):
    """Interface for the /profile endpoints."""

    async def get_profile(self) -> User:
        ...

    async def update_profile(self, update: ProfileUpdate) -> User:
        ...

    async def upload_avatar(self, upload: AvatarUpload) -> Avatar:
        ...

    async def delete_avatar(self) -> None:
        ...

    async def request_email_change(self, new_email: str) -> None:
        ...

    async def delete_account(self, password: str) -> None:
        ...


@runtime_checkable
class IAdminAPI(Protocol):
    """
    Interface for the /admin endpoints.

    Mutations report only success or failure; callers refetch the list
    to observe their effect.
    """

    async def get_stats(self) -> AdminStats:
        ...

    async def list_users(self, query: UserListQuery) -> UserListResponse:
        """
        Fetch one page of the user directory.

        Args:
            query: Page number, page size and optional search term

        Returns:
            Users on the page plus pagination totals
        """
        ...

    async def get_user(self, user_id: str) -> User:
        ...

    async def ban_user(self, user_id: str, reason: str) -> None:
        ...

    async def unban_user(self, user_id: str) -> None:
        ...

    async def update_user_role(self, user_id: str, role: UserRole) -> None:
        ...

    async def reset_user_password(self, user_id: str, new_password: str) -> None:
        ...

    async def delete_user(self, user_id: str) -> None:
        ...
