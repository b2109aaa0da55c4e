"""
HTTP implementation of the backend API interfaces.

Wraps a shared httpx.AsyncClient. Every failure, including transport
errors and malformed bodies, surfaces as a PortalError subclass.
"""

import logging
from typing import Any, Optional, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError as PydanticValidationError

from shared.http import get_http_client
from shared.models import Avatar, User, UserRole

from .exceptions import TransientError, error_from_response
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

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _segment(value: str) -> str:
    """Quote a value for use as a single path segment."""
    return quote(value, safe="")


def _parse(model: type[ModelT], data: Any) -> ModelT:
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise TransientError(
            f"Unexpected {model.__name__} payload from backend",
            details={"model": model.__name__, "error_count": e.error_count()},
        ) from e


class BackendAPIClient:
    """
    Backend API client implementing IAuthAPI, IProfileAPI and IAdminAPI.

    The session cookie lives in the httpx client's cookie jar; this class
    never handles tokens directly.
    """

    def __init__(self, http: Optional[httpx.AsyncClient] = None):
        self._http = http or get_http_client()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
        files: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """Send a request and return the decoded JSON body."""
        try:
            response = await self._http.request(
                method, path, json=json, params=params, files=files
            )
        except httpx.TimeoutException as e:
            logger.warning(f"{method} {path} timed out")
            raise TransientError(f"Request timed out: {method} {path}") from e
        except httpx.HTTPError as e:
            logger.warning(f"{method} {path} failed: {e.__class__.__name__}")
            raise TransientError(f"Request failed: {method} {path}") from e

        payload = self._decode(response)
        if response.is_error:
            error = error_from_response(response.status_code, payload)
            logger.debug(f"{method} {path} -> {response.status_code} ({error.code})")
            raise error
        return payload

    @staticmethod
    def _decode(response: httpx.Response) -> dict[str, Any]:
        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError as e:
            if response.is_error:
                return {}
            raise TransientError("Malformed JSON from backend") from e
        return data if isinstance(data, dict) else {}

    # Auth

    async def get_me(self) -> User:
        payload = await self._request("GET", "/auth/me")
        return _parse(User, payload.get("user"))

    async def login(self, credentials: Credentials) -> LoginResponse:
        payload = await self._request("POST", "/auth/login", json=credentials.to_payload())
        return _parse(LoginResponse, payload)

    async def verify_two_factor(self, otp: str, pending_token: str) -> User:
        payload = await self._request(
            "POST",
            "/auth/verify-2fa",
            json={"otp": otp, "pendingToken": pending_token},
        )
        return _parse(User, payload.get("user"))

    async def logout(self) -> None:
        await self._request("POST", "/auth/logout")

    async def register(self, request: RegistrationRequest) -> None:
        await self._request("POST", "/auth/register", json=request.to_payload())

    async def verify_email(self, token: str) -> None:
        await self._request("GET", f"/auth/verify-email/{_segment(token)}")

    async def resend_verification(self, email: str) -> None:
        await self._request("POST", "/auth/resend-verification", json={"email": email})

    async def forgot_password(self, email: str) -> None:
        await self._request("POST", "/auth/forgot-password", json={"email": email})

    async def reset_password(self, token: str, password: str) -> None:
        await self._request(
            "POST",
            f"/auth/reset-password/{_segment(token)}",
            json={"password": password},
        )

    async def change_password(self, change: PasswordChange) -> None:
        await self._request("POST", "/auth/change-password", json=change.to_payload())

    async def toggle_two_factor(self) -> bool:
        payload = await self._request("POST", "/auth/toggle-2fa")
        return bool(payload.get("twoFactorEnabled", False))

    async def get_login_history(self) -> list[LoginActivity]:
        payload = await self._request("GET", "/auth/login-history")
        return [_parse(LoginActivity, item) for item in payload.get("loginActivity") or []]

    # Profile

    async def get_profile(self) -> User:
        payload = await self._request("GET", "/profile")
        return _parse(User, payload.get("user"))

    async def update_profile(self, update: ProfileUpdate) -> User:
        payload = await self._request("PATCH", "/profile", json=update.to_payload())
        return _parse(User, payload.get("user"))

    async def upload_avatar(self, upload: AvatarUpload) -> Avatar:
        payload = await self._request(
            "POST",
            "/profile/avatar",
            files={"avatar": (upload.filename, upload.content, upload.content_type)},
        )
        return _parse(Avatar, payload.get("avatar") or {})

    async def delete_avatar(self) -> None:
        await self._request("DELETE", "/profile/avatar")

    async def request_email_change(self, new_email: str) -> None:
        await self._request("POST", "/profile/email-change", json={"newEmail": new_email})

    async def delete_account(self, password: str) -> None:
        await self._request("DELETE", "/profile/account", json={"password": password})

    # Admin

    async def get_stats(self) -> AdminStats:
        payload = await self._request("GET", "/admin/stats")
        return _parse(AdminStats, payload.get("stats") or {})

    async def list_users(self, query: UserListQuery) -> UserListResponse:
        payload = await self._request("GET", "/admin/users", params=query.to_params())
        return _parse(UserListResponse, payload)

    async def get_user(self, user_id: str) -> User:
        payload = await self._request("GET", f"/admin/users/{_segment(user_id)}")
        return _parse(User, payload.get("user"))

    async def ban_user(self, user_id: str, reason: str) -> None:
        await self._request(
            "PATCH", f"/admin/users/{_segment(user_id)}/ban", json={"reason": reason}
        )

    async def unban_user(self, user_id: str) -> None:
        await self._request("PATCH", f"/admin/users/{_segment(user_id)}/unban")

    async def update_user_role(self, user_id: str, role: UserRole) -> None:
        await self._request(
            "PATCH",
            f"/admin/users/{_segment(user_id)}/role",
            json={"role": UserRole(role).value},
        )

    async def reset_user_password(self, user_id: str, new_password: str) -> None:
        await self._request(
            "PATCH",
            f"/admin/users/{_segment(user_id)}/reset-password",
            json={"newPassword": new_password},
        )

    async def delete_user(self, user_id: str) -> None:
        await self._request("DELETE", f"/admin/users/{_segment(user_id)}")
