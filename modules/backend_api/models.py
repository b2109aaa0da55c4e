"""
Backend API data models.

Request models serialize to the backend's camelCase payloads; response
models accept them. Only fields the client actually reads are declared.
"""

import re
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, SecretStr, field_validator, model_validator

from shared.models import WIRE_MODEL_CONFIG, User

PASSWORD_STRENGTH_PATTERN = re.compile(r"(?=.*[A-Z])(?=.*[0-9])")
MIN_PASSWORD_LENGTH = 6


def check_password_strength(value: str) -> str:
    """Require at least 6 characters, one uppercase letter and one digit."""
    if len(value) < MIN_PASSWORD_LENGTH:
        raise ValueError("Min 6 characters")
    if not PASSWORD_STRENGTH_PATTERN.match(value):
        raise ValueError("Need 1 uppercase + 1 number")
    return value


class Credentials(BaseModel):
    """Email and password submitted on the login form."""

    email: str = Field(..., min_length=1, description="Login email")
    password: SecretStr = Field(..., description="Login password")

    def to_payload(self) -> dict[str, str]:
        return {"email": self.email, "password": self.password.get_secret_value()}


class LoginResponse(BaseModel):
    """
    Result of POST /auth/login.

    Either a full user (no second factor) or a pending token that must be
    exchanged together with a one-time code.
    """

    model_config = WIRE_MODEL_CONFIG

    requires_2fa: bool = Field(default=False, alias="requires2FA")
    pending_token: Optional[str] = None
    user: Optional[User] = None

    @model_validator(mode="after")
    def _check_shape(self) -> "LoginResponse":
        if self.requires_2fa and not self.pending_token:
            raise ValueError("requires2FA response without pendingToken")
        if not self.requires_2fa and self.user is None:
            raise ValueError("login response without user")
        return self


class Pagination(BaseModel):
    """Pagination block of a list response."""

    model_config = WIRE_MODEL_CONFIG

    page: int = Field(default=1, ge=1)
    pages: int = Field(default=1, ge=0)
    total: int = Field(default=0, ge=0)


class UserListQuery(BaseModel):
    """Query parameters for GET /admin/users."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=15, ge=1)
    search: Optional[str] = None

    def to_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {"page": self.page, "limit": self.limit}
        if self.search:
            params["search"] = self.search
        return params


class UserListResponse(BaseModel):
    """Result of GET /admin/users."""

    model_config = WIRE_MODEL_CONFIG

    data: list[User] = Field(default_factory=list)
    pagination: Pagination = Field(default_factory=Pagination)


class AdminStats(BaseModel):
    """Directory-wide counters shown above the user list."""

    model_config = WIRE_MODEL_CONFIG

    total_users: int = 0
    active_users: int = 0
    banned_users: int = 0
    users_this_month: int = 0


class LoginActivity(BaseModel):
    """One entry of the login history."""

    model_config = WIRE_MODEL_CONFIG

    ip: Optional[str] = None
    user_agent: Optional[str] = None
    success: bool = False
    created_at: Optional[datetime] = None


class RegistrationRequest(BaseModel):
    """Sign-up form. confirm_password is checked locally and never sent."""

    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    password: SecretStr
    confirm_password: SecretStr

    @field_validator("password")
    @classmethod
    def _strong_password(cls, value: SecretStr) -> SecretStr:
        check_password_strength(value.get_secret_value())
        return value

    @model_validator(mode="after")
    def _passwords_match(self) -> "RegistrationRequest":
        if self.password.get_secret_value() != self.confirm_password.get_secret_value():
            raise ValueError("Passwords do not match")
        return self

    def to_payload(self) -> dict[str, str]:
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "password": self.password.get_secret_value(),
        }


class PasswordChange(BaseModel):
    """Change-password form for the logged-in user."""

    current_password: SecretStr
    new_password: SecretStr
    confirm_new_password: SecretStr

    @field_validator("new_password")
    @classmethod
    def _strong_password(cls, value: SecretStr) -> SecretStr:
        check_password_strength(value.get_secret_value())
        return value

    @model_validator(mode="after")
    def _passwords_match(self) -> "PasswordChange":
        if self.new_password.get_secret_value() != self.confirm_new_password.get_secret_value():
            raise ValueError("Passwords do not match")
        return self

    def to_payload(self) -> dict[str, str]:
        return {
            "currentPassword": self.current_password.get_secret_value(),
            "newPassword": self.new_password.get_secret_value(),
            "confirmNewPassword": self.confirm_new_password.get_secret_value(),
        }


class ProfileUpdate(BaseModel):
    """Editable profile fields. Unset fields are not sent."""

    model_config = WIRE_MODEL_CONFIG

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    bio: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True)


class AvatarUpload(BaseModel):
    """An image file to upload as the user's avatar."""

    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

