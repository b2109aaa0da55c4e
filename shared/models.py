"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# Backend payloads are camelCase; models expose snake_case attributes and
# accept either spelling on input.
WIRE_MODEL_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    frozen=True,
    extra="ignore",
)


class UserRole(str, Enum):
    """Roles a directory user can hold."""

    USER = "user"
    MODERATOR = "moderator"
    ADMIN = "admin"


class Avatar(BaseModel):
    """Reference to an uploaded avatar image."""

    model_config = WIRE_MODEL_CONFIG

    url: str = Field(default="", description="Public image URL")
    public_id: str = Field(default="", description="Storage identifier")


class User(BaseModel):
    """
    A user record as returned by the backend.

    Instances are immutable. Partial updates confirmed by the server are
    applied with merged(), which returns a new instance.
    """

    model_config = WIRE_MODEL_CONFIG

    id: str = Field(..., validation_alias=AliasChoices("_id", "id"))
    first_name: str = Field(default="", description="Given name")
    last_name: str = Field(default="", description="Family name")
    email: str = Field(..., description="Email address")
    role: UserRole = Field(default=UserRole.USER, description="Directory role")

    is_active: bool = Field(default=True)
    is_banned: bool = Field(default=False)
    is_email_verified: bool = Field(default=False)
    two_factor_enabled: bool = Field(default=False)
    avatar: Avatar = Field(default_factory=Avatar)

    # Optional profile fields
    bio: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None

    created_at: Optional[datetime] = Field(None, description="Account creation time")
    last_login: Optional[datetime] = Field(None, description="Last successful login")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def initials(self) -> str:
        return f"{self.first_name[:1]}{self.last_name[:1]}".upper()

    def merged(self, updates: Mapping[str, Any]) -> "User":
        """
        Shallow-merge updates into a copy of this user.

        Keys may use wire names (``twoFactorEnabled``) or attribute names
        (``two_factor_enabled``). Nested values such as ``avatar`` are
        replaced, not merged. Unknown keys are ignored.
        """
        names = {"_id": "id"}
        for name in type(self).model_fields:
            names[name] = name
            names[to_camel(name)] = name

        data = self.model_dump()
        for key, value in updates.items():
            data[names.get(key, key)] = value
        return type(self).model_validate(data)
