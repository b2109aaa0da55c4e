"""
Admin directory data models.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from shared.models import User, UserRole


DEFAULT_PAGE_SIZE = 15


class DirectoryPage(BaseModel):
    """
    One page of the user directory.

    Replaced wholesale on every fetch; never patched in place.
    """

    users: tuple[User, ...] = Field(default_factory=tuple)
    page: int = Field(default=1, ge=1, description="Current page number")
    pages: int = Field(default=1, ge=0, description="Total number of pages")
    total: int = Field(default=0, ge=0, description="Total matching users")
    search: Optional[str] = Field(None, description="Search term the page was fetched with")
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_size(self) -> "DirectoryPage":
        if len(self.users) > self.page_size:
            raise ValueError(
                f"page holds {len(self.users)} users, more than page size {self.page_size}"
            )
        return self

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.pages

    def find(self, user_id: str) -> Optional[User]:
        for user in self.users:
            if user.id == user_id:
                return user
        return None


class MenuAction(str, Enum):
    """Actions offered in a directory row's menu."""

    MAKE_USER = "make_user"
    MAKE_MODERATOR = "make_moderator"
    MAKE_ADMIN = "make_admin"
    RESET_PASSWORD = "reset_password"
    BAN = "ban"
    UNBAN = "unban"
    DELETE = "delete"

    @property
    def target_role(self) -> Optional[UserRole]:
        return _ROLE_ACTIONS.get(self)


_ROLE_ACTIONS = {
    MenuAction.MAKE_USER: UserRole.USER,
    MenuAction.MAKE_MODERATOR: UserRole.MODERATOR,
    MenuAction.MAKE_ADMIN: UserRole.ADMIN,
}


def available_actions(user: User) -> list[MenuAction]:
    """Menu entries for a row, in display order."""
    actions = [action for action, role in _ROLE_ACTIONS.items() if role != user.role]
    actions.append(MenuAction.RESET_PASSWORD)
    actions.append(MenuAction.UNBAN if user.is_banned else MenuAction.BAN)
    actions.append(MenuAction.DELETE)
    return actions
