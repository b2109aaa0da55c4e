"""
Admin directory console.

Paginated, searchable user list with row-level moderation actions.
Every successful mutation is followed by a full refetch of the current
page instead of a local patch, so counts and ordering always come from
the server.
"""

import asyncio
import logging
from typing import Awaitable, Optional

from pydantic import ValidationError as PydanticValidationError

from modules.backend_api.interfaces import IAdminAPI
from modules.backend_api.models import AdminStats, UserListQuery
from modules.menu.controller import MenuController, OpenMenu
from modules.menu.models import Rect
from shared.exceptions import PortalError, user_message
from shared.models import User, UserRole
from shared.notifications import INotifier

from .exceptions import PasswordTooShortError, UserNotOnPageError
from .models import DEFAULT_PAGE_SIZE, DirectoryPage, MenuAction, available_actions

logger = logging.getLogger(__name__)

DEFAULT_BAN_REASON = "Admin action"


class DirectoryConsole:
    """
    State and actions of the admin user directory.

    Fetches are fenced by a sequence number: only the response to the most
    recently issued fetch is applied. After close(), late responses are
    ignored.
    """

    def __init__(
        self,
        api: IAdminAPI,
        notifier: INotifier,
        menu: MenuController[MenuAction],
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        min_password_length: int = 6,
    ):
        self._api = api
        self._notifier = notifier
        self._menu = menu
        self._page_size = page_size
        self._min_password_length = min_password_length

        self._page: Optional[DirectoryPage] = None
        self._stats: Optional[AdminStats] = None
        self._page_number = 1
        self._search = ""
        self._loading = False
        self._issued = 0
        self._closed = False
        self._password_reset_target: Optional[str] = None

    @property
    def page(self) -> Optional[DirectoryPage]:
        return self._page

    @property
    def stats(self) -> Optional[AdminStats]:
        return self._stats

    @property
    def page_number(self) -> int:
        return self._page_number

    @property
    def search_term(self) -> str:
        return self._search

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def menu(self) -> MenuController[MenuAction]:
        return self._menu

    @property
    def password_reset_target(self) -> Optional[str]:
        """User whose password-reset prompt is open, if any."""
        return self._password_reset_target

    def _is_latest(self, sequence: int) -> bool:
        return not self._closed and sequence == self._issued

    async def fetch(
        self,
        page: Optional[int] = None,
        search: Optional[str] = None,
    ) -> Optional[DirectoryPage]:
        """
        Load stats and one page of users, replacing the current page.

        Args:
            page: Page to load; defaults to the current page
            search: Search term; defaults to the current term

        Returns:
            The new page, or None if the fetch failed or was superseded
        """
        if page is not None:
            self._page_number = max(1, page)
        if search is not None:
            self._search = search.strip()

        self._issued += 1
        sequence = self._issued
        query = UserListQuery(
            page=self._page_number,
            limit=self._page_size,
            search=self._search or None,
        )
        self._loading = True

        stats, listing = await asyncio.gather(
            self._api.get_stats(),
            self._api.list_users(query),
            return_exceptions=True,
        )

        if not self._is_latest(sequence):
            logger.debug(f"Discarding stale directory response #{sequence}")
            return None
        self._loading = False

        for result in (stats, listing):
            if isinstance(result, BaseException):
                if isinstance(result, PortalError):
                    logger.warning(f"Directory fetch failed: {result.code}")
                else:
                    logger.error(f"Directory fetch raised unexpectedly: {result!r}", exc_info=result)
                self._notifier.error("Failed to load data")
                return None

        try:
            new_page = DirectoryPage(
                users=tuple(listing.data),
                page=listing.pagination.page,
                pages=listing.pagination.pages,
                total=listing.pagination.total,
                search=query.search,
                page_size=self._page_size,
            )
        except PydanticValidationError:
            logger.warning(f"Directory response #{sequence} exceeds the page size")
            self._notifier.error("Failed to load data")
            return None

        self._stats = stats
        self._page = new_page
        return new_page

    async def search(self, term: str) -> Optional[DirectoryPage]:
        """Submit a search; always starts again from page 1."""
        return await self.fetch(page=1, search=term)

    async def next_page(self) -> Optional[DirectoryPage]:
        if self._page is None or not self._page.has_next:
            return None
        return await self.fetch(page=self._page_number + 1)

    async def previous_page(self) -> Optional[DirectoryPage]:
        if self._page_number <= 1:
            return None
        return await self.fetch(page=self._page_number - 1)

    async def _mutate(
        self,
        call: Awaitable[None],
        success_message: str,
        failure_message: str,
    ) -> bool:
        try:
            await call
        except PortalError as e:
            logger.warning(f"Directory action failed: {e.code}")
            self._notifier.error(user_message(e, failure_message))
            return False

        self._notifier.success(success_message)
        await self.fetch()
        return True

    async def ban(self, user_id: str, reason: str = DEFAULT_BAN_REASON) -> bool:
        return await self._mutate(
            self._api.ban_user(user_id, reason), "User banned", "Action failed"
        )

    async def unban(self, user_id: str) -> bool:
        return await self._mutate(
            self._api.unban_user(user_id), "User unbanned", "Action failed"
        )

    async def toggle_ban(self, user_id: str) -> bool:
        """Ban or unban depending on the row's current state."""
        user = self._row(user_id)
        if user.is_banned:
            return await self.unban(user_id)
        return await self.ban(user_id)

    async def change_role(self, user_id: str, role: UserRole) -> bool:
        role = UserRole(role)
        return await self._mutate(
            self._api.update_user_role(user_id, role),
            f"Role updated to {role.value}",
            "Role update failed",
        )

    async def reset_password(self, user_id: str, new_password: str) -> bool:
        if not new_password or len(new_password) < self._min_password_length:
            self._notifier.error(PasswordTooShortError(self._min_password_length).message)
            return False
        return await self._mutate(
            self._api.reset_user_password(user_id, new_password),
            "Password reset successfully",
            "Reset failed",
        )

    async def delete_user(self, user_id: str) -> bool:
        return await self._mutate(
            self._api.delete_user(user_id), "User deleted", "Delete failed"
        )

    # Row menu

    def _row(self, user_id: str) -> User:
        user = self._page.find(user_id) if self._page else None
        if user is None:
            raise UserNotOnPageError(user_id)
        return user

    def row_actions(self, user_id: str) -> list[MenuAction]:
        return available_actions(self._row(user_id))

    def open_row_menu(self, user_id: str, anchor: Rect) -> Optional[OpenMenu]:
        """Toggle the row's menu; any other open menu closes."""
        self._row(user_id)
        return self._menu.toggle(user_id, anchor)

    async def select_menu_action(self, action: MenuAction) -> bool:
        """
        Run an action from the open menu.

        The menu closes before the action is dispatched. Reset password
        only opens the prompt; submit_password_reset() sends it.

        Returns:
            False if no menu was open or the action failed
        """
        selection = self._menu.select(MenuAction(action))
        if selection is None:
            return False
        user_id, action = selection

        if action.target_role is not None:
            return await self.change_role(user_id, action.target_role)
        if action == MenuAction.RESET_PASSWORD:
            self._password_reset_target = user_id
            return True
        if action == MenuAction.BAN:
            return await self.ban(user_id)
        if action == MenuAction.UNBAN:
            return await self.unban(user_id)
        return await self.delete_user(user_id)

    async def submit_password_reset(self, new_password: str) -> bool:
        """Send the new password for the open prompt; the prompt stays open on failure."""
        user_id = self._password_reset_target
        if user_id is None:
            return False
        if not await self.reset_password(user_id, new_password):
            return False
        self._password_reset_target = None
        return True

    def cancel_password_reset(self) -> None:
        self._password_reset_target = None

    def close(self) -> None:
        """Tear the console down; in-flight responses become no-ops."""
        self._closed = True
        self._menu.close()
