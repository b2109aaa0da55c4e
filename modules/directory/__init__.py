"""
Admin directory module.

Paginated, searchable user list with per-row moderation actions
(role change, password reset, ban/unban, delete) behind a contextual menu.

Public API:
- DirectoryConsole: Page state, fetches, and row actions
- DirectoryPage: One page of users
- MenuAction, available_actions: Row menu contents
"""

from .models import DirectoryPage, MenuAction, available_actions, DEFAULT_PAGE_SIZE
from .exceptions import UserNotOnPageError, PasswordTooShortError
from .service import DirectoryConsole, DEFAULT_BAN_REASON

__all__ = [
    # Service
    "DirectoryConsole",
    "DEFAULT_BAN_REASON",
    # Models
    "DirectoryPage",
    "MenuAction",
    "available_actions",
    "DEFAULT_PAGE_SIZE",
    # Exceptions
    "UserNotOnPageError",
    "PasswordTooShortError",
]
