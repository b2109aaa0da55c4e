"""
User-facing notifications.

Screens report outcomes through an INotifier ("toast" messages). Rendering
is not part of this package; the default implementation writes to the log.
"""

import logging
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class INotifier(Protocol):
    """Interface for surfacing short success and failure messages."""

    def success(self, message: str) -> None:
        ...

    def error(self, message: str) -> None:
        ...


class LoggingNotifier:
    """Notifier that forwards messages to the standard logging module."""

    def __init__(self, name: str = "portal.notifications"):
        self._logger = logging.getLogger(name)

    def success(self, message: str) -> None:
        self._logger.info(message)

    def error(self, message: str) -> None:
        self._logger.warning(message)
