"""
Service container.

Wires the backend client, the session store and the screen-level
services together. Everything is created lazily on first access and
cached for the lifetime of the container, so one container means one
session.
"""

from typing import TYPE_CHECKING, Optional

import httpx

from shared.config import Settings, get_settings
from shared.http import create_http_client
from shared.notifications import INotifier, LoggingNotifier

# Type checking imports (concrete classes are imported lazily)
if TYPE_CHECKING:
    from modules.account.service import AccountService
    from modules.backend_api.client import BackendAPIClient
    from modules.directory.service import DirectoryConsole
    from modules.login.flow import LoginFlow
    from modules.routing.routes import Navigator
    from modules.session.service import SessionStore


class ServiceContainer:
    """
    Container for all service instances.

    Args:
        settings: Settings to use; defaults to get_settings()
        http: HTTP client to use; by default one is created and owned
            by the container
        notifier: Message sink; defaults to LoggingNotifier
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        http: Optional[httpx.AsyncClient] = None,
        notifier: Optional[INotifier] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._http = http
        self._owns_http = http is None
        self._notifier = notifier
        self._api: "BackendAPIClient | None" = None
        self._session: "SessionStore | None" = None
        self._navigator: "Navigator | None" = None
        self._login_flow: "LoginFlow | None" = None
        self._account: "AccountService | None" = None
        self._directory: "DirectoryConsole | None" = None

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def http(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = create_http_client(
                base_url=self._settings.api_base_url,
                timeout=self._settings.request_timeout,
            )
        return self._http

    @property
    def notifier(self) -> INotifier:
        if self._notifier is None:
            self._notifier = LoggingNotifier()
        return self._notifier

    @property
    def api(self) -> "BackendAPIClient":
        """Get the backend client (implements every API interface)."""
        if self._api is None:
            from modules.backend_api.client import BackendAPIClient
            self._api = BackendAPIClient(self.http)
        return self._api

    @property
    def session(self) -> "SessionStore":
        """Get the session store."""
        if self._session is None:
            from modules.session.service import SessionStore
            self._session = SessionStore(self.api)
        return self._session

    @property
    def navigator(self) -> "Navigator":
        if self._navigator is None:
            from modules.routing.routes import Navigator
            self._navigator = Navigator(self.session)
        return self._navigator

    @property
    def login_flow(self) -> "LoginFlow":
        if self._login_flow is None:
            from modules.login.flow import LoginFlow
            self._login_flow = LoginFlow(
                self.session,
                self.api,
                self.notifier,
                cooldown_seconds=self._settings.resend_cooldown_seconds,
            )
        return self._login_flow

    @property
    def account(self) -> "AccountService":
        if self._account is None:
            from modules.account.service import AccountService
            from modules.cooldown import CooldownTimer
            self._account = AccountService(
                self.session,
                self.api,
                self.api,
                self.notifier,
                CooldownTimer(self._settings.resend_cooldown_seconds, name="banner-resend"),
            )
        return self._account

    @property
    def directory(self) -> "DirectoryConsole":
        """Get the admin directory console."""
        if self._directory is None:
            from modules.directory.service import DirectoryConsole
            from modules.menu import MenuController, ViewportSize
            settings = self._settings
            menu = MenuController(
                ViewportSize(width=settings.viewport_width, height=settings.viewport_height),
                panel_height=settings.menu_panel_height,
                panel_width=settings.menu_panel_width,
                gap=settings.menu_gap,
            )
            self._directory = DirectoryConsole(
                self.api,
                self.notifier,
                menu,
                page_size=settings.directory_page_size,
                min_password_length=settings.min_admin_password_length,
            )
        return self._directory

    async def aclose(self) -> None:
        """Stop timers, detach the directory and close the owned HTTP client."""
        if self._login_flow is not None:
            self._login_flow.close()
        if self._account is not None:
            self._account.close()
        if self._directory is not None:
            self._directory.close()
        if self._owns_http and self._http is not None:
            await self._http.aclose()
        self.reset()

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing: the next access builds fresh
        instances, including a new session.
        """
        if self._owns_http:
            self._http = None
        self._api = None
        self._session = None
        self._navigator = None
        self._login_flow = None
        self._account = None
        self._directory = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    The next call to get_container() creates a fresh container.
    Primarily used for testing.
    """
    global _container
    _container = None
