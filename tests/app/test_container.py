"""Tests for the service container."""

import httpx
import pytest

from app.container import ServiceContainer, get_container, reset_container
from modules.account.service import AccountService
from modules.backend_api.client import BackendAPIClient
from modules.directory.service import DirectoryConsole
from modules.login.flow import LoginFlow, LoginOutcome
from modules.routing.models import GuardOutcome
from modules.session.interfaces import ISessionStore
from modules.session.models import SessionStatus
from shared.config import Settings
from shared.http import create_http_client


def backend_http(routes: dict) -> httpx.AsyncClient:
    """HTTP client answering (method, path) pairs from a dict."""

    def handler(request: httpx.Request) -> httpx.Response:
        key = (request.method, request.url.path.removeprefix("/api"))
        if key not in routes:
            return httpx.Response(404, json={"message": "Not found"})
        status, body = routes[key]
        return httpx.Response(status, json=body)

    return create_http_client(base_url="http://backend.test/api", transport=httpx.MockTransport(handler))


class TestServiceContainer:
    def test_services_are_cached(self):
        container = ServiceContainer()
        assert container.session is container.session
        assert container.api is container.api

    def test_services_share_one_session(self):
        """Every screen should see the same session store."""
        container = ServiceContainer()
        assert isinstance(container.session, ISessionStore)
        assert isinstance(container.api, BackendAPIClient)
        assert isinstance(container.login_flow, LoginFlow)
        assert isinstance(container.account, AccountService)
        assert isinstance(container.directory, DirectoryConsole)

    def test_directory_uses_settings(self):
        container = ServiceContainer(settings=Settings(directory_page_size=5))
        assert container.directory._page_size == 5

    def test_reset_builds_fresh_services(self):
        container = ServiceContainer()
        session = container.session
        container.reset()
        assert container.session is not session

    @pytest.mark.asyncio
    async def test_aclose_closes_owned_client(self):
        container = ServiceContainer()
        http = container.http
        await container.aclose()
        assert http.is_closed

    @pytest.mark.asyncio
    async def test_aclose_leaves_injected_client(self):
        http = create_http_client(base_url="http://backend.test/api")
        container = ServiceContainer(http=http)
        await container.aclose()
        assert not http.is_closed
        await http.aclose()


class TestGetContainer:
    def test_singleton(self):
        assert get_container() is get_container()

    def test_reset(self):
        first = get_container()
        reset_container()
        assert get_container() is not first


class TestWiring:
    @pytest.mark.asyncio
    async def test_bootstrap_then_navigate(self, make_payload):
        """An existing session cookie should open the dashboard."""
        http = backend_http({("GET", "/auth/me"): (200, {"user": make_payload()})})
        container = ServiceContainer(http=http)

        assert container.navigator.resolve("/dashboard").decision.outcome == GuardOutcome.LOADING
        await container.session.bootstrap()
        assert container.navigator.resolve("/dashboard").decision.outcome == GuardOutcome.RENDER
        assert container.navigator.resolve("/admin").decision.redirect_to == "/dashboard"
        await http.aclose()

    @pytest.mark.asyncio
    async def test_two_factor_login_end_to_end(self, make_payload, notifier):
        """Pending token "abc" and code "123456" should authenticate."""
        http = backend_http({
            ("POST", "/auth/login"): (200, {"requires2FA": True, "pendingToken": "abc"}),
            ("POST", "/auth/verify-2fa"): (200, {"user": make_payload(twoFactorEnabled=True)}),
        })
        container = ServiceContainer(http=http, notifier=notifier)
        flow = container.login_flow

        assert await flow.submit_credentials("jane@example.com", "Secret1") == LoginOutcome.STEP_UP_REQUIRED
        assert container.session.session.status == SessionStatus.PENDING_TWO_FACTOR
        assert container.session.session.pending_token == "abc"

        assert await flow.submit_otp("123456") is True
        session = container.session.session
        assert session.status == SessionStatus.AUTHENTICATED
        assert session.user.two_factor_enabled is True
        await http.aclose()
