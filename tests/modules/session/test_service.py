"""Tests for the session store."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from modules.backend_api.exceptions import InvalidCredentialsError, TransientError
from modules.backend_api.models import Credentials, LoginResponse
from modules.session.exceptions import PendingTokenMismatchError, StepUpNotPendingError
from modules.session.interfaces import ISessionStore
from modules.session.models import Session, SessionStatus
from modules.session.service import SessionStore


@pytest.fixture
def api():
    """Mock IAuthAPI."""
    return AsyncMock()


@pytest.fixture
def store(api):
    return SessionStore(api)


@pytest.fixture
def credentials():
    return Credentials(email="jane@example.com", password="Secret1")


class TestInterface:
    def test_store_implements_interface(self, store):
        """SessionStore should satisfy ISessionStore."""
        assert isinstance(store, ISessionStore)

    def test_starts_bootstrapping(self, store):
        """A new store should be waiting for the probe."""
        assert store.session.status == SessionStatus.BOOTSTRAPPING
        assert store.session.user is None


class TestBootstrap:
    @pytest.mark.asyncio
    async def test_authenticated_when_probe_returns_user(self, store, api, user):
        """A successful probe should authenticate the session."""
        api.get_me.return_value = user
        session = await store.bootstrap()

        assert session.status == SessionStatus.AUTHENTICATED
        assert session.user == user

    @pytest.mark.asyncio
    async def test_anonymous_when_not_logged_in(self, store, api):
        """A 401 probe should resolve to anonymous."""
        api.get_me.side_effect = InvalidCredentialsError()
        session = await store.bootstrap()

        assert session.status == SessionStatus.ANONYMOUS
        assert session.probe_failed is False

    @pytest.mark.asyncio
    async def test_anonymous_with_flag_when_backend_down(self, store, api):
        """Any other probe failure should resolve to anonymous and be flagged."""
        api.get_me.side_effect = TransientError("down")
        session = await store.bootstrap()

        assert session.status == SessionStatus.ANONYMOUS
        assert session.probe_failed is True

    @pytest.mark.asyncio
    async def test_probes_once(self, store, api, user):
        """Repeated and concurrent calls should share one probe."""
        api.get_me.return_value = user

        first, second = await asyncio.gather(store.bootstrap(), store.bootstrap())
        third = await store.bootstrap()

        assert api.get_me.await_count == 1
        assert first == second == third


class TestLogin:
    @pytest.mark.asyncio
    async def test_direct_login(self, store, api, credentials, user):
        """A login without second factor should authenticate immediately."""
        api.login.return_value = LoginResponse(requires_2fa=False, user=user)
        result = await store.login(credentials)

        assert result.requires_step_up is False
        assert store.session.status == SessionStatus.AUTHENTICATED
        assert store.session.user == user

    @pytest.mark.asyncio
    async def test_step_up_login_has_no_user(self, store, api, credentials):
        """A 2FA login should leave the user unset and keep the token."""
        api.login.return_value = LoginResponse(requires_2fa=True, pending_token="abc")
        result = await store.login(credentials)

        assert result.requires_step_up is True
        assert result.pending_token == "abc"
        assert store.session.status == SessionStatus.PENDING_TWO_FACTOR
        assert store.session.user is None

    @pytest.mark.asyncio
    async def test_failed_login_propagates(self, store, api, credentials):
        """Backend refusals should propagate and leave the session alone."""
        api.login.side_effect = InvalidCredentialsError("Wrong password")
        before = store.session

        with pytest.raises(InvalidCredentialsError):
            await store.login(credentials)
        assert store.session is before


class TestCompleteStepUp:
    @pytest.mark.asyncio
    async def test_end_to_end_two_factor(self, store, api, credentials, user):
        """Pending token "abc" plus OTP "123456" should authenticate with the returned user."""
        api.login.return_value = LoginResponse(requires_2fa=True, pending_token="abc")
        api.verify_two_factor.return_value = user

        result = await store.login(credentials)
        returned = await store.complete_step_up("123456", result.pending_token)

        api.verify_two_factor.assert_awaited_once_with("123456", "abc")
        assert returned == user
        assert store.session.status == SessionStatus.AUTHENTICATED
        assert store.session.user == user
        assert store.session.pending_token is None

    @pytest.mark.asyncio
    async def test_rejected_code_keeps_pending(self, store, api, credentials):
        """A wrong code should propagate and keep the pending session."""
        api.login.return_value = LoginResponse(requires_2fa=True, pending_token="abc")
        api.verify_two_factor.side_effect = InvalidCredentialsError("Invalid OTP")
        await store.login(credentials)

        with pytest.raises(InvalidCredentialsError):
            await store.complete_step_up("000000", "abc")
        assert store.session.status == SessionStatus.PENDING_TWO_FACTOR
        assert store.session.pending_token == "abc"

    @pytest.mark.asyncio
    async def test_requires_pending_state(self, store):
        """Completing without a pending login should fail."""
        with pytest.raises(StepUpNotPendingError):
            await store.complete_step_up("123456", "abc")

    @pytest.mark.asyncio
    async def test_requires_matching_token(self, store, api, credentials):
        """A different token should be refused without calling the backend."""
        api.login.return_value = LoginResponse(requires_2fa=True, pending_token="abc")
        await store.login(credentials)

        with pytest.raises(PendingTokenMismatchError):
            await store.complete_step_up("123456", "other")
        api.verify_two_factor.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_result_after_logout_is_discarded(self, store, api, credentials, user):
        """A code accepted after the user left should not resurrect the session."""
        api.login.return_value = LoginResponse(requires_2fa=True, pending_token="abc")
        await store.login(credentials)

        async def verify(otp, token):
            store.abandon_step_up()
            return user

        api.verify_two_factor.side_effect = verify
        await store.complete_step_up("123456", "abc")

        assert store.session.status == SessionStatus.ANONYMOUS


class TestLogout:
    @pytest.mark.asyncio
    async def test_clears_session(self, store, api, user):
        api.get_me.return_value = user
        await store.bootstrap()
        await store.logout()

        api.logout.assert_awaited_once()
        assert store.session.status == SessionStatus.ANONYMOUS
        assert store.session.user is None

    @pytest.mark.asyncio
    async def test_clears_session_when_revoke_fails(self, store, api, user):
        """Logout should clear the session even if the backend call fails."""
        api.get_me.return_value = user
        api.logout.side_effect = TransientError("down")
        await store.bootstrap()

        await store.logout()
        assert store.session.status == SessionStatus.ANONYMOUS


class TestAbandonStepUp:
    @pytest.mark.asyncio
    async def test_returns_to_anonymous(self, store, api, credentials):
        api.login.return_value = LoginResponse(requires_2fa=True, pending_token="abc")
        await store.login(credentials)

        store.abandon_step_up()
        assert store.session == Session.anonymous()

    def test_noop_when_not_pending(self, store):
        store.abandon_step_up()
        assert store.session.status == SessionStatus.BOOTSTRAPPING


class TestUpdateUser:
    @pytest.mark.asyncio
    async def test_merges_partial(self, store, api, user):
        """Partial updates should merge into the current user."""
        api.get_me.return_value = user
        await store.bootstrap()

        store.update_user({"twoFactorEnabled": True})
        assert store.session.user.two_factor_enabled is True
        assert store.session.user.email == user.email

    def test_ignored_without_user(self, store):
        store.update_user({"twoFactorEnabled": True})
        assert store.session.user is None


class TestSubscribe:
    @pytest.mark.asyncio
    async def test_listeners_see_transitions(self, store, api, user):
        """Subscribers should receive every new snapshot until they unsubscribe."""
        listener = MagicMock()
        unsubscribe = store.subscribe(listener)
        api.get_me.return_value = user

        await store.bootstrap()
        listener.assert_called_once()
        assert listener.call_args.args[0].status == SessionStatus.AUTHENTICATED

        unsubscribe()
        await store.logout()
        listener.assert_called_once()
