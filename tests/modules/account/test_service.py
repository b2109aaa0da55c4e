"""Tests for account self-service."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from modules.account.service import AccountService
from modules.backend_api.exceptions import BadRequestError, InvalidCredentialsError, TransientError
from modules.backend_api.models import LoginActivity
from modules.cooldown import CooldownTimer, ResendResult
from modules.session.models import SessionStatus
from modules.session.service import SessionStore
from shared.models import Avatar


async def _never(seconds):
    await asyncio.Event().wait()


@pytest.fixture
def auth_api():
    return AsyncMock()


@pytest.fixture
def profile_api():
    return AsyncMock()


@pytest.fixture
def store(auth_api):
    return SessionStore(auth_api)


@pytest.fixture
def account(store, auth_api, profile_api, notifier):
    return AccountService(
        store, auth_api, profile_api, notifier, CooldownTimer(60, sleep=_never)
    )


async def log_in(store, auth_api, user):
    auth_api.get_me.return_value = user
    await store.bootstrap()


class TestRegister:
    @pytest.mark.asyncio
    async def test_sends_request(self, account, auth_api, notifier):
        assert await account.register("Jane", "Doe", "jane@example.com", "Secret1", "Secret1") is True

        request = auth_api.register.await_args.args[0]
        assert request.email == "jane@example.com"
        assert "confirmPassword" not in request.to_payload()
        assert len(notifier.successes) == 1

    @pytest.mark.asyncio
    async def test_mismatched_confirmation(self, account, auth_api, notifier):
        assert await account.register("Jane", "Doe", "jane@example.com", "Secret1", "Secret2") is False
        auth_api.register.assert_not_awaited()
        assert notifier.errors == ["Passwords do not match"]

    @pytest.mark.asyncio
    async def test_weak_password(self, account, auth_api, notifier):
        assert await account.register("Jane", "Doe", "jane@example.com", "secret", "secret") is False
        assert notifier.errors == ["Need 1 uppercase + 1 number"]

    @pytest.mark.asyncio
    async def test_backend_refusal(self, account, auth_api, notifier):
        auth_api.register.side_effect = BadRequestError("Email already registered")
        assert await account.register("Jane", "Doe", "jane@example.com", "Secret1", "Secret1") is False
        assert notifier.errors == ["Email already registered"]


class TestVerifyEmail:
    @pytest.mark.asyncio
    async def test_one_request_per_token(self, account, auth_api):
        """Repeated calls for the same token should reuse the first result."""
        results = await asyncio.gather(account.verify_email("tok"), account.verify_email("tok"))
        again = await account.verify_email("tok")

        assert results == [True, True]
        assert again is True
        auth_api.verify_email.assert_awaited_once_with("tok")

    @pytest.mark.asyncio
    async def test_rejected_token(self, account, auth_api):
        auth_api.verify_email.side_effect = BadRequestError("Invalid or expired link")
        assert await account.verify_email("used") is False

    @pytest.mark.asyncio
    async def test_marks_logged_in_user_verified(self, account, auth_api, store, make_user):
        await log_in(store, auth_api, make_user(isEmailVerified=False))
        await account.verify_email("tok")
        assert store.session.user.is_email_verified is True


class TestForgotPassword:
    @pytest.mark.asyncio
    async def test_always_succeeds(self, account, auth_api):
        """Unknown emails should look exactly like known ones."""
        auth_api.forgot_password.side_effect = BadRequestError("No such user")
        assert await account.forgot_password("nobody@example.com") is True


class TestResetPassword:
    @pytest.mark.asyncio
    async def test_success(self, account, auth_api, notifier):
        assert await account.reset_password("tok", "Secret1", "Secret1") is True
        auth_api.reset_password.assert_awaited_once_with("tok", "Secret1")
        assert notifier.successes == ["Password reset! Please log in."]

    @pytest.mark.asyncio
    async def test_weak_password_not_sent(self, account, auth_api, notifier):
        assert await account.reset_password("tok", "abc", "abc") is False
        auth_api.reset_password.assert_not_awaited()
        assert notifier.errors == ["Min 6 characters"]

    @pytest.mark.asyncio
    async def test_expired_link(self, account, auth_api, notifier):
        auth_api.reset_password.side_effect = TransientError("down")
        assert await account.reset_password("tok", "Secret1", "Secret1") is False
        assert notifier.errors == ["Reset failed, the link may have expired."]


class TestChangePassword:
    @pytest.mark.asyncio
    async def test_logs_out_after_change(self, account, auth_api, store, user):
        await log_in(store, auth_api, user)

        assert await account.change_password("Old1pass", "New1pass", "New1pass") is True
        auth_api.logout.assert_awaited_once()
        assert store.session.status == SessionStatus.ANONYMOUS

    @pytest.mark.asyncio
    async def test_wrong_current_password(self, account, auth_api, store, user, notifier):
        await log_in(store, auth_api, user)
        auth_api.change_password.side_effect = InvalidCredentialsError("Current password is incorrect")

        assert await account.change_password("Bad1pass", "New1pass", "New1pass") is False
        assert store.session.status == SessionStatus.AUTHENTICATED
        assert notifier.errors == ["Current password is incorrect"]


class TestToggleTwoFactor:
    @pytest.mark.asyncio
    async def test_requires_verified_email(self, account, auth_api, store, make_user, notifier):
        await log_in(store, auth_api, make_user(isEmailVerified=False))

        assert await account.toggle_two_factor() is None
        auth_api.toggle_two_factor.assert_not_awaited()
        assert notifier.errors == ["Please verify your email before enabling 2FA"]

    @pytest.mark.asyncio
    async def test_enabling_logs_out(self, account, auth_api, store, user):
        await log_in(store, auth_api, user)
        auth_api.toggle_two_factor.return_value = True

        assert await account.toggle_two_factor() is True
        assert store.session.status == SessionStatus.ANONYMOUS

    @pytest.mark.asyncio
    async def test_disabling_keeps_session(self, account, auth_api, store, make_user):
        await log_in(store, auth_api, make_user(twoFactorEnabled=True))
        auth_api.toggle_two_factor.return_value = False

        assert await account.toggle_two_factor() is False
        assert store.session.user.two_factor_enabled is False
        auth_api.logout.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_requires_user(self, account, auth_api):
        assert await account.toggle_two_factor() is None


class TestProfile:
    @pytest.mark.asyncio
    async def test_update_merges_server_user(self, account, auth_api, profile_api, store, make_user):
        await log_in(store, auth_api, make_user())
        profile_api.update_profile.return_value = make_user(bio="Hello", location="Lisbon")

        assert await account.update_profile(bio="Hello", location="Lisbon") is True
        assert store.session.user.bio == "Hello"
        assert store.session.user.location == "Lisbon"

    @pytest.mark.asyncio
    async def test_upload_avatar(self, account, auth_api, profile_api, store, user):
        await log_in(store, auth_api, user)
        profile_api.upload_avatar.return_value = Avatar(url="https://cdn/a.png", public_id="a")

        assert await account.upload_avatar("a.png", b"data", "image/png") is True
        assert store.session.user.avatar.url == "https://cdn/a.png"

    @pytest.mark.asyncio
    async def test_upload_failure_message(self, account, profile_api, notifier):
        profile_api.upload_avatar.side_effect = BadRequestError("File too large")
        assert await account.upload_avatar("a.png", b"data", "image/png") is False
        assert notifier.errors == ["Upload failed"]

    @pytest.mark.asyncio
    async def test_remove_avatar_clears_it(self, account, auth_api, profile_api, store, make_user):
        await log_in(store, auth_api, make_user(avatar={"url": "https://cdn/a.png", "publicId": "a"}))

        assert await account.remove_avatar() is True
        assert store.session.user.avatar == Avatar()

    @pytest.mark.asyncio
    async def test_request_email_change(self, account, profile_api):
        assert await account.request_email_change(" new@example.com ") is True
        profile_api.request_email_change.assert_awaited_once_with("new@example.com")

    @pytest.mark.asyncio
    async def test_delete_account_logs_out(self, account, auth_api, profile_api, store, user):
        await log_in(store, auth_api, user)

        assert await account.delete_account("Secret1") is True
        profile_api.delete_account.assert_awaited_once_with("Secret1")
        assert store.session.status == SessionStatus.ANONYMOUS

    @pytest.mark.asyncio
    async def test_delete_account_needs_password(self, account, profile_api):
        assert await account.delete_account("") is False
        profile_api.delete_account.assert_not_awaited()


class TestLoginHistory:
    @pytest.mark.asyncio
    async def test_returns_entries(self, account, auth_api):
        auth_api.get_login_history.return_value = [LoginActivity(ip="1.2.3.4", success=True)]
        history = await account.login_history()
        assert history[0].ip == "1.2.3.4"

    @pytest.mark.asyncio
    async def test_empty_on_failure(self, account, auth_api):
        auth_api.get_login_history.side_effect = TransientError("down")
        assert await account.login_history() == []


class TestBannerResend:
    @pytest.mark.asyncio
    async def test_sends_to_logged_in_user(self, account, auth_api, store, make_user):
        await log_in(store, auth_api, make_user(isEmailVerified=False))

        assert await account.resend_verification() == ResendResult.SENT
        auth_api.resend_verification.assert_awaited_once_with("jane@example.com")
        assert account.resend.timer.remaining == 60
        account.close()

    @pytest.mark.asyncio
    async def test_nothing_to_do_when_verified(self, account, auth_api, store, user):
        await log_in(store, auth_api, user)
        assert await account.resend_verification() == ResendResult.BLOCKED
        auth_api.resend_verification.assert_not_awaited()
