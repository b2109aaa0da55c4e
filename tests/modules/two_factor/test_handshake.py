"""Tests for the two-factor handshake."""

from unittest.mock import AsyncMock

import pytest

from modules.backend_api.exceptions import InvalidCredentialsError
from modules.backend_api.models import Credentials, LoginResponse
from modules.session.models import SessionStatus
from modules.session.service import SessionStore
from modules.two_factor.exceptions import HandshakeNotActiveError, InvalidOtpFormatError
from modules.two_factor.handshake import TwoFactorHandshake, mask_email, validate_otp


@pytest.fixture
def api():
    api = AsyncMock()
    api.login.return_value = LoginResponse(requires_2fa=True, pending_token="abc")
    return api


@pytest.fixture
def store(api):
    return SessionStore(api)


@pytest.fixture
def handshake(store):
    return TwoFactorHandshake(store)


@pytest.fixture
def credentials():
    return Credentials(email="johndoe@example.com", password="Secret1")


class TestMaskEmail:
    def test_masks_local_part(self):
        assert mask_email("johndoe@example.com") == "jo***@example.com"

    def test_short_local_part(self):
        assert mask_email("j@example.com") == "j***@example.com"

    def test_without_domain(self):
        assert mask_email("not-an-email") == "not-an-email"


class TestValidateOtp:
    def test_accepts_six_digits(self):
        assert validate_otp("123456") == "123456"

    @pytest.mark.parametrize("code,message", [
        ("", "Enter the 6-digit code"),
        (None, "Enter the 6-digit code"),
        ("123", "Enter all 6 digits"),
        ("1234567", "only 6 digits"),
        ("12a456", "Digits only"),
    ])
    def test_rejects_malformed(self, code, message):
        with pytest.raises(InvalidOtpFormatError, match=message):
            validate_otp(code)


class TestHandshake:
    @pytest.mark.asyncio
    async def test_start_activates_on_step_up(self, handshake, credentials):
        """A 2FA login should activate the handshake with a masked email."""
        result = await handshake.start(credentials)

        assert result.requires_step_up is True
        assert handshake.is_active is True
        assert handshake.masked_email == "jo***@example.com"

    @pytest.mark.asyncio
    async def test_start_without_step_up_stays_inactive(self, handshake, api, credentials, user):
        api.login.return_value = LoginResponse(requires_2fa=False, user=user)
        await handshake.start(credentials)

        assert handshake.is_active is False

    @pytest.mark.asyncio
    async def test_submit_authenticates(self, handshake, store, api, credentials, user):
        """A valid code should complete the login and clear the handshake."""
        api.verify_two_factor.return_value = user
        await handshake.start(credentials)

        handshake.enter_otp("123456")
        returned = await handshake.submit()

        api.verify_two_factor.assert_awaited_once_with("123456", "abc")
        assert returned == user
        assert store.session.status == SessionStatus.AUTHENTICATED
        assert handshake.is_active is False

    @pytest.mark.asyncio
    async def test_malformed_code_never_reaches_backend(self, handshake, api, credentials):
        await handshake.start(credentials)

        with pytest.raises(InvalidOtpFormatError):
            await handshake.submit("12")
        api.verify_two_factor.assert_not_awaited()
        assert handshake.is_active is True

    @pytest.mark.asyncio
    async def test_rejected_code_clears_input_and_keeps_token(self, handshake, store, api, credentials):
        """A wrong code should clear the input and allow another attempt."""
        api.verify_two_factor.side_effect = InvalidCredentialsError("Invalid OTP")
        await handshake.start(credentials)
        handshake.enter_otp("000000")

        with pytest.raises(InvalidCredentialsError):
            await handshake.submit()

        assert handshake.otp_input == ""
        assert handshake.is_active is True
        assert store.session.pending_token == "abc"

    @pytest.mark.asyncio
    async def test_submit_requires_active_handshake(self, handshake):
        with pytest.raises(HandshakeNotActiveError):
            await handshake.submit("123456")

    @pytest.mark.asyncio
    async def test_back_abandons_step_up(self, handshake, store, credentials):
        """Going back should drop the pending login."""
        await handshake.start(credentials)
        handshake.back()

        assert handshake.is_active is False
        assert handshake.masked_email == ""
        assert store.session.status == SessionStatus.ANONYMOUS
