"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

from typing import Any, Callable

import pytest

from app.container import reset_container
from shared.config import get_settings
from shared.http import reset_client_cache
from shared.models import User


class RecordingNotifier:
    """Notifier that keeps every message for assertions."""

    def __init__(self) -> None:
        self.successes: list[str] = []
        self.errors: list[str] = []

    def success(self, message: str) -> None:
        self.successes.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)


def user_payload(**overrides: Any) -> dict[str, Any]:
    """A user as the backend sends it (camelCase, ``_id``)."""
    payload = {
        "_id": "user-1",
        "firstName": "Jane",
        "lastName": "Doe",
        "email": "jane@example.com",
        "role": "user",
        "isActive": True,
        "isBanned": False,
        "isEmailVerified": True,
        "twoFactorEnabled": False,
        "avatar": {"url": "", "publicId": ""},
    }
    payload.update(overrides)
    return payload


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset cached settings, HTTP client and container around each test."""
    get_settings.cache_clear()
    reset_client_cache()
    reset_container()
    yield
    get_settings.cache_clear()
    reset_client_cache()
    reset_container()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def make_payload() -> Callable[..., dict[str, Any]]:
    """Factory for backend user payloads."""
    return user_payload


@pytest.fixture
def make_user() -> Callable[..., User]:
    """Factory for User models built from backend payloads."""

    def factory(**overrides: Any) -> User:
        return User.model_validate(user_payload(**overrides))

    return factory


@pytest.fixture
def user(make_user) -> User:
    return make_user()


@pytest.fixture
def admin(make_user) -> User:
    return make_user(_id="admin-1", firstName="Ada", email="ada@example.com", role="admin")
