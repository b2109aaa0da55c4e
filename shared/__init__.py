"""
Shared infrastructure for the portal client.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- http: Backend HTTP client factory
- exceptions: Base exception classes
- notifications: User-facing message sink

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .http import (
    create_http_client,
    get_http_client,
    close_http_client,
    reset_client_cache,
)
from .exceptions import (
    PortalError,
    NotFoundError,
    ValidationError,
    AuthenticationError,
    AuthorizationError,
    RateLimitedError,
    ExternalServiceError,
    user_message,
)
from .models import User, UserRole, Avatar
from .notifications import INotifier, LoggingNotifier

__all__ = [
    "Settings",
    "get_settings",
    "create_http_client",
    "get_http_client",
    "close_http_client",
    "reset_client_cache",
    "PortalError",
    "NotFoundError",
    "ValidationError",
    "AuthenticationError",
    "AuthorizationError",
    "RateLimitedError",
    "ExternalServiceError",
    "user_message",
    "User",
    "UserRole",
    "Avatar",
    "INotifier",
    "LoggingNotifier",
]
