"""
Backend API module.

Typed access to the remote authentication, profile and admin endpoints.

Public API:
- IAuthAPI, IProfileAPI, IAdminAPI: Interfaces consumed by the services
- BackendAPIClient: httpx implementation of all three
- Request/response models
- Exceptions raised for failed calls
"""

from .interfaces import IAuthAPI, IProfileAPI, IAdminAPI
from .client import BackendAPIClient
from .models import (
    Credentials,
    LoginResponse,
    Pagination,
    UserListQuery,
    UserListResponse,
    AdminStats,
    LoginActivity,
    RegistrationRequest,
    PasswordChange,
    ProfileUpdate,
    AvatarUpload,
    check_password_strength,
)
from .exceptions import (
    InvalidCredentialsError,
    UnverifiedEmailError,
    ForbiddenError,
    BadRequestError,
    ResourceNotFoundError,
    TransientError,
    error_from_response,
)

__all__ = [
    # Interfaces
    "IAuthAPI",
    "IProfileAPI",
    "IAdminAPI",
    # Client
    "BackendAPIClient",
    # Models
    "Credentials",
    "LoginResponse",
    "Pagination",
    "UserListQuery",
    "UserListResponse",
    "AdminStats",
    "LoginActivity",
    "RegistrationRequest",
    "PasswordChange",
    "ProfileUpdate",
    "AvatarUpload",
    "check_password_strength",
    # Exceptions
    "InvalidCredentialsError",
    "UnverifiedEmailError",
    "ForbiddenError",
    "BadRequestError",
    "ResourceNotFoundError",
    "TransientError",
    "error_from_response",
]
