"""
Admin directory exceptions.
"""

from shared.exceptions import NotFoundError, ValidationError


class UserNotOnPageError(NotFoundError):
    """Raised when a row action names a user that is not on the current page."""

    def __init__(self, user_id: str):
        super().__init__(
            f"User not on the current page: {user_id}",
            code="USER_NOT_ON_PAGE",
            details={"user_id": user_id},
        )


class PasswordTooShortError(ValidationError):
    """Raised when an admin-set password is shorter than the minimum."""

    def __init__(self, min_length: int):
        super().__init__(
            f"Min {min_length} characters",
            code="PASSWORD_TOO_SHORT",
            details={"min_length": min_length},
        )
