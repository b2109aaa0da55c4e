"""
Session module interface.

Screens and flows depend on ISessionStore. Only the store itself writes
the session; everything else reads snapshots or calls these operations.
"""

from typing import Any, Callable, Mapping, Protocol, runtime_checkable

from modules.backend_api.models import Credentials
from shared.models import User

from .models import LoginResult, Session


SessionListener = Callable[[Session], None]


@runtime_checkable
class ISessionStore(Protocol):
    """
    Interface for the single writer of session state.
    """

    @property
    def session(self) -> Session:
        """Current immutable session snapshot."""
        ...

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """
        Register a listener called after every transition.

        Returns:
            Callable that removes the listener
        """
        ...

    async def bootstrap(self) -> Session:
        """
        Resolve the initial session from the identity endpoint.

        Runs the probe at most once per store; later and concurrent
        calls await the same result.

        Returns:
            The resolved session (anonymous or authenticated)
        """
        ...

    async def login(self, credentials: Credentials) -> LoginResult:
        """
        Submit primary credentials.

        Returns:
            LoginResult; requires_step_up is True when a one-time code
            must follow

        Raises:
            AuthenticationError: Bad credentials or unverified email
            TransientError: On server or transport failure
        """
        ...

    async def complete_step_up(self, code: str, pending_token: str) -> User:
        """
        Finish a two-factor login.

        Raises:
            StepUpNotPendingError: If no two-factor login is pending
            AuthenticationError: If the code is rejected (session unchanged)
        """
        ...

    def abandon_step_up(self) -> None:
        """Drop the pending token locally and return to anonymous."""
        ...

    async def logout(self) -> None:
        """Revoke the session; always ends anonymous."""
        ...

    def update_user(self, partial: Mapping[str, Any]) -> None:
        """Shallow-merge fields into the current user, if any."""
        ...
