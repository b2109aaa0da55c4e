"""
Session store implementation.

SessionStore is the only component that writes the Session. It talks to
the backend through IAuthAPI and publishes every transition to its
subscribers.
"""

import asyncio
import logging
from typing import Any, Callable, Mapping, Optional

from modules.backend_api.interfaces import IAuthAPI
from modules.backend_api.models import Credentials
from shared.exceptions import AuthenticationError
from shared.models import User

from .exceptions import PendingTokenMismatchError, StepUpNotPendingError
from .interfaces import ISessionStore, SessionListener
from .models import LoginResult, Session, SessionStatus

logger = logging.getLogger(__name__)


class SessionStore(ISessionStore):
    """
    Single-writer container for the session.

    Create one per process and inject it wherever session state is read.
    """

    def __init__(self, api: IAuthAPI):
        self._api = api
        self._session = Session()
        self._bootstrap_task: Optional[asyncio.Task[Session]] = None
        self._listeners: list[SessionListener] = []

    @property
    def session(self) -> Session:
        return self._session

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _transition(self, session: Session) -> None:
        previous = self._session.status
        self._session = session
        if previous != session.status:
            logger.info(f"Session {previous.value} -> {session.status.value}")
        for listener in list(self._listeners):
            listener(session)

    async def bootstrap(self) -> Session:
        """Probe the identity endpoint once; later calls share the result."""
        if self._bootstrap_task is None:
            self._bootstrap_task = asyncio.ensure_future(self._probe())
        # Shielded so a cancelled caller does not abort the shared probe.
        return await asyncio.shield(self._bootstrap_task)

    async def _probe(self) -> Session:
        try:
            user = await self._api.get_me()
        except AuthenticationError:
            logger.debug("Identity probe: no active session")
            self._transition(Session.anonymous())
        except Exception as e:
            # Any failure resolves to anonymous; probe_failed tells an outage
            # apart from a logged-out visitor.
            logger.warning(f"Identity probe failed: {e}")
            self._transition(Session.anonymous(probe_failed=True))
        else:
            self._transition(Session.authenticated(user))
        return self._session

    async def login(self, credentials: Credentials) -> LoginResult:
        response = await self._api.login(credentials)

        if response.requires_2fa:
            self._transition(Session.pending_two_factor(response.pending_token))
            return LoginResult(requires_step_up=True, pending_token=response.pending_token)

        self._transition(Session.authenticated(response.user))
        return LoginResult(requires_step_up=False)

    async def complete_step_up(self, code: str, pending_token: str) -> User:
        current = self._session
        if current.status != SessionStatus.PENDING_TWO_FACTOR:
            raise StepUpNotPendingError(current.status.value)
        if pending_token != current.pending_token:
            raise PendingTokenMismatchError()

        # A rejected code propagates and leaves the pending session in place.
        user = await self._api.verify_two_factor(code, pending_token)

        if self._session is not current:
            # Logged out or restarted while the code was being checked.
            logger.debug("Discarding step-up result for a superseded login attempt")
            return user

        self._transition(Session.authenticated(user))
        return user

    def abandon_step_up(self) -> None:
        if self._session.status == SessionStatus.PENDING_TWO_FACTOR:
            self._transition(Session.anonymous())

    async def logout(self) -> None:
        try:
            await self._api.logout()
        except Exception as e:
            logger.info(f"Logout revoke call failed, clearing session anyway: {e}")
        finally:
            self._transition(Session.anonymous())

    def update_user(self, partial: Mapping[str, Any]) -> None:
        user = self._session.user
        if user is None:
            return
        self._transition(Session.authenticated(user.merged(partial)))
