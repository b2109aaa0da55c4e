"""
Cooldown-guarded resend action.

Couples a send coroutine (e.g. "resend verification email") with a
CooldownTimer and the notifier. Rate-limit responses are turned into
cooldown state rather than a hard failure.
"""

import logging
from enum import Enum
from typing import Awaitable, Callable

from shared.exceptions import PortalError, RateLimitedError, user_message
from shared.notifications import INotifier

from .timer import CooldownTimer

logger = logging.getLogger(__name__)


class ResendResult(str, Enum):
    """Outcome of a resend attempt."""

    SENT = "sent"
    BLOCKED = "blocked"            # Cooldown running or request in flight
    RATE_LIMITED = "rate_limited"  # Server said 429; cooldown restarted
    FAILED = "failed"


class ResendAction:
    """
    A resend button with its own cooldown.

    Args:
        send: Coroutine function taking the subject (target email)
        timer: Timer dedicated to this action
        notifier: Where success and failure messages go
        success_message: Shown after a successful send
    """

    def __init__(
        self,
        send: Callable[[str], Awaitable[None]],
        timer: CooldownTimer,
        notifier: INotifier,
        success_message: str = "Verification email sent!",
    ):
        self._send = send
        self._timer = timer
        self._notifier = notifier
        self._success_message = success_message
        self._sent = False

    @property
    def timer(self) -> CooldownTimer:
        return self._timer

    @property
    def sent(self) -> bool:
        """True once a send succeeded for the current subject."""
        return self._sent

    @property
    def label(self) -> str:
        """Button caption for the current state."""
        if self._timer.in_flight:
            return "Sending…"
        if self._timer.remaining > 0:
            return f"Resend in {self._timer.remaining}s"
        return "Resend Verification Email"

    def bind(self, subject: str) -> None:
        """Point the action at a new subject, resetting its cooldown if it changed."""
        if subject != self._timer.subject:
            self._sent = False
        self._timer.bind(subject)

    async def trigger(self, subject: str) -> ResendResult:
        self.bind(subject)
        if self._timer.is_blocked:
            return ResendResult.BLOCKED

        self._timer.begin_request()
        try:
            await self._send(subject)
        except RateLimitedError:
            self._timer.on_rate_limited()
            self._notifier.error(
                f"Please wait {self._timer.duration} seconds before resending."
            )
            return ResendResult.RATE_LIMITED
        except PortalError as e:
            logger.warning(f"Resend failed: {e.code}")
            self._notifier.error(user_message(e, "Failed to send email"))
            return ResendResult.FAILED
        finally:
            self._timer.end_request()

        self._sent = True
        self._timer.start()
        self._notifier.success(self._success_message)
        return ResendResult.SENT
