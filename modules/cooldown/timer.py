"""
Cooldown timer.

Counts down from a fixed duration at 1 Hz. While it is running, or while
the guarded request is in flight, the dependent action is blocked. Each
resend context owns its own instance.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_COOLDOWN_SECONDS = 60

Sleep = Callable[[float], Awaitable[None]]


class CooldownTimer:
    """
    Resettable countdown guarding a side-effecting action.

    tick() can be driven manually; start() additionally launches a ticker
    task when called inside a running event loop.
    """

    def __init__(
        self,
        duration: int = DEFAULT_COOLDOWN_SECONDS,
        *,
        name: str = "cooldown",
        sleep: Optional[Sleep] = None,
    ):
        if duration < 1:
            raise ValueError("duration must be at least one second")
        self._duration = duration
        self._name = name
        self._sleep = sleep or asyncio.sleep
        self._remaining = 0
        self._in_flight = False
        self._subject: Optional[str] = None
        self._ticker: Optional[asyncio.Task[None]] = None

    @property
    def duration(self) -> int:
        return self._duration

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def subject(self) -> Optional[str]:
        return self._subject

    @property
    def is_running(self) -> bool:
        return self._remaining > 0

    @property
    def is_blocked(self) -> bool:
        """True while the guarded action must not be triggered."""
        return self._remaining > 0 or self._in_flight

    def start(self) -> None:
        """(Re)start the countdown at the full duration."""
        self._remaining = self._duration
        logger.debug(f"{self._name}: started at {self._duration}s")
        # A ticker parked mid-sleep would take its tick off the fresh count.
        self._cancel_ticker()
        self._ensure_ticker()

    def on_rate_limited(self) -> None:
        """
        The server refused the action as too frequent.

        Restarts at the full duration even if the local countdown had
        already finished or never ran.
        """
        logger.debug(f"{self._name}: server rate limit, restarting countdown")
        self.start()

    def tick(self) -> int:
        """Advance one second. Returns the remaining seconds."""
        if self._remaining > 0:
            self._remaining -= 1
        return self._remaining

    def begin_request(self) -> None:
        self._in_flight = True

    def end_request(self) -> None:
        self._in_flight = False

    def bind(self, subject: Optional[str]) -> None:
        """Attach the timer to a subject (e.g. an email); a new subject resets it."""
        if subject != self._subject:
            self.reset()
            self._subject = subject

    def reset(self) -> None:
        """Stop ticking and clear the countdown."""
        self._cancel_ticker()
        self._remaining = 0

    async def wait(self) -> None:
        """Wait until the running countdown reaches zero."""
        while self._ticker is not None and not self._ticker.done():
            ticker = self._ticker
            try:
                await asyncio.shield(ticker)
            except asyncio.CancelledError:
                # Restarted or closed underneath us; only our own cancellation propagates.
                if not ticker.cancelled():
                    raise

    def close(self) -> None:
        """Stop the ticker task; the remaining value is kept."""
        self._cancel_ticker()

    def _ensure_ticker(self) -> None:
        if self._ticker is not None and not self._ticker.done():
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop: the owner drives tick() itself.
            return
        self._ticker = loop.create_task(self._run())

    def _cancel_ticker(self) -> None:
        if self._ticker is not None and not self._ticker.done():
            self._ticker.cancel()
        self._ticker = None

    async def _run(self) -> None:
        while self._remaining > 0:
            await self._sleep(1)
            self.tick()
        logger.debug(f"{self._name}: finished")
