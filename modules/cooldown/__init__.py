"""
Cooldown module.

Reusable countdowns that throttle resend actions on the client and
reconcile with server-side rate limiting.

Public API:
- CooldownTimer: Independent, resettable 1 Hz countdown
- ResendAction, ResendResult: Cooldown-guarded send button
"""

from .timer import CooldownTimer, DEFAULT_COOLDOWN_SECONDS
from .resend import ResendAction, ResendResult

__all__ = [
    "CooldownTimer",
    "DEFAULT_COOLDOWN_SECONDS",
    "ResendAction",
    "ResendResult",
]
