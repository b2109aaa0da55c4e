"""
Session module.

Owns the browser session state machine: bootstrap probe, login with
optional step-up, logout and partial user updates.

Public API:
- ISessionStore: Interface for session operations
- SessionStore: The single writer of session state
- Session, SessionStatus, LoginResult: Data models
- Session exceptions
"""

from .interfaces import ISessionStore, SessionListener
from .models import Session, SessionStatus, LoginResult
from .service import SessionStore
from .exceptions import StepUpNotPendingError, PendingTokenMismatchError

__all__ = [
    # Interface
    "ISessionStore",
    "SessionListener",
    # Models
    "Session",
    "SessionStatus",
    "LoginResult",
    # Service
    "SessionStore",
    # Exceptions
    "StepUpNotPendingError",
    "PendingTokenMismatchError",
]
