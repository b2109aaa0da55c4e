"""
Login module.

Public API:
- LoginFlow: Credential form, OTP step and verification banner
- LoginOutcome: Result of a credential submission
"""

from .flow import LoginFlow, LoginOutcome

__all__ = [
    "LoginFlow",
    "LoginOutcome",
]
