"""
Account module.

Public API:
- AccountService: Registration, verification, password and profile
  operations for the current user
"""

from .service import AccountService

__all__ = [
    "AccountService",
]
