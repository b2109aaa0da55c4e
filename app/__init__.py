"""
Application wiring for the portal client.

- container: Lazily built services sharing one session
- display: Rich rendering helpers
- cli: The ``portal`` command
"""

from .container import ServiceContainer, get_container, reset_container

__all__ = [
    "ServiceContainer",
    "get_container",
    "reset_container",
]
