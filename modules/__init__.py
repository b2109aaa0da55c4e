"""
Feature modules for the authentication portal client.

Each module is self-contained with its own:
- interfaces.py: Protocol definitions for the module's public API
- models.py: Pydantic models (or dataclasses for pure geometry)
- service.py / flow.py: Behaviour behind a screen
- exceptions.py: Module-specific exceptions

Modules communicate through interfaces, not concrete implementations.
"""
