"""
Protocol definitions for profile_keeper.

- ErrorType: failure taxonomy shared by the core and the console
- ActionResult: Core → Presentation outcome of a profile action
"""

from .errors import ErrorType, ActionResult

__all__ = [
    "ErrorType",
    "ActionResult",
]
