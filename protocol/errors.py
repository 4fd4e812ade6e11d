"""
Error Protocols - Core → Presentation failure reporting.

ErrorType: What went wrong (storage, host configuration, selection)
ActionResult: Outcome of a user-level action, with a display message
"""

from dataclasses import dataclass, asdict
from typing import Dict, Optional, Any
from enum import Enum
import json


class ErrorType(str, Enum):
    """Types of errors that can occur."""
    STORAGE_FAULT = "STORAGE_FAULT"
    MISSING_HOST_CONFIG = "MISSING_HOST_CONFIG"
    MALFORMED_HOST_CONFIG = "MALFORMED_HOST_CONFIG"
    NOT_FOUND = "NOT_FOUND"
    NO_SELECTION = "NO_SELECTION"
    PARTIAL_DELETE = "PARTIAL_DELETE"
    INVALID_NAME = "INVALID_NAME"


@dataclass
class ActionResult:
    """
    Result of a profile action.

    Never raised, always returned: the presentation layer decides how to
    show `message`.
    """
    success: bool
    message: str = ""
    error_type: Optional[ErrorType] = None
    name: Optional[str] = None
    storage_key: Optional[str] = None
    payload: Optional[str] = None
    reloaded: bool = False

    @classmethod
    def ok(cls, message: str, **kwargs) -> "ActionResult":
        """Create a success result."""
        return cls(success=True, message=message, **kwargs)

    @classmethod
    def failure(cls, error_type: ErrorType, message: str, **kwargs) -> "ActionResult":
        """Create a failure result."""
        return cls(success=False, message=message, error_type=error_type, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        result = asdict(self)
        if self.error_type is not None:
            result["error_type"] = self.error_type.value
        return {k: v for k, v in result.items() if v is not None}

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)
