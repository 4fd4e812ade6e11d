"""
Persistence adapter - the never-raising face of a key/value backend.
"""

from typing import List, Optional

from .backends import KeyValueBackend
from ..log import get_logger

logger = get_logger(__name__)


class SafeStorage:
    """
    Wrap a backend so that callers only ever branch on results.

    get() returns None, set()/delete() return False and keys() returns []
    when the backend faults. The fault is logged, never propagated.
    """

    def __init__(self, backend: KeyValueBackend):
        self.backend = backend

    def get(self, key: str) -> Optional[str]:
        """Read a value, or None if absent or unreadable."""
        try:
            return self.backend.get(key)
        except Exception as e:
            logger.warning("Storage read failed for %r: %s", key, e)
            return None

    def set(self, key: str, value: str) -> bool:
        """Write a value. Returns True on success."""
        try:
            self.backend.set(key, value)
            return True
        except Exception as e:
            logger.warning("Storage write failed for %r: %s", key, e)
            return False

    def delete(self, key: str) -> bool:
        """Remove a key. Returns True on success, including when it was absent."""
        try:
            self.backend.delete(key)
            return True
        except Exception as e:
            logger.warning("Storage delete failed for %r: %s", key, e)
            return False

    def keys(self) -> List[str]:
        """Enumerate every key in the store, or [] if it cannot be scanned."""
        try:
            return list(self.backend.keys())
        except Exception as e:
            logger.warning("Storage scan failed: %s", e)
            return []

    def close(self) -> None:
        try:
            self.backend.close()
        except Exception as e:
            logger.warning("Closing %s failed: %s", self.backend.describe(), e)

    def describe(self) -> str:
        return self.backend.describe()
