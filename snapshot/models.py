"""
Data models for the snapshot store.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional, Any, Tuple
import unicodedata

from ..protocol.errors import ErrorType


DEFAULT_PREFIX = "gcp_profile_"
META_SUFFIX = "__meta"

# Minute resolution, independent of the process locale
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"
FALLBACK_NAME_PREFIX = "Profile "


def timestamp_label(moment: Optional[datetime] = None) -> str:
    """Format a save time as 'YYYY-MM-DD HH:MM'."""
    return (moment or datetime.now()).strftime(TIMESTAMP_FORMAT)


def fallback_name(label: str) -> str:
    """Name used when a profile is saved without one."""
    return f"{FALLBACK_NAME_PREFIX}{label}"


@dataclass
class SnapshotEntry:
    """One listed snapshot."""
    storage_key: str
    name: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def saved_at(self) -> Optional[str]:
        value = self.metadata.get("savedAt")
        return str(value) if value else None

    @property
    def label(self) -> str:
        """Display text: 'name (savedAt)', or just the name without metadata."""
        if self.saved_at:
            return f"{self.name} ({self.saved_at})"
        return self.name

    def to_dict(self) -> Dict[str, Any]:
        return {
            "storage_key": self.storage_key,
            "name": self.name,
            "metadata": dict(self.metadata),
        }


@dataclass
class SaveResult:
    """Result of a save. The payload may be stored even when success is False."""
    success: bool
    name: str
    storage_key: str
    saved_at: str
    payload_written: bool = False
    metadata_written: bool = False
    error: Optional[ErrorType] = None


@dataclass
class CaptureResult:
    """Active configuration read for saving, or the reason it was refused."""
    payload: Optional[str] = None
    error: Optional[ErrorType] = None
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None and self.payload is not None

    @classmethod
    def captured(cls, payload: str) -> 'CaptureResult':
        return cls(payload=payload)

    @classmethod
    def failure(cls, error: ErrorType, reason: str) -> 'CaptureResult':
        return cls(error=error, reason=reason)


def _strip_marks(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def _char_rank(char: str) -> int:
    # Spaces and punctuation, then digits, then letters
    if char.isdigit():
        return 1
    if char.isalpha():
        return 2
    return 0


def collation_key(name: str) -> Tuple[tuple, str, str]:
    """
    Sort key approximating a locale-aware comparison.

    Compares base letters ignoring case and accents first, then accents,
    then case with lowercase ahead of uppercase. Punctuation sorts ahead
    of digits and digits ahead of letters. Canonically equivalent names
    (composed or decomposed accents) get equal keys. Independent of the
    process locale so listings are stable across machines.
    """
    decomposed = unicodedata.normalize("NFKD", name)
    return (
        tuple((_char_rank(c), c) for c in _strip_marks(name).casefold()),
        decomposed.casefold(),
        decomposed.swapcase(),
    )
