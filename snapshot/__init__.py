"""
Snapshot system for profile_keeper.

Named copies of a host application's configuration blob, kept in the same
key/value store the host uses. Key features:

- Save the active configuration under a name (or a generated one)
- Listing sorted by name, tolerant of missing metadata
- Load a profile back into the host's active key
- Paired payload/metadata delete

Scope: one host configuration key per store.
"""

from .models import SnapshotEntry, SaveResult, CaptureResult, timestamp_label, collation_key
from .store import SnapshotStore
from .bridge import ActiveConfigBridge
from .manager import ProfileManager

__all__ = [
    'SnapshotEntry',
    'SaveResult',
    'CaptureResult',
    'timestamp_label',
    'collation_key',
    'SnapshotStore',
    'ActiveConfigBridge',
    'ProfileManager',
]
