"""
profile_keeper - Named configuration profiles for a host application

Saves copies of the host's active configuration blob into the key/value
store the host already uses, lists them, and switches between them by
overwriting the host's configuration key.

Usage:
    # As a module
    python -m profile_keeper --list

    # Programmatically
    from profile_keeper import (
        SafeStorage, JsonFileBackend, SnapshotStore, ActiveConfigBridge, ProfileManager,
    )

    storage = SafeStorage(JsonFileBackend("~/.profile_keeper/store.json"))
    manager = ProfileManager(SnapshotStore(storage), ActiveConfigBridge(storage))
    manager.save_current("Airbus Stick")
"""

__version__ = "1.0.0"

# Storage exports
from .storage import (
    SafeStorage,
    KeyValueBackend,
    MemoryBackend,
    JsonFileBackend,
    PostgresBackend,
    create_backend,
)

# Snapshot exports
from .snapshot import (
    SnapshotStore,
    SnapshotEntry,
    SaveResult,
    CaptureResult,
    ActiveConfigBridge,
    ProfileManager,
)

# Protocol exports
from .protocol import ErrorType, ActionResult

from .config import Config

__all__ = [
    # Version
    "__version__",
    # Storage
    "SafeStorage",
    "KeyValueBackend",
    "MemoryBackend",
    "JsonFileBackend",
    "PostgresBackend",
    "create_backend",
    # Snapshot
    "SnapshotStore",
    "SnapshotEntry",
    "SaveResult",
    "CaptureResult",
    "ActiveConfigBridge",
    "ProfileManager",
    # Protocol
    "ErrorType",
    "ActionResult",
    # Config
    "Config",
]
