"""
Storage layer for profile_keeper.

Backends hold the raw key/value data and raise on failure. SafeStorage wraps
a backend and converts every fault into None/False/[] so the snapshot store
and the bridge never deal with exceptions.
"""

from .backends import (
    KeyValueBackend,
    MemoryBackend,
    JsonFileBackend,
    PostgresBackend,
    StorageError,
    QuotaExceededError,
    create_backend,
    BACKENDS,
)
from .adapter import SafeStorage

__all__ = [
    'KeyValueBackend',
    'MemoryBackend',
    'JsonFileBackend',
    'PostgresBackend',
    'StorageError',
    'QuotaExceededError',
    'create_backend',
    'BACKENDS',
    'SafeStorage',
]
