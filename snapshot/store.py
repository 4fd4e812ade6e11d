"""
Snapshot store - named configuration snapshots in a shared key/value store.

Key layout:

    <prefix><name>          payload (the configuration blob, verbatim)
    <prefix><name>__meta    metadata, JSON object {"savedAt": "YYYY-MM-DD HH:MM"}

The prefix is the only thing separating managed entries from the rest of the
shared store, so listing is a scan over every key in it.
"""

import json
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from ..log import get_logger
from ..protocol.errors import ErrorType
from ..storage.adapter import SafeStorage
from .models import (
    DEFAULT_PREFIX,
    META_SUFFIX,
    SaveResult,
    SnapshotEntry,
    collation_key,
    fallback_name,
    timestamp_label,
)

logger = get_logger(__name__)


class SnapshotStore:
    """CRUD and listing over prefixed snapshot keys."""

    def __init__(
        self,
        storage: SafeStorage,
        prefix: str = DEFAULT_PREFIX,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize the snapshot store.

        Args:
            storage: Never-raising persistence adapter
            prefix: Namespace prefix for managed keys
            clock: Source of save times
        """
        if not prefix:
            raise ValueError("Snapshot prefix must not be empty")
        self.storage = storage
        self.prefix = prefix
        self.clock = clock

    # =========================================================================
    # Key scheme
    # =========================================================================

    def storage_key_of(self, name: str) -> str:
        return f"{self.prefix}{name}"

    @staticmethod
    def meta_key_of(storage_key: str) -> str:
        return f"{storage_key}{META_SUFFIX}"

    def name_of(self, storage_key: str) -> str:
        """Logical name of a payload or metadata key."""
        name = storage_key[len(self.prefix):] if storage_key.startswith(self.prefix) else storage_key
        if name.endswith(META_SUFFIX):
            name = name[:-len(META_SUFFIX)]
        return name

    def is_managed(self, storage_key: str) -> bool:
        """True for payload keys inside this store's namespace."""
        return (
            bool(storage_key)
            and storage_key.startswith(self.prefix)
            and not storage_key.endswith(META_SUFFIX)
        )

    # =========================================================================
    # Core Operations
    # =========================================================================

    def save(self, name: str, payload: str) -> SaveResult:
        """
        Save a payload under a name, overwriting any snapshot of that name.

        An empty name becomes 'Profile <timestamp>'. The payload is written
        first, then the metadata; a failure of either is reported but the
        written payload is left in place.

        Args:
            name: Snapshot name (surrounding whitespace ignored)
            payload: Configuration blob, stored verbatim

        Returns:
            SaveResult describing which writes succeeded
        """
        saved_at = timestamp_label(self.clock())
        name = (name or "").strip() or fallback_name(saved_at)
        storage_key = self.storage_key_of(name)

        if name.endswith(META_SUFFIX):
            logger.debug("Refusing snapshot name %r", name)
            return SaveResult(
                success=False,
                name=name,
                storage_key=storage_key,
                saved_at=saved_at,
                error=ErrorType.INVALID_NAME,
            )

        if not self.storage.set(storage_key, payload):
            return SaveResult(
                success=False,
                name=name,
                storage_key=storage_key,
                saved_at=saved_at,
                error=ErrorType.STORAGE_FAULT,
            )

        metadata_written = self.storage.set(
            self.meta_key_of(storage_key),
            json.dumps({"savedAt": saved_at}),
        )
        if not metadata_written:
            logger.warning("Snapshot %r saved without metadata", name)
        else:
            logger.debug("Saved snapshot %r (%d chars)", name, len(payload))

        return SaveResult(
            success=metadata_written,
            name=name,
            storage_key=storage_key,
            saved_at=saved_at,
            payload_written=True,
            metadata_written=metadata_written,
            error=None if metadata_written else ErrorType.STORAGE_FAULT,
        )

    def read(self, storage_key: str) -> Optional[str]:
        """Get a snapshot payload, or None if absent."""
        if not self.is_managed(storage_key):
            return None
        return self.storage.get(storage_key)

    def delete(self, storage_key: str) -> bool:
        """
        Delete a snapshot's payload and metadata.

        Both deletions are attempted. Returns True only if both succeed;
        whichever half did succeed is not undone.
        """
        if not self.is_managed(storage_key):
            return False

        payload_deleted = self.storage.delete(storage_key)
        meta_deleted = self.storage.delete(self.meta_key_of(storage_key))

        if payload_deleted and meta_deleted:
            logger.debug("Deleted snapshot %r", self.name_of(storage_key))
            return True

        logger.warning(
            "Partial delete of %r (payload=%s, metadata=%s)",
            self.name_of(storage_key), payload_deleted, meta_deleted,
        )
        return False

    # =========================================================================
    # Query Operations
    # =========================================================================

    def list(self) -> List[SnapshotEntry]:
        """
        List all snapshots sorted by name.

        Scans every key of the shared store. Metadata that is missing,
        unparsable or not a JSON object yields an entry with empty
        metadata rather than an error.
        """
        entries = []

        for key in self.storage.keys():
            if not self.is_managed(key):
                continue
            entries.append(SnapshotEntry(
                storage_key=key,
                name=key[len(self.prefix):],
                metadata=self._read_metadata(key),
            ))

        # sort() is stable, so equal names keep scan order
        entries.sort(key=lambda e: collation_key(e.name))
        return entries

    def _read_metadata(self, storage_key: str) -> Dict[str, Any]:
        raw = self.storage.get(self.meta_key_of(storage_key))
        if not raw:
            return {}
        try:
            metadata = json.loads(raw)
        except ValueError:
            logger.debug("Unparsable metadata for %r", storage_key)
            return {}
        return metadata if isinstance(metadata, dict) else {}
