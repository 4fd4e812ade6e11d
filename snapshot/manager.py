"""
Profile manager - high-level profile operations.

Each operation is one user action (save current, load, delete, export) and
returns an ActionResult whose message is ready for display.
"""

from typing import List, Optional

from ..host import HostReloader
from ..protocol.errors import ActionResult, ErrorType
from .bridge import ActiveConfigBridge
from .models import SnapshotEntry
from .store import SnapshotStore


class ProfileManager:
    """High-level profile operations over a snapshot store and the host key."""

    def __init__(
        self,
        store: SnapshotStore,
        bridge: ActiveConfigBridge,
        reloader: Optional[HostReloader] = None,
    ):
        """
        Initialize profile manager.

        Args:
            store: Snapshot store holding the profiles
            bridge: Access to the host's active configuration
            reloader: Optional hook run after a profile is applied
        """
        self.store = store
        self.bridge = bridge
        self.reloader = reloader

    # =========================================================================
    # Core Operations
    # =========================================================================

    def save_current(self, name: str = "") -> ActionResult:
        """
        Save the host's active configuration as a profile.

        Args:
            name: Profile name; empty generates 'Profile <timestamp>'
        """
        captured = self.bridge.capture_current()
        if not captured.ok:
            if captured.error == ErrorType.MALFORMED_HOST_CONFIG:
                message = "Host settings format looks unexpected."
            else:
                message = "Host settings not found yet. Start the host application and try again."
            return ActionResult.failure(captured.error, message)

        saved = self.store.save(name, captured.payload)

        if saved.error == ErrorType.INVALID_NAME:
            return ActionResult.failure(
                ErrorType.INVALID_NAME,
                f"Profile names cannot end with '__meta': {saved.name}",
                name=saved.name,
            )

        if not saved.payload_written:
            return ActionResult.failure(
                ErrorType.STORAGE_FAULT,
                "Failed to save profile (storage error).",
                name=saved.name,
                storage_key=saved.storage_key,
            )

        if not saved.metadata_written:
            return ActionResult.failure(
                ErrorType.STORAGE_FAULT,
                f"Saved {saved.name} but its timestamp could not be stored.",
                name=saved.name,
                storage_key=saved.storage_key,
            )

        return ActionResult.ok(
            f"Saved: {saved.name}",
            name=saved.name,
            storage_key=saved.storage_key,
        )

    def load(self, storage_key: str) -> ActionResult:
        """
        Apply a profile to the host, then run the reload hook if configured.

        A failed reload is reported but the applied configuration stays.
        """
        if not storage_key:
            return ActionResult.failure(ErrorType.NO_SELECTION, "Select a profile first.")

        name = self.store.name_of(storage_key)
        payload = self.store.read(storage_key)
        if payload is None:
            return ActionResult.failure(
                ErrorType.NOT_FOUND, "Profile not found.",
                name=name, storage_key=storage_key,
            )

        if not self.bridge.apply(payload):
            return ActionResult.failure(
                ErrorType.STORAGE_FAULT, "Failed to apply profile.",
                name=name, storage_key=storage_key,
            )

        if self.reloader is None or not self.reloader.enabled:
            return ActionResult.ok(
                f"Profile applied: {name}. Restart the host to pick it up.",
                name=name, storage_key=storage_key,
            )

        reloaded, detail = self.reloader.reload()
        if not reloaded:
            message = f"Profile applied: {name}, but the host reload failed: {detail}"
        else:
            message = f"Profile applied: {name}. Host reloaded."
        return ActionResult.ok(
            message,
            name=name, storage_key=storage_key, reloaded=reloaded,
        )

    def delete(self, storage_key: str) -> ActionResult:
        """Delete a profile and its metadata."""
        if not storage_key:
            return ActionResult.failure(ErrorType.NO_SELECTION, "Select a profile first.")

        name = self.store.name_of(storage_key)
        if not self.store.delete(storage_key):
            return ActionResult.failure(
                ErrorType.PARTIAL_DELETE, "Delete failed.",
                name=name, storage_key=storage_key,
            )

        return ActionResult.ok(f"Deleted: {name}", name=name, storage_key=storage_key)

    def export(self, storage_key: str) -> ActionResult:
        """Fetch a profile payload for copying out."""
        if not storage_key:
            return ActionResult.failure(ErrorType.NO_SELECTION, "Select a profile first.")

        name = self.store.name_of(storage_key)
        payload = self.store.read(storage_key)
        if payload is None:
            return ActionResult.failure(
                ErrorType.NOT_FOUND, "Profile not found.",
                name=name, storage_key=storage_key,
            )

        return ActionResult.ok(
            f"Exported: {name}",
            name=name, storage_key=storage_key, payload=payload,
        )

    # =========================================================================
    # Query Operations
    # =========================================================================

    def profiles(self) -> List[SnapshotEntry]:
        return self.store.list()

    def resolve(self, selection: str, entries: Optional[List[SnapshotEntry]] = None) -> str:
        """
        Turn user input into a storage key.

        Accepts a listed name, a 1-based position in the listing, or a
        storage key, tried in that order. Unknown names map to the key
        they would have, so the following action reports 'Profile not found.'

        Args:
            selection: Raw user input
            entries: Listing the user is looking at (re-listed if None)

        Returns:
            Storage key, or "" for an empty selection
        """
        selection = (selection or "").strip()
        if not selection:
            return ""

        if entries is None:
            entries = self.profiles()

        # A profile literally named "2" wins over the second row
        for entry in entries:
            if entry.name == selection:
                return entry.storage_key

        if selection.isdigit():
            index = int(selection)
            if 1 <= index <= len(entries):
                return entries[index - 1].storage_key

        if self.store.is_managed(selection):
            return selection

        return self.store.storage_key_of(selection)
