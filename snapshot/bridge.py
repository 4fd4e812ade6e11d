"""
Active-configuration bridge - reads and overwrites the host's live settings key.
"""

from ..log import get_logger
from ..protocol.errors import ErrorType
from ..storage.adapter import SafeStorage
from .models import CaptureResult

logger = get_logger(__name__)

DEFAULT_HOST_KEY = "settings"


class ActiveConfigBridge:
    """Captures the host configuration for saving and applies snapshots back."""

    def __init__(self, storage: SafeStorage, host_key: str = DEFAULT_HOST_KEY):
        """
        Initialize the bridge.

        Args:
            storage: Never-raising persistence adapter shared with the host
            host_key: Key under which the host keeps its active configuration
        """
        if not host_key:
            raise ValueError("Host configuration key must not be empty")
        self.storage = storage
        self.host_key = host_key

    def capture_current(self) -> CaptureResult:
        """
        Read the active configuration for saving.

        Only a shallow sanity check is made: the value must be set and its
        first non-whitespace character must be '{'. The blob itself is
        returned untouched.
        """
        payload = self.storage.get(self.host_key)

        if not payload:
            return CaptureResult.failure(
                ErrorType.MISSING_HOST_CONFIG,
                f"Host configuration key {self.host_key!r} is not set",
            )

        if not payload.strip().startswith("{"):
            return CaptureResult.failure(
                ErrorType.MALFORMED_HOST_CONFIG,
                f"Host configuration under {self.host_key!r} does not look like a JSON object",
            )

        return CaptureResult.captured(payload)

    def apply(self, payload: str) -> bool:
        """Overwrite the active configuration with a payload, verbatim."""
        applied = self.storage.set(self.host_key, payload)
        if applied:
            logger.debug("Applied %d chars to %r", len(payload), self.host_key)
        return applied
