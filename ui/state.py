"""
Panel state - last position and minimized flag of the profiles panel.

Stored as {"x": ..., "y": ..., "minimized": ...} under its own key, outside
the profile namespace.
"""

import json
from dataclasses import dataclass, asdict
from typing import Optional, Union

from ..storage.adapter import SafeStorage

Coordinate = Optional[Union[int, float]]


@dataclass
class PanelState:
    """Position is None until the panel has been placed."""
    x: Coordinate = None
    y: Coordinate = None
    minimized: bool = False

    @classmethod
    def load(cls, storage: SafeStorage, key: str) -> "PanelState":
        """Read the state, falling back to defaults when absent or corrupt."""
        raw = storage.get(key)
        if not raw:
            return cls()
        try:
            data = json.loads(raw)
        except ValueError:
            return cls()
        if not isinstance(data, dict):
            return cls()
        return cls(
            x=_coordinate(data.get("x")),
            y=_coordinate(data.get("y")),
            minimized=bool(data.get("minimized")),
        )

    def save(self, storage: SafeStorage, key: str) -> bool:
        return storage.set(key, json.dumps(asdict(self)))

    def toggled(self) -> "PanelState":
        """Same position, minimized flag flipped."""
        return PanelState(x=self.x, y=self.y, minimized=not self.minimized)


def _coordinate(value) -> Coordinate:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value
