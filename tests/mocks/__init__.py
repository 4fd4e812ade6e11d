"""
Mock components for testing profile_keeper.

These mocks simulate storage faults, a database connection and the host
reload hook, using realistic host settings from golden_data.py.
"""

from .golden_data import (
    HOST_KEY,
    PREFIX,
    UI_STATE_KEY,
    JOYSTICK_SETTINGS,
    KEYBOARD_SETTINGS,
    INDENTED_SETTINGS,
    MALFORMED_SETTINGS,
)

from .mock_storage import (
    FaultyBackend,
    FixedClock,
    MockReloader,
    FakePgConnection,
)

__all__ = [
    # Storage mocks
    'FaultyBackend',
    'FixedClock',
    'MockReloader',
    'FakePgConnection',
    # Golden data
    'HOST_KEY',
    'PREFIX',
    'UI_STATE_KEY',
    'JOYSTICK_SETTINGS',
    'KEYBOARD_SETTINGS',
    'INDENTED_SETTINGS',
    'MALFORMED_SETTINGS',
]
