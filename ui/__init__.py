"""
UI module - Rich console interface for profiles.

Provides:
- Profile list and action result display
- Slash commands for the interactive panel
- Persisted panel state (position, minimized)
- Clipboard export with manual-copy fallback
"""

from .console import ProfilesConsole
from .commands import SlashCommandHandler, CommandResult
from .state import PanelState
from .clipboard import copy_to_clipboard, find_clipboard_command

__all__ = [
    "ProfilesConsole",
    "SlashCommandHandler",
    "CommandResult",
    "PanelState",
    "copy_to_clipboard",
    "find_clipboard_command",
]
