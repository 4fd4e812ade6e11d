"""
Slash Command Handler - interactive panel commands.

Commands:
    /list       - Show saved profiles
    /save       - Save the host's current settings as a profile
    /load       - Apply a profile to the host
    /delete     - Delete a profile
    /export     - Copy a profile's JSON to the clipboard
    /minimize   - Collapse or expand the profile list
    /quit       - Exit the panel
    /help       - Show available commands

Profiles are selected by their number in the last listing or by name.
"""

from typing import Callable, Dict, List, Optional, Tuple
from enum import Enum

from ..snapshot.manager import ProfileManager
from ..snapshot.models import SnapshotEntry
from ..storage.adapter import SafeStorage
from .clipboard import copy_to_clipboard
from .console import ProfilesConsole
from .state import PanelState


class CommandResult(Enum):
    """Result of command execution."""
    SUCCESS = "success"
    ERROR = "error"
    EXIT = "exit"


class SlashCommandHandler:
    """
    Handles slash commands in the interactive panel.

    Keeps the listing the user last saw so that '/load 2' means the second
    row on screen, even if the store changed since.
    """

    def __init__(
        self,
        manager: ProfileManager,
        ui: ProfilesConsole,
        storage: Optional[SafeStorage] = None,
        state_key: str = "",
        copier: Callable[[str], bool] = copy_to_clipboard,
    ):
        self.manager = manager
        self.ui = ui
        self.storage = storage
        self.state_key = state_key
        self.copier = copier

        self.entries: List[SnapshotEntry] = []
        self.panel_state = PanelState()
        if storage is not None and state_key:
            self.panel_state = PanelState.load(storage, state_key)

        # Command registry
        self._commands: Dict[str, Callable] = {
            'help': self._cmd_help,
            'h': self._cmd_help,
            '?': self._cmd_help,
            'list': self._cmd_list,
            'ls': self._cmd_list,
            'save': self._cmd_save,
            's': self._cmd_save,
            'load': self._cmd_load,
            'apply': self._cmd_load,
            'delete': self._cmd_delete,
            'rm': self._cmd_delete,
            'export': self._cmd_export,
            'minimize': self._cmd_minimize,
            'min': self._cmd_minimize,
            'quit': self._cmd_quit,
            'q': self._cmd_quit,
            'exit': self._cmd_quit,
        }

    def parse(self, input_text: str) -> Tuple[str, str]:
        """
        Split input into command and argument text.

        The argument is kept as one string since profile names may contain
        spaces.
        """
        text = input_text.strip()
        if not text:
            return '', ''

        parts = text.split(None, 1)
        command = parts[0].lstrip('/').lower()
        argument = parts[1].strip() if len(parts) > 1 else ''

        return command, argument

    def execute(self, input_text: str) -> Tuple[CommandResult, str]:
        """
        Execute a slash command.

        Returns:
            Tuple of (result, message)
        """
        command, argument = self.parse(input_text)

        if not command:
            return CommandResult.ERROR, "Empty command"

        if command not in self._commands:
            return CommandResult.ERROR, f"Unknown command: /{command}. Type /help for available commands."

        try:
            return self._commands[command](argument)
        except Exception as e:
            return CommandResult.ERROR, f"Command error: {str(e)}"

    def refresh(self) -> None:
        """Re-list profiles and redraw the list."""
        self.entries = self.manager.profiles()
        self.ui.print_profiles(self.entries, minimized=self.panel_state.minimized)

    def _select(self, argument: str) -> str:
        return self.manager.resolve(argument, self.entries or None)

    def _from_action(self, result) -> Tuple[CommandResult, str]:
        return (CommandResult.SUCCESS if result.success else CommandResult.ERROR), result.message

    # =========================================================================
    # Commands
    # =========================================================================

    def _cmd_help(self, argument: str) -> Tuple[CommandResult, str]:
        """Show available commands."""
        lines = [
            "Available Commands:",
            "",
            "  /list, /ls             - Show saved profiles",
            "  /save [name]           - Save current host settings (name optional)",
            "  /load <#|name>         - Apply a profile to the host",
            "  /delete, /rm <#|name>  - Delete a profile",
            "  /export <#|name>       - Copy a profile's JSON to the clipboard",
            "  /minimize, /min        - Collapse or expand the profile list",
            "  /quit, /q              - Exit",
            "  /help, /h, /?          - Show this help",
            "",
            "Tips:",
            "  - Saving under an existing name replaces that profile",
            "  - Without a name, profiles are called 'Profile <date time>'",
        ]
        return CommandResult.SUCCESS, "\n".join(lines)

    def _cmd_list(self, argument: str) -> Tuple[CommandResult, str]:
        """Show saved profiles."""
        self.refresh()
        return CommandResult.SUCCESS, ""

    def _cmd_save(self, argument: str) -> Tuple[CommandResult, str]:
        """Save the current host settings."""
        result = self.manager.save_current(argument)
        if result.success:
            self.refresh()
        return self._from_action(result)

    def _cmd_load(self, argument: str) -> Tuple[CommandResult, str]:
        """Apply a profile to the host."""
        return self._from_action(self.manager.load(self._select(argument)))

    def _cmd_delete(self, argument: str) -> Tuple[CommandResult, str]:
        """Delete a profile."""
        result = self.manager.delete(self._select(argument))
        if result.success:
            self.refresh()
        return self._from_action(result)

    def _cmd_export(self, argument: str) -> Tuple[CommandResult, str]:
        """Copy a profile's JSON to the clipboard."""
        result = self.manager.export(self._select(argument))
        if not result.success:
            return self._from_action(result)

        if self.copier(result.payload):
            return CommandResult.SUCCESS, "Profile JSON copied to clipboard."

        self.ui.show_manual_copy(result.payload, result.name or "")
        return CommandResult.SUCCESS, "Clipboard unavailable; copy the JSON above."

    def _cmd_minimize(self, argument: str) -> Tuple[CommandResult, str]:
        """Collapse or expand the profile list."""
        self.panel_state = self.panel_state.toggled()

        saved = True
        if self.storage is not None and self.state_key:
            saved = self.panel_state.save(self.storage, self.state_key)

        self.refresh()
        status = "minimized" if self.panel_state.minimized else "expanded"
        if not saved:
            return CommandResult.SUCCESS, f"Panel {status} (state could not be saved)"
        return CommandResult.SUCCESS, f"Panel {status}"

    def _cmd_quit(self, argument: str) -> Tuple[CommandResult, str]:
        """Exit the panel."""
        return CommandResult.EXIT, "Goodbye!"
