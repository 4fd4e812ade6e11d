import io
import json

import pytest
from rich.console import Console

from profile_keeper.protocol.errors import ActionResult, ErrorType
from profile_keeper.snapshot import ActiveConfigBridge, ProfileManager, SnapshotStore
from profile_keeper.snapshot.models import SnapshotEntry
from profile_keeper.storage import SafeStorage
from profile_keeper.ui import (
    CommandResult,
    PanelState,
    ProfilesConsole,
    SlashCommandHandler,
    copy_to_clipboard,
    find_clipboard_command,
)
from profile_keeper.tests.mocks import (
    FaultyBackend,
    FixedClock,
    HOST_KEY,
    PREFIX,
    UI_STATE_KEY,
    JOYSTICK_SETTINGS,
    KEYBOARD_SETTINGS,
)


def make_console(quiet=False):
    buffer = io.StringIO()
    console = Console(file=buffer, width=120, color_system=None, force_terminal=False)
    return ProfilesConsole(quiet=quiet, console=console), buffer


class FakeCopier:
    def __init__(self, works=True):
        self.works = works
        self.copied = []

    def __call__(self, text):
        self.copied.append(text)
        return self.works


@pytest.fixture
def backend():
    return FaultyBackend({HOST_KEY: JOYSTICK_SETTINGS})


@pytest.fixture
def setup(backend):
    storage = SafeStorage(backend)
    manager = ProfileManager(
        SnapshotStore(storage, prefix=PREFIX, clock=FixedClock()),
        ActiveConfigBridge(storage, HOST_KEY),
    )
    ui, buffer = make_console()
    copier = FakeCopier()
    handler = SlashCommandHandler(manager, ui, storage, UI_STATE_KEY, copier=copier)
    return handler, buffer, copier


# =============================================================================
# PanelState
# =============================================================================

def test_panel_state_defaults_when_absent(backend):
    state = PanelState.load(SafeStorage(backend), UI_STATE_KEY)
    assert state == PanelState(x=None, y=None, minimized=False)


@pytest.mark.parametrize("raw", ["{bad", "[1]", "null", ""])
def test_panel_state_defaults_when_corrupt(backend, raw):
    backend.data[UI_STATE_KEY] = raw
    assert PanelState.load(SafeStorage(backend), UI_STATE_KEY) == PanelState()


def test_panel_state_round_trip(backend):
    storage = SafeStorage(backend)

    assert PanelState(x=120, y=48.5, minimized=True).save(storage, UI_STATE_KEY)

    assert json.loads(backend.data[UI_STATE_KEY]) == {"x": 120, "y": 48.5, "minimized": True}
    assert PanelState.load(storage, UI_STATE_KEY) == PanelState(x=120, y=48.5, minimized=True)


def test_panel_state_ignores_bad_coordinates(backend):
    backend.data[UI_STATE_KEY] = '{"x": "left", "y": true, "minimized": 1}'

    state = PanelState.load(SafeStorage(backend), UI_STATE_KEY)

    assert state == PanelState(x=None, y=None, minimized=True)


def test_panel_state_toggle_keeps_position():
    assert PanelState(x=1, y=2).toggled() == PanelState(x=1, y=2, minimized=True)


# =============================================================================
# Slash commands
# =============================================================================

def test_parse_keeps_spaces_in_argument(setup):
    handler, _, _ = setup

    assert handler.parse("/save  Airbus A320 stick ") == ("save", "Airbus A320 stick")
    assert handler.parse("/LIST") == ("list", "")
    assert handler.parse("   ") == ("", "")


def test_unknown_and_empty_commands(setup):
    handler, _, _ = setup

    assert handler.execute("/fly")[0] == CommandResult.ERROR
    assert "Unknown command: /fly" in handler.execute("/fly")[1]
    assert handler.execute("") == (CommandResult.ERROR, "Empty command")


def test_help_lists_commands(setup):
    handler, _, _ = setup
    result, message = handler.execute("/help")

    assert result == CommandResult.SUCCESS
    for command in ["/list", "/save", "/load", "/delete", "/export", "/minimize", "/quit"]:
        assert command in message


def test_save_and_list(setup):
    handler, buffer, _ = setup

    result, message = handler.execute("/save Airbus stick")

    assert result == CommandResult.SUCCESS
    assert message == "Saved: Airbus stick"
    assert [e.name for e in handler.entries] == ["Airbus stick"]
    assert "Airbus stick" in buffer.getvalue()
    assert "2025-03-14 09:26" in buffer.getvalue()


def test_load_by_number(setup, backend):
    handler, _, _ = setup
    handler.execute("/save b")
    handler.execute("/save a")
    backend.data[HOST_KEY] = KEYBOARD_SETTINGS

    result, message = handler.execute("/load 2")

    assert result == CommandResult.SUCCESS
    assert message.startswith("Profile applied: b")
    assert backend.data[HOST_KEY] == JOYSTICK_SETTINGS


def test_load_without_selection(setup):
    handler, _, _ = setup
    assert handler.execute("/load") == (CommandResult.ERROR, "Select a profile first.")


def test_load_unknown_name(setup):
    handler, _, _ = setup
    assert handler.execute("/load ghost") == (CommandResult.ERROR, "Profile not found.")


def test_delete_refreshes_listing(setup):
    handler, _, _ = setup
    handler.execute("/save a")
    handler.execute("/save b")

    result, message = handler.execute("/rm a")

    assert (result, message) == (CommandResult.SUCCESS, "Deleted: a")
    assert [e.name for e in handler.entries] == ["b"]


def test_export_to_clipboard(setup):
    handler, _, copier = setup
    handler.execute("/save a")

    result, message = handler.execute("/export 1")

    assert (result, message) == (CommandResult.SUCCESS, "Profile JSON copied to clipboard.")
    assert copier.copied == [JOYSTICK_SETTINGS]


def test_export_falls_back_to_manual_copy(setup):
    handler, buffer, copier = setup
    copier.works = False
    handler.execute("/save a")

    result, message = handler.execute("/export a")

    assert result == CommandResult.SUCCESS
    assert message == "Clipboard unavailable; copy the JSON above."
    output = buffer.getvalue()
    assert "Copy the JSON: a" in output
    assert '"mode": "joystick"' in output


def test_minimize_persists_state(setup, backend):
    handler, buffer, _ = setup
    handler.execute("/save a")

    assert handler.execute("/min") == (CommandResult.SUCCESS, "Panel minimized")
    assert json.loads(backend.data[UI_STATE_KEY])["minimized"] is True
    assert "1 profile saved (/minimize to expand)" in buffer.getvalue()

    assert handler.execute("/minimize") == (CommandResult.SUCCESS, "Panel expanded")
    assert json.loads(backend.data[UI_STATE_KEY])["minimized"] is False


def test_minimize_state_write_failure(setup, backend):
    handler, _, _ = setup
    backend.fail_on("set", UI_STATE_KEY)

    result, message = handler.execute("/min")

    assert result == CommandResult.SUCCESS
    assert message == "Panel minimized (state could not be saved)"
    assert handler.panel_state.minimized


def test_panel_state_restored_on_start(backend):
    backend.data[UI_STATE_KEY] = '{"x": 10, "y": 20, "minimized": true}'
    storage = SafeStorage(backend)
    manager = ProfileManager(SnapshotStore(storage), ActiveConfigBridge(storage, HOST_KEY))

    handler = SlashCommandHandler(manager, make_console()[0], storage, UI_STATE_KEY)

    assert handler.panel_state == PanelState(x=10, y=20, minimized=True)


def test_command_exceptions_become_errors(setup, monkeypatch):
    handler, _, _ = setup

    def boom(name=""):
        raise RuntimeError("kaboom")

    monkeypatch.setattr(handler.manager, "save_current", boom)

    assert handler.execute("/save x") == (CommandResult.ERROR, "Command error: kaboom")


def test_quit(setup):
    handler, _, _ = setup
    assert handler.execute("/q") == (CommandResult.EXIT, "Goodbye!")


# =============================================================================
# ProfilesConsole
# =============================================================================

def test_result_messages_are_not_markup():
    ui, buffer = make_console()

    ui.print_result(ActionResult.ok("Saved: [bold]stick[/bold]"))

    assert "Saved: [bold]stick[/bold]" in buffer.getvalue()


def test_failures_print_in_quiet_mode():
    ui, buffer = make_console(quiet=True)

    ui.print_result(ActionResult.ok("Saved: a"))
    ui.print_result(ActionResult.failure(ErrorType.NOT_FOUND, "Profile not found."))

    output = buffer.getvalue()
    assert "Saved: a" not in output
    assert "Profile not found." in output


def test_empty_listing():
    ui, buffer = make_console()
    ui.print_profiles([])
    assert "No profiles saved yet" in buffer.getvalue()


def test_labels():
    ui, buffer = make_console(quiet=True)

    ui.print_labels([
        SnapshotEntry("gcp_profile_a", "a", {"savedAt": "2025-03-14 09:26"}),
        SnapshotEntry("gcp_profile_[b]", "[b]"),
    ])

    assert buffer.getvalue().splitlines() == ["a (2025-03-14 09:26)", "[b]"]


def test_manual_copy_in_quiet_mode_prints_raw_payload():
    ui, buffer = make_console(quiet=True)
    ui.show_manual_copy(KEYBOARD_SETTINGS, "a")
    assert buffer.getvalue().rstrip("\n") == KEYBOARD_SETTINGS


# =============================================================================
# Clipboard
# =============================================================================

def test_clipboard_unavailable(monkeypatch):
    monkeypatch.setattr("profile_keeper.ui.clipboard.shutil.which", lambda name: None)

    assert find_clipboard_command() is None
    assert copy_to_clipboard("{}") is False


def test_clipboard_uses_first_available_tool(monkeypatch):
    runs = []

    class Completed:
        returncode = 0

    def fake_run(cmd, **kwargs):
        runs.append((cmd, kwargs["input"]))
        return Completed()

    monkeypatch.setattr(
        "profile_keeper.ui.clipboard.shutil.which",
        lambda name: "/usr/bin/xclip" if name == "xclip" else None,
    )
    monkeypatch.setattr("profile_keeper.ui.clipboard.subprocess.run", fake_run)

    assert copy_to_clipboard('{"a": 1}') is True
    assert runs == [(["xclip", "-selection", "clipboard"], '{"a": 1}')]
