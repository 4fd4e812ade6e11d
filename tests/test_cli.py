import json

import pytest

from profile_keeper import cli
from profile_keeper.cli import main, parse_args
from profile_keeper.tests.mocks import HOST_KEY, JOYSTICK_SETTINGS, KEYBOARD_SETTINGS


@pytest.fixture(autouse=True)
def isolated(monkeypatch, tmp_path):
    """No config files or environment from the machine running the tests."""
    monkeypatch.setattr("profile_keeper.config.CONFIG_SEARCH_PATHS", [])
    for var in ["PROFILE_KEEPER_STORE", "PROFILE_KEEPER_DSN", "PROFILE_KEEPER_LOG_LEVEL"]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def store(tmp_path):
    path = tmp_path / "store.json"
    path.write_text(json.dumps({HOST_KEY: JOYSTICK_SETTINGS}), encoding="utf-8")
    return path


def run(store, *argv):
    return main(["--store", str(store), *argv])


def read_store(store):
    return json.loads(store.read_text(encoding="utf-8"))


def test_parse_args_modes():
    assert parse_args(["--save"]).save == ""
    assert parse_args(["--save", "Airbus Stick"]).save == "Airbus Stick"
    assert parse_args([]).save is None

    with pytest.raises(SystemExit):
        parse_args(["--list", "--delete", "x"])


def test_save_list_load_delete(store, capsys):
    assert run(store, "--save", "Airbus Stick") == 0
    assert "Saved: Airbus Stick" in capsys.readouterr().out

    data = read_store(store)
    assert data["gcp_profile_Airbus Stick"] == JOYSTICK_SETTINGS
    assert "savedAt" in json.loads(data["gcp_profile_Airbus Stick__meta"])

    assert run(store, "--list", "--quiet") == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 1 and lines[0].startswith("Airbus Stick (")

    data[HOST_KEY] = KEYBOARD_SETTINGS
    store.write_text(json.dumps(data), encoding="utf-8")

    assert run(store, "--load", "1", "--no-reload") == 0
    assert "Profile applied: Airbus Stick" in capsys.readouterr().out
    assert read_store(store)[HOST_KEY] == JOYSTICK_SETTINGS

    assert run(store, "--delete", "Airbus Stick") == 0
    assert "Deleted: Airbus Stick" in capsys.readouterr().out
    assert set(read_store(store)) == {HOST_KEY}


def test_save_without_name(store, capsys):
    assert run(store, "--save") == 0
    assert "Saved: Profile " in capsys.readouterr().out
    assert any(k.startswith("gcp_profile_Profile ") for k in read_store(store))


def test_save_without_host_config(tmp_path, capsys):
    empty = tmp_path / "empty.json"

    assert run(empty, "--save", "n") == 1
    assert "Host settings not found yet" in capsys.readouterr().out


def test_load_unknown_profile(store, capsys):
    assert run(store, "--load", "ghost") == 1
    assert "Profile not found." in capsys.readouterr().out


def test_json_output(store, capsys):
    assert run(store, "--save", "n", "--json") == 0
    result = json.loads(capsys.readouterr().out)
    assert result["success"] is True
    assert result["storage_key"] == "gcp_profile_n"

    assert run(store, "--list", "--json") == 0
    listing = json.loads(capsys.readouterr().out)
    assert [e["name"] for e in listing] == ["n"]

    assert run(store, "--delete", "", "--json") == 1
    assert json.loads(capsys.readouterr().out)["error_type"] == "NO_SELECTION"


def test_export_to_file(store, tmp_path, capsys):
    run(store, "--save", "n")
    target = tmp_path / "n.json"

    assert run(store, "--export", "n", "--output", str(target)) == 0

    assert target.read_text(encoding="utf-8") == JOYSTICK_SETTINGS
    assert "Exported n to" in capsys.readouterr().out


def test_export_to_stdout(store, capsys):
    run(store, "--save", "n")
    capsys.readouterr()

    assert run(store, "--export", "1", "-o", "-") == 0

    assert capsys.readouterr().out.strip() == JOYSTICK_SETTINGS


def test_export_falls_back_without_clipboard(store, capsys, monkeypatch):
    monkeypatch.setattr("profile_keeper.ui.clipboard.shutil.which", lambda name: None)
    run(store, "--save", "n")
    capsys.readouterr()

    assert run(store, "--export", "n", "--quiet") == 0

    assert capsys.readouterr().out.strip() == JOYSTICK_SETTINGS


def test_invalid_configuration(capsys):
    assert main(["--backend", "postgres"]) == 1
    assert "DSN" in capsys.readouterr().out


def test_mistyped_config_value(tmp_path, capsys):
    path = tmp_path / "pk.toml"
    path.write_text('[storage]\nquota_bytes = "10"\n')

    assert main(["-c", str(path)]) == 1
    assert "quota_bytes" in capsys.readouterr().out


def test_missing_config_file(capsys):
    assert main(["-c", "missing.toml"]) == 1
    assert "Config file not found" in capsys.readouterr().out


def test_init_config(tmp_path, capsys):
    assert main(["--init-config"]) == 0
    assert (tmp_path / "profile_keeper.toml").exists()

    assert main(["--init-config"]) == 1
    assert "already exists" in capsys.readouterr().out


def test_interactive_panel(store, capsys, monkeypatch):
    lines = iter(["/save Cessna", "", "/list", "/bogus", "/quit"])
    monkeypatch.setattr(cli.ProfilesConsole, "prompt", lambda self, message: next(lines))

    assert run(store) == 0

    output = capsys.readouterr().out
    assert "Saved: Cessna" in output
    assert "Unknown command: /bogus" in output
    assert "Goodbye!" in output
    assert "gcp_profile_Cessna" in read_store(store)


def test_interactive_panel_ends_on_eof(store, monkeypatch):
    def eof(self, message):
        raise EOFError

    monkeypatch.setattr(cli.ProfilesConsole, "prompt", eof)

    assert run(store) == 0
