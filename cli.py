"""
CLI - Command-line interface for profile_keeper.

One-shot modes (--list, --save, --load, --delete, --export) for scripts, and
an interactive panel with slash commands when no mode is given.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Callable, List, Optional

from rich.markup import escape

from . import __version__
from .config import Config, ConfigError, create_example_config
from .host import HostReloader
from .log import get_logger, setup_logging
from .protocol.errors import ActionResult
from .snapshot import ActiveConfigBridge, ProfileManager, SnapshotStore
from .storage import SafeStorage, create_backend
from .ui import CommandResult, ProfilesConsole, SlashCommandHandler, copy_to_clipboard

logger = get_logger(__name__)


def parse_args(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="profile-keeper",
        description="Save and switch named snapshots of a host application's configuration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    profile-keeper                          # interactive panel
    profile-keeper --list
    profile-keeper --save "Airbus Stick"
    profile-keeper --save                   # name generated from the time
    profile-keeper --load "Airbus Stick"
    profile-keeper --load 2                 # second entry of --list
    profile-keeper --delete "Airbus Stick"
    profile-keeper --export 1 --output stick.json

    # Store in PostgreSQL instead of a JSON file
    profile-keeper --backend postgres --dsn "dbname=host user=app" --list

Environment Variables:
    PROFILE_KEEPER_STORE      Path of the JSON store
    PROFILE_KEEPER_DSN        PostgreSQL DSN for the postgres backend
    PROFILE_KEEPER_LOG_LEVEL  Console log level (DEBUG, INFO, WARNING, ...)
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    # Configuration
    config_group = parser.add_argument_group('Configuration')
    config_group.add_argument(
        "-c", "--config",
        help="Path to TOML config file (default: search standard locations)"
    )
    config_group.add_argument(
        "--init-config",
        nargs="?",
        const="profile_keeper.toml",
        metavar="PATH",
        help="Write an example config file and exit"
    )

    # Storage
    storage_group = parser.add_argument_group('Storage')
    storage_group.add_argument(
        "--backend",
        choices=["json", "postgres", "memory"],
        help="Key/value store backend (default: json)"
    )
    storage_group.add_argument(
        "--store",
        metavar="PATH",
        help="JSON store file (json backend)"
    )
    storage_group.add_argument(
        "--dsn",
        help="PostgreSQL connection string (postgres backend)"
    )
    storage_group.add_argument(
        "--host-key",
        help="Key holding the host's active configuration (default: settings)"
    )
    storage_group.add_argument(
        "--prefix",
        help="Key prefix reserved for profiles (default: gcp_profile_)"
    )

    # Operation modes
    mode_group = parser.add_argument_group('Operation Modes')
    modes = mode_group.add_mutually_exclusive_group()
    modes.add_argument(
        "--list",
        action="store_true",
        help="List saved profiles"
    )
    modes.add_argument(
        "--save",
        nargs="?",
        const="",
        metavar="NAME",
        help="Save the current host configuration (name optional)"
    )
    modes.add_argument(
        "--load",
        metavar="PROFILE",
        help="Apply a profile (name or list number) to the host"
    )
    modes.add_argument(
        "--delete",
        metavar="PROFILE",
        help="Delete a profile"
    )
    modes.add_argument(
        "--export",
        metavar="PROFILE",
        help="Copy a profile's JSON to the clipboard"
    )

    # Output
    output_group = parser.add_argument_group('Output')
    output_group.add_argument(
        "-o", "--output",
        metavar="FILE",
        help="With --export: write the JSON to FILE ('-' for stdout) instead of the clipboard"
    )
    output_group.add_argument(
        "--json",
        action="store_true",
        help="Print results as JSON"
    )
    output_group.add_argument(
        "-q", "--quiet",
        action="store_true",
        default=None,
        help="Only print errors and requested data"
    )
    output_group.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=None,
        help="Debug logging"
    )
    output_group.add_argument(
        "--log-file",
        help="Also write logs to this file"
    )

    # Host reload
    reload_group = parser.add_argument_group('Host Reload')
    reload_group.add_argument(
        "--reload-command",
        help="Shell command run after a profile is applied"
    )
    reload_group.add_argument(
        "--no-reload",
        action="store_true",
        default=None,
        help="Do not run the reload command"
    )

    return parser.parse_args(argv)


def open_storage(config: Config) -> SafeStorage:
    """Create the configured backend wrapped in the never-raising adapter."""
    backend = create_backend(
        config.storage.backend,
        path=config.storage.path,
        dsn=config.storage.dsn,
        table=config.storage.table,
        quota_bytes=config.storage.quota_bytes,
    )
    return SafeStorage(backend)


def build_manager(config: Config, storage: SafeStorage) -> ProfileManager:
    """Wire store, bridge and reload hook from configuration."""
    store = SnapshotStore(storage, prefix=config.profiles.prefix)
    bridge = ActiveConfigBridge(storage, host_key=config.host.config_key)
    reloader = HostReloader(config.host.reload_command, timeout=config.host.reload_timeout)
    return ProfileManager(store, bridge, reloader=reloader)


def emit_result(ui: ProfilesConsole, result: ActionResult, as_json: bool = False) -> int:
    """Show a result and return the matching exit status."""
    if as_json:
        ui.console.print(result.to_json(), markup=False, highlight=False, soft_wrap=True)
    else:
        ui.print_result(result)
    return 0 if result.success else 1


def run_list(ui: ProfilesConsole, manager: ProfileManager, as_json: bool = False) -> int:
    """List saved profiles."""
    entries = manager.profiles()
    if as_json:
        ui.console.print(
            json.dumps([e.to_dict() for e in entries], indent=2),
            markup=False, highlight=False, soft_wrap=True,
        )
    elif ui.quiet:
        ui.print_labels(entries)
    else:
        ui.print_profiles(entries)
    return 0


def run_export(
    ui: ProfilesConsole,
    manager: ProfileManager,
    selection: str,
    output: Optional[str] = None,
    as_json: bool = False,
    copier: Callable[[str], bool] = copy_to_clipboard,
) -> int:
    """Export a profile to a file, stdout or the clipboard."""
    result = manager.export(manager.resolve(selection))
    if not result.success or as_json:
        return emit_result(ui, result, as_json)

    if output == "-":
        ui.console.print(result.payload, markup=False, highlight=False, soft_wrap=True)
        return 0

    if output:
        try:
            Path(output).write_text(result.payload, encoding="utf-8")
        except OSError as e:
            ui.print_error(f"Cannot write {output}: {e}")
            return 1
        ui.print(f"[green]✓[/] Exported {escape(result.name or '')} to {escape(output)}", highlight=False)
        return 0

    if copier(result.payload):
        ui.print("[green]✓[/] Profile JSON copied to clipboard.", highlight=False)
    else:
        ui.show_manual_copy(result.payload, result.name or "")
    return 0


def run_panel(
    ui: ProfilesConsole,
    manager: ProfileManager,
    storage: SafeStorage,
    config: Config,
    input_func: Optional[Callable[[str], str]] = None,
) -> int:
    """Interactive panel: slash commands until /quit or end of input."""
    handler = SlashCommandHandler(
        manager,
        ui,
        storage=storage,
        state_key=config.profiles.ui_state_key,
    )
    read = input_func or ui.prompt

    ui.print_banner(__version__, config.summary(include_config_path=False))
    ui.print("[dim]Type /help for available commands[/]")
    handler.refresh()

    while True:
        try:
            line = read("profiles> ")
        except (EOFError, KeyboardInterrupt):
            ui.print()
            break

        if not line.strip():
            continue

        result, message = handler.execute(line)
        if result == CommandResult.ERROR:
            ui.console.print(f"[bold red]✗[/] {escape(message)}", highlight=False)
        elif message:
            ui.print(message, markup=False, highlight=False)

        if result == CommandResult.EXIT:
            break

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point. Returns the process exit status."""
    args = parse_args(argv)
    ui = ProfilesConsole(quiet=bool(args.quiet))

    if args.init_config:
        try:
            path = create_example_config(args.init_config)
        except FileExistsError as e:
            ui.print_error(str(e))
            return 1
        ui.console.print(f"Created {path}", highlight=False)
        return 0

    try:
        config = Config.load(args.config)
    except ConfigError as e:
        ui.print_error(str(e))
        return 1
    config.override_from_args(args)

    errors = config.validate()
    if errors:
        for error in errors:
            ui.print_error(error)
        return 1

    setup_logging(config.logging.level, config.logging.file or None)
    ui.quiet = config.output.quiet

    storage = open_storage(config)
    logger.debug("Using %s", storage.describe())
    manager = build_manager(config, storage)

    try:
        if args.list:
            return run_list(ui, manager, args.json)

        if args.save is not None:
            return emit_result(ui, manager.save_current(args.save), args.json)

        if args.load is not None:
            return emit_result(ui, manager.load(manager.resolve(args.load)), args.json)

        if args.delete is not None:
            return emit_result(ui, manager.delete(manager.resolve(args.delete)), args.json)

        if args.export is not None:
            return run_export(ui, manager, args.export, args.output, args.json)

        return run_panel(ui, manager, storage, config)
    finally:
        storage.close()


def run():
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
