"""
ProfilesConsole - Rich-based console interface.

Renders the profile list, action outcomes and the manual-copy fallback.
"""

from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich import box
from rich.markup import escape

from ..protocol.errors import ActionResult
from ..snapshot.models import SnapshotEntry


class ProfilesConsole:
    """
    Rich console interface for profile_keeper.
    """

    def __init__(self, quiet: bool = False, console: Optional[Console] = None):
        self.quiet = quiet
        self.console = console or Console()

    def print(self, *args, **kwargs):
        """Print to console."""
        if self.quiet:
            return
        self.console.print(*args, **kwargs)

    def print_banner(self, version: str, summary: str = ""):
        """Print application banner."""
        if self.quiet:
            return

        banner = f"[bold cyan]Profile Keeper[/] [dim]v{version}[/]\n[dim]Named snapshots of your host configuration[/]"
        if summary:
            banner += f"\n\n[dim]{escape(summary)}[/]"
        self.console.print(Panel(banner, border_style="cyan"))

    def print_result(self, result: ActionResult):
        """Show the outcome of an action, like a short-lived toast."""
        if result.success:
            self.print(f"[green]✓[/] {escape(result.message)}", highlight=False)
        else:
            # Failures are shown even in quiet mode
            self.console.print(f"[bold red]✗[/] {escape(result.message)}", highlight=False)

    def print_error(self, message: str):
        """Print error message."""
        self.console.print(f"[bold red]Error:[/] {escape(message)}", highlight=False)

    def print_profiles(self, entries: List[SnapshotEntry], minimized: bool = False):
        """
        Display saved profiles.

        Minimized shows a single summary line instead of the table.
        """
        if self.quiet:
            return

        if not entries:
            self.console.print("[dim]No profiles saved yet[/]")
            return

        if minimized:
            noun = "profile" if len(entries) == 1 else "profiles"
            self.console.print(f"[dim]{len(entries)} {noun} saved (/minimize to expand)[/]")
            return

        table = Table(title="Profiles", box=box.SIMPLE)
        table.add_column("#", justify="right", style="dim")
        table.add_column("Name", style="bold")
        table.add_column("Saved", style="dim")

        for i, entry in enumerate(entries, 1):
            table.add_row(str(i), escape(entry.name), escape(entry.saved_at or ""))

        self.console.print(table)

    def print_labels(self, entries: List[SnapshotEntry]):
        """Plain one-per-line listing ('name (savedAt)'), for scripts."""
        for entry in entries:
            self.console.print(entry.label, markup=False, highlight=False, emoji=False)

    def show_manual_copy(self, payload: str, name: str = ""):
        """Show a payload for manual copying when the clipboard is unavailable."""
        if self.quiet:
            self.console.print(payload, markup=False, highlight=False, emoji=False, soft_wrap=True)
            return

        title = f"Copy the JSON: {escape(name)}" if name else "Copy the JSON:"
        self.console.print(Panel(
            Syntax(payload, "json", word_wrap=True),
            title=title,
            border_style="yellow",
        ))

    def prompt(self, message: str) -> str:
        return self.console.input(message)
