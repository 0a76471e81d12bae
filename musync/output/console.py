# Musync Console Output
# Rich-based console output for user-friendly display

from rich.console import Console as RichConsole
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from musync.sync.actions import ActionType, SyncEvent
from musync.sync.engine import SyncResult

EVENT_STYLES: dict[ActionType, tuple[str, str]] = {
    ActionType.COPY: ("COPY", "bold green"),
    ActionType.CONVERT: ("CONVERT", "bold yellow"),
    ActionType.RENAME: ("RENAME", "bold blue"),
    ActionType.REMOVE: ("REMOVE", "bold red"),
    ActionType.HASH_COLLISION: ("HASH COLLISION", "bold red"),
    ActionType.PATH_COLLISION: ("PATH COLLISION", "bold red"),
    ActionType.CONVERT_FAILED: ("FAILED", "bold red"),
    ActionType.UNCHANGED: ("UNCHANGED", "dim"),
}


class Console:
    """
    Console output manager using Rich.

    Provides formatted output for sync operations. ``print_event`` can be
    passed to the engine directly as its event sink.
    """

    def __init__(self, *, verbose: bool = False, colored: bool = True):
        """
        Initialize console.

        Args:
            verbose: Enable verbose output.
            colored: Enable colored output.
        """
        self.verbose = verbose
        self._console = RichConsole(no_color=not colored, highlight=False)

    def configure(self, *, verbose: bool, colored: bool) -> None:
        """Apply output settings after construction."""
        self.verbose = verbose
        self._console.no_color = not colored

    def print(self, *args, **kwargs) -> None:
        """Print to console."""
        self._console.print(*args, **kwargs)

    def print_error(self, message: str) -> None:
        """Print error message."""
        self._console.print(f"[red]Error:[/red] {escape(message)}")

    def print_warning(self, message: str) -> None:
        """Print warning message."""
        self._console.print(f"[yellow]Warning:[/yellow] {escape(message)}")

    def print_success(self, message: str) -> None:
        """Print success message."""
        self._console.print(f"[green]{escape(message)}[/green]")

    def print_info(self, message: str) -> None:
        """Print info message."""
        self._console.print(f"[blue]{escape(message)}[/blue]")

    def print_event(self, event: SyncEvent) -> None:
        """Print one action line, e.g. ``[  CONVERT] Artist/Song.mp3``."""
        label, style = EVENT_STYLES.get(event.action, (event.action.value.upper(), "white"))

        text = Text()
        text.append("[")
        text.append(f"{label:>14}", style=style)
        text.append("] ")
        text.append(event.path, style="cyan")

        if event.detail and (self.verbose or event.is_problem):
            text.append(f" ({event.detail})", style="dim")

        self._console.print(text)

    def print_plan(self, result: SyncResult) -> None:
        """
        Print the planned changes of a dry run as a table.

        Args:
            result: Dry-run result.
        """
        if not result.events:
            self._console.print("[green]Everything is in sync[/green]")
            return

        table = Table(title="Planned Changes (dry-run)", show_header=True, header_style="bold")
        table.add_column("Action")
        table.add_column("Path", style="cyan")
        table.add_column("Detail", style="dim")

        for event in result.events:
            label, style = EVENT_STYLES.get(event.action, (event.action.value, "white"))
            table.add_row(f"[{style}]{label}[/{style}]", escape(event.path), escape(event.detail))

        self._console.print()
        self._console.print(table)
        self._console.print()

    def print_sync_result(self, result: SyncResult) -> None:
        """
        Print sync result summary.

        Args:
            result: Sync result to display.
        """
        status_text = "Dry run completed, nothing written" if result.dry_run else "Sync completed"

        lines = [
            f"Copied:    {result.copied}",
            f"Converted: {result.converted}",
            f"Renamed:   {result.renamed}",
            f"Removed:   {result.removed}",
            f"Unchanged: {result.unchanged}",
        ]
        if result.collisions:
            lines.append(f"[yellow]Collisions: {result.collisions} skipped[/yellow]")
        if result.failures:
            lines.append(f"[red]Failed conversions: {len(result.failures)}[/red]")
            for failure in result.failures:
                reason = f": {escape(failure.stderr.splitlines()[-1])}" if failure.stderr else ""
                lines.append(f"  • {escape(failure.job.relative_path)}{reason}")

        if result.success:
            header = f"[green]{status_text}[/green]"
            border = "yellow" if result.has_issues else "green"
        else:
            header = f"[red]{status_text} with errors[/red]"
            border = "red"

        self._console.print()
        self._console.print(
            Panel(
                "\n".join([header, *lines]),
                title="Summary",
                border_style=border,
            )
        )

    def print_duration(self, seconds: float) -> None:
        """Print total run time."""
        self._console.print(f"Finished in [bold green]{seconds:.2f}s[/bold green]")
