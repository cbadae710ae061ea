# MirrorSync Console Output
# Rich-based console output for user-friendly display

from rich.console import Console as RichConsole
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from mirrorsync.handlers.registry import Route
from mirrorsync.sync.engine import SyncEvent, SyncResult
from mirrorsync.sync.writer import WriteOutcome


class Console:
    """
    Console output manager using Rich.

    Provides formatted output for sync runs.
    """

    def __init__(self, *, verbose: bool = False, colored: bool = True, quiet: bool = False):
        """
        Initialize console.

        Args:
            verbose: Also show leaves that were already up to date.
            colored: Enable colored output.
            quiet: Only show errors and the summary.
        """
        self.verbose = verbose
        self.quiet = quiet
        self._console = RichConsole(no_color=not colored, highlight=False)

    @property
    def rich(self) -> RichConsole:
        """Underlying Rich console."""
        return self._console

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
        self._console.print(f"[green]{message}[/green]")

    def print_info(self, message: str) -> None:
        """Print info message."""
        self._console.print(f"[blue]{message}[/blue]")

    def print_event(self, event: SyncEvent) -> None:
        """Print a single sync event."""
        text = Text()
        if event.is_error:
            text.append("  ✗ ", style="red")
            text.append(str(event.error))
            if event.locator is not None:
                text.append(f" ({event.locator})", style="dim")
            self._console.print(text)
            return

        if self.quiet:
            return

        if event.outcome == WriteOutcome.WRITTEN:
            text.append("  ↓ ", style="green")
            text.append(str(event.entry.local_path))
        elif self.verbose:
            text.append(f"  = {event.entry.local_path}", style="dim")
        else:
            return
        self._console.print(text)

    def print_routes(self, routes: list[Route]) -> None:
        """Print the handler registry as a table."""
        if not routes:
            self._console.print("[dim]No handlers registered[/dim]")
            return

        table = Table(title="Handlers", show_header=True, header_style="bold")
        table.add_column("Route", style="cyan")
        table.add_column("Handler", style="magenta")
        table.add_column("Description")

        for route in routes:
            table.add_row(route.pattern, route.handler.name, route.handler.describe())

        self._console.print(table)

    def print_summary(self, result: SyncResult, *, source: str = "", destination: str = "") -> None:
        """Print final sync summary."""
        if result.cancelled:
            status = "[yellow]⚠ Sync cancelled[/yellow]"
        elif result.success:
            status = "[green]✓ Sync completed successfully[/green]"
        else:
            status = "[red]✗ Sync completed with errors[/red]"

        lines = [status, ""]
        if source:
            lines.append(f"  Source:      [cyan]{escape(source)}[/cyan]")
        if destination:
            lines.append(f"  Destination: [cyan]{escape(destination)}[/cyan]")
        lines.extend(
            [
                f"  Synced:      [cyan]{result.total}[/cyan]",
                f"  Written:     [green]{result.written}[/green]",
                f"  Up to date:  [dim]{result.skipped}[/dim]",
                f"  Errors:      [red]{len(result.errors)}[/red]",
            ]
        )

        border = "green" if result.success else ("yellow" if result.cancelled else "red")
        self._console.print(Panel("\n".join(lines), title="Sync Result", border_style=border))


def create_console(*, verbose: bool = False, colored: bool = True, quiet: bool = False) -> Console:
    """Create a console instance."""
    return Console(verbose=verbose, colored=colored, quiet=quiet)
