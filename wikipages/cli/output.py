"""Terminal output handling using Rich library.

This module provides the OutputHandler class for all CLI terminal output:
colored status lines, a spinner for long operations and run/check summaries.
Supports verbosity levels, --quiet and --no-color.
"""

from contextlib import contextmanager
from typing import Iterator

from rich.console import Console
from rich.live import Live
from rich.markup import escape
from rich.spinner import Spinner

from wikipages.cli.models import CheckSummary
from wikipages.sync.models import RunResult


class OutputHandler:
    """Handles all terminal output using Rich library.

    Attributes:
        verbosity: Verbosity level (0=summary, 1=info, 2=debug)
        quiet: Suppress everything but errors and summaries
        console: Rich Console instance for output

    Example:
        >>> handler = OutputHandler(verbosity=1, no_color=False)
        >>> handler.success("Run completed")
        >>> with handler.spinner("Logging in..."):
        ...     scheduler.login()
    """

    def __init__(self, verbosity: int = 0, no_color: bool = False, quiet: bool = False):
        """Initialize output handler.

        Args:
            verbosity: Verbosity level (0=summary, 1=info, 2=debug)
            no_color: Disable color output if True
            quiet: Suppress notifications and info messages if True
        """
        self.verbosity = verbosity
        self.quiet = quiet
        self.console = Console(
            no_color=no_color,
            highlight=False,
        )

    def success(self, message: str) -> None:
        """Display success message in green."""
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def error(self, message: str) -> None:
        """Display error message in red."""
        self.console.print(f"[red]✗[/red] {escape(message)}", style="red")

    def warning(self, message: str) -> None:
        """Display warning message in yellow (hidden with --quiet)."""
        if not self.quiet:
            self.console.print(f"[yellow]⚠[/yellow] {escape(message)}", style="yellow")

    def info(self, message: str) -> None:
        """Display info message (only if verbosity >= 1 and not quiet)."""
        if self.verbosity >= 1 and not self.quiet:
            self.console.print(escape(message))

    def debug(self, message: str) -> None:
        """Display debug message (only if verbosity >= 2)."""
        if self.verbosity >= 2:
            self.console.print(f"[dim]{escape(message)}[/dim]")

    def print(self, message: str) -> None:
        """Display message without formatting."""
        self.console.print(message, markup=False)

    @contextmanager
    def spinner(self, message: str) -> Iterator[None]:
        """Display spinner for single operations.

        Example:
            >>> with handler.spinner("Writing pages..."):
            ...     result = scheduler.run()
        """
        if self.quiet or not self.console.is_terminal:
            yield
            return
        spinner = Spinner("dots", text=message)
        with Live(spinner, console=self.console, refresh_per_second=10):
            yield

    def print_run_summary(self, result: RunResult) -> None:
        """Display run summary with color coding."""
        self.console.print("\n[bold]Run Summary:[/bold]")

        if result.written:
            self.console.print(f"  [green]↑[/green] Written: {len(result.written)} page(s)")

        if result.unchanged:
            self.console.print(f"  [dim]─[/dim] Unchanged: {len(result.unchanged)} page(s)")

        if result.excluded:
            self.console.print(f"  [yellow]⊘[/yellow] Excluded: {len(result.excluded)} page(s)")

        if result.skipped:
            self.console.print(f"  [yellow]⊘[/yellow] Skipped: {len(result.skipped)} file(s)")

        if result.failed:
            self.console.print(f"  [red]✗[/red] Failed: {len(result.failed)} page(s)")
            for target_id in result.failed:
                self.console.print(f"    • {escape(target_id)}")

        # Overall status
        total = len(result.written) + len(result.unchanged) + len(result.excluded) + len(result.failed)
        if total == 0:
            self.console.print("\n[yellow]No pages to write[/yellow]")
        elif result.failed:
            self.console.print("\n[red]Run completed with errors[/red]")
        elif not result.written:
            self.console.print("\n[green]Wiki already up to date. No changes detected.[/green]")
        else:
            self.console.print("\n[green]Run completed successfully[/green]")

    def print_check_summary(self, summary: CheckSummary) -> None:
        """Display per-file errors followed by checked/succeeded/failed counts."""
        for file_path, messages in summary.failures.items():
            self.console.print(f"\n[red]✗[/red] {escape(file_path)}")
            for message in messages:
                self.console.print(f"    • {escape(message)}")

        self.console.print("\n[bold]Check Summary:[/bold]")
        self.console.print(f"  Checked: {summary.checked} file(s)")
        self.console.print(f"  [green]✓[/green] Succeeded: {summary.succeeded}")
        if summary.failed:
            self.console.print(f"  [red]✗[/red] Failed: {summary.failed}")
