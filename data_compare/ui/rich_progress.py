"""
Rich progress monitoring.
Single responsibility: provide rich terminal UI for comparison runs.
"""

from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.text import Text
from rich.markup import escape
from rich import box

from ..core.models import ComparisonResult
from .progress import ProgressMonitor


class RichProgressMonitor(ProgressMonitor):
    """
    Observer that renders the run log and results with Rich.
    """

    STYLES = {
        "info": "blue",
        "warning": "yellow",
        "error": "bold red",
        "success": "bold green",
    }

    def __init__(self, verbose: bool = True, console: Optional[Console] = None):
        """
        Initialize Rich progress monitor.

        Args:
            verbose: Whether to show info messages
            console: Console to print to (a new one when None)
        """
        super().__init__(verbose=verbose)
        self.console = console or Console()

    def start(self, title: str = "Data Compare"):
        """Print the run header."""
        header = Panel(
            Text(title, justify="center", style="bold cyan"),
            box=box.DOUBLE,
            style="cyan"
        )
        self.console.print(header)

    def _show(self, level: str, message: str):
        if level == "info" and not self.verbose:
            return
        style = self.STYLES.get(level, "white")
        self.console.print(f"[{style}]{level.upper():7}[/{style}] {escape(message)}",
                           highlight=False)

    def show_results(self, result: ComparisonResult):
        """
        Render the comparison stats as a table.

        Args:
            result: Comparison result
        """
        stats = result.stats

        table = Table(
            title=f"{result.source_a_name} vs {result.source_b_name}",
            box=box.ROUNDED,
            show_header=True,
            header_style="bold magenta"
        )
        table.add_column("Metric", style="cyan")
        table.add_column(result.source_a_name, justify="right")
        table.add_column(result.source_b_name, justify="right")

        table.add_row("Total rows", f"{stats.total_a:,}", f"{stats.total_b:,}")
        table.add_row("Unique rows", f"{stats.valid_unique_a:,}", f"{stats.valid_unique_b:,}")
        table.add_row("Duplicates removed", f"{stats.duplicates_a:,}", f"{stats.duplicates_b:,}")
        if stats.skipped_a or stats.skipped_b:
            table.add_row("Rows skipped", f"{stats.skipped_a:,}", f"{stats.skipped_b:,}")
        table.add_row("Missing from other source",
                      f"[yellow]{stats.missing_in_b:,}[/yellow]",
                      f"[yellow]{stats.missing_in_a:,}[/yellow]")

        self.console.print(table)
        self.console.print(
            f"Matched keys: [bold green]{stats.matched:,}[/bold green]  "
            f"Match rate: [bold]{stats.match_rate}%[/bold]"
        )
