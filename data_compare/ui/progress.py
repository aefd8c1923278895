"""
Progress monitoring and user interface.
Single responsibility: provide user feedback during operations.
"""

import sys
from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Optional

from ..core.models import ComparisonResult


@dataclass
class LogEntry:
    """One observer message with the time it arrived."""

    timestamp: str
    level: str
    message: str


class ProgressMonitor:
    """
    Simple progress monitoring for console output.

    Instances are comparison observers: call them with ``(level, message)``.
    """

    PREFIXES = {
        "info": "[INFO]",
        "warning": "[WARNING]",
        "error": "[ERROR]",
        "success": "[DONE]",
    }

    def __init__(self, verbose: bool = True):
        """
        Initialize progress monitor.

        Args:
            verbose: Whether to show info messages
        """
        self.verbose = verbose
        self.entries: List[LogEntry] = []

    def __call__(self, level: str, message: str):
        self.entries.append(LogEntry(
            timestamp=datetime.now().isoformat(),
            level=level,
            message=message
        ))
        self._show(level, message)

    def start(self, title: str = "Data Compare"):
        """Print the run header."""
        print(f"\n{title}\n{'-' * len(title)}")

    def _show(self, level: str, message: str):
        prefix = self.PREFIXES.get(level, f"[{level.upper()}]")
        if level in ("warning", "error"):
            print(f"{prefix} {message}", file=sys.stderr)
        elif self.verbose or level == "success":
            print(f"{prefix} {message}")

    def clear(self):
        """Reset the log for a new run."""
        self.entries = []

    def show_results(self, result: ComparisonResult):
        """
        Print a summary of a comparison result.

        Args:
            result: Comparison result
        """
        stats = result.stats
        print(f"\n{'='*60}")
        print(f"Comparison: {result.source_a_name} vs {result.source_b_name}")
        print(f"{'='*60}")
        print(f"Total rows in {result.source_a_name}: {stats.total_a:,}")
        print(f"Total rows in {result.source_b_name}: {stats.total_b:,}")
        print(f"Unique rows A / B: {stats.valid_unique_a:,} / {stats.valid_unique_b:,}")
        print(f"Duplicates removed A / B: {stats.duplicates_a:,} / {stats.duplicates_b:,}")
        if stats.skipped_a or stats.skipped_b:
            print(f"Rows skipped A / B: {stats.skipped_a:,} / {stats.skipped_b:,}")
        print(f"Matched keys: {stats.matched:,}")
        print(f"Rows missing in {result.source_b_name}: {stats.missing_in_b:,}")
        print(f"Rows missing in {result.source_a_name}: {stats.missing_in_a:,}")
        print(f"Match rate: {stats.match_rate}%")
        print(f"{'='*60}\n")

    def error(self, message: str):
        """
        Show error message.

        Args:
            message: Error message
        """
        self("error", message)


def get_progress_monitor(use_rich: bool = True, verbose: bool = True) -> Any:
    """
    Get appropriate progress monitor.

    Args:
        use_rich: Whether to use Rich
        verbose: Whether to show info messages

    Returns:
        Progress monitor instance
    """
    if use_rich:
        from .rich_progress import RichProgressMonitor
        return RichProgressMonitor(verbose=verbose)
    return ProgressMonitor(verbose=verbose)
