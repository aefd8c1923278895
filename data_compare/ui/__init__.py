"""User interface and progress monitoring."""

from .progress import (
    LogEntry,
    ProgressMonitor,
    get_progress_monitor
)
from .rich_progress import RichProgressMonitor

__all__ = [
    "LogEntry",
    "ProgressMonitor",
    "RichProgressMonitor",
    "get_progress_monitor",
]
