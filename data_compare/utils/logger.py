"""
Structured logging utility.
Single responsibility: provide consistent logging across application.
"""

import sys
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional
import json


LEVELS = {
    "DEBUG": 10,
    "INFO": 20,
    "WARN": 30,
    "ERROR": 40,
    "CRITICAL": 50,
}


class StructuredLogger:
    """
    Structured logger for consistent application logging.
    """

    def __init__(self, name: str = "data-compare",
                 log_file: Optional[Path] = None,
                 level: str = "INFO"):
        """
        Initialize logger.

        Args:
            name: Logger name
            log_file: Optional file path for logging
            level: Minimum level written to the console
        """
        self.name = name
        self.log_file = log_file
        self.level = level
        self._lock = threading.Lock()

    def set_level(self, level: str):
        """Change the minimum console level."""
        if level not in LEVELS:
            raise ValueError(f"Unknown log level: {level}")
        self.level = level

    def _format_message(self, level: str, message: str,
                       **kwargs) -> Dict[str, Any]:
        """
        Format log message with metadata.

        Args:
            level: Log level (INFO, DEBUG, ERROR, etc.)
            message: Log message
            **kwargs: Additional context fields

        Returns:
            Formatted log entry
        """
        entry = {
            "timestamp": datetime.now().isoformat(),
            "level": level,
            "logger": self.name,
            "message": message
        }

        if kwargs:
            entry["context"] = kwargs

        return entry

    def _output(self, entry: Dict[str, Any]):
        """
        Output log entry to console and optionally file.

        Args:
            entry: Log entry dictionary
        """
        # Per-source passes may log from worker threads
        with self._lock:
            if LEVELS[entry["level"]] >= LEVELS[self.level]:
                timestamp = entry["timestamp"].split("T")[1][:8]
                level = entry["level"]
                msg = entry["message"]

                print(f"[{timestamp}] {level:5} | {msg}", file=sys.stderr)

                if "context" in entry:
                    for key, value in entry["context"].items():
                        print(f"  {key}={value}", file=sys.stderr)

            # File output - JSON for parsing, every level
            if self.log_file:
                with open(self.log_file, "a") as f:
                    f.write(json.dumps(entry, default=str) + "\n")

    def info(self, message: str, **kwargs):
        """Log info message."""
        entry = self._format_message("INFO", message, **kwargs)
        self._output(entry)

    def debug(self, message: str, **kwargs):
        """Log debug message."""
        entry = self._format_message("DEBUG", message, **kwargs)
        self._output(entry)

    def warning(self, message: str, **kwargs):
        """Log warning message."""
        entry = self._format_message("WARN", message, **kwargs)
        self._output(entry)

    def error(self, message: str, **kwargs):
        """Log error message."""
        entry = self._format_message("ERROR", message, **kwargs)
        self._output(entry)

    def critical(self, message: str, **kwargs):
        """Log critical message."""
        entry = self._format_message("CRITICAL", message, **kwargs)
        self._output(entry)


# Global logger instance
_logger: Optional[StructuredLogger] = None


def get_logger(name: str = "data-compare") -> StructuredLogger:
    """
    Get or create logger instance.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    global _logger
    if _logger is None:
        _logger = StructuredLogger(name)
    return _logger
