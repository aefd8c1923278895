"""
Performance metrics collection.
Single responsibility: track and report performance metrics.
"""

import os
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Any, Optional, List

import psutil

from .logger import get_logger


logger = get_logger()


@dataclass
class OperationMetrics:
    """Metrics for a single operation."""

    name: str
    start_time: float
    end_time: Optional[float] = None
    duration_seconds: Optional[float] = None
    rows_processed: int = 0
    memory_mb_start: float = 0
    memory_mb_end: float = 0
    success: bool = True
    error: Optional[str] = None


@dataclass
class RunMetrics:
    """Metrics for one comparison run."""

    start_time: float = field(default_factory=time.perf_counter)
    end_time: Optional[float] = None
    operations: List[OperationMetrics] = field(default_factory=list)
    memory_mb_peak: float = 0
    total_rows_processed: int = 0
    errors_encountered: int = 0

    @property
    def duration_seconds(self) -> float:
        end = self.end_time if self.end_time is not None else time.perf_counter()
        return end - self.start_time


class MetricsCollector:
    """
    Collect and track performance metrics.

    Operations may start and end on different worker threads.
    """

    def __init__(self):
        """Initialize metrics collector."""
        self.run_metrics = RunMetrics()
        self.current_operations: Dict[str, OperationMetrics] = {}
        self.process = psutil.Process(os.getpid())
        self._lock = threading.Lock()

    def start_operation(self, name: str) -> None:
        """
        Start tracking an operation.

        Args:
            name: Operation name
        """
        memory_mb = self._get_memory_usage()

        with self._lock:
            self.current_operations[name] = OperationMetrics(
                name=name,
                start_time=time.perf_counter(),
                memory_mb_start=memory_mb
            )

        logger.debug("metrics.operation.start",
                    operation=name,
                    memory_mb=round(memory_mb, 2))

    def end_operation(self, name: str, rows_processed: int = 0,
                     success: bool = True, error: Optional[str] = None) -> None:
        """
        End tracking an operation.

        Args:
            name: Operation name
            rows_processed: Number of rows processed
            success: Whether operation succeeded
            error: Error message if failed
        """
        memory_mb = self._get_memory_usage()

        with self._lock:
            operation = self.current_operations.pop(name, None)
            if operation is None:
                logger.warning("metrics.operation.not_found", operation=name)
                return

            operation.end_time = time.perf_counter()
            operation.duration_seconds = operation.end_time - operation.start_time
            operation.rows_processed = rows_processed
            operation.memory_mb_end = memory_mb
            operation.success = success
            operation.error = error

            self.run_metrics.operations.append(operation)
            self.run_metrics.total_rows_processed += rows_processed
            self.run_metrics.memory_mb_peak = max(
                self.run_metrics.memory_mb_peak,
                operation.memory_mb_start,
                operation.memory_mb_end
            )
            if not success:
                self.run_metrics.errors_encountered += 1

        logger.debug("metrics.operation.end",
                    operation=name,
                    duration=round(operation.duration_seconds, 3),
                    rows=rows_processed,
                    memory_mb=round(memory_mb, 2),
                    success=success)

    @contextmanager
    def operation(self, name: str):
        """
        Context manager that times an operation.

        Example:
            with metrics.operation("dedupe.A") as op:
                ...
                op["rows"] = 1000
        """
        details: Dict[str, Any] = {"rows": 0}
        self.start_operation(name)
        try:
            yield details
        except Exception as e:
            self.end_operation(name, rows_processed=details["rows"],
                               success=False, error=str(e))
            raise
        self.end_operation(name, rows_processed=details["rows"])

    @property
    def elapsed_seconds(self) -> float:
        return self.run_metrics.duration_seconds

    def finalize(self) -> RunMetrics:
        """
        Finalize metrics collection.

        Returns:
            Final run metrics
        """
        self.run_metrics.end_time = time.perf_counter()

        logger.info("metrics.run.finalized",
                   duration=round(self.run_metrics.duration_seconds, 3),
                   operations=len(self.run_metrics.operations),
                   rows=self.run_metrics.total_rows_processed,
                   memory_mb_peak=round(self.run_metrics.memory_mb_peak, 2),
                   errors=self.run_metrics.errors_encountered)

        return self.run_metrics

    def generate_report(self) -> Dict[str, Any]:
        """
        Generate metrics report.

        Returns:
            Metrics report dictionary
        """
        metrics = self.run_metrics
        duration = metrics.duration_seconds
        rows_per_second = metrics.total_rows_processed / duration if duration > 0 else 0

        return {
            "summary": {
                "total_duration_seconds": round(duration, 3),
                "total_rows_processed": metrics.total_rows_processed,
                "rows_per_second": round(rows_per_second, 0),
                "memory_mb_peak": round(metrics.memory_mb_peak, 2),
                "errors_encountered": metrics.errors_encountered
            },
            "operations": [
                {
                    "name": op.name,
                    "duration_seconds": round(op.duration_seconds or 0, 3),
                    "rows": op.rows_processed,
                    "success": op.success
                }
                for op in metrics.operations
            ]
        }

    def _get_memory_usage(self) -> float:
        """
        Get current memory usage in MB.

        Returns:
            Memory usage in MB
        """
        return self.process.memory_info().rss / (1024 * 1024)
