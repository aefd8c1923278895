"""
Unit tests for MetricsCollector.
"""

import pytest
from pathlib import Path
import sys

# Add project root to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from data_compare.utils.metrics import MetricsCollector


class TestMetricsCollector:

    def setup_method(self):
        self.metrics = MetricsCollector()

    def test_operation_context_records_rows(self):
        with self.metrics.operation("source.A") as op:
            op["rows"] = 42

        run = self.metrics.finalize()

        assert [o.name for o in run.operations] == ["source.A"]
        assert run.total_rows_processed == 42
        assert run.operations[0].success
        assert run.duration_seconds >= 0

    def test_failed_operation_is_recorded_and_reraised(self):
        with pytest.raises(RuntimeError):
            with self.metrics.operation("reconcile"):
                raise RuntimeError("boom")

        assert self.metrics.run_metrics.errors_encountered == 1
        assert self.metrics.run_metrics.operations[0].error == "boom"

    def test_ending_unknown_operation_is_ignored(self):
        self.metrics.end_operation("never-started")

        assert self.metrics.run_metrics.operations == []

    def test_report(self):
        with self.metrics.operation("source.B") as op:
            op["rows"] = 10
        self.metrics.finalize()

        report = self.metrics.generate_report()

        assert report["summary"]["total_rows_processed"] == 10
        assert report["operations"][0]["name"] == "source.B"
        assert report["summary"]["memory_mb_peak"] > 0
