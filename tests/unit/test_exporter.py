"""
Unit tests for ReportExporter.
"""

import csv
import json
from pathlib import Path
import sys

# Add project root to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from data_compare.adapters.exporter import ReportExporter
from data_compare.core.models import ComparisonResult, ComparisonStats, DuplicateEntry


def make_result(**overrides):
    values = dict(
        stats=ComparisonStats(total_a=3, total_b=2, matched=1,
                              missing_in_a=1, missing_in_b=1, duplicates_a=1),
        source_a_name="ledger.csv",
        source_b_name="bank.csv",
        timestamp="2025-01-02T03:04:05.678+00:00",
        rows_missing_in_b=[{"ID": "100", "NAME": "Bob"}],
        rows_missing_in_a=[{"REF": "300", "NAME": "Dan"}],
        duplicated_rows_a=[DuplicateEntry(row={"ID": "1", "NAME": "Ann"}, count=2)],
    )
    values.update(overrides)
    return ComparisonResult(**values)


def read_csv(path, delimiter=";"):
    with open(path, newline="") as f:
        return list(csv.reader(f, delimiter=delimiter))


class TestReportExporter:
    """Test cases for discrepancy file export."""

    def test_file_names(self, tmp_path):
        written = ReportExporter(tmp_path).export(make_result())

        stamp = "2025-01-02T03-04-05-678-00-00"
        assert written["missing_in_b"].name == f"ledger_missing_in_bank_{stamp}.csv"
        assert written["missing_in_a"].name == f"bank_missing_in_ledger_{stamp}.csv"
        assert written["duplicates_a"].name == f"ledger_duplicates_{stamp}.csv"
        assert written["summary"].name == f"summary_{stamp}.json"

    def test_empty_reports_are_not_written(self, tmp_path):
        written = ReportExporter(tmp_path).export(make_result())

        assert "duplicates_b" not in written
        assert len(list(tmp_path.iterdir())) == 4

    def test_semicolon_delimited_rows(self, tmp_path):
        written = ReportExporter(tmp_path).export(make_result())

        assert read_csv(written["missing_in_b"]) == [["ID", "NAME"], ["100", "Bob"]]

    def test_duplicates_have_count_column(self, tmp_path):
        written = ReportExporter(tmp_path).export(make_result())

        assert read_csv(written["duplicates_a"]) == [["ID", "NAME", "Count"],
                                                    ["1", "Ann", "2"]]

    def test_custom_delimiter(self, tmp_path):
        written = ReportExporter(tmp_path, delimiter=",").export(make_result())

        assert read_csv(written["missing_in_a"], ",") == [["REF", "NAME"], ["300", "Dan"]]

    def test_leading_zeros_survive(self, tmp_path):
        result = make_result(rows_missing_in_b=[{"ID": "007"}])

        written = ReportExporter(tmp_path).export(result)

        assert read_csv(written["missing_in_b"]) == [["ID"], ["007"]]

    def test_summary_contents(self, tmp_path):
        written = ReportExporter(tmp_path).export(make_result())

        summary = json.loads(written["summary"].read_text())

        assert summary["source_a_name"] == "ledger.csv"
        assert summary["stats"]["matched"] == 1
        assert summary["stats"]["match_rate"] == 33.3
        assert "rows_missing_in_b" not in summary

    def test_creates_output_directory(self, tmp_path):
        target = tmp_path / "nested" / "reports"

        ReportExporter(target).export(make_result())

        assert target.is_dir()

    def test_same_named_sources_get_distinct_files(self, tmp_path):
        result = make_result(
            source_a_name="export.csv",
            source_b_name="export.csv",
            duplicated_rows_b=[DuplicateEntry(row={"REF": "9", "NAME": "Zed"}, count=2)]
        )

        written = ReportExporter(tmp_path).export(result)

        stamp = "2025-01-02T03-04-05-678-00-00"
        assert written["missing_in_b"].name == f"export_A_missing_in_export_B_{stamp}.csv"
        assert written["missing_in_a"].name == f"export_B_missing_in_export_A_{stamp}.csv"
        assert written["duplicates_a"].name == f"export_A_duplicates_{stamp}.csv"
        assert written["duplicates_b"].name == f"export_B_duplicates_{stamp}.csv"
        assert len(list(tmp_path.glob("*.csv"))) == 4
        assert read_csv(written["missing_in_b"])[1] == ["100", "Bob"]
        assert read_csv(written["missing_in_a"])[1] == ["300", "Dan"]
