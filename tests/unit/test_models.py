"""
Unit tests for the comparison data model and result aggregation.
"""

import pytest
from pathlib import Path
import sys

# Add project root to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from data_compare.config.manager import NormalizationRules, Side
from data_compare.core.aggregator import ResultAggregator
from data_compare.core.models import ComparisonStats, Dataset, DuplicateEntry
from data_compare.core.reconciler import Reconciliation
from data_compare.pipeline.deduplicator import RowDeduplicator


class TestDataset:

    def test_duplicate_headers_rejected(self):
        with pytest.raises(ValueError):
            Dataset(name="a.csv", headers=["ID", "NAME", "ID"])

    def test_length_is_row_count(self):
        assert len(Dataset(name="a.csv", headers=["ID"], rows=[{"ID": "1"}] * 3)) == 3


class TestComparisonStats:

    def test_match_rate(self):
        stats = ComparisonStats(matched=1, missing_in_a=1, missing_in_b=1)

        assert stats.match_rate == 33.3

    def test_match_rate_of_empty_run(self):
        assert ComparisonStats().match_rate == 0.0


def test_duplicate_entry_record_appends_count():
    entry = DuplicateEntry(row={"ID": "1", "NAME": "a"}, count=3)

    assert list(entry.to_record().items()) == [("ID", "1"), ("NAME", "a"), ("Count", 3)]
    assert "Count" not in entry.row


class TestResultAggregator:

    def test_counts_and_names(self):
        dataset_a = Dataset(name="a.csv", headers=["ID"],
                            rows=[{"ID": "1"}, {"ID": "1"}, None])
        dataset_b = Dataset(name="b.csv", headers=["ID"], rows=[{"ID": "2"}])
        deduplicator = RowDeduplicator(NormalizationRules())
        reconciliation = Reconciliation(
            keys_only_in_a=[("1",)],
            keys_only_in_b=[("2",)],
            matched_key_count=0,
            rows_missing_in_b=[{"ID": "1"}],
            rows_missing_in_a=[{"ID": "2"}]
        )

        result = ResultAggregator().aggregate(
            dataset_a, dataset_b,
            deduplicator.dedupe(dataset_a, Side.A),
            deduplicator.dedupe(dataset_b, Side.B),
            reconciliation,
            timestamp="2025-01-01T00:00:00+00:00"
        )

        assert result.timestamp == "2025-01-01T00:00:00+00:00"
        assert result.source_a_name == "a.csv"
        stats = result.stats
        assert (stats.total_a, stats.valid_unique_a, stats.duplicates_a, stats.skipped_a) == (3, 1, 1, 1)
        assert (stats.missing_in_a, stats.missing_in_b, stats.matched) == (1, 1, 0)
        assert result.duplicated_rows_a[0].count == 2


def test_duplicate_entry_keeps_source_count_column():
    entry = DuplicateEntry(row={"ID": "1", "Count": "7", "Count_1": "x"}, count=2)

    record = entry.to_record()

    assert record["Count"] == "7"
    assert record["Count_1"] == "x"
    assert record["Count_2"] == 2
