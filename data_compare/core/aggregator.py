"""
Result aggregation.
Single responsibility: assemble the final comparison result.
"""

from datetime import datetime, timezone
from typing import Optional

from ..core.models import ComparisonResult, ComparisonStats, Dataset
from ..core.reconciler import Reconciliation
from ..pipeline.deduplicator import DedupeResult


class ResultAggregator:
    """Package per-source and reconciliation counts into a ComparisonResult."""

    def aggregate(self, dataset_a: Dataset, dataset_b: Dataset,
                  dedup_a: DedupeResult, dedup_b: DedupeResult,
                  reconciliation: Reconciliation,
                  timestamp: Optional[str] = None) -> ComparisonResult:
        stats = ComparisonStats(
            total_a=len(dataset_a),
            total_b=len(dataset_b),
            valid_unique_a=len(dedup_a.unique_rows),
            valid_unique_b=len(dedup_b.unique_rows),
            duplicates_a=dedup_a.duplicate_count,
            duplicates_b=dedup_b.duplicate_count,
            missing_in_a=len(reconciliation.rows_missing_in_a),
            missing_in_b=len(reconciliation.rows_missing_in_b),
            matched=reconciliation.matched_key_count,
            skipped_a=dedup_a.skipped_count,
            skipped_b=dedup_b.skipped_count,
        )

        return ComparisonResult(
            stats=stats,
            source_a_name=dataset_a.name,
            source_b_name=dataset_b.name,
            timestamp=timestamp or datetime.now(timezone.utc).isoformat(),
            rows_missing_in_b=list(reconciliation.rows_missing_in_b),
            rows_missing_in_a=list(reconciliation.rows_missing_in_a),
            duplicated_rows_a=list(dedup_a.duplicates),
            duplicated_rows_b=list(dedup_b.duplicates),
        )


def aggregate(dataset_a: Dataset, dataset_b: Dataset,
              dedup_a: DedupeResult, dedup_b: DedupeResult,
              reconciliation: Reconciliation) -> ComparisonResult:
    return ResultAggregator().aggregate(dataset_a, dataset_b, dedup_a, dedup_b,
                                        reconciliation)
