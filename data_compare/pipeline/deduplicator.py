"""
Row deduplication.
Single responsibility: collapse rows that are identical after normalization.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from ..config.manager import NormalizationRules, Side
from ..core.models import Dataset, DuplicateEntry, NormalizedRow, Row
from ..utils.logger import get_logger
from ..utils.normalizers import normalize_row


logger = get_logger()


Signature = Tuple[str, ...]


class RowNormalizationError(Exception):
    """Raised when a single row cannot be normalized."""

    def __init__(self, index: int, message: str):
        super().__init__(f"Row {index}: {message}")
        self.index = index


@dataclass
class DedupeResult:
    """Unique rows of one source and what was collapsed to get them."""

    unique_rows: List[NormalizedRow] = field(default_factory=list)
    duplicate_count: int = 0
    skipped_count: int = 0
    duplicates: List[DuplicateEntry] = field(default_factory=list)


def row_signature(row: NormalizedRow, headers: Tuple[str, ...]) -> Signature:
    """
    Canonical signature of a normalized row.

    Values are taken strictly in header order so two rows with equal values
    always share a signature, whatever order their fields were inserted in.
    """
    return tuple(row.get(header, "") for header in headers)


class RowDeduplicator:
    """
    Remove exact duplicate rows within one source.

    The first occurrence of each signature is kept; every later occurrence
    is counted and reported through ``DedupeResult.duplicates``.
    """

    def __init__(self, rules: NormalizationRules):
        """
        Initialize deduplicator.

        Args:
            rules: Normalization rules for the run
        """
        self.rules = rules

    def _normalize(self, index: int, row: Row, dataset: Dataset,
                   side: Side) -> NormalizedRow:
        try:
            return normalize_row(row, dataset.headers, side, self.rules)
        except Exception as e:
            raise RowNormalizationError(index, str(e)) from e

    def dedupe(self, dataset: Dataset, side: Side) -> DedupeResult:
        """
        Deduplicate a dataset.

        Args:
            dataset: Source dataset
            side: Which source the dataset is

        Returns:
            Unique rows with duplicate and skipped counts
        """
        logger.debug("deduplicator.starting",
                    side=side.value,
                    dataset=dataset.name,
                    rows=len(dataset))

        result = DedupeResult()
        first_seen: Dict[Signature, NormalizedRow] = {}
        occurrences: Dict[Signature, int] = {}

        for index, row in enumerate(dataset.rows):
            try:
                normalized = self._normalize(index, row, dataset, side)
            except RowNormalizationError as e:
                result.skipped_count += 1
                logger.debug("deduplicator.row_skipped",
                            side=side.value,
                            error=str(e))
                continue

            signature = row_signature(normalized, dataset.headers)
            if signature in first_seen:
                occurrences[signature] += 1
                result.duplicate_count += 1
            else:
                first_seen[signature] = normalized
                occurrences[signature] = 1
                result.unique_rows.append(normalized)

        result.duplicates = [
            DuplicateEntry(row=first_seen[signature], count=count)
            for signature, count in occurrences.items()
            if count > 1
        ]

        logger.debug("deduplicator.completed",
                    side=side.value,
                    unique=len(result.unique_rows),
                    duplicates=result.duplicate_count,
                    skipped=result.skipped_count)

        return result


def dedupe(dataset: Dataset, rules: NormalizationRules, side: Side) -> DedupeResult:
    """Deduplicate ``dataset`` with a one-off ``RowDeduplicator``."""
    return RowDeduplicator(rules).dedupe(dataset, side)
