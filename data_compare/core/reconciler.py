"""
Key reconciliation.
Single responsibility: partition keys into matched, only-in-A and only-in-B.
"""

from dataclasses import dataclass, field
from typing import List

from ..core.models import NormalizedRow
from ..pipeline.indexer import CompositeKey, KeyIndex, format_key
from ..utils.logger import get_logger


logger = get_logger()


@dataclass
class Reconciliation:
    """Outcome of comparing two key indexes."""

    keys_only_in_a: List[CompositeKey] = field(default_factory=list)
    keys_only_in_b: List[CompositeKey] = field(default_factory=list)
    matched_key_count: int = 0
    rows_missing_in_b: List[NormalizedRow] = field(default_factory=list)
    rows_missing_in_a: List[NormalizedRow] = field(default_factory=list)


def _missing_keys(own: KeyIndex, other: KeyIndex) -> List[CompositeKey]:
    return [key for key in own.keys if key not in other]


def _rows_for_keys(own: KeyIndex, keys: List[CompositeKey]) -> List[NormalizedRow]:
    rows: List[NormalizedRow] = []
    for key in keys:
        rows.extend(own.rows_for(key))
    return rows


class Reconciler:
    """
    Compare two key indexes without mutating either.
    """

    def reconcile(self, index_a: KeyIndex, index_b: KeyIndex) -> Reconciliation:
        """
        Reconcile the keys of both sources.

        Every row filed under a missing key is reported, so the missing row
        count can exceed the missing key count.

        Args:
            index_a: Key index of Source A
            index_b: Key index of Source B

        Returns:
            Reconciliation with missing keys and rows for each direction
        """
        keys_only_in_a = _missing_keys(index_a, index_b)
        keys_only_in_b = _missing_keys(index_b, index_a)

        result = Reconciliation(
            keys_only_in_a=keys_only_in_a,
            keys_only_in_b=keys_only_in_b,
            matched_key_count=len(index_a) - len(keys_only_in_a),
            rows_missing_in_b=_rows_for_keys(index_a, keys_only_in_a),
            rows_missing_in_a=_rows_for_keys(index_b, keys_only_in_b),
        )

        logger.debug("reconciler.completed",
                    matched=result.matched_key_count,
                    keys_only_in_a=len(keys_only_in_a),
                    keys_only_in_b=len(keys_only_in_b),
                    sample_only_in_a=[format_key(k) for k in keys_only_in_a[:5]],
                    sample_only_in_b=[format_key(k) for k in keys_only_in_b[:5]])

        return result


def reconcile(index_a: KeyIndex, index_b: KeyIndex) -> Reconciliation:
    """Reconcile two key indexes."""
    return Reconciler().reconcile(index_a, index_b)
