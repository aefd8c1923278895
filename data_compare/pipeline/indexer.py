"""
Composite key indexing.
Single responsibility: map each unique row to its comparison key.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence, Tuple

from ..config.manager import KeyMapping, Side
from ..core.models import NormalizedRow
from ..utils.logger import get_logger


logger = get_logger()


CompositeKey = Tuple[str, ...]

KEY_DISPLAY_SEPARATOR = "|"


def format_key(key: CompositeKey) -> str:
    """Render a composite key for logs and reports."""
    return KEY_DISPLAY_SEPARATOR.join(key)


def build_key(row: NormalizedRow, key_fields: Sequence[str]) -> CompositeKey:
    """
    Build the composite key of a normalized row.

    Args:
        row: Normalized row
        key_fields: Field names in key mapping order

    Returns:
        Tuple of key values; absent fields read as empty strings
    """
    return tuple(row.get(name, "") for name in key_fields)


@dataclass
class KeyIndex:
    """Rows of one source grouped by composite key, in first-seen order."""

    key_to_rows: Dict[CompositeKey, List[NormalizedRow]] = field(default_factory=dict)

    @property
    def keys(self) -> List[CompositeKey]:
        return list(self.key_to_rows)

    @property
    def key_set(self) -> frozenset:
        return frozenset(self.key_to_rows)

    def __contains__(self, key: CompositeKey) -> bool:
        return key in self.key_to_rows

    def __len__(self) -> int:
        return len(self.key_to_rows)

    def rows_for(self, key: CompositeKey) -> List[NormalizedRow]:
        return self.key_to_rows.get(key, [])


class KeyIndexer:
    """
    Index unique rows by their composite comparison key.

    Rows that share a key are all kept under it; the key mapping alone may
    not distinguish records that differ in non-key fields.
    """

    def __init__(self, key_mappings: Sequence[KeyMapping]):
        """
        Initialize indexer.

        Args:
            key_mappings: Ordered key mappings shared by both sides
        """
        self.key_mappings = tuple(key_mappings)

    def index(self, rows: Iterable[NormalizedRow], side: Side) -> KeyIndex:
        """
        Build the key index for one source.

        Args:
            rows: Unique normalized rows
            side: Which source the rows come from

        Returns:
            Key index
        """
        key_fields = [mapping.field_for(side) for mapping in self.key_mappings]
        index = KeyIndex()

        for row in rows:
            key = build_key(row, key_fields)
            index.key_to_rows.setdefault(key, []).append(row)

        logger.debug("indexer.completed",
                    side=side.value,
                    key_fields=key_fields,
                    keys=len(index))

        return index


def index(unique_rows: Iterable[NormalizedRow], key_mappings: Sequence[KeyMapping],
          side: Side) -> KeyIndex:
    """Index ``unique_rows`` with a one-off ``KeyIndexer``."""
    return KeyIndexer(key_mappings).index(unique_rows, side)
