"""
Comparison data model.
Single responsibility: hold datasets and comparison outcomes.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Tuple


Row = Mapping[str, Any]
NormalizedRow = Dict[str, str]

COUNT_COLUMN = "Count"


@dataclass(frozen=True)
class Dataset:
    """A loaded table: ordered headers plus raw rows."""

    name: str
    headers: Tuple[str, ...]
    rows: Tuple[Row, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "headers", tuple(self.headers))
        object.__setattr__(self, "rows", tuple(self.rows))
        if len(set(self.headers)) != len(self.headers):
            duplicates = sorted({h for h in self.headers
                                 if self.headers.count(h) > 1})
            raise ValueError(f"Duplicate headers in {self.name}: {duplicates}")

    def __len__(self) -> int:
        return len(self.rows)


@dataclass
class DuplicateEntry:
    """A row that occurred more than once, with its total occurrence count."""

    row: NormalizedRow
    count: int

    def to_record(self) -> Dict[str, Any]:
        """
        Flatten for CSV export with a trailing Count column.

        A source column already named Count keeps its value; the occurrence
        count then goes to the first free name of Count_1, Count_2, ...
        """
        record: Dict[str, Any] = dict(self.row)
        column = COUNT_COLUMN
        suffix = 1
        while column in record:
            column = f"{COUNT_COLUMN}_{suffix}"
            suffix += 1
        record[column] = self.count
        return record


@dataclass
class ComparisonStats:
    """Aggregate counts for a comparison run."""

    total_a: int = 0
    total_b: int = 0
    valid_unique_a: int = 0
    valid_unique_b: int = 0
    duplicates_a: int = 0
    duplicates_b: int = 0
    missing_in_a: int = 0  # rows of B whose key is absent from A
    missing_in_b: int = 0  # rows of A whose key is absent from B
    matched: int = 0       # keys present in both
    skipped_a: int = 0
    skipped_b: int = 0

    @property
    def match_rate(self) -> float:
        """Matched keys as a percentage of matched plus missing rows."""
        union = self.matched + self.missing_in_a + self.missing_in_b
        if union == 0:
            return 0.0
        return round(self.matched / union * 100, 1)


@dataclass
class ComparisonResult:
    """Results from reconciling two datasets."""

    stats: ComparisonStats
    source_a_name: str
    source_b_name: str
    timestamp: str
    rows_missing_in_b: List[NormalizedRow] = field(default_factory=list)
    rows_missing_in_a: List[NormalizedRow] = field(default_factory=list)
    duplicated_rows_a: List[DuplicateEntry] = field(default_factory=list)
    duplicated_rows_b: List[DuplicateEntry] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Plain-data view used for JSON summaries and equality checks."""
        return {
            "timestamp": self.timestamp,
            "source_a_name": self.source_a_name,
            "source_b_name": self.source_b_name,
            "stats": {
                "total_a": self.stats.total_a,
                "total_b": self.stats.total_b,
                "valid_unique_a": self.stats.valid_unique_a,
                "valid_unique_b": self.stats.valid_unique_b,
                "duplicates_a": self.stats.duplicates_a,
                "duplicates_b": self.stats.duplicates_b,
                "missing_in_a": self.stats.missing_in_a,
                "missing_in_b": self.stats.missing_in_b,
                "matched": self.stats.matched,
                "skipped_a": self.stats.skipped_a,
                "skipped_b": self.stats.skipped_b,
                "match_rate": self.stats.match_rate,
            },
            "rows_missing_in_b": [dict(r) for r in self.rows_missing_in_b],
            "rows_missing_in_a": [dict(r) for r in self.rows_missing_in_a],
            "duplicated_rows_a": [e.to_record() for e in self.duplicated_rows_a],
            "duplicated_rows_b": [e.to_record() for e in self.duplicated_rows_b],
        }
