"""
Discrepancy report export.
Single responsibility: write comparison results to CSV and JSON files.
"""

import json
import re
from pathlib import Path
from typing import Any, Dict, List, Optional
import pandas as pd

from ..core.models import ComparisonResult
from ..utils.logger import get_logger


logger = get_logger()


def _stem(name: str) -> str:
    """Source name without its file extension."""
    return re.sub(r"\.[^/.]+$", "", name)


def _file_stamp(timestamp: str) -> str:
    return re.sub(r"[:.+]", "-", timestamp)


class ReportExporter:
    """
    Export missing and duplicated rows as delimited CSV files.
    """

    def __init__(self, output_dir: Path, delimiter: str = ";"):
        """
        Initialize exporter.

        Args:
            output_dir: Directory reports are written to
            delimiter: CSV field delimiter
        """
        self.output_dir = Path(output_dir)
        self.delimiter = delimiter

    def write_rows(self, records: List[Dict[str, Any]], filename: str) -> Optional[Path]:
        """
        Write row records to a CSV file.

        Args:
            records: Plain field -> value mappings
            filename: Target file name inside the output directory

        Returns:
            Written path, or None when there was nothing to write
        """
        if not records:
            return None

        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / filename

        pd.DataFrame.from_records(records).to_csv(path, sep=self.delimiter,
                                                  index=False)

        logger.info("exporter.csv.written", file=str(path), rows=len(records))
        return path

    def export(self, result: ComparisonResult) -> Dict[str, Path]:
        """
        Export every non-empty report of a comparison.

        Args:
            result: Comparison result

        Returns:
            Report kind -> written path
        """
        name_a = _stem(result.source_a_name)
        name_b = _stem(result.source_b_name)
        if name_a.lower() == name_b.lower():
            # Same-named sources would write every report pair to one path
            name_a, name_b = f"{name_a}_A", f"{name_b}_B"
        stamp = _file_stamp(result.timestamp)

        reports = {
            "missing_in_b": (
                [dict(row) for row in result.rows_missing_in_b],
                f"{name_a}_missing_in_{name_b}_{stamp}.csv"),
            "missing_in_a": (
                [dict(row) for row in result.rows_missing_in_a],
                f"{name_b}_missing_in_{name_a}_{stamp}.csv"),
            "duplicates_a": (
                [entry.to_record() for entry in result.duplicated_rows_a],
                f"{name_a}_duplicates_{stamp}.csv"),
            "duplicates_b": (
                [entry.to_record() for entry in result.duplicated_rows_b],
                f"{name_b}_duplicates_{stamp}.csv"),
        }

        written: Dict[str, Path] = {}
        for kind, (records, filename) in reports.items():
            path = self.write_rows(records, filename)
            if path is not None:
                written[kind] = path

        written["summary"] = self.write_summary(result, f"summary_{stamp}.json")
        return written

    def write_summary(self, result: ComparisonResult, filename: str) -> Path:
        """Write run metadata and stats as JSON."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / filename

        data = result.to_dict()
        summary = {
            "timestamp": data["timestamp"],
            "source_a_name": data["source_a_name"],
            "source_b_name": data["source_b_name"],
            "stats": data["stats"],
        }

        with open(path, "w") as f:
            json.dump(summary, f, indent=2)

        logger.info("exporter.summary.written", file=str(path))
        return path
