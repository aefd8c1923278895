"""
Universal file reader.
Single responsibility: decode source files into datasets.
"""

import csv
import io
from itertools import islice
from pathlib import Path
from typing import List, Optional, Tuple
import pandas as pd

from ..core.models import Dataset
from ..utils.logger import get_logger


logger = get_logger()


# Try different encodings in order of likelihood
ENCODINGS = ['utf-8', 'utf-8-sig', 'cp1252', 'latin-1']

# Candidate delimiters when none is given; anything else is never sniffed
SNIFF_DELIMITERS = ",;\t|"
SNIFF_SAMPLE_LINES = 50


def sniff_delimiter(sample: str) -> str:
    """
    Guess the delimiter of a CSV sample.

    Single-column files have no delimiter to find and read as comma
    separated.
    """
    try:
        return csv.Sniffer().sniff(sample, delimiters=SNIFF_DELIMITERS).delimiter
    except csv.Error:
        return ","


def header_width(sample: str, delimiter: str) -> int:
    """Number of fields in the header line of a sample."""
    return len(next(csv.reader(io.StringIO(sample), delimiter=delimiter), []))


class UniversalFileReader:
    """
    Reads CSV and Excel files as text-only tables.

    Every cell is kept as the string found in the file; nothing is coerced
    to numbers or NaN, since leading zeros and date spellings matter for
    matching.
    """

    def __init__(self, delimiter: Optional[str] = None):
        """
        Initialize file reader.

        Args:
            delimiter: CSV delimiter (sniffed from the file when None)
        """
        self.delimiter = delimiter

    def read_csv(self, file_path: Path) -> pd.DataFrame:
        """
        Read CSV file with automatic encoding and delimiter detection.

        Rows with more fields than the header are kept, truncated to the
        header width, and counted in the log.

        Args:
            file_path: Path to CSV file

        Returns:
            DataFrame of strings
        """
        logger.info("file_reader.csv.reading", file=str(file_path))

        df = None
        successful_encoding = None
        delimiter = self.delimiter
        long_rows: List[List[str]] = []

        for encoding in ENCODINGS:
            long_rows.clear()
            try:
                with open(file_path, encoding=encoding, newline="") as f:
                    sample = "".join(islice(f, SNIFF_SAMPLE_LINES)).lstrip("\ufeff")

                delimiter = self.delimiter or sniff_delimiter(sample)
                width = header_width(sample, delimiter)

                def keep_long_row(fields: List[str]) -> List[str]:
                    long_rows.append(fields)
                    return fields[:width]

                df = pd.read_csv(
                    file_path,
                    sep=delimiter,
                    engine="python",
                    dtype=str,
                    keep_default_na=False,
                    skip_blank_lines=True,
                    index_col=False,
                    encoding=encoding,
                    on_bad_lines=keep_long_row
                )
                successful_encoding = encoding
                break
            except (UnicodeDecodeError, UnicodeError):
                continue

        if df is None:
            raise ValueError(f"Could not decode {file_path} with any of {ENCODINGS}")

        if long_rows:
            logger.warning("file_reader.csv.long_rows_truncated",
                          file=str(file_path),
                          rows=len(long_rows),
                          expected_fields=len(df.columns))

        logger.info("file_reader.csv.loaded",
                   rows=len(df),
                   columns=len(df.columns),
                   delimiter=delimiter,
                   encoding=successful_encoding)

        return df

    def read_excel(self, file_path: Path, sheet_name=0) -> pd.DataFrame:
        """
        Read Excel file.

        Args:
            file_path: Path to Excel file
            sheet_name: Sheet to read

        Returns:
            DataFrame of strings
        """
        logger.info("file_reader.excel.reading",
                   file=str(file_path),
                   sheet=sheet_name)

        df = pd.read_excel(file_path, sheet_name=sheet_name, dtype=str,
                           keep_default_na=False)

        logger.info("file_reader.excel.loaded",
                   rows=len(df),
                   columns=len(df.columns))

        return df

    def read(self, file_path: Path) -> pd.DataFrame:
        """
        Read any supported file type.

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If file type is not supported
        """
        file_path = Path(file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        suffix = file_path.suffix.lower()

        if suffix in ['.csv', '.txt']:
            return self.read_csv(file_path)
        if suffix in ['.xlsx', '.xls']:
            return self.read_excel(file_path)
        raise ValueError(f"Unsupported file type: {suffix}")

    def read_dataset(self, file_path: Path, name: Optional[str] = None) -> Dataset:
        """
        Read a file into a Dataset.

        Args:
            file_path: Path to file
            name: Dataset name (defaults to the file name)

        Returns:
            Dataset with headers in file column order
        """
        file_path = Path(file_path)
        df = self.read(file_path)
        headers, rows = dataframe_to_rows(df)
        return Dataset(name=name or file_path.name, headers=headers, rows=rows)


def dataframe_to_rows(df: pd.DataFrame) -> Tuple[List[str], List[dict]]:
    """
    Split a DataFrame into ordered headers and plain dict rows.

    Args:
        df: DataFrame read as text

    Returns:
        (headers, rows)
    """
    df = df.copy()
    df.columns = [str(c) for c in df.columns]
    df = df.fillna("")
    return list(df.columns), df.to_dict(orient="records")
