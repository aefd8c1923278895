"""
Unit tests for UniversalFileReader.
"""

import pandas as pd
import pytest
from pathlib import Path
import sys

# Add project root to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from data_compare.adapters.file_reader import (
    UniversalFileReader,
    dataframe_to_rows,
    sniff_delimiter,
)


class TestUniversalFileReader:
    """Test cases for reading source files as text."""

    def test_values_stay_text(self, tmp_path):
        path = tmp_path / "ledger.csv"
        path.write_text("ID;AMOUNT;NOTE\n007;1.50;\n010;2;NA\n")

        dataset = UniversalFileReader(delimiter=";").read_dataset(path)

        assert dataset.name == "ledger.csv"
        assert dataset.headers == ("ID", "AMOUNT", "NOTE")
        assert dataset.rows[0] == {"ID": "007", "AMOUNT": "1.50", "NOTE": ""}
        assert dataset.rows[1]["NOTE"] == "NA"

    def test_blank_lines_are_skipped(self, tmp_path):
        path = tmp_path / "bank.csv"
        path.write_text("REF,NAME\n1,a\n\n2,b\n\n")

        dataset = UniversalFileReader(delimiter=",").read_dataset(path)

        assert [r["REF"] for r in dataset.rows] == ["1", "2"]

    def test_delimiter_is_sniffed(self, tmp_path):
        path = tmp_path / "bank.csv"
        path.write_text("REF;NAME;CITY\n1;Ann;Oslo\n2;Bob;Rome\n3;Cy;Lima\n")

        dataset = UniversalFileReader().read_dataset(path, name="Bank")

        assert dataset.name == "Bank"
        assert dataset.headers == ("REF", "NAME", "CITY")
        assert len(dataset) == 3

    def test_latin1_fallback(self, tmp_path):
        path = tmp_path / "names.csv"
        path.write_bytes("ID,NAME\n1,Jos\xe9\n".encode("latin-1"))

        dataset = UniversalFileReader(delimiter=",").read_dataset(path)

        assert dataset.rows[0]["NAME"] == "Jos\xe9"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            UniversalFileReader().read(tmp_path / "missing.csv")

    def test_unsupported_extension(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text("{}")

        with pytest.raises(ValueError):
            UniversalFileReader().read(path)


def test_dataframe_to_rows_keeps_column_order():
    df = pd.DataFrame({"B": ["2"], "A": [None]})

    headers, rows = dataframe_to_rows(df)

    assert headers == ["B", "A"]
    assert rows == [{"B": "2", "A": ""}]


class TestDelimiterDetection:

    def test_single_column_file(self, tmp_path):
        path = tmp_path / "ids.csv"
        path.write_text("ID\n1\n2\n")

        dataset = UniversalFileReader().read_dataset(path)

        assert dataset.headers == ("ID",)
        assert [r["ID"] for r in dataset.rows] == ["1", "2"]

    def test_letters_are_never_delimiters(self):
        assert sniff_delimiter("ID\nIDA\nIDB\n") == ","

    @pytest.mark.parametrize("sample, expected", [
        ("A;B\n1;2\n3;4\n", ";"),
        ("A\tB\n1\t2\n3\t4\n", "\t"),
        ("A|B\n1|2\n3|4\n", "|"),
        ("A,B\n1,2\n3,4\n", ","),
    ])
    def test_common_delimiters(self, sample, expected):
        assert sniff_delimiter(sample) == expected


class TestLongRows:

    def test_rows_with_extra_fields_are_kept(self, tmp_path):
        path = tmp_path / "ledger.csv"
        path.write_text("ID,NAME\n1,x\n2,y,EXTRA\n3,z\n")

        dataset = UniversalFileReader(delimiter=",").read_dataset(path)

        assert dataset.headers == ("ID", "NAME")
        assert [r["ID"] for r in dataset.rows] == ["1", "2", "3"]
        assert dataset.rows[1] == {"ID": "2", "NAME": "y"}

    def test_first_data_row_with_extra_field_is_not_an_index(self, tmp_path):
        path = tmp_path / "ledger.csv"
        path.write_text("ID,NAME\n1,x,EXTRA\n2,y\n")

        dataset = UniversalFileReader(delimiter=",").read_dataset(path)

        assert dataset.headers == ("ID", "NAME")
        assert dataset.rows[0] == {"ID": "1", "NAME": "x"}
