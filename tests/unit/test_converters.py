"""
Unit tests for date conversion heuristics.
"""

import pytest
from datetime import date
from pathlib import Path
import sys

# Add project root to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from data_compare.utils.converters import parse_date, title_case_month, to_iso_date


class TestTitleCaseMonth:

    def test_upper_case_month_is_title_cased(self):
        assert title_case_month("3-DEC-25") == "3-Dec-25"

    def test_lower_case_month_is_title_cased(self):
        assert title_case_month("03-dec-2025") == "03-Dec-2025"

    def test_other_shapes_untouched(self):
        assert title_case_month("DEC-3-25") == "DEC-3-25"
        assert title_case_month("3-DECE-25") == "3-DECE-25"


class TestParseDate:

    @pytest.mark.parametrize("value, expected", [
        ("25/12/2024", date(2024, 12, 25)),
        ("5/1/2024", date(2024, 1, 5)),
        ("05-01-2024", date(2024, 1, 5)),
        ("2024-1-5", date(2024, 1, 5)),
        ("2024-01-05T10:20:30", date(2024, 1, 5)),
        ("12/25/2024", date(2024, 12, 25)),
        ("3-DEC-25", date(2025, 12, 3)),
        ("03-Dec-25", date(2025, 12, 3)),
        ("3-dec-2025", date(2025, 12, 3)),
        ("03-DEC-2025", date(2025, 12, 3)),
    ])
    def test_known_formats(self, value, expected):
        assert parse_date(value) == expected

    def test_day_first_wins_when_ambiguous(self):
        """Business exports are day-first: 01/02/2024 is 1 February."""
        assert parse_date("01/02/2024") == date(2024, 2, 1)

    def test_strict_iso_accepted_without_year_check(self):
        assert parse_date("1800-01-01") == date(1800, 1, 1)

    def test_invalid_iso_falls_through_and_fails(self):
        assert parse_date("2024-02-30") is None
        assert parse_date("2024-13-01") is None

    def test_year_out_of_range_rejected(self):
        assert parse_date("01/01/1899") is None
        assert parse_date("01/01/2100") is None
        assert parse_date("01/01/1900") is None

    @pytest.mark.parametrize("value", ["", "1-2-3", "ABC", "3-XYZ-25", "20240105", "31/02/2024"])
    def test_unparseable_values(self, value):
        assert parse_date(value) is None


class TestToIsoDate:

    def test_renders_iso(self):
        assert to_iso_date("3-DEC-25") == "2025-12-03"

    def test_iso_input_is_unchanged(self):
        assert to_iso_date("2024-06-30") == "2024-06-30"

    def test_failure_returns_none(self):
        assert to_iso_date("nope") is None
