"""
Date conversion utilities.
Single responsibility: turn loosely formatted date strings into ISO dates.
"""

import re
from datetime import date, datetime
from typing import Optional


ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
DAY_MONTH_ABBREV_YEAR = re.compile(r"^\d{1,2}-[A-Za-z]{3}-\d{2,4}$")

# Probed in priority order, day-first before month-first. %d and %m accept
# one or two digits, so each entry covers both the padded and unpadded form
# (d/M/yyyy and dd/MM/yyyy, d-MMM-yy and dd-MMM-yy, ...).
DATE_FORMATS = (
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%Y-%m-%d",
    "%Y-%m-%dT%H:%M:%S",
    "%m/%d/%Y",
    "%d-%b-%y",
    "%d-%b-%Y",
)

MIN_YEAR = 1900
MAX_YEAR = 2100


def title_case_month(val: str) -> str:
    """
    Re-case a day-month-year value with an abbreviated month to title case.

    Examples:
        >>> title_case_month("3-DEC-25")
        '3-Dec-25'
        >>> title_case_month("2024-01-01")
        '2024-01-01'
    """
    if DAY_MONTH_ABBREV_YEAR.match(val):
        return val.title()
    return val


def _parse_iso(val: str) -> Optional[date]:
    if not ISO_DATE.match(val):
        return None
    try:
        return date.fromisoformat(val)
    except ValueError:
        return None


def parse_date(val: str) -> Optional[date]:
    """
    Parse a date string using the known business export formats.

    A strict ISO ``YYYY-MM-DD`` value is accepted without probing. Otherwise
    the first format that parses and yields a year strictly between 1900
    and 2100 wins; the year check rejects short numeric strings that happen
    to parse.

    Args:
        val: Trimmed input string

    Returns:
        Parsed date or None if no format matched
    """
    if not val:
        return None

    val = title_case_month(val)

    parsed = _parse_iso(val)
    if parsed is not None:
        return parsed

    for fmt in DATE_FORMATS:
        try:
            candidate = datetime.strptime(val, fmt)
        except ValueError:
            continue
        if MIN_YEAR < candidate.year < MAX_YEAR:
            return candidate.date()

    return None


def to_iso_date(val: str) -> Optional[str]:
    """
    Convert a date string to ``yyyy-MM-dd``.

    Examples:
        >>> to_iso_date("3-DEC-25")
        '2025-12-03'
        >>> to_iso_date("25/12/2024")
        '2024-12-25'
        >>> to_iso_date("ABC") is None
        True
    """
    parsed = parse_date(val)
    if parsed is None:
        return None
    return parsed.isoformat()
