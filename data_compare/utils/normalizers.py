"""
Data normalization utilities.
Single responsibility: normalize and clean data values.
"""

import re
from typing import Any, Dict, Mapping, Sequence

from ..config.manager import NormalizationRules, Side
from .converters import to_iso_date


WHITESPACE = re.compile(r"\s+")
# Whitespace inside the run is only possible when whitespace trimming is off
LEADING_ZEROS = re.compile(r"^0[0\s]*")


def strip_all_whitespace(val: str) -> str:
    """
    Remove every whitespace character, internal ones included.

    Args:
        val: Input string

    Returns:
        String without whitespace
    """
    return WHITESPACE.sub("", val)


def remove_leading_zeros(val: str) -> str:
    """
    Remove leading zero characters, and any whitespace between them.

    An all-zero value becomes the empty string.

    Examples:
        >>> remove_leading_zeros("00700")
        '700'
        >>> remove_leading_zeros("000")
        ''
        >>> remove_leading_zeros("0 07")
        '7'
    """
    return LEADING_ZEROS.sub("", val)


def normalize_value(raw: Any, field_name: str, side: Side,
                    rules: NormalizationRules) -> str:
    """
    Normalize a single field value for matching.

    Steps run in a fixed order: edge trim, whitespace removal, leading zero
    removal, date canonicalization. Dates that cannot be parsed fall back to
    the value produced by the earlier steps.

    Args:
        raw: Raw field value (None reads as empty)
        field_name: Header the value belongs to
        side: Source the value comes from
        rules: Normalization rules for the run

    Returns:
        Normalized string
    """
    val = "" if raw is None else str(raw)
    val = val.strip()

    if rules.trim_whitespace:
        val = strip_all_whitespace(val)

    side_rules = rules.for_side(side)

    if side_rules.strips_zeros(field_name):
        val = remove_leading_zeros(val)

    if side_rules.parses_dates(field_name):
        iso = to_iso_date(val)
        if iso is not None:
            val = iso

    return val


def normalize_row(row: Mapping[str, Any], headers: Sequence[str], side: Side,
                  rules: NormalizationRules) -> Dict[str, str]:
    """
    Normalize every header field of a row.

    The result is a new dict in header order; fields missing from the row
    normalize as empty strings and fields outside the headers are dropped.
    """
    return {
        header: normalize_value(row.get(header), header, side, rules)
        for header in headers
    }
