"""Utility functions and helpers."""

from .logger import get_logger, StructuredLogger
from .converters import (
    parse_date,
    title_case_month,
    to_iso_date
)

__all__ = [
    "get_logger",
    "StructuredLogger",
    "parse_date",
    "title_case_month",
    "to_iso_date",
]
