"""Per-source processing pipeline components."""

from .deduplicator import DedupeResult, RowDeduplicator, RowNormalizationError
from .indexer import KeyIndex, KeyIndexer, format_key
from .validators import (
    ValidationPipeline,
    ValidationReport,
    ValidationIssue,
    Validator,
    SchemaValidator,
    KeyMappingValidator,
    RuleFieldValidator
)

__all__ = [
    "DedupeResult",
    "RowDeduplicator",
    "RowNormalizationError",
    "KeyIndex",
    "KeyIndexer",
    "format_key",
    "ValidationPipeline",
    "ValidationReport",
    "ValidationIssue",
    "Validator",
    "SchemaValidator",
    "KeyMappingValidator",
    "RuleFieldValidator",
]
