"""
Data Compare - reconcile two tabular exports by composite key.
"""

__version__ = "1.0.0"

from .config.manager import (
    ComparisonConfig,
    ConfigError,
    ConfigManager,
    KeyMapping,
    NormalizationRules,
    Side,
    SideRules,
)
from .core.models import ComparisonResult, ComparisonStats, Dataset, DuplicateEntry
from .core.comparator import (
    CancellationToken,
    ComparisonCancelled,
    DataComparator,
    FatalError,
    compare,
)
from .pipeline.deduplicator import RowDeduplicator, RowNormalizationError
from .pipeline.indexer import KeyIndexer
from .core.reconciler import Reconciler
from .core.aggregator import ResultAggregator
from .adapters.file_reader import UniversalFileReader
from .adapters.exporter import ReportExporter
from .utils.logger import get_logger

__all__ = [
    "CancellationToken",
    "ComparisonCancelled",
    "ComparisonConfig",
    "ComparisonResult",
    "ComparisonStats",
    "ConfigError",
    "ConfigManager",
    "DataComparator",
    "Dataset",
    "DuplicateEntry",
    "FatalError",
    "KeyIndexer",
    "KeyMapping",
    "NormalizationRules",
    "Reconciler",
    "ReportExporter",
    "ResultAggregator",
    "RowDeduplicator",
    "RowNormalizationError",
    "Side",
    "SideRules",
    "UniversalFileReader",
    "compare",
    "get_logger",
]
