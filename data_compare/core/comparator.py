"""
Core data comparison logic.
Single responsibility: reconcile two datasets and report what is missing.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from ..config.manager import ComparisonConfig, ConfigError, Side
from ..pipeline.deduplicator import DedupeResult, RowDeduplicator
from ..pipeline.indexer import KeyIndex, KeyIndexer
from ..utils.logger import get_logger
from ..utils.metrics import MetricsCollector
from .aggregator import ResultAggregator
from .models import ComparisonResult, Dataset
from .reconciler import Reconciler


logger = get_logger()


Observer = Callable[[str, str], None]

INFO = "info"
WARNING = "warning"
ERROR = "error"
SUCCESS = "success"


class FatalError(Exception):
    """Raised when a comparison run fails after processing has started."""
    pass


class ComparisonCancelled(Exception):
    """Raised when a comparison run is cancelled before it completes."""
    pass


class CancellationToken:
    """
    Cooperative cancellation flag for a comparison run.

    Can be cancelled from any thread; the run checks it between phases.
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self, phase: str):
        if self.cancelled:
            raise ComparisonCancelled(f"Comparison cancelled before {phase}")


@dataclass
class SourceOutcome:
    """Deduplicated rows and key index of one source."""

    dedup: DedupeResult
    index: KeyIndex


def _on_off(flag: bool) -> str:
    return "ON" if flag else "OFF"


class DataComparator:
    """
    Reconcile two datasets by composite key.

    Each source is normalized, deduplicated and indexed independently, then
    the two key indexes are merged read-only.
    """

    def __init__(self, parallel: bool = True):
        """
        Initialize comparator.

        Args:
            parallel: Process the two sources on separate worker threads
        """
        self.parallel = parallel
        self.reconciler = Reconciler()
        self.aggregator = ResultAggregator()

    def compare(self, dataset_a: Optional[Dataset], dataset_b: Optional[Dataset],
               config: ComparisonConfig, observer: Optional[Observer] = None,
               cancel_token: Optional[CancellationToken] = None) -> ComparisonResult:
        """
        Compare two datasets.

        Args:
            dataset_a: Source A
            dataset_b: Source B
            config: Immutable comparison configuration
            observer: Optional ``(level, message)`` progress callback
            cancel_token: Optional token to abort the run between phases

        Returns:
            Complete comparison result

        Raises:
            ConfigError: If a dataset is missing or no key mapping is set
            ComparisonCancelled: If the token was cancelled
            FatalError: If processing failed unexpectedly
        """
        notify = self._make_notifier(observer)
        token = cancel_token or CancellationToken()

        self._validate(dataset_a, dataset_b, config, notify)

        logger.info("comparator.starting",
                   source_a=dataset_a.name,
                   source_b=dataset_b.name,
                   key_mappings=len(config.key_mappings),
                   parallel=self.parallel)

        metrics = MetricsCollector()
        rules = config.rules

        notify(INFO, "Starting reconciliation process...")
        notify(INFO,
               f"Config Active: Remove Zeros A=[{_on_off(rules.source_a.remove_leading_zeros)}], "
               f"B=[{_on_off(rules.source_b.remove_leading_zeros)}]; "
               f"Normalize Dates A=[{_on_off(rules.source_a.normalize_dates)}], "
               f"B=[{_on_off(rules.source_b.normalize_dates)}]; "
               f"Trim Whitespace=[{_on_off(rules.trim_whitespace)}]")

        token.raise_if_cancelled("processing sources")

        for side, dataset in ((Side.A, dataset_a), (Side.B, dataset_b)):
            notify(INFO, f"Processing {side.label}: {dataset.name} ({len(dataset)} rows)...")

        try:
            outcome_a, outcome_b = self._process_sources(dataset_a, dataset_b,
                                                         config, metrics)
        except Exception as e:
            raise self._fatal(notify, "processing sources", e) from e

        for side, outcome in ((Side.A, outcome_a), (Side.B, outcome_b)):
            self._report_source(side, outcome, notify)

        token.raise_if_cancelled("comparing keys")

        notify(INFO, "Comparing keys...")

        try:
            with metrics.operation("reconcile") as op:
                reconciliation = self.reconciler.reconcile(outcome_a.index,
                                                           outcome_b.index)
                op["rows"] = (len(reconciliation.rows_missing_in_a)
                              + len(reconciliation.rows_missing_in_b))
            result = self.aggregator.aggregate(dataset_a, dataset_b,
                                               outcome_a.dedup, outcome_b.dedup,
                                               reconciliation)
        except Exception as e:
            raise self._fatal(notify, "comparing keys", e) from e

        metrics.finalize()
        logger.debug("comparator.metrics", **metrics.generate_report()["summary"])

        notify(SUCCESS, f"Comparison completed in {metrics.elapsed_seconds:.2f}s.")
        notify(INFO, f"Found {result.stats.missing_in_b} rows in Source A missing from B.")
        notify(INFO, f"Found {result.stats.missing_in_a} rows in Source B missing from A.")

        logger.info("comparator.completed",
                   matched=result.stats.matched,
                   missing_in_a=result.stats.missing_in_a,
                   missing_in_b=result.stats.missing_in_b,
                   duplicates_a=result.stats.duplicates_a,
                   duplicates_b=result.stats.duplicates_b,
                   match_rate=result.stats.match_rate)

        return result

    def _validate(self, dataset_a: Optional[Dataset], dataset_b: Optional[Dataset],
                  config: Optional[ComparisonConfig], notify: Observer):
        """Reject runs that cannot start, before touching any row."""
        if dataset_a is None or dataset_b is None:
            message = "Both source files must be loaded."
        elif config is None or not config.key_mappings:
            message = "At least one key mapping is required."
        else:
            return

        logger.error("comparator.config.invalid", error=message)
        notify(ERROR, message)
        raise ConfigError(message)

    def _process_source(self, dataset: Dataset, side: Side,
                        config: ComparisonConfig,
                        metrics: MetricsCollector) -> SourceOutcome:
        """Normalize, deduplicate and index one source."""
        with metrics.operation(f"source.{side.value}") as op:
            dedup = RowDeduplicator(config.rules).dedupe(dataset, side)
            index = KeyIndexer(config.key_mappings).index(dedup.unique_rows, side)
            op["rows"] = len(dataset)

        logger.info("comparator.source.processed",
                   side=side.value,
                   dataset=dataset.name,
                   rows=len(dataset),
                   unique=len(dedup.unique_rows),
                   duplicates=dedup.duplicate_count,
                   skipped=dedup.skipped_count,
                   keys=len(index))

        return SourceOutcome(dedup=dedup, index=index)

    def _process_sources(self, dataset_a: Dataset, dataset_b: Dataset,
                         config: ComparisonConfig,
                         metrics: MetricsCollector) -> Tuple[SourceOutcome, SourceOutcome]:
        if not self.parallel:
            return (self._process_source(dataset_a, Side.A, config, metrics),
                    self._process_source(dataset_b, Side.B, config, metrics))

        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="source") as executor:
            future_a = executor.submit(self._process_source, dataset_a, Side.A,
                                       config, metrics)
            future_b = executor.submit(self._process_source, dataset_b, Side.B,
                                       config, metrics)
            return future_a.result(), future_b.result()

    def _report_source(self, side: Side, outcome: SourceOutcome, notify: Observer):
        dedup = outcome.dedup
        if dedup.duplicate_count > 0:
            notify(INFO, f"{side.label}: Removed {dedup.duplicate_count} duplicate rows.")
        if dedup.skipped_count > 0:
            notify(WARNING,
                   f"{side.label}: Skipped {dedup.skipped_count} rows that could not be normalized.")

    def _fatal(self, notify: Observer, phase: str, error: Exception) -> FatalError:
        logger.error("comparator.failed", phase=phase, error=str(error))
        notify(ERROR, f"Critical Failure: {error}")
        return FatalError(f"Comparison failed while {phase}: {error}")

    def _make_notifier(self, observer: Optional[Observer]) -> Observer:
        """Wrap the observer so its failures never reach the comparison."""
        def notify(level: str, message: str):
            if observer is None:
                return
            try:
                observer(level, message)
            except Exception as e:
                logger.warning("comparator.observer.failed",
                              observer_level=level,
                              error=str(e))
        return notify


def compare(dataset_a: Optional[Dataset], dataset_b: Optional[Dataset],
            config: ComparisonConfig, observer: Optional[Observer] = None,
            cancel_token: Optional[CancellationToken] = None) -> ComparisonResult:
    """Run a comparison with a default ``DataComparator``."""
    return DataComparator().compare(dataset_a, dataset_b, config,
                                    observer=observer, cancel_token=cancel_token)
