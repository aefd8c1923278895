#!/usr/bin/env python3
"""
Data Compare - Main Entry Point
Reconcile two CSV exports by composite key.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .adapters.exporter import ReportExporter
from .adapters.file_reader import UniversalFileReader
from .config.manager import (
    ComparisonConfig,
    ConfigError,
    ConfigManager,
    KeyMapping,
    NormalizationRules,
    OutputConfig,
    Side,
    SideRules,
    SourceConfig,
)
from .core.comparator import ComparisonCancelled, DataComparator, FatalError
from .pipeline.validators import ValidationPipeline
from .ui.progress import get_progress_monitor
from .utils.logger import get_logger


logger = get_logger()


SAMPLE_CONFIG = """# Data Compare Configuration
# ==========================

sources:
  a:
    path: "data/raw/ledger_export.csv"
  b:
    path: "data/raw/bank_statement.csv"

# Composite key, in order. Each entry pairs a Source A column with a
# Source B column.
key_mappings:
  - source_a: "DOC_NUMBER"
    source_b: "REFERENCE"
  - source_a: "POSTING_DATE"
    source_b: "VALUE_DATE"

rules:
  trim_whitespace: true
  source_a:
    remove_leading_zeros: true
    leading_zero_fields: ["DOC_NUMBER"]
    normalize_dates: true
    date_fields: ["POSTING_DATE"]
  source_b:
    remove_leading_zeros: false
    leading_zero_fields: []
    normalize_dates: true
    date_fields: ["VALUE_DATE"]

output:
  directory: "data/reports"
  delimiter: ";"
  export: true
"""


def create_sample_config(output_path: Path):
    """
    Create a sample configuration file.

    Args:
        output_path: Where to save the config
    """
    output_path.write_text(SAMPLE_CONFIG)
    print(f"Sample configuration created: {output_path}")


def parse_key_mapping(value: str) -> KeyMapping:
    """Parse ``FIELD_A=FIELD_B`` (or a single shared ``FIELD``)."""
    field_a, sep, field_b = value.partition("=")
    if not sep:
        field_b = field_a
    try:
        return KeyMapping(source_a=field_a.strip(), source_b=field_b.strip())
    except ConfigError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="data-compare",
        description="Data Compare - reconcile two CSV exports by composite key"
    )

    parser.add_argument("source_a", nargs="?", help="Source A file")
    parser.add_argument("source_b", nargs="?", help="Source B file")

    parser.add_argument(
        "--config", "-c",
        help="YAML configuration file"
    )
    parser.add_argument(
        "--key", "-k",
        action="append",
        type=parse_key_mapping,
        default=[],
        metavar="FIELD_A=FIELD_B",
        help="Key mapping; repeat for a composite key (order matters)"
    )
    parser.add_argument(
        "--no-trim",
        action="store_true",
        help="Keep internal whitespace when matching"
    )
    parser.add_argument("--zeros-a", action="append", default=[], metavar="FIELD",
                        help="Strip leading zeros from this Source A field")
    parser.add_argument("--zeros-b", action="append", default=[], metavar="FIELD",
                        help="Strip leading zeros from this Source B field")
    parser.add_argument("--dates-a", action="append", default=[], metavar="FIELD",
                        help="Normalize dates in this Source A field")
    parser.add_argument("--dates-b", action="append", default=[], metavar="FIELD",
                        help="Normalize dates in this Source B field")
    parser.add_argument(
        "--delimiter",
        help="Input CSV delimiter (sniffed when omitted)"
    )
    parser.add_argument(
        "--output-dir", "-o",
        help="Directory for discrepancy reports"
    )
    parser.add_argument(
        "--no-export",
        action="store_true",
        help="Print the summary only"
    )
    parser.add_argument(
        "--sequential",
        action="store_true",
        help="Process the two sources one after the other"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )
    parser.add_argument(
        "--no-rich",
        action="store_true",
        help="Disable Rich output"
    )
    parser.add_argument(
        "--log-file",
        help="Append JSON log lines to this file"
    )
    parser.add_argument(
        "--create-sample",
        action="store_true",
        help="Create sample configuration file"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"Data Compare v{__version__}"
    )
    return parser


def _rules_from_args(args: argparse.Namespace) -> NormalizationRules:
    return NormalizationRules(
        trim_whitespace=not args.no_trim,
        source_a=SideRules(
            remove_leading_zeros=bool(args.zeros_a),
            leading_zero_fields=args.zeros_a,
            normalize_dates=bool(args.dates_a),
            date_fields=args.dates_a
        ),
        source_b=SideRules(
            remove_leading_zeros=bool(args.zeros_b),
            leading_zero_fields=args.zeros_b,
            normalize_dates=bool(args.dates_b),
            date_fields=args.dates_b
        )
    )


def resolve_run(args: argparse.Namespace):
    """
    Work out sources, comparison config and output settings.

    Returns:
        (source_a, source_b, comparison config, output config)

    Raises:
        ConfigError: If sources are missing
    """
    sources = {}
    output = OutputConfig()

    if args.config:
        manager = ConfigManager(Path(args.config))
        config = manager.load()
        sources.update(manager.sources)
        output = manager.output
        if args.key:
            config = ComparisonConfig(key_mappings=args.key, rules=config.rules)
    else:
        config = ComparisonConfig(key_mappings=args.key, rules=_rules_from_args(args))

    if args.source_a:
        sources[Side.A] = SourceConfig(path=args.source_a)
    if args.source_b:
        sources[Side.B] = SourceConfig(path=args.source_b)

    missing = [side.label for side in Side if side not in sources]
    if missing:
        raise ConfigError(f"No file given for {', '.join(missing)}")

    if args.output_dir:
        output.directory = args.output_dir
    if args.no_export:
        output.export = False

    return sources[Side.A], sources[Side.B], config, output


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    if args.create_sample:
        create_sample_config(Path("compare_sample.yaml"))
        return 0

    if args.verbose:
        logger.set_level("DEBUG")
    if args.log_file:
        logger.log_file = Path(args.log_file)

    monitor = get_progress_monitor(use_rich=not args.no_rich)
    monitor.start(f"Data Compare v{__version__}")

    try:
        source_a, source_b, config, output = resolve_run(args)

        reader = UniversalFileReader(delimiter=args.delimiter)
        dataset_a = reader.read_dataset(Path(source_a.path), name=source_a.name)
        dataset_b = reader.read_dataset(Path(source_b.path), name=source_b.name)
        monitor("info", f"Loaded Source A: {dataset_a.name}")
        monitor("info", f"Loaded Source B: {dataset_b.name}")

        report = ValidationPipeline().validate(dataset_a, dataset_b, config)
        for issue in report.get_warnings():
            monitor("warning", issue.message)
        if not report.is_valid:
            for issue in report.get_errors():
                details = ", ".join(f"{k}={v}" for k, v in issue.details.items())
                monitor("error", f"{issue.message} ({details})" if details else issue.message)
            return 1

        comparator = DataComparator(parallel=not args.sequential)
        result = comparator.compare(dataset_a, dataset_b, config, observer=monitor)

        monitor.show_results(result)

        if output.export:
            exporter = ReportExporter(Path(output.directory), delimiter=output.delimiter)
            for kind, path in exporter.export(result).items():
                monitor("info", f"Wrote {kind}: {path}")

        return 0

    except (ConfigError, FatalError, ComparisonCancelled) as e:
        monitor.error(str(e))
        return 1
    except (FileNotFoundError, ValueError) as e:
        logger.error("cli.input.failed", error=str(e))
        monitor.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
