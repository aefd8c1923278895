"""
Configuration management.
Single responsibility: load, validate, and manage configuration.
"""

import yaml
from enum import Enum
from pathlib import Path
from typing import Dict, Any, Optional, List, Iterable, FrozenSet, Tuple
from dataclasses import dataclass, field

from ..utils.logger import get_logger


logger = get_logger()


class ConfigError(Exception):
    """Raised when a comparison cannot start because its configuration is unusable."""
    pass


class Side(str, Enum):
    """Which of the two sources a value belongs to."""
    A = "A"
    B = "B"

    @property
    def label(self) -> str:
        return f"Source {self.value}"


@dataclass(frozen=True)
class KeyMapping:
    """Pairs one column of Source A with one column of Source B."""

    source_a: str
    source_b: str

    def __post_init__(self):
        if not self.source_a or not self.source_b:
            raise ConfigError(
                f"Key mapping needs a field on both sides: "
                f"{self.source_a!r} <-> {self.source_b!r}")

    def field_for(self, side: Side) -> str:
        return self.source_a if side == Side.A else self.source_b


@dataclass(frozen=True)
class SideRules:
    """Normalization rules that apply to one source only."""

    remove_leading_zeros: bool = False
    leading_zero_fields: FrozenSet[str] = frozenset()
    normalize_dates: bool = False
    date_fields: FrozenSet[str] = frozenset()

    def __post_init__(self):
        # Accept any iterable from callers; store immutably
        object.__setattr__(self, "leading_zero_fields",
                           frozenset(self.leading_zero_fields))
        object.__setattr__(self, "date_fields", frozenset(self.date_fields))

    def strips_zeros(self, field_name: str) -> bool:
        return self.remove_leading_zeros and field_name in self.leading_zero_fields

    def parses_dates(self, field_name: str) -> bool:
        return self.normalize_dates and field_name in self.date_fields


@dataclass(frozen=True)
class NormalizationRules:
    """Global and per-source normalization rules."""

    trim_whitespace: bool = True
    source_a: SideRules = field(default_factory=SideRules)
    source_b: SideRules = field(default_factory=SideRules)

    def for_side(self, side: Side) -> SideRules:
        return self.source_a if side == Side.A else self.source_b


@dataclass(frozen=True)
class ComparisonConfig:
    """Immutable snapshot of everything a single comparison run needs."""

    key_mappings: Tuple[KeyMapping, ...] = ()
    rules: NormalizationRules = field(default_factory=NormalizationRules)

    def __post_init__(self):
        object.__setattr__(self, "key_mappings", tuple(self.key_mappings))

    def key_fields(self, side: Side) -> List[str]:
        """Key field names for one side, in composite-key order."""
        return [mapping.field_for(side) for mapping in self.key_mappings]


@dataclass
class SourceConfig:
    """Where to load one source from."""

    path: str
    name: Optional[str] = None

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not self.path:
            raise ConfigError("Source path is required")
        if not self.name:
            self.name = Path(self.path).name


@dataclass
class OutputConfig:
    """Where and how discrepancy reports are written."""

    directory: str = "data/reports"
    delimiter: str = ";"
    export: bool = True


def _side_rules_from_dict(raw: Optional[Dict[str, Any]]) -> SideRules:
    raw = raw or {}
    return SideRules(
        remove_leading_zeros=bool(raw.get("remove_leading_zeros", False)),
        leading_zero_fields=_as_fields(raw.get("leading_zero_fields")),
        normalize_dates=bool(raw.get("normalize_dates", False)),
        date_fields=_as_fields(raw.get("date_fields")),
    )


def _side_rules_to_dict(rules: SideRules) -> Dict[str, Any]:
    return {
        "remove_leading_zeros": rules.remove_leading_zeros,
        "leading_zero_fields": sorted(rules.leading_zero_fields),
        "normalize_dates": rules.normalize_dates,
        "date_fields": sorted(rules.date_fields),
    }


def _as_fields(value: Optional[Iterable[str]]) -> FrozenSet[str]:
    if value is None:
        return frozenset()
    if isinstance(value, str):
        return frozenset([value])
    return frozenset(str(v) for v in value)


class ConfigManager:
    """
    Manage application configuration.
    """

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize config manager.

        Args:
            config_path: Path to configuration file
        """
        self.config_path = Path(config_path or "compare.yaml")
        self.config: Dict[str, Any] = {}
        self.sources: Dict[Side, SourceConfig] = {}
        self.comparison = ComparisonConfig()
        self.output = OutputConfig()

    def load(self) -> ComparisonConfig:
        """
        Load configuration from file.

        Returns:
            Comparison configuration snapshot

        Raises:
            FileNotFoundError: If config file doesn't exist
            ConfigError: If config is invalid YAML or has a bad shape
        """
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config not found: {self.config_path}")

        logger.info("config.loading", file=str(self.config_path))

        with open(self.config_path) as f:
            try:
                self.config = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {self.config_path}: {e}") from e

        if not isinstance(self.config, dict):
            raise ConfigError(f"Config root must be a mapping: {self.config_path}")

        self._parse_sources()
        self.comparison = ComparisonConfig(
            key_mappings=self._parse_key_mappings(),
            rules=self._parse_rules()
        )
        self._parse_output()

        logger.info("config.loaded",
                   sources=len(self.sources),
                   key_mappings=len(self.comparison.key_mappings))

        return self.comparison

    def _parse_sources(self):
        """Parse source file configurations."""
        sources = self.config.get("sources") or {}
        for side in Side:
            raw = sources.get(side.value.lower()) or sources.get(side.value)
            if raw is None:
                continue
            if isinstance(raw, str):
                raw = {"path": raw}
            try:
                self.sources[side] = SourceConfig(path=raw.get("path", ""),
                                                  name=raw.get("name"))
            except ConfigError as e:
                logger.error("config.source.invalid", side=side.value, error=str(e))
                raise

    def _parse_key_mappings(self) -> List[KeyMapping]:
        """Parse the ordered key mapping list."""
        mappings = []
        for raw in self.config.get("key_mappings") or []:
            if not isinstance(raw, dict):
                raise ConfigError(f"Key mapping must be a mapping, got: {raw!r}")
            mappings.append(KeyMapping(source_a=str(raw.get("source_a") or ""),
                                       source_b=str(raw.get("source_b") or "")))
        return mappings

    def _parse_rules(self) -> NormalizationRules:
        """Parse normalization rules."""
        raw = self.config.get("rules") or {}
        return NormalizationRules(
            trim_whitespace=bool(raw.get("trim_whitespace", True)),
            source_a=_side_rules_from_dict(raw.get("source_a")),
            source_b=_side_rules_from_dict(raw.get("source_b"))
        )

    def _parse_output(self):
        raw = self.config.get("output") or {}
        self.output = OutputConfig(
            directory=raw.get("directory", "data/reports"),
            delimiter=raw.get("delimiter", ";"),
            export=bool(raw.get("export", True))
        )

    def get_source(self, side: Side) -> SourceConfig:
        """
        Get source configuration by side.

        Raises:
            ConfigError: If the source is not configured
        """
        if side not in self.sources:
            raise ConfigError(f"{side.label} is not configured")
        return self.sources[side]

    def save(self, path: Optional[Path] = None):
        """
        Save configuration to file.

        Args:
            path: Output path (uses original path if not specified)
        """
        output_path = Path(path or self.config_path)

        logger.info("config.saving", file=str(output_path))

        rules = self.comparison.rules
        config_dict = {
            "sources": {
                side.value.lower(): {"path": source.path, "name": source.name}
                for side, source in self.sources.items()
            },
            "key_mappings": [
                {"source_a": m.source_a, "source_b": m.source_b}
                for m in self.comparison.key_mappings
            ],
            "rules": {
                "trim_whitespace": rules.trim_whitespace,
                "source_a": _side_rules_to_dict(rules.source_a),
                "source_b": _side_rules_to_dict(rules.source_b),
            },
            "output": {
                "directory": self.output.directory,
                "delimiter": self.output.delimiter,
                "export": self.output.export,
            },
        }

        with open(output_path, 'w') as f:
            yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False)

        logger.info("config.saved", file=str(output_path))
