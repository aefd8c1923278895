"""Configuration management."""

from .manager import (
    ConfigManager,
    ConfigError,
    ComparisonConfig,
    KeyMapping,
    NormalizationRules,
    OutputConfig,
    Side,
    SideRules,
    SourceConfig,
)

__all__ = [
    "ConfigManager",
    "ConfigError",
    "ComparisonConfig",
    "KeyMapping",
    "NormalizationRules",
    "OutputConfig",
    "Side",
    "SideRules",
    "SourceConfig",
]
