"""
Pre-run validation pipeline.
Single responsibility: check datasets against the comparison configuration.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional

from ..config.manager import ComparisonConfig, Side
from ..core.models import Dataset
from ..utils.logger import get_logger


logger = get_logger()


@dataclass
class ValidationIssue:
    """Single validation issue."""

    severity: str  # ERROR, WARNING, INFO
    category: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ValidationReport:
    """Complete validation report."""

    is_valid: bool
    issues: List[ValidationIssue] = field(default_factory=list)
    stats: Dict[str, Any] = field(default_factory=dict)

    def add_issue(self, severity: str, category: str,
                  message: str, **details):
        """Add an issue to the report."""
        issue = ValidationIssue(severity, category, message, details)
        self.issues.append(issue)

        if severity == "ERROR":
            self.is_valid = False

    def get_errors(self) -> List[ValidationIssue]:
        """Get only error-level issues."""
        return [i for i in self.issues if i.severity == "ERROR"]

    def get_warnings(self) -> List[ValidationIssue]:
        """Get only warning-level issues."""
        return [i for i in self.issues if i.severity == "WARNING"]


class Validator(ABC):
    """Base validator class."""

    @abstractmethod
    def validate(self, dataset_a: Dataset, dataset_b: Dataset,
                config: ComparisonConfig) -> ValidationReport:
        """
        Validate a pair of datasets against a configuration.

        Args:
            dataset_a: Source A
            dataset_b: Source B
            config: Comparison configuration

        Returns:
            Validation report
        """
        pass


class SchemaValidator(Validator):
    """Check that both datasets have headers and rows."""

    def validate(self, dataset_a: Dataset, dataset_b: Dataset,
                config: ComparisonConfig) -> ValidationReport:
        report = ValidationReport(is_valid=True)

        for side, dataset in ((Side.A, dataset_a), (Side.B, dataset_b)):
            logger.debug("validator.schema.checking",
                        side=side.value,
                        rows=len(dataset),
                        columns=len(dataset.headers))

            if not dataset.headers:
                report.add_issue(
                    "ERROR", "schema", f"{side.label} has no columns",
                    dataset=dataset.name
                )
            elif not dataset.rows:
                report.add_issue(
                    "WARNING", "schema", f"{side.label} has no rows",
                    dataset=dataset.name
                )

            report.stats[f"rows_{side.value.lower()}"] = len(dataset)
            report.stats[f"columns_{side.value.lower()}"] = len(dataset.headers)

        return report


class KeyMappingValidator(Validator):
    """Check that every key mapping names existing columns."""

    def validate(self, dataset_a: Dataset, dataset_b: Dataset,
                config: ComparisonConfig) -> ValidationReport:
        report = ValidationReport(is_valid=True)

        logger.debug("validator.keys.checking",
                    key_mappings=len(config.key_mappings))

        if not config.key_mappings:
            report.add_issue("ERROR", "keys", "At least one key mapping is required")
            return report

        for side, dataset in ((Side.A, dataset_a), (Side.B, dataset_b)):
            missing = [name for name in config.key_fields(side)
                       if name not in dataset.headers]
            if missing:
                report.add_issue(
                    "ERROR", "keys",
                    f"Key columns not found in {side.label}",
                    dataset=dataset.name,
                    missing=missing,
                    available=list(dataset.headers)
                )

        report.stats["key_fields_a"] = config.key_fields(Side.A)
        report.stats["key_fields_b"] = config.key_fields(Side.B)

        return report


class RuleFieldValidator(Validator):
    """Check that normalization rules point at existing columns."""

    def validate(self, dataset_a: Dataset, dataset_b: Dataset,
                config: ComparisonConfig) -> ValidationReport:
        report = ValidationReport(is_valid=True)

        for side, dataset in ((Side.A, dataset_a), (Side.B, dataset_b)):
            side_rules = config.rules.for_side(side)
            checks = (
                ("leading zero", side_rules.remove_leading_zeros,
                 side_rules.leading_zero_fields),
                ("date", side_rules.normalize_dates, side_rules.date_fields),
            )
            for rule_name, enabled, fields in checks:
                unknown = sorted(f for f in fields if f not in dataset.headers)
                if unknown:
                    report.add_issue(
                        "WARNING", "rules",
                        f"{side.label} {rule_name} fields not found",
                        dataset=dataset.name,
                        fields=unknown
                    )
                if fields and not enabled:
                    report.add_issue(
                        "INFO", "rules",
                        f"{side.label} {rule_name} fields listed but rule is off",
                        fields=sorted(fields)
                    )

        return report


class ValidationPipeline:
    """
    Run validation checks in sequence.
    """

    def __init__(self, validators: Optional[List[Validator]] = None,
                 fail_fast: bool = False):
        """
        Initialize validation pipeline.

        Args:
            validators: List of validators to run
            fail_fast: Stop at the first validator reporting an error
        """
        if validators is None:
            self.validators = [
                SchemaValidator(),
                KeyMappingValidator(),
                RuleFieldValidator()
            ]
        else:
            self.validators = validators
        self.fail_fast = fail_fast

    def validate(self, dataset_a: Dataset, dataset_b: Dataset,
                config: ComparisonConfig) -> ValidationReport:
        """
        Run all validators.

        Returns:
            Combined validation report
        """
        logger.info("validation.pipeline.starting",
                   validators=len(self.validators))

        combined_report = ValidationReport(is_valid=True)

        for validator in self.validators:
            validator_name = validator.__class__.__name__

            logger.debug("validation.pipeline.running",
                        validator=validator_name)

            report = validator.validate(dataset_a, dataset_b, config)

            combined_report.issues.extend(report.issues)
            combined_report.stats[validator_name] = report.stats

            if not report.is_valid:
                combined_report.is_valid = False

                if self.fail_fast:
                    logger.warning("validation.pipeline.failed_fast",
                                 validator=validator_name)
                    break

        logger.info("validation.pipeline.completed",
                   is_valid=combined_report.is_valid,
                   errors=len(combined_report.get_errors()),
                   warnings=len(combined_report.get_warnings()))

        return combined_report
