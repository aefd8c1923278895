"""
Unit tests for the pre-run validation pipeline.
"""

from unittest.mock import Mock
from pathlib import Path
import sys

# Add project root to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from data_compare.config.manager import (
    ComparisonConfig,
    KeyMapping,
    NormalizationRules,
    SideRules,
)
from data_compare.core.models import Dataset
from data_compare.pipeline.validators import (
    KeyMappingValidator,
    RuleFieldValidator,
    SchemaValidator,
    ValidationPipeline,
    ValidationReport,
)


class TestValidators:

    def setup_method(self):
        self.dataset_a = Dataset(name="a.csv", headers=["ID", "DATE"],
                                 rows=[{"ID": "1", "DATE": "2024-01-01"}])
        self.dataset_b = Dataset(name="b.csv", headers=["REF", "DAY"],
                                 rows=[{"REF": "1", "DAY": "01/01/2024"}])
        self.config = ComparisonConfig(key_mappings=[KeyMapping("ID", "REF")])

    def test_valid_pair(self):
        report = ValidationPipeline().validate(self.dataset_a, self.dataset_b, self.config)

        assert report.is_valid
        assert report.get_errors() == []

    def test_dataset_without_columns(self):
        empty = Dataset(name="empty.csv", headers=[])

        report = SchemaValidator().validate(empty, self.dataset_b, self.config)

        assert not report.is_valid
        assert report.get_errors()[0].message == "Source A has no columns"

    def test_dataset_without_rows_is_a_warning(self):
        no_rows = Dataset(name="b.csv", headers=["REF"])

        report = SchemaValidator().validate(self.dataset_a, no_rows, self.config)

        assert report.is_valid
        assert report.get_warnings()[0].message == "Source B has no rows"

    def test_no_key_mappings(self):
        report = KeyMappingValidator().validate(self.dataset_a, self.dataset_b,
                                                ComparisonConfig())

        assert not report.is_valid

    def test_key_column_missing(self):
        config = ComparisonConfig(key_mappings=[KeyMapping("ID", "REFERENCE")])

        report = KeyMappingValidator().validate(self.dataset_a, self.dataset_b, config)

        errors = report.get_errors()
        assert len(errors) == 1
        assert errors[0].details["missing"] == ["REFERENCE"]

    def test_rule_fields_not_found(self):
        config = ComparisonConfig(
            key_mappings=[KeyMapping("ID", "REF")],
            rules=NormalizationRules(
                source_b=SideRules(normalize_dates=True, date_fields=["DATE"])
            )
        )

        report = RuleFieldValidator().validate(self.dataset_a, self.dataset_b, config)

        assert report.is_valid
        assert report.get_warnings()[0].details["fields"] == ["DATE"]

    def test_rule_fields_listed_while_off(self):
        config = ComparisonConfig(
            key_mappings=[KeyMapping("ID", "REF")],
            rules=NormalizationRules(source_a=SideRules(leading_zero_fields=["ID"]))
        )

        report = RuleFieldValidator().validate(self.dataset_a, self.dataset_b, config)

        assert [i.severity for i in report.issues] == ["INFO"]

    def test_fail_fast_stops_after_first_error(self):
        failing = Mock()
        failing.validate.return_value = ValidationReport(is_valid=False)
        never_run = Mock()

        pipeline = ValidationPipeline(validators=[failing, never_run], fail_fast=True)
        report = pipeline.validate(self.dataset_a, self.dataset_b, self.config)

        assert not report.is_valid
        never_run.validate.assert_not_called()
