"""
Rule engine for applying must-be and date rules to records.

The rule engine builds validators from rule configurations, runs them
against records and summarizes which rules passed, failed or were skipped.
"""

from typing import Any

from be_valid.config import Configuration, get_config
from be_valid.core.models import DataRecord, ValidationResult
from be_valid.core.validators import BaseValidator, DateValidator, MustBeValidator
from be_valid.exceptions import ConfigurationError
from be_valid.observability.logger import get_logger, log_operation

logger = get_logger(__name__)


class RuleEngine:
    """
    Orchestrates validation rules on data records.

    Rules run in order; every failure is recorded on the record and the
    engine never stops early.
    """

    VALIDATOR_REGISTRY: dict[str, type[BaseValidator]] = {
        "must_be": MustBeValidator,
        "date": DateValidator,
    }

    def __init__(self, rules: list[dict[str, Any]], config: Configuration | None = None):
        """
        Initialize the rule engine with validation rules.

        Args:
            rules: List of rule configurations, each containing:
                   - rule_name: str
                   - rule_type: str (must_be, date)
                   - field_name: str
                   - parameters: Dict[str, Any] (optional)
                   - severity: str (error or warning)
                   - enabled: bool (default True)
            config: Rule registry shared by the validators; the process-wide
                    one is used when omitted
        """
        self.rules = rules
        self._config = config
        self.validators: list[tuple[str, str, BaseValidator]] = []
        self._build_validators()

    @property
    def config(self) -> Configuration:
        return self._config if self._config is not None else get_config()

    def _build_validators(self) -> None:
        """Build validator instances from rule configurations."""
        for rule in self.rules:
            if not rule.get("enabled", True):
                continue

            rule_name = rule["rule_name"]
            rule_type = rule["rule_type"]
            severity = rule.get("severity", "error")

            validator_class = self.VALIDATOR_REGISTRY.get(rule_type)
            if not validator_class:
                raise ConfigurationError(f"Unknown rule type: {rule_type}")
            if severity not in ("error", "warning"):
                raise ConfigurationError(f"Invalid severity '{severity}' for rule '{rule_name}'")

            # Validators report under the rule name; warnings go to their own collection
            parameters = dict(rule.get("parameters") or {})
            parameters.setdefault("rule_name", rule_name)
            if severity == "warning":
                parameters.setdefault("error_level", "warnings")

            validator = validator_class(rule["field_name"], parameters, config=self._config)
            self.validators.append((rule_name, severity, validator))

    def validate_record(self, record: DataRecord) -> ValidationResult:
        """
        Validate a data record against all rules.

        Args:
            record: The DataRecord to validate; errors and warnings are added to it

        Returns:
            ValidationResult containing pass/fail status and detailed results
        """
        passed_rules = []
        failed_rules = []
        warnings = []
        skipped_rules = []

        for rule_name, severity, validator in self.validators:
            # Disabled through the registry
            if self.config.is_disabled(validator.rule_name):
                skipped_rules.append(rule_name)
                continue

            if validator.validate_record(record):
                passed_rules.append(rule_name)
            # Warning severity and notice rules never fail the record
            elif severity == "warning" or self.config.is_notice(validator.rule_name):
                warnings.append(rule_name)
            else:
                failed_rules.append(rule_name)

        passed = len(failed_rules) == 0
        record.validation_status = "valid" if passed else "invalid"

        return ValidationResult(
            record_id=record.record_id,
            passed=passed,
            passed_rules=passed_rules,
            failed_rules=failed_rules,
            warnings=warnings,
            skipped_rules=skipped_rules,
            messages=record.errors.full_messages(),
        )

    def validate_batch(self, records: list[DataRecord]) -> list[ValidationResult]:
        """
        Validate a batch of records.

        Args:
            records: List of DataRecord objects

        Returns:
            List of ValidationResult objects, one per record
        """
        with log_operation("Validating batch", logger=logger, batch_size=len(records)):
            results = [self.validate_record(record) for record in records]
        logger.info(
            "Batch validated",
            extra={
                "batch_size": len(results),
                "invalid_records": sum(1 for result in results if not result.passed),
            },
        )
        return results

    def get_rule_summary(self) -> dict[str, Any]:
        """
        Get summary of loaded rules.

        Returns:
            Dictionary with rule counts and types
        """
        return {
            "total_rules": len(self.validators),
            "rules_by_type": self._count_by_type(),
            "rules_by_severity": self._count_by_severity(),
        }

    def _count_by_type(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for _, _, validator in self.validators:
            rule_type = validator.rule_type
            counts[rule_type] = counts.get(rule_type, 0) + 1
        return counts

    def _count_by_severity(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for _, severity, _ in self.validators:
            counts[severity] = counts.get(severity, 0) + 1
        return counts
