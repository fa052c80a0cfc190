"""
Rule configuration management.

Loads must-be and date rules from YAML files and provides a builder for
declaring them in code.
"""

import re
from pathlib import Path
from typing import Any

import yaml

from be_valid.core.validators.date_validator import parse_iso_date
from be_valid.core.validators.operands import BLANK, NOW, PRESENT, TODAY, Field, Method
from be_valid.exceptions import ConfigurationError

RULE_TYPES = ("must_be", "date")
SEVERITIES = ("error", "warning")

_SENTINELS = {"now": NOW, "today": TODAY, "blank": BLANK, "present": PRESENT}


def parse_operand(value: Any) -> Any:
    """
    Convert YAML operand notation into operand kinds.

    {field: bonus} -> Field("bonus"), {pattern: "^a"} -> compiled regex,
    {method: is_premium} -> Method("is_premium"), {is: present} -> PRESENT.
    Lists are converted element by element; everything else is a literal.
    """
    if isinstance(value, list):
        return [parse_operand(item) for item in value]
    if not isinstance(value, dict) or len(value) != 1:
        return value

    tag, argument = next(iter(value.items()))
    if tag == "field":
        return Field(str(argument))
    if tag == "pattern":
        return re.compile(str(argument))
    if tag == "method":
        return Method(str(argument))
    if tag == "is":
        sentinel = _SENTINELS.get(str(argument))
        if sentinel not in (BLANK, PRESENT):
            raise ConfigurationError(f"Unknown condition 'is: {argument}', expected blank or present")
        return sentinel
    return value


def parse_bound(value: Any) -> Any:
    """Date bounds additionally accept now/today and ISO date strings."""
    if isinstance(value, str):
        if value in ("now", "today"):
            return _SENTINELS[value]
        return parse_iso_date(value)
    return parse_operand(value)


def parse_parameters(parameters: dict[str, Any]) -> dict[str, Any]:
    """Convert every operand in a YAML parameter mapping."""
    parsed: dict[str, Any] = {}
    for key, value in parameters.items():
        if key in ("before", "after"):
            parsed[key] = parse_bound(value)
        elif key == "matching" and isinstance(value, str):
            parsed[key] = re.compile(value)
        elif key == "when":
            if not isinstance(value, dict):
                raise ConfigurationError("'when' must be a mapping of field to condition")
            parsed[key] = {field: parse_operand(condition) for field, condition in value.items()}
        else:
            parsed[key] = parse_operand(value)
    return parsed


class RuleConfigLoader:
    """
    Loads validation rules from YAML configuration files.

    Expected YAML format:
    ```yaml
    rules:
      salary:
        - type: must_be
          name: salary_above_bonus
          params:
            greater_than: {field: bonus}
      birthday:
        - type: date
          params:
            before: today
            allow_blank: true
      email:
        - type: must_be
          severity: warning
          params:
            present: true
            when:
              salary: {is: present}
    ```
    """

    def __init__(self, config_path: str | Path):
        """
        Initialize the rule config loader.

        Args:
            config_path: Path to the YAML configuration file
        """
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Rule configuration file not found: {config_path}")

    def load_rules(self) -> list[dict[str, Any]]:
        """
        Load and parse validation rules from YAML file.

        Returns:
            List of rule dictionaries suitable for RuleEngine

        Raises:
            ConfigurationError: If YAML is invalid or missing required fields
        """
        with open(self.config_path) as f:
            config = yaml.safe_load(f)

        if not config or "rules" not in config:
            raise ConfigurationError("Configuration file must contain 'rules' section")

        rules = []
        for field_name, field_rule_list in config["rules"].items():
            if not isinstance(field_rule_list, list):
                raise ConfigurationError(f"Rules for field '{field_name}' must be a list")

            for idx, rule_def in enumerate(field_rule_list):
                rules.append(self._parse_rule(field_name, rule_def, idx))

        return rules

    def _parse_rule(self, field_name: str, rule_def: dict[str, Any], idx: int) -> dict[str, Any]:
        if "type" not in rule_def:
            raise ConfigurationError(f"Rule for field '{field_name}' is missing 'type'")

        rule_type = rule_def["type"]
        if rule_type not in RULE_TYPES:
            raise ConfigurationError(f"Unknown rule type '{rule_type}' for field '{field_name}'")

        rule_name = rule_def.get("name", f"{field_name}_{rule_type}_{idx}")

        severity = rule_def.get("severity", "error")
        if severity not in SEVERITIES:
            raise ConfigurationError(
                f"Invalid severity '{severity}' for rule '{rule_name}'. Must be 'error' or 'warning'"
            )

        parameters = parse_parameters(rule_def.get("params", rule_def.get("parameters", {})) or {})

        return {
            "rule_name": rule_name,
            "rule_type": rule_type,
            "field_name": field_name,
            "parameters": parameters,
            "severity": severity,
            "enabled": rule_def.get("enabled", True),
        }


class RuleConfigBuilder:
    """
    Programmatically build rule configurations (for testing or dynamic rules).
    """

    def __init__(self):
        self.rules: list[dict[str, Any]] = []

    def _add(
        self,
        rule_type: str,
        field_name: str,
        parameters: dict[str, Any],
        rule_name: str | None,
        severity: str,
    ) -> "RuleConfigBuilder":
        self.rules.append({
            "rule_name": rule_name or f"{field_name}_{rule_type}_{len(self.rules)}",
            "rule_type": rule_type,
            "field_name": field_name,
            "parameters": parameters,
            "severity": severity,
            "enabled": True,
        })
        return self

    def must_be(
        self,
        field_name: str,
        rule_name: str | None = None,
        severity: str = "error",
        **parameters: Any,
    ) -> "RuleConfigBuilder":
        """Add a must-be rule; keyword arguments are its directives."""
        return self._add("must_be", field_name, parameters, rule_name, severity)

    def date(
        self,
        field_name: str,
        rule_name: str | None = None,
        severity: str = "error",
        **parameters: Any,
    ) -> "RuleConfigBuilder":
        """Add a date rule; keyword arguments are its options."""
        return self._add("date", field_name, parameters, rule_name, severity)

    def build(self) -> list[dict[str, Any]]:
        """Build and return the rule configuration."""
        return self.rules
