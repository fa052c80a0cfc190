"""
Process-wide rule configuration.

Holds the rule registry (rule name -> settings) consulted at the start of
every must-be evaluation, and the list of notice rules whose failures are
routed to a record's warnings instead of its errors.

The registry follows a single-writer, many-reader convention: configure it
at start-up or in test set-up, never while records are being validated on
other threads.
"""

from pathlib import Path
from typing import Callable

import yaml
from pydantic import BaseModel, Field

from .exceptions import ConfigurationError


class RuleSettings(BaseModel):
    """Flags for one named rule."""

    disabled: bool = False


class Configuration(BaseModel):
    """
    Mutable configuration shared by all validators.

    Attributes:
        rules: Rule name -> RuleSettings
        notice_rules: Rule names whose failures are reported as warnings
    """

    rules: dict[str, RuleSettings] = Field(default_factory=dict)
    notice_rules: list[str] = Field(default_factory=list)

    def is_disabled(self, rule_name: str | None) -> bool:
        if not rule_name:
            return False
        settings = self.rules.get(rule_name)
        return settings is not None and settings.disabled

    def disable(self, *rule_names: str) -> "Configuration":
        for rule_name in rule_names:
            self.rules.setdefault(rule_name, RuleSettings()).disabled = True
        return self

    def enable(self, *rule_names: str) -> "Configuration":
        for rule_name in rule_names:
            self.rules.setdefault(rule_name, RuleSettings()).disabled = False
        return self

    def is_notice(self, rule_name: str | None) -> bool:
        return bool(rule_name) and rule_name in self.notice_rules

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> "Configuration":
        """
        Load a configuration from a YAML file.

        Expected YAML format:
        ```yaml
        rules:
          salary_floor:
            disabled: true
        notice_rules:
          - bonus_range
        ```

        Raises:
            FileNotFoundError: If the file does not exist
            ConfigurationError: If the file is not a mapping
        """
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file {config_path} must contain a mapping")

        return cls.model_validate(data)


_config: Configuration | None = None


def get_config() -> Configuration:
    """Return the process-wide configuration, creating it on first access."""
    global _config
    if _config is None:
        _config = Configuration()
    return _config


def configure(callback: Callable[[Configuration], None] | None = None) -> Configuration:
    """
    Entry point for mutating the process-wide configuration.

    Usage:
        configure().disable("salary_floor")

        configure(lambda config: config.rules.update(
            salary_floor=RuleSettings(disabled=True)))
    """
    config = get_config()
    if callback is not None:
        callback(config)
    return config


def reset_config() -> Configuration:
    """Replace the process-wide configuration with an empty one."""
    global _config
    _config = Configuration()
    return _config
