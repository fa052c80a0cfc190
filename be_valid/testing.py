"""
Test helpers for code that uses be-valid rules.
"""

from contextlib import contextmanager
from typing import Iterator

from .config import Configuration, RuleSettings, get_config


@contextmanager
def disabled_rules(*rule_names: str, config: Configuration | None = None) -> Iterator[Configuration]:
    """
    Disable rules for the duration of a block, restoring their previous
    settings afterwards even if the block raises.

    Usage:
        with disabled_rules("salary_floor"):
            assert validator.validate(10, record)
    """
    config = config if config is not None else get_config()
    previous: dict[str, RuleSettings | None] = {
        name: config.rules.get(name) for name in rule_names
    }
    for name in rule_names:
        settings = previous[name]
        config.rules[name] = (
            settings.model_copy(update={"disabled": True}) if settings else RuleSettings(disabled=True)
        )
    try:
        yield config
    finally:
        for name, settings in previous.items():
            if settings is None:
                config.rules.pop(name, None)
            else:
                config.rules[name] = settings
