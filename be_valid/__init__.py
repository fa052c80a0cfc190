"""
be-valid: must-be and date validators for record attributes.
"""

from .config import Configuration, RuleSettings, configure, get_config, reset_config
from .core.models import DataRecord, ErrorEntry, Errors, ValidationResult
from .core.rules import RuleConfigBuilder, RuleConfigLoader, RuleEngine
from .core.validators import (
    BLANK,
    NOW,
    PRESENT,
    TODAY,
    DateValidator,
    Field,
    Method,
    MustBeValidator,
    evaluate_bound,
)
from .exceptions import ConfigurationError

__version__ = "0.1.0"

__all__ = [
    "Configuration",
    "RuleSettings",
    "configure",
    "get_config",
    "reset_config",
    "DataRecord",
    "ErrorEntry",
    "Errors",
    "ValidationResult",
    "RuleConfigBuilder",
    "RuleConfigLoader",
    "RuleEngine",
    "DateValidator",
    "MustBeValidator",
    "evaluate_bound",
    "Field",
    "Method",
    "NOW",
    "TODAY",
    "BLANK",
    "PRESENT",
    "ConfigurationError",
]
