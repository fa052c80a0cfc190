"""
Validation rule implementations.

Provides the must-be comparator validator and the date validator, plus the
operand kinds their options accept.
"""

from .base_validator import BaseValidator, Record, is_blank, is_present
from .date_validator import DateValidator, evaluate_bound, resolve_bound
from .messages import Message, MessageState
from .must_be_validator import DIRECTIVES, MATCHERS, MustBeValidator
from .operands import BLANK, NOW, PRESENT, TODAY, Field, Method, Sentinel

__all__ = [
    "BaseValidator",
    "Record",
    "is_blank",
    "is_present",
    "DateValidator",
    "evaluate_bound",
    "resolve_bound",
    "Message",
    "MessageState",
    "MustBeValidator",
    "MATCHERS",
    "DIRECTIVES",
    "Field",
    "Method",
    "Sentinel",
    "NOW",
    "TODAY",
    "BLANK",
    "PRESENT",
]
