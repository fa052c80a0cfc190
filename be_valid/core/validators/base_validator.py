"""
Base validator interface for all validation rules.

All validators inherit from BaseValidator and implement validate(). A failed
rule is not an exception: the validator appends an entry to the record's
error collection and returns False.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Set
from typing import Any, Protocol

from be_valid.config import Configuration, get_config


class ErrorCollection(Protocol):
    def add(self, attribute: str, message: str, **metadata: Any) -> Any: ...


class Record(Protocol):
    """What a validator needs from the host record."""

    errors: ErrorCollection

    def has_attribute(self, name: str) -> bool: ...

    def read_attribute(self, name: str) -> Any: ...

    def read_attribute_before_type_cast(self, name: str) -> Any: ...


def is_blank(value: Any) -> bool:
    """
    None, False, whitespace-only strings and empty collections are blank.
    Zero is not.
    """
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, Set, Mapping)):
        return len(value) == 0
    return False


def is_present(value: Any) -> bool:
    return not is_blank(value)


class BaseValidator(ABC):
    """
    Abstract base class for all validators.

    Each validator checks one attribute of a record against the options in
    `parameters`.
    """

    # Record attribute holding the default error collection
    errors_attribute = "errors"

    def __init__(
        self,
        field_name: str,
        parameters: dict[str, Any] | None = None,
        config: Configuration | None = None,
    ):
        """
        Initialize validator.

        Args:
            field_name: Name of the field to validate
            parameters: Rule options (directives, message overrides, rule_name)
            config: Rule registry; the process-wide one is used when omitted
        """
        self.field_name = field_name
        self.parameters = dict(parameters or {})
        self._config = config

    @property
    def config(self) -> Configuration:
        return self._config if self._config is not None else get_config()

    @property
    def rule_name(self) -> str | None:
        return self.parameters.get("rule_name")

    @abstractmethod
    def validate(self, value: Any, record: Record) -> bool:
        """
        Validate a value against this rule.

        Args:
            value: The current (typed) field value
            record: The record the value belongs to

        Returns:
            True if the value satisfies the rule, False if an error was added
        """
        pass

    def validate_record(self, record: Record) -> bool:
        """Read this validator's field from the record and validate it."""
        return self.validate(record.read_attribute(self.field_name), record)

    def error_collection(self, record: Record) -> ErrorCollection:
        """
        The collection failures are written to: `error_level` when given,
        the warnings of notice rules, the class default otherwise.
        """
        level = self.parameters.get("error_level")
        if level is None and self.config.is_notice(self.rule_name):
            level = "warnings"
        return getattr(record, level or self.errors_attribute)

    @property
    @abstractmethod
    def rule_type(self) -> str:
        """Return the rule type identifier."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(field={self.field_name}, params={self.parameters})"
