"""
Operand kinds accepted by rule options.

Literals are used as they are. Everything else is tagged explicitly so a
string operand is never mistaken for a field name:

    Field("bonus")          value of another attribute of the record
    Method("is_premium")    zero-argument predicate called on a value
    NOW, TODAY              date bound sentinels
    BLANK, PRESENT          `when` condition sentinels
    callable(record)        computed operand or bound
"""

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from re import Pattern
from typing import Any


class Sentinel(Enum):
    NOW = "now"
    TODAY = "today"
    BLANK = "blank"
    PRESENT = "present"

    def __str__(self) -> str:
        return self.value


NOW = Sentinel.NOW
TODAY = Sentinel.TODAY
BLANK = Sentinel.BLANK
PRESENT = Sentinel.PRESENT


@dataclass(frozen=True)
class Field:
    """Reference to another attribute of the record being validated."""

    name: str

    def resolve(self, record) -> Any:
        return record.read_attribute(self.name)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Method:
    """Name of a zero-argument predicate to call on a value."""

    name: str

    def call(self, value: Any) -> bool:
        return bool(getattr(value, self.name)())

    def __str__(self) -> str:
        return self.name


def is_callable_operand(operand: Any) -> bool:
    return callable(operand) and not isinstance(operand, (type, Pattern))


def resolve_operand(record, operand: Any) -> Any:
    """Turn an operand into the concrete value it stands for."""
    if isinstance(operand, Field):
        return operand.resolve(record)
    if is_callable_operand(operand):
        return operand(record)
    return operand


def describe_operand(operand: Any) -> str:
    """Text used for an operand in failure messages."""
    if isinstance(operand, Pattern):
        return f"/{operand.pattern}/"
    return str(operand)


def as_pattern(operand: Any) -> Pattern:
    if isinstance(operand, Pattern):
        return operand
    return re.compile(str(operand))


def is_collection(value: Any) -> bool:
    """Any iterable of values; strings, bytes and mappings count as one value."""
    return isinstance(value, Iterable) and not isinstance(value, (str, bytes, bytearray, Mapping))


def flatten(values: Any) -> list[Any]:
    """Flatten nested collections (lists, tuples, sets, ranges); strings stay whole."""
    if not is_collection(values):
        return [values]
    flat: list[Any] = []
    for item in values:
        flat.extend(flatten(item))
    return flat


def as_sequence(value: Any) -> list[Any]:
    """Wrap a scalar as a one-element list; None is the empty list."""
    if value is None:
        return []
    if is_collection(value):
        return list(value)
    return [value]


def join_values(values: Any) -> str:
    return ", ".join(str(value) for value in values)
