"""
ErrorEntry and Errors: the error collection attached to a record.
"""

from typing import Any

from pydantic import BaseModel, Field


def humanize(attribute: str) -> str:
    """'naming_day' -> 'Naming day'"""
    text = attribute.replace("_", " ").strip()
    return text[:1].upper() + text[1:]


class ErrorEntry(BaseModel):
    """
    One failed rule on one attribute.

    Attributes:
        attribute: Name of the attribute that failed
        message: Human-readable message (without the attribute name)
        metadata: Extra context, at least rule_name for must-be failures
    """

    attribute: str
    message: str
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def rule_name(self) -> str | None:
        return self.metadata.get("rule_name")

    def full_message(self) -> str:
        return f"{humanize(self.attribute)} {self.message}"


class Errors(BaseModel):
    """
    Ordered collection of ErrorEntry objects.

    Validators only rely on add(); the remaining helpers are for callers
    reading the results.
    """

    entries: list[ErrorEntry] = Field(default_factory=list)

    def add(self, attribute: str, message: str, **metadata: Any) -> ErrorEntry:
        entry = ErrorEntry(attribute=attribute, message=message, metadata=metadata)
        self.entries.append(entry)
        return entry

    def __getitem__(self, attribute: str) -> list[str]:
        return [entry.message for entry in self.entries if entry.attribute == attribute]

    def is_empty(self) -> bool:
        return not self.entries

    def count(self) -> int:
        return len(self.entries)

    def full_messages(self) -> list[str]:
        return [entry.full_message() for entry in self.entries]

    def rule_names(self) -> list[str]:
        return [entry.rule_name for entry in self.entries if entry.rule_name]

    def clear(self) -> None:
        self.entries.clear()
