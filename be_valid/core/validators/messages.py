"""
Failure message composition for the must-be validator.

Comparator-style directives append clauses to a "must be" sentence
("must be greater than 10 less than 20"). Membership and date directives
use a different sentence shape (": 'X' is not a valid value") and replace
whatever was composed so far.
"""

from dataclasses import dataclass
from enum import Enum


class MessageState(Enum):
    PREFIXED = "prefixed"
    REPLACED = "replaced"


MESSAGE_PREFIX = "must be"


@dataclass
class Message:
    text: str = MESSAGE_PREFIX
    state: MessageState = MessageState.PREFIXED

    def append(self, clause: str) -> "Message":
        self.text += clause
        return self

    def replace(self, text: str) -> "Message":
        self.text = text
        self.state = MessageState.REPLACED
        return self

    def finish(self) -> str:
        return f"{self.text}."

    def __str__(self) -> str:
        return self.text
