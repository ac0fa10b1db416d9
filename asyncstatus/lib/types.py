"""
Shared data types for asyncstatus.

This module contains the status record model used by the document codec,
the change detector, the store and the edit session, kept here to avoid
circular imports.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum


class ItemKind(Enum):
    """Kind of a status item.

    Values are the directive keywords used in the editable document.
    """

    DONE = "done"
    PROGRESS = "progress"
    BLOCKER = "blocker"

    @property
    def keyword(self) -> str:
        return self.value


@dataclass
class StatusItem:
    """A single line of a status update."""
    content: str
    kind: ItemKind
    order: int


@dataclass
class StatusRecord:
    """Status update for one calendar date, as held by the store.

    mood and notes are either None or a non-empty string; multi-line values
    use newline separators.
    """
    effective_date: date
    items: list[StatusItem] = field(default_factory=list)
    mood: str | None = None
    notes: str | None = None
    last_updated_at: datetime | None = None  # Informational only


@dataclass
class EditResult:
    """Structured content recovered from an edited document."""
    items: list[StatusItem] = field(default_factory=list)
    mood: str | None = None
    notes: str | None = None


def optional_text(value: str | None) -> str | None:
    """Normalize optional text: empty strings become None."""
    if value is None or value == "":
        return None
    return value
