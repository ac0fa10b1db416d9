"""
Change detection between a stored record and an edited document.

Items are compared by position: reordering two otherwise identical items is
a change.
"""

from asyncstatus.lib.types import EditResult, StatusRecord

__all__ = ["has_changed"]


def _text(value: str | None) -> str:
    return value or ""


def has_changed(original: StatusRecord | None, edited: EditResult) -> bool:
    """Return True if the edited result should be submitted."""
    if original is None or not original.items:
        if edited.items:
            return True
        original_mood = original.mood if original is not None else None
        original_notes = original.notes if original is not None else None
        return (
            _text(original_mood) != _text(edited.mood)
            or _text(original_notes) != _text(edited.notes)
        )

    if len(original.items) != len(edited.items):
        return True

    for item, edited_item in zip(original.items, edited.items):
        if item.kind.keyword != edited_item.kind.keyword or item.content != edited_item.content:
            return True

    if _text(original.mood) != _text(edited.mood):
        return True

    if _text(original.notes) != _text(edited.notes):
        return True

    return False
