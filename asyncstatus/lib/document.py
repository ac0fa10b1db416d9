"""
Editable status document for asyncstatus.

Renders a status record into the plain-text document opened in the user's
editor, and parses the edited text back into items, mood and notes.

Grammar (one directive per line, whitespace around the line is ignored):
- done|progress|blocker <text>   status item
- mood <text>                    mood line (repeatable, joined with newlines)
- notes <text>                   notes line (repeatable, joined with newlines)
- blank lines and lines starting with # are ignored
"""

import re

from asyncstatus.lib.errors import EmptyItemContent, MalformedLine
from asyncstatus.lib.types import EditResult, ItemKind, StatusItem, StatusRecord

ITEM_RE = re.compile(r'^(done|progress|blocker)\s+(.+)$')
MOOD_RE = re.compile(r'^mood\s+(.+)$')
NOTES_RE = re.compile(r'^notes\s+(.+)$')

# Bare keyword with nothing after it: "done " trims to "done"
BARE_ITEM_RE = re.compile(r'^(done|progress|blocker)$')

HELP_FOOTER = """\
#
# Commands:
#   done <text>     = completed task
#   progress <text> = work in progress
#   blocker <text>  = blocked task
#
# Special fields:
#   mood <mood>     = your current mood
#   notes <text>    = additional notes
#
# Lines starting with # are ignored
# You can reorder lines to change the order
# Delete lines to remove items
# Add new lines to add items
#
# Example:
#   done Implemented user authentication
#   progress Working on payment integration
#   blocker Waiting for API keys
#   mood productive
#   notes Great progress today, team collaboration was excellent
"""


def _directive_lines(keyword: str, value: str | None) -> list[str]:
    """Split a multi-line field into one directive per non-empty line."""
    if not value:
        return []
    lines = []
    for part in value.split("\n"):
        part = part.strip()
        if part:
            lines.append(f"{keyword} {part}")
    return lines


def serialize(record: StatusRecord | None, label: str) -> str:
    """Render a record as an editable document.

    Args:
        record: Current status record, or None if no update exists yet
        label: Human-readable target date shown in the header

    Returns:
        Document text, newline-terminated
    """
    lines = [f"# Edit your status update for {label}", ""]

    if record is not None and record.items:
        for item in record.items:
            lines.append(f"{item.kind.keyword} {item.content}")
    else:
        lines.append("# No existing items. Add your status items below:")
        lines.append("# done Example completed task")
        lines.append("# progress Example work in progress")

    lines.append("")
    if record is not None:
        lines.extend(_directive_lines("mood", record.mood))
        lines.extend(_directive_lines("notes", record.notes))

    lines.append("")
    return "\n".join(lines) + "\n" + HELP_FOOTER


def _append_line(current: str | None, addition: str) -> str:
    if current is None:
        return addition
    return current + "\n" + addition


def parse(text: str) -> EditResult:
    """Parse an edited document.

    Raises:
        EmptyItemContent: if an item directive has no content
        MalformedLine: if a line matches no directive
    """
    result = EditResult()
    order = 1

    for lineno, raw in enumerate(text.splitlines(), 1):
        line = raw.strip()

        # Skip empty lines and comments
        if not line or line.startswith("#"):
            continue

        item_match = ITEM_RE.match(line)
        if item_match:
            content = item_match.group(2).strip()
            if not content:
                raise EmptyItemContent(raw, lineno)
            result.items.append(StatusItem(
                content=content,
                kind=ItemKind(item_match.group(1)),
                order=order,
            ))
            order += 1
            continue

        if BARE_ITEM_RE.match(line):
            raise EmptyItemContent(raw, lineno)

        mood_match = MOOD_RE.match(line)
        if mood_match:
            mood = mood_match.group(1).strip()
            if mood:
                result.mood = _append_line(result.mood, mood)
            continue

        notes_match = NOTES_RE.match(line)
        if notes_match:
            notes = notes_match.group(1).strip()
            if notes:
                result.notes = _append_line(result.notes, notes)
            continue

        raise MalformedLine(raw, lineno)

    return result
