"""
asyncstatus show - Display a status update grouped by item kind.
"""

from asyncstatus.lib.config import Config
from asyncstatus.lib.dates import format_date_for_display, format_long_date, parse_date
from asyncstatus.lib.errors import SessionError
from asyncstatus.lib.types import ItemKind, StatusRecord
from asyncstatus.store import JsonFileStore

SECTION_TITLES = [
    (ItemKind.DONE, "completed"),
    (ItemKind.PROGRESS, "in progress"),
    (ItemKind.BLOCKER, "blockers"),
]


def format_record(record: StatusRecord) -> str:
    """Format a record for the terminal."""
    lines = [format_long_date(record.effective_date), ""]

    if not record.items:
        lines.append("  (empty)")

    for kind, title in SECTION_TITLES:
        items = [item for item in record.items if item.kind is kind]
        if not items:
            continue
        lines.append(f"  {title}")
        for item in items:
            lines.append(f"    {item.content}")
        lines.append("")

    for title, value in (("mood", record.mood), ("notes", record.notes)):
        if value:
            lines.append(f"  {title}")
            for part in value.split("\n"):
                lines.append(f"    {part}")
            lines.append("")

    return "\n".join(lines).rstrip() + "\n"


def cmd_show(args, config: Config) -> int:
    """Show the status update for args.date."""
    try:
        day = parse_date(args.date)
    except ValueError as e:
        print(f"ERROR: invalid date format: {e}")
        return 2

    try:
        record = JsonFileStore(config.store_dir).fetch_record(day)
    except SessionError as e:
        print(f"ERROR: {e}")
        return 1

    if record is None:
        print(f"no updates found for {format_date_for_display(day)}")
        print('  run: asyncstatus done "your task" to create one')
        return 0

    print(format_record(record), end="")
    return 0
