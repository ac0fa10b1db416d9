"""
asyncstatus done|progress|blocker - Append one item to a status update.
"""

from asyncstatus.lib.config import Config
from asyncstatus.lib.dates import format_date_for_display, parse_date
from asyncstatus.lib.errors import SessionError
from asyncstatus.lib.types import ItemKind
from asyncstatus.store import JsonFileStore


def cmd_add(args, config: Config) -> int:
    """Add an item of kind args.kind with text args.message."""
    try:
        day = parse_date(args.date)
    except ValueError as e:
        print(f"ERROR: invalid date format: {e}")
        return 2

    kind = ItemKind(args.kind)
    store = JsonFileStore(config.store_dir)
    try:
        item = store.add_item(day, kind, args.message)
    except ValueError as e:
        print(f"ERROR: {e}")
        return 2
    except SessionError as e:
        print(f"ERROR: {e}")
        return 1

    print(f"{kind.keyword}: {item.content}")
    print(f"  saved to {format_date_for_display(day)}")
    return 0
