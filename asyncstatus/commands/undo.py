"""
asyncstatus undo - Remove the most recently added item.

Only the last item can be undone; there is no history beyond that.
"""

from asyncstatus.lib.config import Config
from asyncstatus.lib.dates import format_date_for_display, parse_date
from asyncstatus.lib.errors import SessionError
from asyncstatus.store import JsonFileStore


def cmd_undo(args, config: Config) -> int:
    try:
        day = parse_date(args.date)
    except ValueError as e:
        print(f"ERROR: invalid date format: {e}")
        return 2

    try:
        outcome = JsonFileStore(config.store_dir).undo_last(day)
    except SessionError as e:
        print(f"ERROR: {e}")
        return 1

    if outcome.removed is None:
        print(f"nothing to undo for {format_date_for_display(day)}")
    elif outcome.deleted_record:
        print("removed entire status update")
    else:
        print(f"removed last item: {outcome.removed.kind.keyword} {outcome.removed.content}")
    return 0
