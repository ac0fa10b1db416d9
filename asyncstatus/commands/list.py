"""
asyncstatus list - Show recent status updates, newest first.
"""

from asyncstatus.commands.show import format_record
from asyncstatus.lib.config import Config
from asyncstatus.lib.errors import SessionError
from asyncstatus.store import MAX_LIST_DAYS, JsonFileStore


def cmd_list(args, config: Config) -> int:
    """List status updates from the past args.days days (default: today only)."""
    if not 1 <= args.days <= MAX_LIST_DAYS:
        print(f"ERROR: days must be between 1 and {MAX_LIST_DAYS}")
        return 2

    try:
        records = JsonFileStore(config.store_dir).list_recent(args.days)
    except SessionError as e:
        print(f"ERROR: {e}")
        return 1

    if not records:
        span = "today" if args.days == 1 else f"the past {args.days} days"
        print(f"no status updates found for {span}")
        return 0

    print("\n".join(format_record(record) for record in records), end="")
    return 0
