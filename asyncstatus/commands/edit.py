"""
asyncstatus edit - Edit a status update in $EDITOR, like git rebase -i.

Opens a temporary file with the current status items. Items can be changed,
reordered, added or removed; the update is saved when the editor closes.
"""

import logging
from functools import partial

from asyncstatus.lib.config import Config
from asyncstatus.lib.dates import parse_date
from asyncstatus.lib.editor import resolve_editor, run_editor
from asyncstatus.lib.errors import DocumentParseError, SessionError
from asyncstatus.store import JsonFileStore
from asyncstatus.workflow.session import EditSession, SessionOutcome

logger = logging.getLogger(__name__)


def cmd_edit(args, config: Config) -> int:
    """Edit the status update for args.date interactively."""
    try:
        day = parse_date(args.date)
    except ValueError as e:
        print(f"ERROR: invalid date format: {e}")
        return 2

    resolver = partial(resolve_editor, config_editor=config.editor)
    session = EditSession(
        JsonFileStore(config.store_dir),
        day,
        editor=partial(run_editor, resolver=resolver),
    )

    try:
        result = session.run()
    except DocumentParseError as e:
        print(f"ERROR: failed to parse edited file: {e}")
        print("  status update was not changed")
        return 1
    except SessionError as e:
        logger.debug(f"[SESSION] failed at {e.stage}", exc_info=True)
        print(f"ERROR: {e}")
        if e.stage == "submitted":
            print("  your edits were not saved; status update was not changed")
        return 1

    if result.outcome is SessionOutcome.NO_CHANGE:
        print("no changes made")
    else:
        print(f"status update saved ({len(result.edited.items)} item(s))")
    return 0
