"""Interactive edit session using the transitions library.

One session edits the status record for one date:

    start -> fetched -> document_written -> editor_run -> parsed
          -> (no_change | submitted) -> cleaned -> end

Any failure jumps straight to cleaned, so the temporary document is removed
on every exit path before the error propagates.

Usage:
    from asyncstatus.workflow.session import EditSession

    result = EditSession(store, day).run()
    if result.outcome is SessionOutcome.NO_CHANGE:
        ...
"""

import logging
import os
import tempfile
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Callable

from transitions import Machine

from asyncstatus.lib import document
from asyncstatus.lib.dates import format_date_for_display, format_long_date
from asyncstatus.lib.diff import has_changed
from asyncstatus.lib.editor import run_editor
from asyncstatus.lib.errors import (
    EditorLaunchError,
    SubmissionError,
    TempResourceError,
)
from asyncstatus.lib.types import EditResult, StatusRecord
from asyncstatus.store import StatusStore

logger = logging.getLogger(__name__)


STATES = [
    "start",
    "fetched",
    "document_written",
    "editor_run",
    "parsed",
    "no_change",
    "submitted",
    "cleaned",
    "end",
]

# Happy path is linear; "release" reaches cleaned from any live state
TRANSITIONS = [
    {"trigger": "record_fetched", "source": "start", "dest": "fetched"},
    {"trigger": "document_ready", "source": "fetched", "dest": "document_written"},
    {"trigger": "editor_closed", "source": "document_written", "dest": "editor_run"},
    {"trigger": "document_parsed", "source": "editor_run", "dest": "parsed"},
    {"trigger": "skip_submit", "source": "parsed", "dest": "no_change"},
    {"trigger": "submit_done", "source": "parsed", "dest": "submitted"},
    {"trigger": "release", "source": STATES[:7], "dest": "cleaned"},
    {"trigger": "finish", "source": "cleaned", "dest": "end"},
]

TEMP_PREFIX = "asyncstatus-edit-"
TEMP_SUFFIX = ".txt"


class SessionOutcome(Enum):
    NO_CHANGE = "no_change"
    SUBMITTED = "submitted"


@dataclass
class SessionResult:
    """What an edit session did."""
    outcome: SessionOutcome
    day: date
    original: StatusRecord | None
    edited: EditResult
    states: list[str] = field(default_factory=list)


class EditSession:
    """Edit the status record for one date in the user's editor.

    Wraps the transitions library with session-specific logic:
    - Owns the temporary document for the whole run
    - Records every visited state (for auditing cleanup)
    - Logs all transitions
    """

    def __init__(
        self,
        store: StatusStore,
        day: date,
        editor: Callable[[str], int] = run_editor,
        today: date | None = None,
        temp_dir: str | None = None,
    ):
        """Initialize a session.

        Args:
            store: Record store providing fetch_record/submit_record
            day: Date whose record is edited
            editor: Blocks until the user's editor exits, returns its exit code
            today: Reference date for the document header label
            temp_dir: Directory for the temporary document (system default if None)
        """
        self.store = store
        self.day = day
        self.editor = editor
        self.today = today
        self.temp_dir = temp_dir
        self.doc_path: str | None = None
        self.states = ["start"]

        self.machine = Machine(
            model=self,
            states=STATES,
            transitions=TRANSITIONS,
            initial="start",
            auto_transitions=False,
            send_event=True,
            after_state_change="on_state_change",
        )

    def on_state_change(self, event) -> None:
        """Called after every transition."""
        self.states.append(self.state)
        logger.debug(
            f"[SESSION] {self.day}: {event.transition.source} -> "
            f"{event.transition.dest} (trigger: {event.event.name})"
        )

    def label_for(self, original: StatusRecord | None) -> str:
        """Header label: "today"/"yesterday", or the full date."""
        label = format_date_for_display(self.day, self.today)
        if label == "today" and original is not None:
            label = format_long_date(original.effective_date)
        return label

    def _write_document(self, text: str) -> str:
        try:
            fd, path = tempfile.mkstemp(prefix=TEMP_PREFIX, suffix=TEMP_SUFFIX, dir=self.temp_dir)
        except OSError as e:
            raise TempResourceError(f"failed to create temporary file: {e}") from e

        self.doc_path = path
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
        except OSError as e:
            raise TempResourceError(f"failed to write temporary file {path}: {e}") from e
        return path

    def _read_document(self) -> str:
        try:
            with open(self.doc_path, encoding="utf-8") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise TempResourceError(f"failed to read edited file {self.doc_path}: {e}") from e

    def _remove_document(self) -> None:
        path, self.doc_path = self.doc_path, None
        if path is None:
            return
        try:
            os.unlink(path)
        except FileNotFoundError:
            logger.debug(f"[SESSION] temporary file {path} already gone")
        except OSError as e:
            raise TempResourceError(f"failed to remove temporary file {path}: {e}") from e

    def run(self) -> SessionResult:
        """Run the session start to end.

        Raises:
            FetchError: reading the current record failed
            TempResourceError: the temporary document could not be handled
            EditorLaunchError: no editor, or the editor failed
            MalformedLine / EmptyItemContent: the edited document is invalid
            SubmissionError: the store did not accept the update
        """
        failed = False
        try:
            original = self.store.fetch_record(self.day)
            self.record_fetched()

            path = self._write_document(document.serialize(original, self.label_for(original)))
            self.document_ready()

            exit_code = self.editor(path)
            if exit_code != 0:
                raise EditorLaunchError(f"editor exited with status {exit_code}")
            self.editor_closed()

            edited = document.parse(self._read_document())
            self.document_parsed()

            if not has_changed(original, edited):
                logger.info(f"[SESSION] {self.day}: no changes")
                self.skip_submit()
                outcome = SessionOutcome.NO_CHANGE
            else:
                try:
                    self.store.submit_record(self.day, edited.items, edited.mood, edited.notes)
                except OSError as e:
                    raise SubmissionError(f"failed to update status: {e}") from e
                self.submit_done()
                outcome = SessionOutcome.SUBMITTED
        except BaseException:
            failed = True
            raise
        finally:
            try:
                self._remove_document()
            except TempResourceError as e:
                if not failed:
                    raise
                logger.warning(f"[SESSION] {e}")
            finally:
                self.release()
                self.finish()

        return SessionResult(
            outcome=outcome,
            day=self.day,
            original=original,
            edited=edited,
            states=list(self.states),
        )
