"""Tests for asyncstatus.workflow.session module."""

import os
import pytest
from datetime import date
from pathlib import Path
from unittest.mock import patch

from asyncstatus.lib.errors import (
    EditorLaunchError,
    EmptyItemContent,
    FetchError,
    MalformedLine,
    SubmissionError,
    TempResourceError,
)
from asyncstatus.lib.types import ItemKind, StatusItem, StatusRecord
from asyncstatus.workflow.session import (
    STATES,
    TRANSITIONS,
    EditSession,
    SessionOutcome,
)

DAY = date(2024, 1, 15)


class FakeStore:
    """In-memory store recording submissions."""

    def __init__(self, record=None, fetch_error=None, submit_error=None):
        self.record = record
        self.fetch_error = fetch_error
        self.submit_error = submit_error
        self.submissions = []

    def fetch_record(self, day):
        if self.fetch_error:
            raise self.fetch_error
        return self.record

    def submit_record(self, day, items, mood, notes):
        if self.submit_error:
            raise self.submit_error
        self.submissions.append((day, items, mood, notes))


class FakeEditor:
    """Replaces the document with fixed text, or leaves it alone."""

    def __init__(self, new_text=None, exit_code=0, error=None):
        self.new_text = new_text
        self.exit_code = exit_code
        self.error = error
        self.paths = []
        self.seen_text = None

    def __call__(self, path):
        self.paths.append(path)
        self.seen_text = Path(path).read_text()
        if self.error:
            raise self.error
        if self.new_text is not None:
            Path(path).write_text(self.new_text)
        return self.exit_code


@pytest.fixture
def record():
    return StatusRecord(
        effective_date=DAY,
        items=[
            StatusItem(content="Shipped login", kind=ItemKind.DONE, order=1),
            StatusItem(content="Payments", kind=ItemKind.PROGRESS, order=2),
        ],
        mood="tired\nbut ok",
    )


def run_session(store, editor, tmp_path):
    session = EditSession(store, DAY, editor=editor, today=date(2024, 1, 20), temp_dir=str(tmp_path))
    return session, session.run()


class TestSessionStates:
    """Tests for session state definitions."""

    def test_states_are_linear_path(self):
        assert STATES[0] == "start"
        assert STATES[-1] == "end"
        assert "cleaned" in STATES

    def test_release_reachable_from_every_live_state(self):
        release = [t for t in TRANSITIONS if t["trigger"] == "release"][0]
        assert set(release["source"]) == set(STATES) - {"cleaned", "end"}


class TestSessionOutcomes:
    """Happy paths."""

    def test_unedited_document_is_no_change(self, record, tmp_path):
        store = FakeStore(record)
        editor = FakeEditor()
        session, result = run_session(store, editor, tmp_path)

        assert result.outcome is SessionOutcome.NO_CHANGE
        assert store.submissions == []
        assert result.states == [
            "start", "fetched", "document_written", "editor_run",
            "parsed", "no_change", "cleaned", "end",
        ]
        assert session.state == "end"

    def test_document_contains_current_record(self, record, tmp_path):
        editor = FakeEditor()
        run_session(FakeStore(record), editor, tmp_path)
        assert "done Shipped login\nprogress Payments\n" in editor.seen_text
        assert "mood tired\nmood but ok\n" in editor.seen_text
        assert editor.seen_text.startswith("# Edit your status update for Monday, January 15, 2024")

    def test_edited_document_is_submitted(self, record, tmp_path):
        store = FakeStore(record)
        editor = FakeEditor("progress Payments\ndone Shipped login\nnotes retro\n")
        _, result = run_session(store, editor, tmp_path)

        assert result.outcome is SessionOutcome.SUBMITTED
        assert len(store.submissions) == 1
        day, items, mood, notes = store.submissions[0]
        assert day == DAY
        assert [(i.kind, i.content, i.order) for i in items] == [
            (ItemKind.PROGRESS, "Payments", 1),
            (ItemKind.DONE, "Shipped login", 2),
        ]
        assert mood is None
        assert notes == "retro"
        assert "submitted" in result.states

    def test_new_record_from_scratch(self, tmp_path):
        store = FakeStore(None)
        _, result = run_session(store, FakeEditor("done shipped the fix\n"), tmp_path)
        assert result.outcome is SessionOutcome.SUBMITTED
        assert result.original is None
        assert store.submissions[0][1] == [
            StatusItem(content="shipped the fix", kind=ItemKind.DONE, order=1)
        ]

    def test_temp_file_removed_after_success(self, record, tmp_path):
        editor = FakeEditor("done changed\n")
        run_session(FakeStore(record), editor, tmp_path)
        assert not os.path.exists(editor.paths[0])
        assert list(tmp_path.iterdir()) == []

    def test_temp_file_uniquely_named(self, record, tmp_path):
        first, second = FakeEditor(), FakeEditor()
        run_session(FakeStore(record), first, tmp_path)
        run_session(FakeStore(record), second, tmp_path)
        assert Path(first.paths[0]).name.startswith("asyncstatus-edit-")
        assert first.paths[0] != second.paths[0]


class TestSessionFailures:
    """Every failure path releases the temp file and never submits."""

    def test_editor_nonzero_exit(self, record, tmp_path):
        store = FakeStore(record)
        editor = FakeEditor("done changed\n", exit_code=1)
        session = EditSession(store, DAY, editor=editor, temp_dir=str(tmp_path))

        with pytest.raises(EditorLaunchError) as exc_info:
            session.run()

        assert exc_info.value.stage == "editor_run"
        assert store.submissions == []
        assert not os.path.exists(editor.paths[0])
        assert session.states[-2:] == ["cleaned", "end"]

    def test_editor_launch_failure(self, record, tmp_path):
        store = FakeStore(record)
        editor = FakeEditor(error=EditorLaunchError("no editor found"))
        session = EditSession(store, DAY, editor=editor, temp_dir=str(tmp_path))

        with pytest.raises(EditorLaunchError):
            session.run()
        assert list(tmp_path.iterdir()) == []
        assert session.state == "end"

    def test_malformed_line(self, record, tmp_path):
        store = FakeStore(record)
        editor = FakeEditor("done ok\nfoo bar\n")
        session = EditSession(store, DAY, editor=editor, temp_dir=str(tmp_path))

        with pytest.raises(MalformedLine) as exc_info:
            session.run()

        assert exc_info.value.line == "foo bar"
        assert exc_info.value.stage == "parsed"
        assert store.submissions == []
        assert list(tmp_path.iterdir()) == []

    def test_empty_item_content(self, record, tmp_path):
        store = FakeStore(record)
        session = EditSession(store, DAY, editor=FakeEditor("blocker   \n"), temp_dir=str(tmp_path))
        with pytest.raises(EmptyItemContent):
            session.run()
        assert store.submissions == []

    def test_submission_failure(self, record, tmp_path):
        store = FakeStore(record, submit_error=SubmissionError("server error (status 500)"))
        editor = FakeEditor("done changed\n")
        session = EditSession(store, DAY, editor=editor, temp_dir=str(tmp_path))

        with pytest.raises(SubmissionError) as exc_info:
            session.run()

        assert exc_info.value.stage == "submitted"
        assert list(tmp_path.iterdir()) == []
        assert "submitted" not in session.states
        assert session.states[-2:] == ["cleaned", "end"]

    def test_fetch_failure_never_creates_document(self, tmp_path):
        editor = FakeEditor()
        session = EditSession(
            FakeStore(fetch_error=FetchError("bad json")), DAY, editor=editor, temp_dir=str(tmp_path)
        )
        with pytest.raises(FetchError):
            session.run()
        assert editor.paths == []
        assert session.states == ["start", "cleaned", "end"]

    def test_temp_creation_failure(self, record, tmp_path):
        missing_dir = tmp_path / "does-not-exist"
        editor = FakeEditor()
        session = EditSession(FakeStore(record), DAY, editor=editor, temp_dir=str(missing_dir))
        with pytest.raises(TempResourceError) as exc_info:
            session.run()
        assert exc_info.value.stage == "document_written"
        assert editor.paths == []

    def test_editor_deleting_file_is_read_failure(self, record, tmp_path):
        class DeletingEditor(FakeEditor):
            def __call__(self, path):
                os.unlink(path)
                return 0

        store = FakeStore(record)
        session = EditSession(store, DAY, editor=DeletingEditor(), temp_dir=str(tmp_path))
        with pytest.raises(TempResourceError):
            session.run()
        assert store.submissions == []
        assert session.state == "end"

    def test_temp_removal_failure_after_success(self, record, tmp_path):
        store = FakeStore(record)
        session = EditSession(store, DAY, editor=FakeEditor(), temp_dir=str(tmp_path))

        with patch("asyncstatus.workflow.session.os.unlink", side_effect=PermissionError("denied")):
            with pytest.raises(TempResourceError) as exc_info:
                session.run()

        assert "failed to remove temporary file" in str(exc_info.value)
        assert session.state == "end"
        assert session.states[-2:] == ["cleaned", "end"]

    def test_temp_removal_failure_keeps_earlier_error(self, record, tmp_path, caplog):
        store = FakeStore(record)
        editor = FakeEditor("done changed\n", exit_code=1)
        session = EditSession(store, DAY, editor=editor, temp_dir=str(tmp_path))

        with patch("asyncstatus.workflow.session.os.unlink", side_effect=PermissionError("denied")):
            with pytest.raises(EditorLaunchError):
                session.run()

        assert "failed to remove temporary file" in caplog.text
        assert store.submissions == []
        assert session.state == "end"
