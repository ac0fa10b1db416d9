"""Status record storage.

The edit session only needs two operations from a store: fetch the record for
a date, and replace the record for a date. JsonFileStore implements them on
top of one JSON file per date, validated against status_record.schema.json.
"""

import contextlib
import json
import logging
import os
import tempfile
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Protocol

from asyncstatus.lib.errors import FetchError, SubmissionError
from asyncstatus.lib.types import ItemKind, StatusItem, StatusRecord, optional_text
from asyncstatus.lib.validate import ValidationError, validate_record

logger = logging.getLogger(__name__)

MAX_LIST_DAYS = 30


class StatusStore(Protocol):
    """Read/replace access to status records, keyed by date."""

    def fetch_record(self, day: date) -> StatusRecord | None:
        """Return the record for day, or None if no update exists yet."""
        ...

    def submit_record(
        self,
        day: date,
        items: list[StatusItem],
        mood: str | None,
        notes: str | None,
    ) -> None:
        """Replace the record for day. Raises SubmissionError on failure."""
        ...

    def list_recent(self, days: int, today: date | None = None) -> list[StatusRecord]:
        """Records from the last `days` days, newest first."""
        ...


@dataclass
class UndoOutcome:
    """Result of removing the most recent item."""
    removed: StatusItem | None
    deleted_record: bool


def record_to_dict(record: StatusRecord) -> dict:
    return {
        "date": record.effective_date.isoformat(),
        "items": [
            {"content": item.content, "type": item.kind.value, "order": item.order}
            for item in record.items
        ],
        "mood": record.mood,
        "notes": record.notes,
        "updated_at": record.last_updated_at.isoformat() if record.last_updated_at else None,
    }


def record_from_dict(data: dict) -> StatusRecord:
    """Build a StatusRecord from validated JSON data. Items are sorted by order."""
    items = [
        StatusItem(content=entry["content"], kind=ItemKind(entry["type"]), order=entry["order"])
        for entry in data["items"]
    ]
    items.sort(key=lambda item: item.order)
    updated_at = data.get("updated_at")
    return StatusRecord(
        effective_date=date.fromisoformat(data["date"]),
        items=items,
        mood=optional_text(data.get("mood")),
        notes=optional_text(data.get("notes")),
        last_updated_at=datetime.fromisoformat(updated_at) if updated_at else None,
    )


def _write_atomic_json(path: Path, data: dict) -> None:
    """Write JSON via a temp file in the same directory, then replace."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path_str = tempfile.mkstemp(dir=str(path.parent), prefix=".tmp_", suffix=".json")
    tmp_path = Path(tmp_path_str)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(json.dumps(data, indent=2, ensure_ascii=False) + "\n")
            f.flush()
            os.fsync(f.fileno())
        tmp_path.replace(path)
    except BaseException:
        with contextlib.suppress(OSError):
            tmp_path.unlink(missing_ok=True)
        raise


class JsonFileStore:
    """Local store: <root>/<YYYY-MM-DD>.json per record."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def path_for(self, day: date) -> Path:
        return self.root / f"{day.isoformat()}.json"

    def fetch_record(self, day: date) -> StatusRecord | None:
        path = self.path_for(day)
        if not path.exists():
            logger.debug(f"[STORE] no record for {day}")
            return None

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            validate_record(data, path)
            return record_from_dict(data)
        except (OSError, ValueError, ValidationError) as e:
            raise FetchError(f"failed to read status update for {day}: {e}") from e

    def submit_record(
        self,
        day: date,
        items: list[StatusItem],
        mood: str | None,
        notes: str | None,
    ) -> None:
        record = StatusRecord(
            effective_date=day,
            items=list(items),
            mood=optional_text(mood),
            notes=optional_text(notes),
            last_updated_at=datetime.now(),
        )
        path = self.path_for(day)
        data = record_to_dict(record)

        try:
            validate_record(data, path)
            _write_atomic_json(path, data)
        except (OSError, ValidationError) as e:
            raise SubmissionError(f"failed to update status for {day}: {e}") from e

        logger.info(f"[STORE] saved {len(items)} item(s) for {day}")

    def list_recent(self, days: int, today: date | None = None) -> list[StatusRecord]:
        """Records for today and the days-1 days before it, newest first.

        Raises:
            ValueError: if days is not between 1 and MAX_LIST_DAYS
        """
        if not 1 <= days <= MAX_LIST_DAYS:
            raise ValueError(f"days must be between 1 and {MAX_LIST_DAYS}")

        today = today or date.today()
        records = []
        for offset in range(days):
            record = self.fetch_record(today - timedelta(days=offset))
            if record is not None:
                records.append(record)
        return records

    def add_item(self, day: date, kind: ItemKind, content: str) -> StatusItem:
        """Append one item to the record for day, creating it if needed."""
        content = content.strip()
        if not content or "\n" in content:
            raise ValueError("status item must be a single non-empty line")

        record = self.fetch_record(day) or StatusRecord(effective_date=day)
        next_order = max((item.order for item in record.items), default=0) + 1
        item = StatusItem(content=content, kind=kind, order=next_order)
        self.submit_record(day, record.items + [item], record.mood, record.notes)
        return item

    def undo_last(self, day: date) -> UndoOutcome:
        """Remove the most recently added item for day.

        The record is deleted entirely once it has no items, mood or notes.
        """
        record = self.fetch_record(day)
        if record is None or not record.items:
            return UndoOutcome(removed=None, deleted_record=False)

        last = max(record.items, key=lambda item: item.order)
        remaining = [item for item in record.items if item is not last]

        if not remaining and record.mood is None and record.notes is None:
            try:
                self.path_for(day).unlink()
            except OSError as e:
                raise SubmissionError(f"failed to remove status update for {day}: {e}") from e
            logger.info(f"[STORE] removed record for {day}")
            return UndoOutcome(removed=last, deleted_record=True)

        self.submit_record(day, remaining, record.mood, record.notes)
        return UndoOutcome(removed=last, deleted_record=False)
