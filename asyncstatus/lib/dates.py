"""
Date argument parsing for asyncstatus commands.

Accepts ISO dates (2024-01-15), "today", "yesterday" and relative
expressions like "2 days ago", "1 week ago" or "3 months ago".
"""

import calendar
import re
from datetime import date, timedelta

ISO_DATE_RE = re.compile(r'^\d{4}-\d{2}-\d{2}$')
RELATIVE_RE = re.compile(r'^(\d+)\s+(day|week|month)s?\s+ago$')


def _months_before(d: date, months: int) -> date:
    """Step back whole months, clamping to the last day of the target month."""
    month_index = d.year * 12 + (d.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(d.day, last_day))


def parse_date(text: str | None, today: date | None = None) -> date:
    """Parse a date argument.

    Args:
        text: Date expression, or None/empty for today
        today: Reference date (defaults to date.today())

    Raises:
        ValueError: if the expression is not recognized or not a real date
    """
    today = today or date.today()
    text = (text or "").strip()

    if not text or text == "today":
        return today
    if text == "yesterday":
        return today - timedelta(days=1)

    relative = RELATIVE_RE.match(text)
    if relative:
        count = int(relative.group(1))
        unit = relative.group(2)
        if unit == "day":
            return today - timedelta(days=count)
        if unit == "week":
            return today - timedelta(weeks=count)
        return _months_before(today, count)

    if ISO_DATE_RE.match(text):
        try:
            return date.fromisoformat(text)
        except ValueError:
            raise ValueError(f"invalid date format: {text}") from None

    raise ValueError(
        f"unsupported date format: {text}. Use YYYY-MM-DD, 'yesterday', or 'N days ago'"
    )


def format_date_for_display(d: date, today: date | None = None) -> str:
    """Friendly label: "today", "yesterday" or "Monday, January 15, 2024"."""
    today = today or date.today()
    if d == today:
        return "today"
    if d == today - timedelta(days=1):
        return "yesterday"
    return format_long_date(d)


def format_long_date(d: date) -> str:
    """Full date, e.g. "Monday, January 15, 2024"."""
    return f"{d.strftime('%A, %B')} {d.day}, {d.year}"
