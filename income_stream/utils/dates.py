"""Date helpers shared by the income aggregation and persistence layers."""

import calendar
from datetime import date, datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string (the stored timestamp format)."""
    return utc_now().isoformat()


def parse_date(value) -> date | None:
    """
    Coerce a stored or submitted date value to a date.

    Accepts date/datetime objects and ISO strings, with or without a time
    part (e.g. '2024-03-15', '2024-03-15T00:00:00Z'). Returns None for
    empty values.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return date.fromisoformat(text[:10])


def month_name(month: int) -> str:
    """Full English month name for a 1-based month number."""
    return calendar.month_name[month]


def add_months(day: date, months: int) -> date:
    """Shift a date by whole months, clamping the day to the target month's length."""
    index = day.month - 1 + months
    year = day.year + index // 12
    month = index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))
