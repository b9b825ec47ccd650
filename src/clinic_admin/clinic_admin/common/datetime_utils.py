from __future__ import annotations

import calendar
from datetime import date, datetime, timezone


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_utc() -> datetime:
    """Current time as an aware UTC datetime.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)


def parse_timestamp(value: str | date | datetime) -> datetime:
    """Parse an ISO-8601 date or timestamp into an aware UTC datetime.

    Accepts the browser-style ``...Z`` suffix and bare ``YYYY-MM-DD`` dates
    (taken as midnight UTC). Naive values are assumed to be UTC.
    """

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def to_iso(value: datetime) -> str:
    return parse_timestamp(value).isoformat()


def subtract_months(value: datetime, months: int) -> datetime:
    """Calendar-month subtraction.

    The day is clamped to the last day of the target month (31 Mar - 1 month = 28/29 Feb).
    """

    total = value.year * 12 + (value.month - 1) - int(months)
    year, month_index = divmod(total, 12)
    month = month_index + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)
