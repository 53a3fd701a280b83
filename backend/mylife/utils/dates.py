from __future__ import annotations

import re
from datetime import UTC, date, datetime
from typing import Any

_CALENDAR_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def utc_now() -> datetime:
    return datetime.now(UTC)


def parse_calendar_date(value: Any) -> date | None:
    """Parse a ``YYYY-MM-DD`` string, returning None when it is not a real date."""
    if not isinstance(value, str) or not _CALENDAR_DATE.match(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def is_calendar_date(value: Any) -> bool:
    return parse_calendar_date(value) is not None


def is_iso8601(value: Any) -> bool:
    """Check that a value is a complete ISO 8601 date or date/time string."""
    if not isinstance(value, str) or not value:
        return False
    try:
        datetime.fromisoformat(value)
    except ValueError:
        return False
    return True

