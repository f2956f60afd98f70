"""
engine/date_math.py
-------------------
Timezone-safe day arithmetic on calendar dates.
"""

from datetime import date, datetime, timedelta
from typing import Union

DateLike = Union[date, datetime]


def as_calendar_date(value: DateLike) -> date:
    """
    Reduce a date or datetime to its calendar date fields.

    The datetime's own year/month/day are kept as-is; no timezone
    conversion is applied, so the same wall-clock day never drifts.
    """
    if isinstance(value, datetime):
        return value.date()
    return value


def days_until_due(due: DateLike, today: DateLike) -> int:
    """
    Number of whole days from `today` until `due`.

    Returns:
        0 when both fall on the same day, negative when `due` is in the past.
    """
    return (as_calendar_date(due) - as_calendar_date(today)).days


def shift_date(value: DateLike, days: int) -> date:
    """Move a calendar date forward (or backward, for negative `days`)."""
    return as_calendar_date(value) + timedelta(days=days)
