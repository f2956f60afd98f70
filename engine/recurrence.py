"""
engine/recurrence.py
--------------------
Monthly recurrence anchored to a canonical day-of-month.

Every occurrence is computed from the stored anchor day, never from a
previously clamped due date, so an anchor of 31 yields Feb 28 and then
Mar 31 again instead of sticking to the 28th.
"""

from datetime import date

from dateutil.relativedelta import relativedelta

from engine.date_math import DateLike, as_calendar_date
from engine.errors import InvalidRecurrenceDay

MIN_ANCHOR_DAY = 1
MAX_ANCHOR_DAY = 31


def validate_anchor_day(anchor_day: object) -> int:
    """
    Check that `anchor_day` is an integer day-of-month.

    Raises:
        InvalidRecurrenceDay: If missing, not an integer, or outside 1-31.
    """
    if anchor_day is None or isinstance(anchor_day, bool) or not isinstance(anchor_day, int):
        raise InvalidRecurrenceDay(anchor_day)
    if not MIN_ANCHOR_DAY <= anchor_day <= MAX_ANCHOR_DAY:
        raise InvalidRecurrenceDay(anchor_day)
    return anchor_day


def occurrence_in_month(year: int, month: int, anchor_day: int) -> date:
    """The anchor day in the given month, clamped to the month's last day."""
    validate_anchor_day(anchor_day)
    # relativedelta clamps `day` to the length of the target month.
    return date(year, month, 1) + relativedelta(day=anchor_day)


def next_occurrence_on_or_after(anchor_day: int, reference: DateLike) -> date:
    """
    First occurrence of `anchor_day` strictly after `reference`.

    The current month's occurrence is used if it has not been reached yet,
    otherwise the following month's, both clamped to the month length.

    Raises:
        InvalidRecurrenceDay: If `anchor_day` is outside 1-31.
    """
    reference = as_calendar_date(reference)
    candidate = occurrence_in_month(reference.year, reference.month, anchor_day)
    if candidate > reference:
        return candidate
    return reference + relativedelta(months=1, day=anchor_day)


def advance_to_next_cycle(current_due: DateLike, anchor_day: int) -> date:
    """
    Roll a recurring due date over to the following cycle.

    The search starts one day past `current_due`, so the result is always a
    later date, never the current one again.

    Examples:
        advance_to_next_cycle(date(2025, 1, 31), 31) -> date(2025, 2, 28)
        advance_to_next_cycle(date(2025, 2, 28), 31) -> date(2025, 3, 31)

    Raises:
        InvalidRecurrenceDay: If `anchor_day` is outside 1-31.
    """
    return next_occurrence_on_or_after(anchor_day, current_due)


def first_due_date(start_date: DateLike, today: DateLike) -> tuple[int, date]:
    """
    Schedule a new monthly series from its start date.

    Returns:
        (anchor_day, due_date) where anchor_day is the start date's
        day-of-month. A start date of today or later is itself the first
        due date; an earlier one rolls to the first anchored occurrence
        strictly after today.
    """
    start_date = as_calendar_date(start_date)
    today = as_calendar_date(today)
    anchor_day = start_date.day
    if start_date >= today:
        return anchor_day, start_date
    return anchor_day, next_occurrence_on_or_after(anchor_day, today)
