"""
engine/reminders.py
-------------------
Reminder cadence table and reminder status projection.

Statuses here are display labels computed from the calendar: "Sent" means
the reminder's day has passed, not that anything was delivered.
"""

from datetime import date
from typing import Mapping, Optional

from engine.date_math import DateLike, as_calendar_date, shift_date
from engine.errors import UnknownCadence
from models.payment import ReminderCadence, ReminderDate, ReminderState, ReminderStatus
from utils.logger import get_logger

logger = get_logger(__name__)

CadenceTable = Mapping[str, ReminderCadence]

OFF = "off"
DEFAULT_CADENCE = "one_day_before"

BUILTIN_CADENCES: dict[str, ReminderCadence] = {
    c.name: c
    for c in (
        ReminderCadence(OFF, "No Reminders", None),
        ReminderCadence("due_only", "Due Day Only", 0),
        ReminderCadence(DEFAULT_CADENCE, "Default: 1 Day Before + Due Day", 1),
        ReminderCadence("three_days_before", "3 Days Before + Due Day", 3),
        ReminderCadence("one_week_before", "1 Week Before + Due Day", 7),
    )
}


def build_cadence_table(extra: Optional[str] = None) -> dict[str, ReminderCadence]:
    """
    Build the cadence table: the built-ins plus any extra entries.

    Args:
        extra: Comma-separated "name:days" pairs, e.g. "two_weeks_before:14".
            A days value of "off" registers another disabled cadence.

    Raises:
        ValueError: If an entry is malformed or has negative days.
    """
    table = dict(BUILTIN_CADENCES)
    if not extra:
        return table

    for raw in extra.split(","):
        entry = raw.strip()
        if not entry:
            continue
        name, sep, days_str = entry.partition(":")
        name, days_str = name.strip(), days_str.strip().lower()
        if not sep or not name or not days_str:
            raise ValueError(f"Malformed reminder cadence {entry!r}; expected name:days.")
        if days_str == OFF:
            lead_days = None
        else:
            try:
                lead_days = int(days_str)
            except ValueError:
                raise ValueError(f"Lead days for cadence {name!r} must be an integer.") from None
            if lead_days < 0:
                raise ValueError(f"Lead days for cadence {name!r} must not be negative.")
        label = "No Reminders" if lead_days is None else f"{lead_days} Days Before + Due Day"
        table[name] = ReminderCadence(name, label, lead_days)
        logger.debug(f"Registered reminder cadence '{name}' ({days_str})")
    return table


def resolve_cadence(name: str, table: CadenceTable = BUILTIN_CADENCES) -> ReminderCadence:
    """
    Look up a cadence by name.

    Raises:
        UnknownCadence: If the name is not in the table.
    """
    try:
        return table[name]
    except KeyError:
        raise UnknownCadence(name) from None


def compute_reminder_status(days: int, cadence: ReminderCadence) -> ReminderStatus:
    """
    Project the lead and due-day reminder states for a payment.

    Args:
        days: Days until due (negative when overdue).
        cadence: The payment's reminder cadence.
    """
    if cadence.is_off:
        return ReminderStatus(ReminderState.DISABLED, ReminderState.DISABLED)

    # An overdue bill has no pending reminders.
    if days < 0:
        return ReminderStatus(ReminderState.SENT, ReminderState.SENT)

    lead_days = cadence.lead_days
    if days == lead_days:
        lead = ReminderState.READY_TO_SEND
    elif days < lead_days:
        lead = ReminderState.SENT
    else:
        lead = ReminderState.UPCOMING

    due = ReminderState.READY_TO_SEND if days == 0 else ReminderState.UPCOMING
    return ReminderStatus(lead, due)


def reminder_schedule(due_date: DateLike, cadence: ReminderCadence) -> list[ReminderDate]:
    """
    Calendar dates on which the cadence's reminders fall.

    Returns:
        An advance reminder `lead_days` before the due date (when lead_days
        is positive) followed by the due-day reminder; empty when off.
    """
    if cadence.is_off:
        return []

    due: date = as_calendar_date(due_date)
    reminders = []
    if cadence.lead_days > 0:
        plural = "s" if cadence.lead_days > 1 else ""
        reminders.append(ReminderDate(
            label=f"Reminder 1 ({cadence.lead_days} day{plural} before)",
            date=shift_date(due, -cadence.lead_days),
            kind="advance",
        ))
    reminders.append(ReminderDate(label="Reminder (Due Date)", date=due, kind="due"))
    return reminders
