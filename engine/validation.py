"""
engine/validation.py
--------------------
Boundary checks for payments entering the engine on creation or edit.
Malformed input is rejected with a typed error, never coerced.
"""

import dataclasses
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional, Union

from engine.date_math import DateLike, as_calendar_date
from engine.errors import InvalidAmount, InvalidDate
from engine.recurrence import first_due_date, validate_anchor_day
from engine.reminders import BUILTIN_CADENCES, CadenceTable, DEFAULT_CADENCE, resolve_cadence
from models.payment import Payment, PaymentStatus

_CENT = Decimal("0.01")

DEFAULT_CATEGORY = "Other"

AmountInput = Union[str, int, float, Decimal, None]

# Fields an edit may change; id and bookkeeping stay with the record.
EDITABLE_FIELDS = frozenset({
    "name", "amount", "min_payment_amount", "due_date", "status",
    "is_recurring", "recurring_anchor_day", "category_tag", "reminder_cadence",
})


def parse_due_date(value: Union[str, DateLike]) -> date:
    """
    Parse a calendar date given as YYYY-MM-DD (or pass a date through).

    Raises:
        InvalidDate: If the text is not a real calendar date.
    """
    if isinstance(value, (date, datetime)):
        return as_calendar_date(value)
    if not isinstance(value, str):
        raise InvalidDate(value)
    text = value.strip()
    # fromisoformat also accepts compact forms like 20250131 on newer Pythons.
    if len(text) != 10 or text[4] != "-" or text[7] != "-":
        raise InvalidDate(value)
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise InvalidDate(value) from None


def parse_amount(value: AmountInput, field_name: str = "amount") -> Optional[Decimal]:
    """
    Normalize an optional money amount to a two-decimal Decimal.

    Blank strings and None mean "not tracked" and return None.

    Raises:
        InvalidAmount: If the value is not a finite, non-negative number.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise InvalidAmount(field_name, value)
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidAmount(field_name, value) from None
    if not amount.is_finite() or amount < 0:
        raise InvalidAmount(field_name, value)
    return amount.quantize(_CENT)


def validate_payment(payment: Payment, cadences: CadenceTable = BUILTIN_CADENCES) -> Payment:
    """
    Check every invariant of a payment record.

    Returns:
        The same payment, for chaining.

    Raises:
        ValueError: Empty name or category tag.
        InvalidDate: due_date is not a calendar date.
        InvalidAmount: Negative or non-finite amount/min_payment_amount.
        InvalidRecurrenceDay: Recurring without a valid anchor day.
        UnknownCadence: reminder_cadence missing from the table.
    """
    if not payment.name or not payment.name.strip():
        raise ValueError("Payment name is required.")
    if not isinstance(payment.due_date, date) or isinstance(payment.due_date, datetime):
        raise InvalidDate(payment.due_date)
    if not isinstance(payment.status, PaymentStatus):
        raise ValueError(f"Unknown payment status {payment.status!r}.")
    for field_name in ("amount", "min_payment_amount"):
        value = getattr(payment, field_name)
        if value is not None and (not isinstance(value, Decimal) or not value.is_finite() or value < 0):
            raise InvalidAmount(field_name, value)
    if not isinstance(payment.category_tag, str) or not payment.category_tag.strip():
        raise ValueError("Category tag is required.")
    if payment.is_recurring:
        validate_anchor_day(payment.recurring_anchor_day)
    resolve_cadence(payment.reminder_cadence, cadences)
    return payment


def new_payment(
    name: str,
    due_date: Union[str, DateLike, None] = None,
    *,
    today: date,
    amount: AmountInput = None,
    min_payment_amount: AmountInput = None,
    is_recurring: bool = False,
    start_date: Union[str, DateLike, None] = None,
    category_tag: str = DEFAULT_CATEGORY,
    reminder_cadence: str = DEFAULT_CADENCE,
    cadences: CadenceTable = BUILTIN_CADENCES,
    owner_id: Optional[int] = None,
    created_at: Optional[datetime] = None,
) -> Payment:
    """
    Build a validated, not-yet-persisted payment from user input.

    One-time payments need `due_date`. Recurring payments need `start_date`
    (falling back to `due_date`): its day-of-month becomes the anchor and
    the first due date is the next anchored occurrence from today on.

    Raises:
        ValueError / InvalidDate / InvalidAmount / InvalidRecurrenceDay /
        UnknownCadence: See validate_payment.
    """
    anchor_day = None
    if is_recurring:
        start = start_date if start_date is not None else due_date
        if start is None or (isinstance(start, str) and not start.strip()):
            raise InvalidDate(start)
        anchor_day, first_due = first_due_date(parse_due_date(start), today)
    else:
        if due_date is None:
            raise InvalidDate(due_date)
        first_due = parse_due_date(due_date)

    payment = Payment(
        name=(name or "").strip(),
        due_date=first_due,
        amount=parse_amount(amount, "amount"),
        min_payment_amount=parse_amount(min_payment_amount, "min_payment_amount"),
        is_recurring=is_recurring,
        recurring_anchor_day=anchor_day,
        category_tag=category_tag,
        reminder_cadence=reminder_cadence,
        owner_id=owner_id,
        updated_at=created_at,
        created_at=created_at,
    )
    return validate_payment(payment, cadences)


def apply_edit(
    payment: Payment,
    patch: Mapping[str, Any],
    cadences: CadenceTable = BUILTIN_CADENCES,
    updated_at: Optional[datetime] = None,
) -> Payment:
    """
    Apply a user edit and re-validate the result.

    String dates and amounts in the patch are parsed the same way as on
    creation. Turning recurrence on without an anchor pins the series to
    the due date's day-of-month; turning it off clears the anchor.
    A blank category tag falls back to the default one.

    Raises:
        ValueError: If the patch names a field that cannot be edited.
        InvalidDate / InvalidAmount / InvalidRecurrenceDay / UnknownCadence.
    """
    unknown = set(patch) - EDITABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot edit field(s): {', '.join(sorted(unknown))}.")

    changes = dict(patch)
    if "due_date" in changes:
        changes["due_date"] = parse_due_date(changes["due_date"])
    for field_name in ("amount", "min_payment_amount"):
        if field_name in changes:
            changes[field_name] = parse_amount(changes[field_name], field_name)
    if "status" in changes and not isinstance(changes["status"], PaymentStatus):
        try:
            changes["status"] = PaymentStatus(changes["status"])
        except ValueError:
            raise ValueError(f"Unknown payment status {changes['status']!r}.") from None
    if "name" in changes and isinstance(changes["name"], str):
        changes["name"] = changes["name"].strip()
    if "category_tag" in changes:
        tag = changes["category_tag"]
        if tag is None or isinstance(tag, str):
            changes["category_tag"] = (tag or "").strip() or DEFAULT_CATEGORY

    edited = dataclasses.replace(payment, **changes)
    if edited.is_recurring and edited.recurring_anchor_day is None and "recurring_anchor_day" not in patch:
        edited = dataclasses.replace(edited, recurring_anchor_day=edited.due_date.day)
    elif not edited.is_recurring and edited.recurring_anchor_day is not None:
        edited = dataclasses.replace(edited, recurring_anchor_day=None)

    if updated_at is not None:
        edited = dataclasses.replace(edited, updated_at=updated_at)
    return validate_payment(edited, cadences)
