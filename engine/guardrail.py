"""
engine/guardrail.py
-------------------
The "mark as paid" transition.

Recurring bills never rest in the Paid state: settling one occurrence
immediately opens the next cycle. To keep a stray tap from skipping a
whole month, a recurring bill can only be settled within
GUARDRAIL_DAYS of its due date.
"""

import dataclasses
from datetime import date, datetime, timezone
from typing import Optional

from engine.date_math import days_until_due
from engine.errors import GuardrailViolation, InvalidRecurrenceDay
from engine.recurrence import advance_to_next_cycle
from models.payment import Payment, PaymentStatus
from utils.logger import get_logger

logger = get_logger(__name__)

GUARDRAIL_DAYS = 30


def check_guardrail(payment: Payment, today: date) -> int:
    """
    Verify a recurring payment may be settled today.

    Returns:
        Days until the payment is due.

    Raises:
        GuardrailViolation: If the due date is GUARDRAIL_DAYS or more away.
    """
    days = days_until_due(payment.due_date, today)
    if days >= GUARDRAIL_DAYS:
        raise GuardrailViolation(days, GUARDRAIL_DAYS)
    return days


def toggle_paid(
    payment: Payment,
    today: date,
    updated_at: Optional[datetime] = None,
) -> Payment:
    """
    Flip a payment between Upcoming and Paid.

    Args:
        payment: The current record; it is never modified.
        today: Calendar date used for the guardrail check.
        updated_at: Timestamp to stamp on settlement (defaults to now, UTC).

    Returns:
        A new Payment:
            - Paid -> Upcoming with the same due date.
            - One-time Upcoming -> Paid.
            - Recurring Upcoming -> Upcoming, rolled to the next cycle.

    Raises:
        GuardrailViolation: Recurring payment 30 or more days from due.
        InvalidRecurrenceDay: Recurring payment without a valid anchor day.
    """
    if payment.status == PaymentStatus.PAID:
        logger.debug(f"Reverting '{payment.name}' to Upcoming")
        return dataclasses.replace(payment, status=PaymentStatus.UPCOMING)

    stamp = updated_at or datetime.now(timezone.utc)

    if not payment.is_recurring:
        logger.info(f"Marked '{payment.name}' as paid")
        return dataclasses.replace(payment, status=PaymentStatus.PAID, updated_at=stamp)

    if payment.recurring_anchor_day is None:
        raise InvalidRecurrenceDay(None)

    try:
        check_guardrail(payment, today)
    except GuardrailViolation as e:
        logger.warning(f"Guardrail blocked '{payment.name}': due in {e.days_until_due} days")
        raise

    next_due = advance_to_next_cycle(payment.due_date, payment.recurring_anchor_day)
    logger.info(f"Settled '{payment.name}' for {payment.due_date}; next due {next_due}")
    return dataclasses.replace(
        payment,
        due_date=next_due,
        status=PaymentStatus.UPCOMING,
        updated_at=stamp,
    )
