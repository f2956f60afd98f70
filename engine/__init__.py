"""
engine/ - Payment Lifecycle & Due-Date Engine
==============================================
Pure functions over a caller-supplied snapshot of payments and the current
date. Nothing here touches the database, Telegram, or the configuration;
"mutations" return new Payment records for the caller to persist.
"""

from engine.aggregation import (
    aggregate_daily_alerts,
    group_by_due_date,
    overdue_count,
    payment_history,
    sort_payments,
    weekly_summary,
)
from engine.clock import Clock, FixedClock, SystemClock
from engine.date_math import days_until_due, shift_date
from engine.errors import (
    GuardrailViolation,
    InvalidAmount,
    InvalidDate,
    InvalidRecurrenceDay,
    PaymentError,
    UnknownCadence,
)
from engine.guardrail import toggle_paid
from engine.recurrence import advance_to_next_cycle, next_occurrence_on_or_after
from engine.reminders import build_cadence_table, compute_reminder_status, reminder_schedule
from engine.urgency import classify_urgency, describe_due
from engine.validation import apply_edit, new_payment, parse_amount, parse_due_date

__all__ = [
    "Clock",
    "FixedClock",
    "GuardrailViolation",
    "InvalidAmount",
    "InvalidDate",
    "InvalidRecurrenceDay",
    "PaymentError",
    "SystemClock",
    "UnknownCadence",
    "advance_to_next_cycle",
    "aggregate_daily_alerts",
    "apply_edit",
    "build_cadence_table",
    "classify_urgency",
    "compute_reminder_status",
    "days_until_due",
    "describe_due",
    "group_by_due_date",
    "new_payment",
    "next_occurrence_on_or_after",
    "overdue_count",
    "parse_amount",
    "parse_due_date",
    "payment_history",
    "reminder_schedule",
    "shift_date",
    "sort_payments",
    "toggle_paid",
    "weekly_summary",
]
