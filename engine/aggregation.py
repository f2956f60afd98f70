"""
engine/aggregation.py
---------------------
Ordering and summaries over a caller-supplied collection of payments.
"""

from collections import OrderedDict
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Iterable, Sequence

from engine.date_math import days_until_due
from models.payment import DailyAlert, Payment, WeeklySummary

ALERT_WINDOW_DAYS = 2
WEEK_DAYS = 7

_ZERO = Decimal("0")
_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _amount(payment: Payment) -> Decimal:
    return payment.amount if payment.amount is not None else _ZERO


def sort_payments(payments: Iterable[Payment], today: date) -> list[Payment]:
    """
    Order payments for display.

    Unpaid payments come first, then Paid ones; each group is ordered by
    days until due, most overdue first. Payments with the same number of
    days keep their input order.
    """
    return sorted(
        payments,
        key=lambda p: (p.is_paid, days_until_due(p.due_date, today)),
    )


def _alert_message(days: int, due: date, total: Decimal, count: int, currency: str) -> str:
    amount = f"{currency}{total:.2f}"
    if days == 0:
        return f"Total of {amount} DUE TODAY for {count} item(s)!"
    if days == 1:
        return f"Total of {amount} DUE TOMORROW for {count} item(s)!"
    return f"Total of {amount} due on {due.isoformat()} (in {days} days) for {count} item(s)."


def aggregate_daily_alerts(
    payments: Iterable[Payment],
    today: date,
    currency: str = "$",
) -> list[DailyAlert]:
    """
    Summarize unpaid payments due in the next ALERT_WINDOW_DAYS by date.

    Args:
        payments: The caller's payment collection.
        today: Reference date.
        currency: Symbol prefixed to totals in the alert message.

    Returns:
        One DailyAlert per due date, soonest first. Missing amounts count as 0.
    """
    groups: dict[date, list[Payment]] = {}
    for payment in payments:
        if payment.is_paid:
            continue
        days = days_until_due(payment.due_date, today)
        if 0 <= days <= ALERT_WINDOW_DAYS:
            groups.setdefault(payment.due_date, []).append(payment)

    alerts = []
    for due, group in groups.items():
        days = days_until_due(due, today)
        total = sum((_amount(p) for p in group), _ZERO)
        alerts.append(DailyAlert(
            date=due,
            days_until_due=days,
            total_amount=total,
            count=len(group),
            message=_alert_message(days, due, total, len(group), currency),
        ))
    return sorted(alerts, key=lambda a: a.days_until_due)


def overdue_count(payments: Iterable[Payment], today: date) -> int:
    """Number of unpaid payments whose due date has passed."""
    return sum(1 for p in payments if not p.is_paid and days_until_due(p.due_date, today) < 0)


def weekly_summary(payments: Iterable[Payment], today: date) -> WeeklySummary:
    """Count and total of unpaid payments due within the next week (today included)."""
    due_this_week = tuple(
        p for p in sort_payments(payments, today)
        if not p.is_paid and 0 <= days_until_due(p.due_date, today) <= WEEK_DAYS
    )
    return WeeklySummary(
        count=len(due_this_week),
        total_amount=sum((_amount(p) for p in due_this_week), _ZERO),
        payments=due_this_week,
    )


def payment_history(payments: Iterable[Payment]) -> list[Payment]:
    """Paid payments, most recently updated first; undated records go last."""
    paid = [p for p in payments if p.is_paid]
    return sorted(paid, key=lambda p: p.updated_at or _EPOCH, reverse=True)


def group_by_due_date(payments: Sequence[Payment]) -> "OrderedDict[date, list[Payment]]":
    """
    Group payments by due date, preserving the order in which dates first
    appear (pass a sorted sequence to get chronological groups).
    """
    groups: "OrderedDict[date, list[Payment]]" = OrderedDict()
    for payment in payments:
        groups.setdefault(payment.due_date, []).append(payment)
    return groups
