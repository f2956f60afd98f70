"""
models/payment.py
-----------------
Domain model for bills (payments) and the derived views computed from them.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class PaymentStatus(str, Enum):
    """Stored lifecycle state of a payment."""
    UPCOMING = "Upcoming"
    PAID = "Paid"


class UrgencyTier(str, Enum):
    """Display tier derived from status and days until due."""
    PAID = "Paid"
    OVERDUE = "Overdue"
    DUE_SOON = "DueSoon"
    UPCOMING = "Upcoming"


class ReminderState(str, Enum):
    """Projected state of a single reminder marker."""
    DISABLED = "Disabled"
    UPCOMING = "Upcoming"
    READY_TO_SEND = "Ready to Send"
    SENT = "Sent"


@dataclass(frozen=True)
class Payment:
    """
    Represents one bill/obligation.

    Attributes:
        id: Opaque identifier assigned by the repository (None before insert).
        name: Display name, never empty.
        due_date: Calendar date the payment is owed.
        status: Upcoming or Paid.
        amount: Full amount, or None when not tracked.
        min_payment_amount: Minimum payment, or None when not tracked.
        is_recurring: Whether the bill repeats monthly.
        recurring_anchor_day: Canonical day-of-month (1-31) for recurring bills.
        category_tag: Free-form label.
        reminder_cadence: Name of an entry in the cadence table.
        owner_id: Telegram user the bill belongs to.
        updated_at: Last mutation timestamp, used for history ordering.
        created_at: Insert timestamp.

    Bookkeeping fields (owner_id, updated_at, created_at) are excluded from
    equality: two records with the same domain fields compare equal.
    """
    name: str
    due_date: date
    status: PaymentStatus = PaymentStatus.UPCOMING
    amount: Optional[Decimal] = None
    min_payment_amount: Optional[Decimal] = None
    is_recurring: bool = False
    recurring_anchor_day: Optional[int] = None
    category_tag: str = "Other"
    reminder_cadence: str = "one_day_before"
    id: Optional[str] = None
    owner_id: Optional[int] = field(default=None, compare=False)
    updated_at: Optional[datetime] = field(default=None, compare=False)
    created_at: Optional[datetime] = field(default=None, compare=False)

    @property
    def is_paid(self) -> bool:
        """Returns True if the payment is settled."""
        return self.status == PaymentStatus.PAID

    def __str__(self) -> str:
        amount = f"{self.amount:.2f}" if self.amount is not None else "-"
        repeat = f" (monthly on day {self.recurring_anchor_day})" if self.is_recurring else ""
        return f"{self.name}: {amount} | {self.status.value} | due {self.due_date}{repeat}"


@dataclass(frozen=True)
class ReminderCadence:
    """
    A named reminder policy.

    lead_days is the number of days before the due date the lead reminder
    fires; None means reminders are off.
    """
    name: str
    label: str
    lead_days: Optional[int]

    @property
    def is_off(self) -> bool:
        return self.lead_days is None


@dataclass(frozen=True)
class ReminderStatus:
    """Lead and due-day reminder markers for one payment."""
    lead: ReminderState
    due: ReminderState


@dataclass(frozen=True)
class ReminderDate:
    """A concrete calendar date on which a reminder applies."""
    label: str
    date: date
    kind: str  # 'advance' | 'due'


@dataclass(frozen=True)
class DailyAlert:
    """Near-term payments due on the same date, summarized."""
    date: date
    days_until_due: int
    total_amount: Decimal
    count: int
    message: str


@dataclass(frozen=True)
class WeeklySummary:
    """Unpaid payments due within the coming week."""
    count: int
    total_amount: Decimal
    payments: tuple[Payment, ...] = ()
