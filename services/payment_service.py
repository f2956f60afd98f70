"""
services/payment_service.py
---------------------------
Business logic for bills: wires the clock, the repository and the pure
engine together, and formats the results for the bot.

Every view is recomputed from a fresh repository snapshot and clock
reading on each call; nothing derived is cached or stored.
"""

from typing import Any, Mapping, Optional

from config import CURRENCY_SYMBOL, DEFAULT_REMINDER_CADENCE, EXTRA_REMINDER_CADENCES
from engine import (
    Clock,
    PaymentError,
    SystemClock,
    aggregate_daily_alerts,
    apply_edit,
    build_cadence_table,
    classify_urgency,
    compute_reminder_status,
    days_until_due,
    group_by_due_date,
    describe_due,
    new_payment,
    overdue_count,
    payment_history,
    reminder_schedule,
    sort_payments,
    toggle_paid,
    weekly_summary,
)
from engine.reminders import resolve_cadence
from models.payment import Payment, PaymentStatus, ReminderState, UrgencyTier
from repositories.payment_repo import PaymentRepository
from utils.logger import get_logger

logger = get_logger(__name__)

_TIER_ICONS = {
    UrgencyTier.OVERDUE: "🔴",
    UrgencyTier.DUE_SOON: "🟡",
    UrgencyTier.UPCOMING: "🟢",
    UrgencyTier.PAID: "✅",
}

# Shortest id prefix users can type to pick a payment.
MIN_ID_PREFIX = 4


class PaymentService:
    """
    Handles all business logic for bills.

    Responsibilities:
        - Validate user input into Payment records and persist them.
        - Apply the paid toggle (with its guardrail) and save the result.
        - Render sorted lists, reminder states, alerts and summaries.
    """

    def __init__(
        self,
        repo: Optional[PaymentRepository] = None,
        clock: Optional[Clock] = None,
        cadences: Optional[Mapping] = None,
        currency: Optional[str] = None,
    ):
        self.repo = repo or PaymentRepository()
        self.clock = clock or SystemClock()
        self.cadences = cadences or build_cadence_table(EXTRA_REMINDER_CADENCES)
        self.currency = currency if currency is not None else CURRENCY_SYMBOL

    # ── CREATE / EDIT ─────────────────────────────────────

    def add_payment(
        self,
        owner_id: int,
        name: str,
        due_date: Optional[str] = None,
        amount: Optional[str] = None,
        *,
        is_recurring: bool = False,
        start_date: Optional[str] = None,
        min_payment_amount: Optional[str] = None,
        category_tag: str = "Other",
        reminder_cadence: Optional[str] = None,
    ) -> dict:
        """
        Validate and save a new bill.

        Returns:
            Dict with 'success' and 'message' (or 'error' on rejection).
        """
        try:
            payment = new_payment(
                name,
                due_date,
                today=self.clock.today(),
                amount=amount,
                min_payment_amount=min_payment_amount,
                is_recurring=is_recurring,
                start_date=start_date,
                category_tag=category_tag,
                reminder_cadence=reminder_cadence or DEFAULT_REMINDER_CADENCE,
                cadences=self.cadences,
                owner_id=owner_id,
            )
        except (PaymentError, ValueError) as e:
            logger.warning(f"Rejected new payment for user {owner_id}: {e}")
            return {"success": False, "error": str(e)}

        saved = self.repo.create(payment)
        repeat = f"\n  🔁 Monthly on day {saved.recurring_anchor_day}" if saved.is_recurring else ""
        schedule = reminder_schedule(saved.due_date, resolve_cadence(saved.reminder_cadence, self.cadences))
        reminders = ", ".join(f"{r.date:%b %d}" for r in schedule) or "off"
        msg = (
            f"🧾 Bill added:\n"
            f"  📌 {saved.name}\n"
            f"  💵 {self._money(saved.amount)}\n"
            f"  📅 Due {saved.due_date} ({describe_due(days_until_due(saved.due_date, self.clock.today()))})"
            f"{repeat}\n"
            f"  🔔 Reminders: {reminders}\n"
            f"  🔖 #{self._short_id(saved)}"
        )
        return {"success": True, "message": msg}

    def edit_payment(self, owner_id: int, ref: str, patch: Mapping[str, Any]) -> dict:
        """Apply a validated edit to one of the user's bills."""
        payment = self._find(owner_id, ref)
        if payment is None:
            return {"success": False, "error": f"Bill #{ref} not found."}
        try:
            edited = apply_edit(payment, patch, self.cadences, updated_at=self.clock.now())
        except (PaymentError, ValueError) as e:
            logger.warning(f"Rejected edit of #{payment.id}: {e}")
            return {"success": False, "error": str(e)}

        self.repo.save(edited)
        return {"success": True, "message": f"✏️ Updated {edited}"}

    # ── TRANSITIONS ───────────────────────────────────────

    def toggle_paid(self, owner_id: int, ref: str) -> dict:
        """Mark a bill paid (or revert it) and persist the new record."""
        payment = self._find(owner_id, ref)
        if payment is None:
            return {"success": False, "error": f"Bill #{ref} not found."}
        try:
            updated = toggle_paid(payment, self.clock.today(), updated_at=self.clock.now())
        except PaymentError as e:
            return {"success": False, "error": str(e)}

        self.repo.save(updated)
        if payment.is_paid:
            msg = f"↩️ {updated.name} is back to Upcoming (due {updated.due_date})."
        elif updated.is_recurring:
            msg = f"✅ {updated.name} paid. Next cycle due {updated.due_date}."
        else:
            msg = f"✅ {updated.name} marked as paid."
        return {"success": True, "message": msg}

    def delete_payment(self, owner_id: int, ref: str) -> dict:
        """Delete one of the user's bills."""
        payment = self._find(owner_id, ref)
        if payment is None or not self.repo.delete(payment.id, owner_id):
            return {"success": False, "error": f"Bill #{ref} not found."}
        return {"success": True, "message": f"🗑️ Deleted {payment.name}."}

    # ── VIEWS ─────────────────────────────────────────────

    def list_upcoming(self, owner_id: int) -> str:
        """Unpaid bills grouped by due date, most urgent first, with reminder states."""
        today = self.clock.today()
        payments = self.repo.list(owner_id)
        upcoming = [p for p in sort_payments(payments, today) if not p.is_paid]
        if not upcoming:
            return "📭 No upcoming bills."

        lines = ["🧾 Upcoming bills:"]
        overdue = overdue_count(payments, today)
        if overdue:
            lines.insert(0, f"🚨 {overdue} {'Payment' if overdue == 1 else 'Payments'} OVERDUE!\n")
        for due, group in group_by_due_date(upcoming).items():
            days = days_until_due(due, today)
            total = sum(p.amount for p in group if p.amount is not None)
            lines.append(f"\n📅 {due} ({describe_due(days)}) - {self._money(total)}")
            icon = _TIER_ICONS[classify_urgency(PaymentStatus.UPCOMING, days)]
            for p in group:
                lines.append(f"{icon} #{self._short_id(p)} {p.name}: {self._money(p.amount)}")
                reminder = self._reminder_line(p, days)
                if reminder:
                    lines.append(reminder)
        return "\n".join(lines)

    def daily_alerts(self, owner_id: int) -> str:
        """Bills due today, tomorrow, or in two days, summed per date."""
        alerts = aggregate_daily_alerts(self.repo.list(owner_id), self.clock.today(), self.currency)
        if not alerts:
            return "🔕 Nothing due in the next two days."
        return "\n".join(f"⏰ {a.message}" for a in alerts)

    def week_summary(self, owner_id: int) -> str:
        """Count and total of bills due within the next seven days."""
        summary = weekly_summary(self.repo.list(owner_id), self.clock.today())
        if not summary.count:
            return "📆 Nothing due this week."
        lines = [
            f"📆 {summary.count} bill(s) due this week, "
            f"{self.currency}{summary.total_amount:.2f} in total:"
        ]
        lines += [f"  • {p.name}: {self._money(p.amount)} ({p.due_date})" for p in summary.payments]
        return "\n".join(lines)

    def history(self, owner_id: int) -> str:
        """Paid bills, most recently paid first."""
        paid = payment_history(self.repo.list(owner_id))
        if not paid:
            return "📭 No paid bills yet."
        lines = ["📜 Payment history:\n"]
        for p in paid:
            stamp = p.updated_at.strftime("%Y-%m-%d") if p.updated_at else "-"
            lines.append(f"  #{self._short_id(p)} {p.name}: {self._money(p.amount)} (paid {stamp})")
        return "\n".join(lines)

    # ── HELPERS ───────────────────────────────────────────

    def _find(self, owner_id: int, ref: str) -> Optional[Payment]:
        """Resolve a full id or a unique id prefix to one of the user's bills."""
        ref = (ref or "").strip().lstrip("#").lower()
        if len(ref) < MIN_ID_PREFIX:
            return None
        matches = [p for p in self.repo.list(owner_id) if p.id and p.id.lower().startswith(ref)]
        if len(matches) != 1:
            if matches:
                logger.info(f"Ambiguous bill reference '{ref}' for user {owner_id}")
            return None
        return matches[0]

    def _reminder_line(self, payment: Payment, days: int) -> str:
        try:
            cadence = resolve_cadence(payment.reminder_cadence, self.cadences)
        except PaymentError:
            logger.warning(f"Bill #{payment.id} uses unknown cadence '{payment.reminder_cadence}'")
            return ""
        status = compute_reminder_status(days, cadence)
        if status.lead == ReminderState.DISABLED:
            return "     🔕 Reminders off"
        return f"     🔔 1st: {status.lead.value} | Final: {status.due.value}"

    def _money(self, amount) -> str:
        return f"{self.currency}{amount:.2f}" if amount is not None else "-"

    @staticmethod
    def _short_id(payment: Payment) -> str:
        return (payment.id or "")[:8]
