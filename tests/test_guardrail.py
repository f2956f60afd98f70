"""Tests for the paid toggle and the recurring-payment guardrail."""

from datetime import date, datetime, timezone

import pytest

from engine.date_math import shift_date
from engine.errors import GuardrailViolation, InvalidRecurrenceDay
from engine.guardrail import GUARDRAIL_DAYS, check_guardrail, toggle_paid
from models.payment import PaymentStatus

STAMP = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)


class TestOneTimePayments:
    def test_marks_paid_and_stamps(self, make_payment, today):
        payment = make_payment(due_date=date(2025, 3, 20))
        result = toggle_paid(payment, today, updated_at=STAMP)
        assert result.status == PaymentStatus.PAID
        assert result.due_date == date(2025, 3, 20)
        assert result.updated_at == STAMP

    def test_far_future_one_time_is_not_guarded(self, make_payment, today):
        payment = make_payment(due_date=date(2026, 1, 1))
        assert toggle_paid(payment, today).status == PaymentStatus.PAID

    def test_round_trip_restores_original(self, make_payment, today):
        original = make_payment(due_date=date(2025, 3, 20), amount=100)
        once = toggle_paid(original, today, updated_at=STAMP)
        twice = toggle_paid(once, today, updated_at=STAMP)
        assert twice == original
        assert twice.due_date == original.due_date
        assert twice.status == PaymentStatus.UPCOMING

    def test_input_record_untouched(self, make_payment, today):
        payment = make_payment(due_date=date(2025, 3, 20))
        toggle_paid(payment, today)
        assert payment.status == PaymentStatus.UPCOMING
        assert payment.updated_at is None


class TestRevert:
    def test_paid_reverts_keeping_due_date(self, make_payment, today):
        payment = make_payment(due_date=date(2025, 2, 1), status=PaymentStatus.PAID)
        result = toggle_paid(payment, today)
        assert result.status == PaymentStatus.UPCOMING
        assert result.due_date == date(2025, 2, 1)

    def test_paid_recurring_reverts_without_guardrail(self, make_payment, today):
        payment = make_payment(
            due_date=date(2025, 6, 1), status=PaymentStatus.PAID,
            is_recurring=True, recurring_anchor_day=1,
        )
        result = toggle_paid(payment, today)
        assert result.status == PaymentStatus.UPCOMING
        assert result.due_date == date(2025, 6, 1)


class TestRecurringPayments:
    def test_rolls_to_next_cycle(self, make_payment):
        today = date(2025, 3, 5)
        payment = make_payment(due_date=date(2025, 3, 15), is_recurring=True, recurring_anchor_day=15)
        result = toggle_paid(payment, today, updated_at=STAMP)
        assert result.status == PaymentStatus.UPCOMING
        assert result.due_date == date(2025, 4, 15)
        assert result.updated_at == STAMP

    def test_uses_stored_anchor_not_clamped_date(self, make_payment, today):
        payment = make_payment(due_date=date(2025, 2, 28), is_recurring=True, recurring_anchor_day=31)
        assert toggle_paid(payment, today).due_date == date(2025, 3, 31)

    def test_overdue_recurring_rolls_one_cycle(self, make_payment, today):
        payment = make_payment(due_date=date(2025, 1, 31), is_recurring=True, recurring_anchor_day=31)
        assert toggle_paid(payment, today).due_date == date(2025, 2, 28)

    def test_rejects_45_days_early(self, make_payment, today):
        payment = make_payment(
            due_date=shift_date(today, 45), is_recurring=True, recurring_anchor_day=24,
        )
        with pytest.raises(GuardrailViolation) as exc:
            toggle_paid(payment, today)
        assert exc.value.days_until_due == 45
        assert payment.status == PaymentStatus.UPCOMING
        assert payment.due_date == shift_date(today, 45)

    def test_boundary(self, make_payment, today):
        at_limit = make_payment(
            due_date=shift_date(today, GUARDRAIL_DAYS), is_recurring=True, recurring_anchor_day=9,
        )
        just_inside = make_payment(
            due_date=shift_date(today, GUARDRAIL_DAYS - 1), is_recurring=True, recurring_anchor_day=8,
        )
        with pytest.raises(GuardrailViolation):
            toggle_paid(at_limit, today)
        assert toggle_paid(just_inside, today).due_date > just_inside.due_date

    def test_missing_anchor(self, make_payment, today):
        payment = make_payment(due_date=date(2025, 3, 15), is_recurring=True)
        with pytest.raises(InvalidRecurrenceDay):
            toggle_paid(payment, today)


class TestCheckGuardrail:
    def test_returns_days(self, make_payment, today):
        payment = make_payment(due_date=shift_date(today, 10), is_recurring=True, recurring_anchor_day=20)
        assert check_guardrail(payment, today) == 10

    def test_message_mentions_days(self, make_payment, today):
        payment = make_payment(due_date=shift_date(today, 40), is_recurring=True, recurring_anchor_day=19)
        with pytest.raises(GuardrailViolation, match="40 days away"):
            check_guardrail(payment, today)
