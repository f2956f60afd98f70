"""Tests for PaymentRepository against a mocked psycopg2 connection."""

import uuid
from datetime import date, datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from models.payment import Payment, PaymentStatus
from repositories import payment_repo
from repositories.payment_repo import PaymentRepository

PID = uuid.UUID("0b5c4f0e-6f7a-4d59-9d0b-2f5e1f3c8a11")
STAMP = datetime(2025, 3, 10, 9, 0, tzinfo=timezone.utc)


def _row(**overrides):
    row = {
        "id": PID,
        "owner_id": 42,
        "name": "Rent",
        "amount": Decimal("800.00"),
        "min_payment_amount": None,
        "due_date": date(2025, 3, 31),
        "status": "Upcoming",
        "is_recurring": True,
        "recurring_anchor_day": 31,
        "category_tag": "Rent",
        "reminder_cadence": "one_day_before",
        "created_at": STAMP,
        "updated_at": STAMP,
    }
    row.update(overrides)
    return row


@pytest.fixture
def db(monkeypatch):
    conn = MagicMock()
    cur = conn.cursor.return_value.__enter__.return_value
    monkeypatch.setattr(payment_repo, "get_connection", lambda: conn)
    monkeypatch.setattr(payment_repo, "release_connection", MagicMock())
    return conn, cur


class TestRowMapping:
    def test_row_to_payment(self):
        payment = PaymentRepository._row_to_payment(_row(status="Paid"))
        assert payment.id == str(PID)
        assert payment.status == PaymentStatus.PAID
        assert payment.recurring_anchor_day == 31
        assert payment.updated_at == STAMP


class TestWrites:
    def test_create_commits_and_notifies(self, db):
        conn, cur = db
        cur.fetchone.return_value = _row()
        repo = PaymentRepository()
        events = []
        repo.subscribe(lambda event, pid: events.append((event, pid)))

        saved = repo.create(Payment(
            name="Rent", due_date=date(2025, 3, 31), amount=Decimal("800.00"),
            is_recurring=True, recurring_anchor_day=31, owner_id=42,
        ))

        assert saved.id == str(PID)
        conn.commit.assert_called_once()
        assert events == [("created", str(PID))]

    def test_create_requires_owner(self, db):
        with pytest.raises(ValueError):
            PaymentRepository().create(Payment(name="Rent", due_date=date(2025, 3, 31)))

    def test_failed_write_rolls_back_without_notifying(self, db):
        conn, cur = db
        cur.execute.side_effect = RuntimeError("boom")
        repo = PaymentRepository()
        listener = MagicMock()
        repo.subscribe(listener)
        with pytest.raises(RuntimeError):
            repo.update(str(PID), {"status": PaymentStatus.PAID})
        conn.rollback.assert_called_once()
        listener.assert_not_called()

    def test_update_converts_status_and_stamps(self, db):
        conn, cur = db
        cur.fetchone.return_value = _row(status="Paid")
        updated = PaymentRepository().update(str(PID), {"status": PaymentStatus.PAID})
        sql, params = cur.execute.call_args[0]
        assert "status = %s" in sql
        assert "updated_at = NOW()" in sql
        assert params == ("Paid", PID)
        assert updated.status == PaymentStatus.PAID

    def test_update_rejects_unknown_columns(self):
        with pytest.raises(ValueError, match="owner_id"):
            PaymentRepository().update(str(PID), {"owner_id": 1})

    def test_bad_ids_never_reach_the_database(self, db):
        conn, _ = db
        repo = PaymentRepository()
        assert repo.get("not-a-uuid") is None
        assert repo.update("not-a-uuid", {"name": "x"}) is None
        assert repo.delete("not-a-uuid") is False
        conn.cursor.assert_not_called()

    def test_delete_notifies(self, db):
        conn, cur = db
        cur.rowcount = 1
        repo = PaymentRepository()
        events = []
        repo.subscribe(lambda event, pid: events.append((event, pid)))
        assert repo.delete(str(PID), owner_id=42)
        assert events == [("deleted", str(PID))]


class TestSubscriptions:
    def test_unsubscribe(self, db):
        _, cur = db
        cur.rowcount = 1
        repo = PaymentRepository()
        listener = MagicMock()
        unsubscribe = repo.subscribe(listener)
        unsubscribe()
        repo.delete(str(PID))
        listener.assert_not_called()

    def test_failing_listener_does_not_break_write(self, db):
        _, cur = db
        cur.rowcount = 1
        repo = PaymentRepository()
        repo.subscribe(MagicMock(side_effect=RuntimeError("listener")))
        assert repo.delete(str(PID)) is True
