"""Shared fixtures: a payment factory, a pinned clock and an in-memory repository."""

from __future__ import annotations

import dataclasses
import uuid
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Mapping, Optional

import pytest

from engine.clock import FixedClock
from models.payment import Payment

TODAY = date(2025, 3, 10)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2025, 3, 10, 9, 30, tzinfo=timezone.utc))


@pytest.fixture
def make_payment() -> Callable[..., Payment]:
    """Build a Payment with sensible defaults; keyword overrides win."""

    def _make(name: str = "Rent", due_date: date = TODAY, **overrides: Any) -> Payment:
        if "amount" in overrides and isinstance(overrides["amount"], (int, str)):
            overrides["amount"] = Decimal(str(overrides["amount"]))
        return Payment(name=name, due_date=due_date, **overrides)

    return _make


class InMemoryPaymentRepository:
    """Dict-backed stand-in for PaymentRepository with the same surface."""

    def __init__(self) -> None:
        self.rows: dict[str, Payment] = {}
        self.events: list[tuple[str, str]] = []
        self._listeners: list[Callable[[str, str], None]] = [
            lambda event, pid: self.events.append((event, pid))
        ]

    def subscribe(self, listener):
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _notify(self, event: str, pid: str) -> None:
        for listener in list(self._listeners):
            listener(event, pid)

    def create(self, payment: Payment) -> Payment:
        saved = dataclasses.replace(payment, id=str(uuid.uuid4()))
        self.rows[saved.id] = saved
        self._notify("created", saved.id)
        return saved

    def list(self, owner_id: int) -> list[Payment]:
        return [p for p in self.rows.values() if p.owner_id == owner_id]

    def get(self, payment_id: str, owner_id: Optional[int] = None) -> Optional[Payment]:
        p = self.rows.get(payment_id)
        if p is None or (owner_id is not None and p.owner_id != owner_id):
            return None
        return p

    def update(self, payment_id: str, patch: Mapping[str, Any]) -> Optional[Payment]:
        if payment_id not in self.rows:
            return None
        self.rows[payment_id] = dataclasses.replace(self.rows[payment_id], **patch)
        self._notify("updated", payment_id)
        return self.rows[payment_id]

    def save(self, payment: Payment) -> Optional[Payment]:
        if payment.id not in self.rows:
            return None
        self.rows[payment.id] = payment
        self._notify("updated", payment.id)
        return payment

    def delete(self, payment_id: str, owner_id: Optional[int] = None) -> bool:
        if self.get(payment_id, owner_id) is None:
            return False
        del self.rows[payment_id]
        self._notify("deleted", payment_id)
        return True


@pytest.fixture
def repo() -> InMemoryPaymentRepository:
    return InMemoryPaymentRepository()
