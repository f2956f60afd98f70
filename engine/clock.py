"""
engine/clock.py
---------------
Calendar clock abstraction.
Production code reads the system clock; tests pin "now" with FixedClock.
"""

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Protocol


class Clock(Protocol):
    """Anything that can report the current date and timestamp."""

    def today(self) -> date: ...

    def now(self) -> datetime: ...


class SystemClock:
    """Clock backed by the host's local calendar date and UTC time."""

    def today(self) -> date:
        return date.today()

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


@dataclass
class FixedClock:
    """
    Clock that always reports the same instant.

    Attributes:
        current: The pinned timestamp; `today()` is its calendar date.
    """
    current: datetime

    @classmethod
    def on(cls, day: date) -> "FixedClock":
        """Build a clock pinned to midnight UTC of the given date."""
        return cls(datetime(day.year, day.month, day.day, tzinfo=timezone.utc))

    def today(self) -> date:
        return self.current.date()

    def now(self) -> datetime:
        return self.current
