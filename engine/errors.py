"""
engine/errors.py
----------------
Exceptions raised by the payment engine.
Each one rejects a single operation and leaves prior state untouched;
callers turn them into user-facing replies.
"""


class PaymentError(Exception):
    """Base class for every engine rejection."""


class InvalidDate(PaymentError, ValueError):
    """A due or start date failed calendar-date parsing."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid date {value!r}: expected YYYY-MM-DD.")


class InvalidAmount(PaymentError, ValueError):
    """An amount is present but not a finite, non-negative number."""

    def __init__(self, field_name: str, value: object):
        self.field_name = field_name
        self.value = value
        super().__init__(f"{field_name} must be a non-negative number, got {value!r}.")


class InvalidRecurrenceDay(PaymentError, ValueError):
    """Anchor day is outside 1-31, or missing on a recurring payment."""

    def __init__(self, value: object):
        self.value = value
        if value is None:
            msg = "Recurring payments need a day of the month (1-31)."
        else:
            msg = f"Recurring day must be between 1 and 31, got {value!r}."
        super().__init__(msg)


class GuardrailViolation(PaymentError):
    """A recurring payment was marked paid too far ahead of its due date."""

    def __init__(self, days_until_due: int, limit: int):
        self.days_until_due = days_until_due
        self.limit = limit
        super().__init__(
            f"Cannot mark as paid: this payment is {days_until_due} days away. "
            f"Recurring payments can only be marked paid within {limit} days of the due date."
        )


class UnknownCadence(PaymentError, KeyError):
    """A reminder cadence name is not present in the cadence table."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(name)

    def __str__(self) -> str:
        return f"Unknown reminder cadence {self.name!r}."
