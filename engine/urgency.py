"""
engine/urgency.py
-----------------
Urgency tiers and human-readable due labels.
Recomputed on every call so they always follow the current clock.
"""

from models.payment import PaymentStatus, UrgencyTier

DUE_SOON_DAYS = 7


def classify_urgency(status: PaymentStatus, days: int) -> UrgencyTier:
    """
    Map a payment's status and days-until-due to its urgency tier.

    Paid wins over everything; otherwise negative days are Overdue,
    0-7 days DueSoon and anything later Upcoming.
    """
    if status == PaymentStatus.PAID:
        return UrgencyTier.PAID
    if days < 0:
        return UrgencyTier.OVERDUE
    if days <= DUE_SOON_DAYS:
        return UrgencyTier.DUE_SOON
    return UrgencyTier.UPCOMING


def describe_due(days: int) -> str:
    """Short label such as 'Due today', '3 days away' or '1 day overdue'."""
    if days < 0:
        overdue = abs(days)
        return f"{overdue} day{'s' if overdue != 1 else ''} overdue"
    if days == 0:
        return "Due today"
    if days == 1:
        return "Due tomorrow"
    return f"{days} days away"
