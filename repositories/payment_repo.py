"""
repositories/payment_repo.py
----------------------------
Data access layer for bills.
All SQL queries related to the `payments` table live here. Listeners
registered with `subscribe` are told about every successful write, which
is how callers learn that their snapshot is stale.
"""

import dataclasses
import uuid
from typing import Any, Callable, Mapping, Optional

from psycopg2.extras import RealDictCursor

from db.connection import get_connection, release_connection
from models.payment import Payment, PaymentStatus
from utils.logger import get_logger

logger = get_logger(__name__)

ChangeListener = Callable[[str, str], None]  # (event, payment_id)

_COLUMNS = (
    "name", "amount", "min_payment_amount", "due_date", "status", "is_recurring",
    "recurring_anchor_day", "category_tag", "reminder_cadence", "updated_at",
)


class PaymentRepository:
    """Repository for CRUD operations on the payments table."""

    def __init__(self):
        self._listeners: list[ChangeListener] = []

    # ── CHANGE NOTIFICATION ───────────────────────────────

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """
        Register a callback invoked as listener(event, payment_id) after
        each create/update/delete. Returns a function that unsubscribes it.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, event: str, payment_id: str) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, payment_id)
            except Exception as e:
                logger.error(f"Change listener failed on {event} #{payment_id}: {e}")

    # ── CREATE ────────────────────────────────────────────

    def create(self, payment: Payment) -> Payment:
        """
        Insert a new payment.

        Args:
            payment: A validated payment with `owner_id` set and no `id`.

        Returns:
            A copy carrying the generated id and timestamps.
        """
        if payment.owner_id is None:
            raise ValueError("Payment owner_id is required before insert.")
        payment_id = uuid.uuid4()
        sql = """
            INSERT INTO payments
                (id, owner_id, name, amount, min_payment_amount, due_date, status,
                 is_recurring, recurring_anchor_day, category_tag, reminder_cadence)
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
            RETURNING *;
        """
        conn = get_connection()
        try:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(sql, (
                    payment_id, payment.owner_id, payment.name, payment.amount,
                    payment.min_payment_amount, payment.due_date, payment.status.value,
                    payment.is_recurring, payment.recurring_anchor_day,
                    payment.category_tag, payment.reminder_cadence,
                ))
                saved = self._row_to_payment(cur.fetchone())
            conn.commit()
            logger.info(f"Added payment '{saved.name}' #{saved.id}")
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to add payment: {e}")
            raise
        finally:
            release_connection(conn)
        self._notify("created", saved.id)
        return saved

    # ── READ ──────────────────────────────────────────────

    def list(self, owner_id: int) -> list[Payment]:
        """All payments for a user, in insertion order."""
        sql = "SELECT * FROM payments WHERE owner_id = %s ORDER BY created_at ASC, id ASC;"
        conn = get_connection()
        try:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(sql, (owner_id,))
                return [self._row_to_payment(r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    def get(self, payment_id: str, owner_id: Optional[int] = None) -> Optional[Payment]:
        """Fetch a single payment, optionally scoped to its owner."""
        pid = self._parse_id(payment_id)
        if pid is None:
            return None
        sql = "SELECT * FROM payments WHERE id = %s"
        params: list = [pid]
        if owner_id is not None:
            sql += " AND owner_id = %s"
            params.append(owner_id)

        conn = get_connection()
        try:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(sql + ";", params)
                row = cur.fetchone()
                return self._row_to_payment(row) if row else None
        finally:
            release_connection(conn)

    # ── UPDATE ────────────────────────────────────────────

    def update(self, payment_id: str, patch: Mapping[str, Any]) -> Optional[Payment]:
        """
        Update selected columns of a payment.

        Args:
            payment_id: Id of the payment to change.
            patch: Column -> new value; keys must be payment fields.

        Returns:
            The updated payment, or None if it does not exist.
        """
        unknown = set(patch) - set(_COLUMNS)
        if unknown:
            raise ValueError(f"Cannot update column(s): {', '.join(sorted(unknown))}")
        pid = self._parse_id(payment_id)
        if pid is None:
            return None
        if not patch:
            return self.get(payment_id)

        values = {
            k: (v.value if isinstance(v, PaymentStatus) else v) for k, v in patch.items()
        }
        assignments = ", ".join(f"{col} = %s" for col in values)
        if "updated_at" not in values:
            assignments += ", updated_at = NOW()"
        sql = f"UPDATE payments SET {assignments} WHERE id = %s RETURNING *;"

        conn = get_connection()
        try:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(sql, (*values.values(), pid))
                row = cur.fetchone()
            conn.commit()
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to update payment #{payment_id}: {e}")
            raise
        finally:
            release_connection(conn)

        if row is None:
            return None
        updated = self._row_to_payment(row)
        logger.info(f"Updated payment '{updated.name}' #{updated.id}: {', '.join(values)}")
        self._notify("updated", updated.id)
        return updated

    def save(self, payment: Payment) -> Optional[Payment]:
        """Persist every mutable field of an existing payment."""
        if payment.id is None:
            raise ValueError("Cannot save a payment without an id; use create().")
        patch = {col: getattr(payment, col) for col in _COLUMNS}
        if patch["updated_at"] is None:
            del patch["updated_at"]
        return self.update(payment.id, patch)

    # ── DELETE ────────────────────────────────────────────

    def delete(self, payment_id: str, owner_id: Optional[int] = None) -> bool:
        """Delete a payment by id, optionally scoped to its owner."""
        pid = self._parse_id(payment_id)
        if pid is None:
            return False
        sql = "DELETE FROM payments WHERE id = %s"
        params: list = [pid]
        if owner_id is not None:
            sql += " AND owner_id = %s"
            params.append(owner_id)

        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql + ";", params)
                deleted = cur.rowcount > 0
            conn.commit()
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to delete payment #{payment_id}: {e}")
            raise
        finally:
            release_connection(conn)

        if deleted:
            logger.info(f"Deleted payment #{payment_id}")
            self._notify("deleted", str(pid))
        return deleted

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _parse_id(payment_id: str) -> Optional[uuid.UUID]:
        """Ids are UUIDs; anything else cannot match a row."""
        try:
            return uuid.UUID(str(payment_id))
        except ValueError:
            return None

    @staticmethod
    def _row_to_payment(row: Mapping[str, Any]) -> Payment:
        """Convert a database row to a Payment domain object."""
        return Payment(
            id=str(row["id"]),
            owner_id=row["owner_id"],
            name=row["name"],
            amount=row["amount"],
            min_payment_amount=row["min_payment_amount"],
            due_date=row["due_date"],
            status=PaymentStatus(row["status"]),
            is_recurring=row["is_recurring"],
            recurring_anchor_day=row["recurring_anchor_day"],
            category_tag=row["category_tag"],
            reminder_cadence=row["reminder_cadence"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
