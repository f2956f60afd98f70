"""
db/init_db.py
-------------
Creates the `payments` table if it does not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

from db.connection import get_connection, release_connection
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- One row per bill; derived views (urgency, reminders, alerts) are never stored
CREATE TABLE IF NOT EXISTS payments (
    id                    UUID PRIMARY KEY,
    owner_id              BIGINT NOT NULL,
    name                  VARCHAR(100) NOT NULL CHECK (length(trim(name)) > 0),
    amount                NUMERIC(12,2) CHECK (amount >= 0),
    min_payment_amount    NUMERIC(12,2) CHECK (min_payment_amount >= 0),
    due_date              DATE NOT NULL,
    status                VARCHAR(10) NOT NULL DEFAULT 'Upcoming'
                              CHECK (status IN ('Upcoming', 'Paid')),
    is_recurring          BOOLEAN NOT NULL DEFAULT FALSE,
    recurring_anchor_day  SMALLINT CHECK (recurring_anchor_day BETWEEN 1 AND 31),
    category_tag          VARCHAR(50) NOT NULL DEFAULT 'Other',
    reminder_cadence      VARCHAR(50) NOT NULL DEFAULT 'one_day_before',
    created_at            TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at            TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    CHECK (NOT is_recurring OR recurring_anchor_day IS NOT NULL)
);

CREATE INDEX IF NOT EXISTS idx_payments_owner_due ON payments(owner_id, due_date);
"""


def create_tables() -> None:
    """
    Execute the schema SQL.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    conn = get_connection()
    try:
        with conn.cursor() as cur:
            cur.execute(SCHEMA_SQL)
        conn.commit()
        logger.info("Database schema initialized successfully.")
    except Exception as e:
        conn.rollback()
        logger.error(f"Failed to initialize schema: {e}")
        raise
    finally:
        release_connection(conn)


if __name__ == "__main__":
    from db.connection import init_pool
    init_pool()
    create_tables()
    print("Database schema created successfully.")
