"""
db/connection.py
----------------
PostgreSQL connection pool shared by the repositories.
Uses psycopg2's SimpleConnectionPool; UUID values are adapted so payment
ids can be passed straight into queries.
"""

from typing import Optional

import psycopg2
import psycopg2.extras
from psycopg2 import pool

from config import DATABASE_URL
from utils.logger import get_logger

logger = get_logger(__name__)

_pool: Optional[pool.SimpleConnectionPool] = None


def init_pool(min_conn: int = 1, max_conn: int = 5, dsn: Optional[str] = None) -> None:
    """
    Open the connection pool (no-op if it is already open).

    Args:
        min_conn: Connections kept open.
        max_conn: Upper bound on concurrent connections.
        dsn: Connection string; defaults to DATABASE_URL from config.

    Raises:
        psycopg2.OperationalError: If the database is unreachable.
    """
    global _pool
    if _pool is not None:
        return
    psycopg2.extras.register_uuid()
    try:
        _pool = pool.SimpleConnectionPool(min_conn, max_conn, dsn or DATABASE_URL)
        logger.info(f"Database pool ready ({min_conn}-{max_conn} connections).")
    except psycopg2.OperationalError as e:
        logger.error(f"Could not open database pool: {e}")
        raise


def get_connection():
    """
    Borrow a connection from the pool.

    Raises:
        RuntimeError: If init_pool() has not been called.
    """
    if _pool is None:
        raise RuntimeError("Database pool not initialized. Call init_pool() first.")
    return _pool.getconn()


def release_connection(conn) -> None:
    """Hand a borrowed connection back to the pool."""
    if _pool is not None:
        _pool.putconn(conn)


def close_pool() -> None:
    """Close every pooled connection."""
    global _pool
    if _pool is not None:
        _pool.closeall()
        _pool = None
        logger.info("Database pool closed.")
