"""
PostgreSQL connection helper.
Provides get_db() for use by the stores.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

import psycopg2
from psycopg2.extras import RealDictCursor


@contextmanager
def get_db(database_url: str) -> Iterator["psycopg2.extensions.connection"]:
    """
    Open a psycopg2 connection with dictionary-based row access.

    The transaction is committed when the block exits cleanly and rolled
    back otherwise; the connection is always closed.

    Usage:
        with get_db(url) as conn:
            with conn.cursor() as cur:
                cur.execute(...)

    Raises:
        psycopg2.Error: If the connection fails.
    """
    try:
        conn = psycopg2.connect(database_url, cursor_factory=RealDictCursor)
    except psycopg2.Error as e:
        logging.error(f"Error connecting to database: {e}")
        raise

    try:
        with conn:
            yield conn
    finally:
        conn.close()


def connector(database_url: str):
    """
    Bind a database URL so stores can open connections without knowing it.

    Returns:
        callable: Zero-argument factory returning a `get_db` context manager.
    """
    def connect():
        return get_db(database_url)

    return connect
