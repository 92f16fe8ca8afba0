"""
Database service for connection management.

Uses PostgreSQL when DATABASE_URL is configured, falling back to a local
SQLite file otherwise. Creates the products table on initialization.
"""

import logging
import sqlite3
import threading
from contextlib import contextmanager
from decimal import Decimal
from typing import Generator, Optional

import psycopg2
import psycopg2.extras
import psycopg2.pool

from ..config import SQLITE_PATH


logger = logging.getLogger(__name__)

# SQLite has no decimal type; prices are stored as text to keep them exact
sqlite3.register_adapter(Decimal, str)


def _casefold(value: Optional[str]) -> Optional[str]:
    # SQLite LOWER() only folds ASCII
    return value.casefold() if value is not None else None


POSTGRES_SCHEMA = '''
    CREATE TABLE IF NOT EXISTS products (
        id BIGSERIAL PRIMARY KEY,
        external_id BIGINT NOT NULL UNIQUE,
        title TEXT NOT NULL,
        price NUMERIC(12, 2) NOT NULL DEFAULT 0,
        image_url TEXT,
        description TEXT,
        variants JSONB,
        updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
'''

SQLITE_SCHEMA = '''
    CREATE TABLE IF NOT EXISTS products (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        external_id INTEGER NOT NULL UNIQUE,
        title TEXT NOT NULL,
        price TEXT NOT NULL DEFAULT '0',
        image_url TEXT,
        description TEXT,
        variants TEXT,
        updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
'''


class DatabasePool:
    """
    Connection manager for the products database.

    PostgreSQL connections come from a psycopg2 ThreadedConnectionPool so the
    background import and request handlers never share a transaction. The
    SQLite fallback keeps a single connection and serializes access to it.
    """

    def __init__(self, database_url: Optional[str] = None, sqlite_path: str = SQLITE_PATH,
                 minconn: int = 1, maxconn: int = 5):
        self._db_url = database_url
        self._sqlite_path = sqlite_path
        self._minconn = minconn
        self._maxconn = maxconn
        self._pool: Optional[psycopg2.pool.ThreadedConnectionPool] = None
        self._sqlite_conn: Optional[sqlite3.Connection] = None
        self._lock = threading.Lock()

    @property
    def is_postgres(self) -> bool:
        return bool(self._db_url)

    @property
    def placeholder(self) -> str:
        """Parameter placeholder for the active driver."""
        return '%s' if self.is_postgres else '?'

    @property
    def is_initialized(self) -> bool:
        return self._pool is not None or self._sqlite_conn is not None

    def initialize(self) -> None:
        """Open connections and create the schema."""
        if self.is_postgres:
            self._pool = psycopg2.pool.ThreadedConnectionPool(
                self._minconn, self._maxconn, self._db_url
            )
            schema = POSTGRES_SCHEMA
            logger.info("Connected to PostgreSQL")
        else:
            conn = sqlite3.connect(self._sqlite_path, check_same_thread=False)
            conn.row_factory = sqlite3.Row
            conn.create_function("casefold", 1, _casefold, deterministic=True)
            self._sqlite_conn = conn
            schema = SQLITE_SCHEMA
            logger.info("DATABASE_URL not set, using SQLite: %s", self._sqlite_path)

        with self.get_cursor() as cursor:
            cursor.execute(schema)

    @contextmanager
    def get_connection(self) -> Generator:
        """
        Get a database connection.

        Commits when the block exits cleanly, rolls back and re-raises otherwise.

        Example:
            with db_pool.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute("SELECT * FROM products")
        """
        if not self.is_initialized:
            raise RuntimeError("Database not initialized")

        if self.is_postgres:
            conn = self._pool.getconn()
            try:
                yield conn
                conn.commit()
            except Exception:
                conn.rollback()
                raise
            finally:
                self._pool.putconn(conn)
        else:
            with self._lock:
                conn = self._sqlite_conn
                if conn is None:
                    raise RuntimeError("Database not initialized")
                try:
                    yield conn
                    conn.commit()
                except Exception:
                    conn.rollback()
                    raise

    @contextmanager
    def get_cursor(self) -> Generator:
        """
        Get a cursor with automatic connection management.

        Rows support access by column name on both drivers
        (RealDictCursor for PostgreSQL, sqlite3.Row for SQLite).
        """
        with self.get_connection() as conn:
            if self.is_postgres:
                cursor = conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor)
            else:
                cursor = conn.cursor()
            try:
                yield cursor
            finally:
                cursor.close()

    def close(self) -> None:
        """Close all connections."""
        if self._pool is not None:
            self._pool.closeall()
            self._pool = None
        with self._lock:
            if self._sqlite_conn is not None:
                self._sqlite_conn.close()
                self._sqlite_conn = None
