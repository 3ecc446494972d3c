"""
SQLite access for the economy server.

Provides:
- Connection factory (WAL mode, foreign keys, row access by column name)
- Schema creation
- Scoped transactions that always commit or roll back
"""

import logging
import sqlite3
from contextlib import contextmanager
from typing import Iterator

logger = logging.getLogger(__name__)

SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS accounts (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        account TEXT UNIQUE NOT NULL,
        name TEXT NOT NULL DEFAULT '',
        password_hash TEXT NOT NULL,
        is_admin INTEGER NOT NULL DEFAULT 0,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS characters (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        account_id INTEGER NOT NULL,
        name TEXT UNIQUE NOT NULL,
        health INTEGER NOT NULL,
        power INTEGER NOT NULL,
        money INTEGER NOT NULL CHECK (money >= 0),
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (account_id) REFERENCES accounts(id) ON DELETE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS items (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        item_code INTEGER UNIQUE NOT NULL,
        item_name TEXT NOT NULL,
        health INTEGER NOT NULL DEFAULT 0,
        power INTEGER NOT NULL DEFAULT 0,
        item_price INTEGER NOT NULL CHECK (item_price >= 0)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS character_inventory (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        character_id INTEGER NOT NULL,
        item_code INTEGER NOT NULL,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (character_id) REFERENCES characters(id) ON DELETE CASCADE
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_inventory_character_item
    ON character_inventory(character_id, item_code)
    """,
    """
    CREATE TABLE IF NOT EXISTS character_items (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        character_id INTEGER NOT NULL,
        item_code INTEGER NOT NULL,
        health_bonus INTEGER NOT NULL DEFAULT 0,
        power_bonus INTEGER NOT NULL DEFAULT 0,
        equipped_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (character_id) REFERENCES characters(id) ON DELETE CASCADE,
        UNIQUE (character_id, item_code)
    )
    """,
)

# sqlite INTEGER is a signed 64-bit value
SQLITE_INT_MIN = -2 ** 63
SQLITE_INT_MAX = 2 ** 63 - 1


def fits_integer(value: int) -> bool:
    """Check if a Python int can be bound to an sqlite INTEGER parameter."""
    return SQLITE_INT_MIN <= value <= SQLITE_INT_MAX


class Database:
    """
    Opens short-lived sqlite connections against a single database file.

    A file path is required: every operation opens its own connection, so an
    in-memory database would not be shared between them.
    """

    def __init__(self, path: str, timeout: float = 10.0):
        self.path = path
        self.timeout = timeout

    def connect(self) -> sqlite3.Connection:
        """Get database connection with WAL mode enabled for better concurrency."""
        # isolation_level=None: transactions are opened explicitly by transaction()
        conn = sqlite3.connect(self.path, timeout=self.timeout, isolation_level=None)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA foreign_keys=ON")
        return conn

    def init_db(self) -> None:
        """Create all tables and indexes if they do not exist yet."""
        conn = self.connect()
        try:
            for statement in SCHEMA:
                conn.execute(statement)
        finally:
            conn.close()
        logger.info(f"Database initialized at {self.path}")

    @contextmanager
    def transaction(self, immediate: bool = True) -> Iterator[sqlite3.Connection]:
        """
        Run a block of statements as one all-or-nothing unit.

        Args:
            immediate: Take the database write lock up front (BEGIN IMMEDIATE).
                Read-only blocks pass False to get a consistent snapshot
                without blocking writers.

        Yields:
            The connection to run statements on. The transaction commits when
            the block exits normally and rolls back on any exception.
        """
        conn = self.connect()
        try:
            conn.execute("BEGIN IMMEDIATE" if immediate else "BEGIN")
            yield conn
            conn.execute("COMMIT")
        except BaseException:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            raise
        finally:
            conn.close()
