"""
SQLite helpers shared by the directory and ledger stores.

Each operation opens its own connection, so stores are safe to share
between request threads. Uniqueness is enforced by the schema itself:
concurrent writers race on the UNIQUE constraints, not on a lock.
"""

from __future__ import annotations
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator
import logging
import sqlite3

from .errors import StorageFailure

logger = logging.getLogger(__name__)

# Seconds a writer waits on a locked database before failing
BUSY_TIMEOUT = 5.0

SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS participants (
        code TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        created_at REAL NOT NULL
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS assignments (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        giver_code TEXT NOT NULL UNIQUE,
        receiver_code TEXT NOT NULL UNIQUE,
        giver_name TEXT NOT NULL,
        receiver_name TEXT NOT NULL,
        created_at REAL NOT NULL
    );
    """,
)


def init_db(db_path: str | Path) -> None:
    """Create required tables if they do not exist. Idempotent."""
    with connect(db_path) as conn:
        for statement in SCHEMA:
            conn.execute(statement)


@contextmanager
def connect(db_path: str | Path) -> Iterator[sqlite3.Connection]:
    """
    Open a connection wrapped in a single transaction.

    Commits on success, rolls back on any exception. IntegrityError is
    re-raised untouched so callers can interpret constraint violations;
    every other sqlite3.Error becomes StorageFailure.
    """
    try:
        conn = sqlite3.connect(str(db_path), timeout=BUSY_TIMEOUT)
    except sqlite3.Error as e:
        logger.error("Cannot open database %s: %s", db_path, e)
        raise StorageFailure(f"Cannot open database: {e}") from e

    conn.row_factory = sqlite3.Row
    try:
        yield conn
        conn.commit()
    except sqlite3.IntegrityError:
        conn.rollback()
        raise
    except sqlite3.Error as e:
        conn.rollback()
        logger.error("Database operation failed on %s: %s", db_path, e)
        raise StorageFailure(f"Database operation failed: {e}") from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()
