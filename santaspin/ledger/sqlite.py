"""
SQLite Ledger Store - Durable ledger backed by the assignments table.

Both uniqueness constraints are UNIQUE columns, so two connections racing
to insert the same giver cannot both commit: the loser gets an
IntegrityError, which is translated into GiverConflict / ReceiverConflict.
"""

from __future__ import annotations
from pathlib import Path
import sqlite3

from .assignment import Assignment
from ..db import connect, init_db
from ..errors import GiverConflict, ReceiverConflict, StorageFailure

_COLUMNS = "giver_code, receiver_code, giver_name, receiver_name, created_at"


def _row_to_assignment(row: sqlite3.Row) -> Assignment:
    return Assignment(
        giver_code=row["giver_code"],
        receiver_code=row["receiver_code"],
        giver_name=row["giver_name"],
        receiver_name=row["receiver_name"],
        created_at=row["created_at"],
    )


class SQLiteLedgerStore:
    """
    Ledger store on a SQLite file.

    Usage:
        store = SQLiteLedgerStore("santaspin.db")
        store.insert_if_absent(assignment)
    """

    def __init__(self, db_path: str | Path):
        self.db_path = db_path
        init_db(db_path)

    def find_by_giver(self, giver_code: str) -> Assignment | None:
        return self._find_one("giver_code", giver_code)

    def find_by_receiver(self, receiver_code: str) -> Assignment | None:
        return self._find_one("receiver_code", receiver_code)

    def list_all(self) -> list[Assignment]:
        with connect(self.db_path) as conn:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM assignments ORDER BY id"
            ).fetchall()
        return [_row_to_assignment(row) for row in rows]

    def insert_if_absent(self, assignment: Assignment) -> Assignment:
        try:
            with connect(self.db_path) as conn:
                conn.execute(
                    f"INSERT INTO assignments ({_COLUMNS}) VALUES (?, ?, ?, ?, ?)",
                    (
                        assignment.giver_code,
                        assignment.receiver_code,
                        assignment.giver_name,
                        assignment.receiver_name,
                        assignment.created_at,
                    ),
                )
        except sqlite3.IntegrityError as e:
            # e.g. "UNIQUE constraint failed: assignments.giver_code"
            message = str(e)
            if "assignments.giver_code" in message:
                raise GiverConflict(assignment.giver_code) from e
            if "assignments.receiver_code" in message:
                raise ReceiverConflict(assignment.receiver_code) from e
            raise StorageFailure(f"Unexpected constraint violation: {message}") from e
        return assignment

    def delete_all(self) -> int:
        with connect(self.db_path) as conn:
            cursor = conn.execute("DELETE FROM assignments")
        return cursor.rowcount

    def _find_one(self, column: str, code: str) -> Assignment | None:
        with connect(self.db_path) as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM assignments WHERE {column} = ?",
                (code,),
            ).fetchone()
        return _row_to_assignment(row) if row else None
