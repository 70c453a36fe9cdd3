"""
Participant Directory - Mapping from canonical code to display name.

Read-only from the engine's perspective: the engine only calls
find_by_code() and list_all(). add() and remove() exist for directory
administration (seeding, the participants endpoints).
"""

from __future__ import annotations
from pathlib import Path
from typing import Protocol, runtime_checkable
import logging
import sqlite3
import threading
import time

from .participant import Participant, canonical_code
from ..db import connect, init_db
from ..errors import DuplicateParticipant

logger = logging.getLogger(__name__)


@runtime_checkable
class ParticipantDirectory(Protocol):
    """What the engine consumes from the directory."""

    def find_by_code(self, code: str) -> Participant | None:
        ...

    def list_all(self) -> list[Participant]:
        ...


@runtime_checkable
class ManagedDirectory(ParticipantDirectory, Protocol):
    """A directory that also supports administration."""

    def add(self, code: str, name: str) -> Participant:
        ...

    def remove(self, code: str) -> bool:
        ...


class InMemoryDirectory:
    """
    Directory held in a dict. Used for tests and when no database is configured.

    Usage:
        directory = InMemoryDirectory.from_pairs([("x", "Alice"), ("y", "Bob")])
        directory.find_by_code(" X ")  # Participant(code="X", name="Alice")
    """

    def __init__(self, participants: list[Participant] | None = None):
        self._participants: dict[str, Participant] = {}
        self._lock = threading.Lock()
        for participant in participants or []:
            self._participants[participant.code] = participant

    @classmethod
    def from_pairs(cls, pairs: list[tuple[str, str]]) -> InMemoryDirectory:
        """Build a directory from raw (code, name) pairs."""
        return cls([Participant.create(code, name) for code, name in pairs])

    def find_by_code(self, code: str) -> Participant | None:
        return self._participants.get(canonical_code(code))

    def list_all(self) -> list[Participant]:
        return sorted(self._participants.values(), key=lambda p: p.name)

    def add(self, code: str, name: str) -> Participant:
        participant = Participant.create(code, name)
        with self._lock:
            if participant.code in self._participants:
                raise DuplicateParticipant(participant.code)
            self._participants[participant.code] = participant
        logger.info("Registered participant %s", participant.code)
        return participant

    def remove(self, code: str) -> bool:
        with self._lock:
            removed = self._participants.pop(canonical_code(code), None)
        return removed is not None


class SQLiteDirectory:
    """Directory backed by the participants table."""

    def __init__(self, db_path: str | Path):
        self.db_path = db_path
        init_db(db_path)

    def find_by_code(self, code: str) -> Participant | None:
        with connect(self.db_path) as conn:
            row = conn.execute(
                "SELECT code, name FROM participants WHERE code = ?",
                (canonical_code(code),),
            ).fetchone()
        return Participant(code=row["code"], name=row["name"]) if row else None

    def list_all(self) -> list[Participant]:
        with connect(self.db_path) as conn:
            rows = conn.execute(
                "SELECT code, name FROM participants ORDER BY name"
            ).fetchall()
        return [Participant(code=row["code"], name=row["name"]) for row in rows]

    def add(self, code: str, name: str) -> Participant:
        participant = Participant.create(code, name)
        try:
            with connect(self.db_path) as conn:
                conn.execute(
                    "INSERT INTO participants (code, name, created_at) VALUES (?, ?, ?)",
                    (participant.code, participant.name, time.time()),
                )
        except sqlite3.IntegrityError:
            raise DuplicateParticipant(participant.code)
        logger.info("Registered participant %s", participant.code)
        return participant

    def remove(self, code: str) -> bool:
        with connect(self.db_path) as conn:
            cursor = conn.execute(
                "DELETE FROM participants WHERE code = ?",
                (canonical_code(code),),
            )
        return cursor.rowcount > 0
