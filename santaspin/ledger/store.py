"""
Ledger Store - The injected storage abstraction behind the allocation engine.

A store holds the set of committed assignments and enforces two uniqueness
constraints at insert time:
- giver_code is unique (GiverConflict)
- receiver_code is unique (ReceiverConflict)

The allocation transaction relies on these constraints, not on locking,
to stay correct under concurrent writers.
"""

from __future__ import annotations
from typing import Protocol, runtime_checkable
import threading

from .assignment import Assignment
from ..errors import GiverConflict, ReceiverConflict


@runtime_checkable
class LedgerStore(Protocol):
    """Storage operations the engine needs."""

    def find_by_giver(self, giver_code: str) -> Assignment | None:
        ...

    def find_by_receiver(self, receiver_code: str) -> Assignment | None:
        ...

    def list_all(self) -> list[Assignment]:
        ...

    def insert_if_absent(self, assignment: Assignment) -> Assignment:
        """
        Insert under the uniqueness constraints.

        Raises GiverConflict or ReceiverConflict if a row already holds
        either code. The store is unchanged on conflict.
        """
        ...

    def delete_all(self) -> int:
        """Atomically remove every assignment. Returns the number removed."""
        ...


class InMemoryLedgerStore:
    """
    Ledger kept in two dict indexes.

    The constraint check and the insert run as one critical section, which
    is the in-memory equivalent of a unique index.
    """

    def __init__(self):
        self._by_giver: dict[str, Assignment] = {}
        self._by_receiver: dict[str, Assignment] = {}
        self._lock = threading.Lock()

    def find_by_giver(self, giver_code: str) -> Assignment | None:
        return self._by_giver.get(giver_code)

    def find_by_receiver(self, receiver_code: str) -> Assignment | None:
        return self._by_receiver.get(receiver_code)

    def list_all(self) -> list[Assignment]:
        with self._lock:
            return list(self._by_giver.values())

    def insert_if_absent(self, assignment: Assignment) -> Assignment:
        with self._lock:
            if assignment.giver_code in self._by_giver:
                raise GiverConflict(assignment.giver_code)
            if assignment.receiver_code in self._by_receiver:
                raise ReceiverConflict(assignment.receiver_code)
            self._by_giver[assignment.giver_code] = assignment
            self._by_receiver[assignment.receiver_code] = assignment
        return assignment

    def delete_all(self) -> int:
        with self._lock:
            count = len(self._by_giver)
            self._by_giver = {}
            self._by_receiver = {}
        return count
