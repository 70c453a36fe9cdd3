"""
Ledger Module - The set of committed giver -> receiver pairs.

The ledger is the source of truth for every allocation decision.
It is accessed only through the LedgerStore abstraction so the engine
can run against an in-memory store in tests and SQLite in production.
"""

from .assignment import Assignment, ReceiverRef
from .store import LedgerStore, InMemoryLedgerStore
from .sqlite import SQLiteLedgerStore

__all__ = [
    "Assignment",
    "ReceiverRef",
    "LedgerStore",
    "InMemoryLedgerStore",
    "SQLiteLedgerStore",
]
