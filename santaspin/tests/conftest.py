"""
Pytest fixtures for Santaspin tests.
"""

import random

import pytest

from ..api.service import AssignmentService
from ..directory import InMemoryDirectory, SQLiteDirectory
from ..engine import (
    AllocationTransaction,
    AssignmentQueries,
    EligibilityResolver,
    PriorReceiverPolicy,
    Spinner,
)
from ..ledger import InMemoryLedgerStore, SQLiteLedgerStore


@pytest.fixture
def directory() -> InMemoryDirectory:
    """Directory = {X: Alice, Y: Bob, Z: Cara}."""
    return InMemoryDirectory.from_pairs([
        ("X", "Alice"),
        ("Y", "Bob"),
        ("Z", "Cara"),
    ])


@pytest.fixture
def large_directory() -> InMemoryDirectory:
    """Twelve participants with mixed-case codes, like a real seed list."""
    return InMemoryDirectory.from_pairs([
        (f"InUnityFE{i:03d}", f"Employee {i}") for i in range(1, 13)
    ])


@pytest.fixture
def ledger() -> InMemoryLedgerStore:
    return InMemoryLedgerStore()


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "santaspin.db"


@pytest.fixture
def sqlite_ledger(db_path) -> SQLiteLedgerStore:
    return SQLiteLedgerStore(db_path)


@pytest.fixture
def sqlite_directory(db_path) -> SQLiteDirectory:
    directory = SQLiteDirectory(db_path)
    for code, name in [("X", "Alice"), ("Y", "Bob"), ("Z", "Cara")]:
        directory.add(code, name)
    return directory


@pytest.fixture
def resolver(directory, ledger) -> EligibilityResolver:
    return EligibilityResolver(directory, ledger)


@pytest.fixture
def transaction(directory, ledger) -> AllocationTransaction:
    """Transaction under the default (forbid) prior-receiver policy."""
    return AllocationTransaction(directory, ledger)


@pytest.fixture
def permissive_transaction(directory, ledger) -> AllocationTransaction:
    return AllocationTransaction(directory, ledger, policy=PriorReceiverPolicy.ALLOW)


@pytest.fixture
def queries(ledger) -> AssignmentQueries:
    return AssignmentQueries(ledger)


@pytest.fixture
def spinner(resolver, transaction) -> Spinner:
    return Spinner(resolver, transaction, rng=random.Random(7))


@pytest.fixture
def service(directory) -> AssignmentService:
    """Service over the three-person directory with a seeded rng."""
    return AssignmentService(directory=directory, rng=random.Random(7))
