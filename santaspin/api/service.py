"""
API Service - Business logic layer between the transport and the engine.

The service:
1. Wires the directory and ledger stores into the engine components
2. Exposes one method per transport operation
3. Raises AllocationError subclasses for every caller-facing failure

This layer is framework-agnostic (can be used with FastAPI, a CLI, tests).
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
import random

from ..config import AppConfig
from ..directory import InMemoryDirectory, ManagedDirectory, Participant, SQLiteDirectory, canonical_code
from ..engine import (
    AllocationOutcome,
    AllocationTransaction,
    AssignmentQueries,
    DEFAULT_SPIN_ATTEMPTS,
    EligibilityResolver,
    ParticipantStatus,
    PriorReceiverPolicy,
    Spinner,
)
from ..errors import UnknownParticipant
from ..ledger import Assignment, InMemoryLedgerStore, LedgerStore, ReceiverRef, SQLiteLedgerStore

logger = logging.getLogger(__name__)


@dataclass
class AssignmentService:
    """
    Main service for the gift exchange.

    Usage:
        service = AssignmentService()
        service.add_participant("x", "Alice")
        service.add_participant("y", "Bob")

        outcome = service.spin("x")
        service.lookup("x")  # same assignment
    """
    directory: ManagedDirectory = field(default_factory=InMemoryDirectory)
    ledger: LedgerStore = field(default_factory=InMemoryLedgerStore)
    policy: PriorReceiverPolicy = PriorReceiverPolicy.FORBID
    rng: random.Random = field(default_factory=random.Random)
    spin_attempts: int = DEFAULT_SPIN_ATTEMPTS

    def __post_init__(self):
        self.resolver = EligibilityResolver(self.directory, self.ledger)
        self.transaction = AllocationTransaction(self.directory, self.ledger, self.policy)
        self.queries = AssignmentQueries(self.ledger, self.policy)
        self.spinner = Spinner(
            self.resolver,
            self.transaction,
            rng=self.rng,
            max_attempts=self.spin_attempts,
        )

    @classmethod
    def from_config(cls, config: AppConfig) -> AssignmentService:
        """Build a service on SQLite when a db path is configured, in memory otherwise."""
        if config.db_path:
            logger.info("Using SQLite stores at %s", config.db_path)
            directory = SQLiteDirectory(config.db_path)
            ledger = SQLiteLedgerStore(config.db_path)
        else:
            logger.info("No database configured, using in-memory stores")
            directory = InMemoryDirectory()
            ledger = InMemoryLedgerStore()

        return cls(
            directory=directory,
            ledger=ledger,
            policy=config.prior_receiver_policy,
            spin_attempts=config.spin_attempts,
        )

    # =========================================================================
    # Assignments
    # =========================================================================

    def list_assignments(self) -> dict[str, ReceiverRef]:
        return self.queries.list_assignments()

    def create_assignment(self, giver_code: str | None, receiver_code: str | None) -> AllocationOutcome:
        """Commit a client-chosen pair (idempotent per giver)."""
        return self.transaction.execute(giver_code, receiver_code)

    def spin(self, giver_code: str | None) -> AllocationOutcome:
        """Pick a random eligible receiver server-side and commit it."""
        return self.spinner.spin(giver_code)

    def reset_assignments(self) -> int:
        return self.queries.reset()

    def available_receivers(self, giver_code: str) -> list[Participant]:
        return self.resolver.available_receivers(giver_code)

    def lookup(self, employee_code: str) -> Assignment | None:
        return self.queries.lookup(employee_code)

    def participant_status(self, employee_code: str) -> ParticipantStatus:
        return self.queries.participant_status(employee_code)

    # =========================================================================
    # Participants
    # =========================================================================

    def list_participants(self) -> list[Participant]:
        return self.directory.list_all()

    def get_participant(self, code: str) -> Participant:
        participant = self.directory.find_by_code(code)
        if participant is None:
            raise UnknownParticipant(canonical_code(code))
        return participant

    def add_participant(self, code: str | None, name: str | None) -> Participant:
        return self.directory.add(code, name)

    def remove_participant(self, code: str) -> None:
        """Remove from the directory. Committed assignments keep their name snapshots."""
        if not self.directory.remove(code):
            raise UnknownParticipant(canonical_code(code))
