"""
Allocation Transaction - Validates and commits one giver -> receiver pair.

The only mutator of the ledger. Order of checks:
1. Both codes present (InvalidInput)
2. Canonicalize
3. Prior-receiver policy (IneligibleGiver)
4. Giver already committed -> return existing assignment (idempotent)
5. Both codes registered (UnknownParticipant)
6. Receiver still free (ReceiverTaken)
7. Insert under the store's uniqueness constraints
8. Lost the giver race -> read back and return the winner

The first committed write for a giver always wins, and every caller,
first or late, receives that same pair. Rejections leave the ledger unchanged.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import logging

from ..directory import ParticipantDirectory, canonical_code
from ..errors import (
    GiverConflict,
    IneligibleGiver,
    InvalidInput,
    ReceiverConflict,
    ReceiverTaken,
    StorageFailure,
    UnknownParticipant,
)
from ..ledger import Assignment, LedgerStore

logger = logging.getLogger(__name__)


class PriorReceiverPolicy(Enum):
    """
    Whether a participant who has already been gifted to may still give.

    FORBID: a prior receiver is rejected as a giver.
    ALLOW: receiving never blocks giving.
    """
    FORBID = "forbid"
    ALLOW = "allow"

    def permits_giving(self, is_receiver: bool) -> bool:
        return self is PriorReceiverPolicy.ALLOW or not is_receiver


@dataclass(frozen=True)
class AllocationOutcome:
    """A committed assignment, and whether this call created it."""
    assignment: Assignment
    created: bool


@dataclass
class AllocationTransaction:
    """
    Commits new assignments.

    Usage:
        transaction = AllocationTransaction(directory, ledger)
        assignment = transaction.allocate("x", "y")
    """
    directory: ParticipantDirectory
    ledger: LedgerStore
    policy: PriorReceiverPolicy = PriorReceiverPolicy.FORBID

    def allocate(self, giver_code: str | None, receiver_code: str | None) -> Assignment:
        """Commit giver -> receiver, or return the giver's existing assignment."""
        return self.execute(giver_code, receiver_code).assignment

    def execute(self, giver_code: str | None, receiver_code: str | None) -> AllocationOutcome:
        """Like allocate(), but also reports whether a new row was created."""
        giver = canonical_code(giver_code)
        receiver = canonical_code(receiver_code)
        if not giver or not receiver:
            raise InvalidInput(
                "Giver code and receiver code are required",
                details={"giver_code": giver_code, "receiver_code": receiver_code},
            )

        self.ensure_may_give(giver)

        existing = self.ledger.find_by_giver(giver)
        if existing is not None:
            logger.info(
                "%s already gives to %s, returning existing assignment",
                giver, existing.receiver_code,
            )
            return AllocationOutcome(assignment=existing, created=False)

        giver_participant = self.directory.find_by_code(giver)
        if giver_participant is None:
            logger.warning("Unknown giver %s", giver)
            raise UnknownParticipant(giver, role="giver")
        receiver_participant = self.directory.find_by_code(receiver)
        if receiver_participant is None:
            logger.warning("Unknown receiver %s", receiver)
            raise UnknownParticipant(receiver, role="receiver")

        holder = self.ledger.find_by_receiver(receiver)
        if holder is not None:
            if holder.giver_code == giver:
                # A concurrent duplicate submission committed this exact pair
                return AllocationOutcome(assignment=holder, created=False)
            logger.warning("Receiver %s already taken by %s", receiver, holder.giver_code)
            raise ReceiverTaken(receiver)

        assignment = Assignment(
            giver_code=giver,
            receiver_code=receiver,
            giver_name=giver_participant.name,
            receiver_name=receiver_participant.name,
        )

        try:
            committed = self.ledger.insert_if_absent(assignment)
        except GiverConflict:
            return self._read_back_winner(giver)
        except ReceiverConflict:
            winner = self.ledger.find_by_giver(giver)
            if winner is not None:
                return AllocationOutcome(assignment=winner, created=False)
            logger.warning("Lost race for receiver %s", receiver)
            raise ReceiverTaken(receiver)

        logger.info("Committed assignment %s -> %s", giver, receiver)
        return AllocationOutcome(assignment=committed, created=True)

    def ensure_may_give(self, giver: str) -> None:
        """Raise IneligibleGiver if the policy bars this canonical code from giving."""
        if self.policy is not PriorReceiverPolicy.FORBID:
            return
        gifted = self.ledger.find_by_receiver(giver)
        if gifted is not None:
            logger.warning(
                "Rejecting %s as giver: already a receiver of %s",
                giver, gifted.giver_code,
            )
            raise IneligibleGiver(giver, gifted_by=gifted.giver_code)

    def _read_back_winner(self, giver: str) -> AllocationOutcome:
        """A concurrent writer committed this giver first: return its pair."""
        winner = self.ledger.find_by_giver(giver)
        if winner is None:
            # Conflict reported but the row is gone, e.g. a reset landed in between
            raise StorageFailure(
                f"Giver {giver} conflicted on commit but no assignment was found",
                details={"giver_code": giver},
            )
        logger.info(
            "Concurrent commit for %s detected, returning winning assignment -> %s",
            giver, winner.receiver_code,
        )
        return AllocationOutcome(assignment=winner, created=False)
