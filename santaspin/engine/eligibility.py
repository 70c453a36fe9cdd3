"""
Eligibility Resolver - Who may be assigned as a giver's receiver right now.

eligible(giver) = { p in directory : p.code != giver and p.code not already a receiver }

This is a pure read over a snapshot of the ledger. A commit that lands
just after the snapshot may make a listed receiver unavailable; the
allocation transaction's receiver check is the authoritative gate.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging

from ..directory import Participant, ParticipantDirectory, canonical_code
from ..ledger import LedgerStore

logger = logging.getLogger(__name__)


@dataclass
class EligibilityResolver:
    """
    Computes eligible receivers for a giver.

    Does not special-case givers that already have an assignment, and does
    not require the giver code to be registered.
    """
    directory: ParticipantDirectory
    ledger: LedgerStore

    def available_receivers(self, giver_code: str) -> list[Participant]:
        """
        List participants who may receive from giver_code.

        Returns an empty list when everyone else is already a receiver;
        callers must not attempt a commit in that case.
        """
        giver = canonical_code(giver_code)
        taken = self.taken_receivers()

        available = [
            participant
            for participant in self.directory.list_all()
            if canonical_code(participant.code) != giver
            and canonical_code(participant.code) not in taken
        ]

        logger.debug(
            "Eligibility for %s: %d available, %d receivers taken",
            giver, len(available), len(taken),
        )
        return available

    def taken_receivers(self) -> set[str]:
        """Canonical codes of every committed receiver."""
        return {
            canonical_code(assignment.receiver_code)
            for assignment in self.ledger.list_all()
        }
