"""
Query Surface - Read-only projections over the ledger, plus reset.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging

from .allocation import PriorReceiverPolicy
from ..directory import canonical_code
from ..ledger import Assignment, LedgerStore, ReceiverRef

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParticipantStatus:
    """Which sides of the ledger a code appears on."""
    code: str
    is_giver: bool
    is_receiver: bool
    can_become_giver: bool
    giver_assignment: Assignment | None = None  # where code gives
    receiver_assignment: Assignment | None = None  # where code receives


@dataclass
class AssignmentQueries:
    """
    Read access to committed assignments.

    lookup() returns None rather than raising, so callers can branch on
    "has an assignment" vs "does not yet" without error handling.
    """
    ledger: LedgerStore
    policy: PriorReceiverPolicy = PriorReceiverPolicy.FORBID

    def list_assignments(self) -> dict[str, ReceiverRef]:
        """Snapshot of every pair, keyed by giver code."""
        return {
            assignment.giver_code: assignment.receiver_ref()
            for assignment in self.ledger.list_all()
        }

    def lookup(self, employee_code: str | None) -> Assignment | None:
        """The assignment where employee_code is the giver, if any."""
        code = canonical_code(employee_code)
        if not code:
            return None
        return self.ledger.find_by_giver(code)

    def reset(self) -> int:
        """Clear the entire ledger. Irreversible."""
        removed = self.ledger.delete_all()
        logger.info("Ledger reset, %d assignments removed", removed)
        return removed

    def participant_status(self, employee_code: str | None) -> ParticipantStatus:
        """Giver/receiver standing of a code under the active policy."""
        code = canonical_code(employee_code)
        as_giver = self.ledger.find_by_giver(code) if code else None
        as_receiver = self.ledger.find_by_receiver(code) if code else None

        return ParticipantStatus(
            code=code,
            is_giver=as_giver is not None,
            is_receiver=as_receiver is not None,
            can_become_giver=(
                as_giver is None
                and self.policy.permits_giving(as_receiver is not None)
            ),
            giver_assignment=as_giver,
            receiver_assignment=as_receiver,
        )
