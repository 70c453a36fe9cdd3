"""
Engine - The assignment-allocation core.

1. EligibilityResolver lists who a giver may still be assigned
2. AllocationTransaction validates and commits one pair
3. AssignmentQueries projects the ledger (list, lookup, reset)
4. Spinner picks a random eligible receiver and commits it
"""

from .eligibility import EligibilityResolver
from .allocation import AllocationTransaction, AllocationOutcome, PriorReceiverPolicy
from .queries import AssignmentQueries, ParticipantStatus
from .spin import Spinner, DEFAULT_SPIN_ATTEMPTS

__all__ = [
    "EligibilityResolver",
    "AllocationTransaction",
    "AllocationOutcome",
    "PriorReceiverPolicy",
    "AssignmentQueries",
    "ParticipantStatus",
    "Spinner",
    "DEFAULT_SPIN_ATTEMPTS",
]
