"""
Spin - The self-service action: pick a random eligible receiver and commit it.

A participant spins once. Spinning again returns the same assignment.
If another spinner takes the picked receiver first, the pool is
re-resolved and the pick is retried a bounded number of times.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
import random

from .allocation import AllocationOutcome, AllocationTransaction
from .eligibility import EligibilityResolver
from ..directory import canonical_code
from ..errors import InvalidInput, NoEligibleReceiver, ReceiverTaken, UnknownParticipant

logger = logging.getLogger(__name__)

DEFAULT_SPIN_ATTEMPTS = 5


@dataclass
class Spinner:
    """
    Server-side spin.

    Usage:
        spinner = Spinner(resolver, transaction, rng=random.Random(42))
        outcome = spinner.spin("x")
        outcome.assignment.receiver_name
    """
    resolver: EligibilityResolver
    transaction: AllocationTransaction
    rng: random.Random = field(default_factory=random.Random)
    max_attempts: int = DEFAULT_SPIN_ATTEMPTS

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")

    def spin(self, giver_code: str | None) -> AllocationOutcome:
        giver = canonical_code(giver_code)
        if not giver:
            raise InvalidInput("Giver code is required")
        if self.transaction.directory.find_by_code(giver) is None:
            raise UnknownParticipant(giver, role="giver")

        self.transaction.ensure_may_give(giver)

        existing = self.transaction.ledger.find_by_giver(giver)
        if existing is not None:
            # Route through the transaction so the prior-receiver policy applies
            return self.transaction.execute(giver, existing.receiver_code)

        for attempt in range(1, self.max_attempts + 1):
            candidates = self.resolver.available_receivers(giver)
            if not candidates:
                raise NoEligibleReceiver(giver)

            receiver = self.rng.choice(candidates)
            try:
                return self.transaction.execute(giver, receiver.code)
            except ReceiverTaken:
                logger.info(
                    "Spin for %s: %s was taken (attempt %d/%d)",
                    giver, receiver.code, attempt, self.max_attempts,
                )

        raise ReceiverTaken(receiver.code)
