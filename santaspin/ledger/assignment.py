"""
Assignment - A committed giver -> receiver edge.

Names are snapshots taken at commit time; they are not re-synced if a
participant is later renamed. Assignments are never updated in place.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import time


@dataclass(frozen=True)
class Assignment:
    """
    A directed edge giver -> receiver in the ledger graph.

    Out-degree and in-degree are at most 1 per participant; cycles are allowed.
    """
    giver_code: str
    receiver_code: str
    giver_name: str
    receiver_name: str
    created_at: float = field(default_factory=time.time)

    def receiver_ref(self) -> ReceiverRef:
        return ReceiverRef(
            receiver_code=self.receiver_code,
            receiver_name=self.receiver_name,
        )


@dataclass(frozen=True)
class ReceiverRef:
    """The receiving side of an assignment, as listed per giver."""
    receiver_code: str
    receiver_name: str
