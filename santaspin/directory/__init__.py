"""
Directory Module - Participant identity.

The directory is an external collaborator of the allocation engine:
a mapping from canonical participant code to display name.
"""

from .participant import Participant, canonical_code
from .store import ParticipantDirectory, ManagedDirectory, InMemoryDirectory, SQLiteDirectory

__all__ = [
    "Participant",
    "canonical_code",
    "ParticipantDirectory",
    "ManagedDirectory",
    "InMemoryDirectory",
    "SQLiteDirectory",
]
