"""
Participant - Identity unit owned by the directory.
"""

from __future__ import annotations
from dataclasses import dataclass

from ..errors import InvalidInput


def canonical_code(code: str | None) -> str:
    """
    Canonicalize a participant code: trim whitespace, uppercase.

    Applied at every boundary before comparison or storage.
    None canonicalizes to the empty string.
    """
    if code is None:
        return ""
    return code.strip().upper()


@dataclass(frozen=True)
class Participant:
    """A registered participant. Immutable once created."""
    code: str
    name: str

    @classmethod
    def create(cls, code: str | None, name: str | None) -> Participant:
        """Build a participant from raw input, canonicalizing the code."""
        canonical = canonical_code(code)
        if not canonical:
            raise InvalidInput("Participant code is required")
        clean_name = (name or "").strip()
        if not clean_name:
            raise InvalidInput("Participant name is required")
        return cls(code=canonical, name=clean_name)
