"""
API Module - Transport surface for the allocation engine.

Exposes the engine via REST API. A participant client:
1. Checks whether its code already has an assignment
2. Spins (or lists eligible receivers and submits a pick)
3. Retries with a fresh pick if its receiver was taken meanwhile

No authentication: participant codes are identifiers, not secrets.
"""

from .service import AssignmentService
from .app import create_app

__all__ = [
    "AssignmentService",
    "create_app",
]
