"""
Errors - The allocation engine's error taxonomy.

Every caller-facing failure is an AllocationError carrying a machine-readable
ErrorCode. The HTTP layer maps codes to status codes; the engine never does.

Idempotent re-submission by an existing giver is NOT an error.
"""

from __future__ import annotations
from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Structured error codes."""
    INVALID_INPUT = "INVALID_INPUT"
    UNKNOWN_PARTICIPANT = "UNKNOWN_PARTICIPANT"
    INELIGIBLE_GIVER = "INELIGIBLE_GIVER"
    RECEIVER_TAKEN = "RECEIVER_TAKEN"
    NO_ELIGIBLE_RECEIVER = "NO_ELIGIBLE_RECEIVER"
    DUPLICATE_PARTICIPANT = "DUPLICATE_PARTICIPANT"
    ASSIGNMENT_NOT_FOUND = "ASSIGNMENT_NOT_FOUND"
    STORAGE_FAILURE = "STORAGE_FAILURE"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AllocationError(Exception):
    """Base class for errors surfaced to callers."""
    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvalidInput(AllocationError):
    """A required code or name is missing or blank."""
    error_code = ErrorCode.INVALID_INPUT


class UnknownParticipant(AllocationError):
    """A code does not resolve in the participant directory."""
    error_code = ErrorCode.UNKNOWN_PARTICIPANT

    def __init__(self, code: str, role: str = "participant"):
        super().__init__(
            f"{role.capitalize()} {code} is not a registered participant",
            details={"code": code, "role": role},
        )
        self.code = code
        self.role = role


class IneligibleGiver(AllocationError):
    """A prior receiver tried to give while the forbid policy is active."""
    error_code = ErrorCode.INELIGIBLE_GIVER

    def __init__(self, code: str, gifted_by: str | None = None):
        super().__init__(
            f"{code} has already been assigned as a receiver and may not give",
            details={"code": code, "gifted_by": gifted_by},
        )
        self.code = code


class ReceiverTaken(AllocationError):
    """The requested receiver already belongs to another giver."""
    error_code = ErrorCode.RECEIVER_TAKEN

    def __init__(self, receiver_code: str):
        super().__init__(
            f"{receiver_code} has already been assigned as a receiver to someone else. "
            "Spin again to get a different person.",
            details={"receiver_code": receiver_code},
        )
        self.receiver_code = receiver_code


class NoEligibleReceiver(AllocationError):
    """Everyone except the giver is already a receiver."""
    error_code = ErrorCode.NO_ELIGIBLE_RECEIVER

    def __init__(self, giver_code: str):
        super().__init__(
            f"No eligible receivers remain for {giver_code}",
            details={"giver_code": giver_code},
        )
        self.giver_code = giver_code


class DuplicateParticipant(AllocationError):
    """A participant with this code is already registered."""
    error_code = ErrorCode.DUPLICATE_PARTICIPANT

    def __init__(self, code: str):
        super().__init__(f"Participant code {code} already exists", details={"code": code})
        self.code = code


class StorageFailure(AllocationError):
    """The backing store failed. Fatal to the request, never retried."""
    error_code = ErrorCode.STORAGE_FAILURE


# =============================================================================
# Store-level commit conflicts (internal, never surfaced to callers)
# =============================================================================

class LedgerConflict(Exception):
    """A uniqueness constraint rejected an insert."""

    def __init__(self, code: str):
        super().__init__(code)
        self.code = code


class GiverConflict(LedgerConflict):
    """Another assignment already exists for this giver."""


class ReceiverConflict(LedgerConflict):
    """Another assignment already targets this receiver."""
