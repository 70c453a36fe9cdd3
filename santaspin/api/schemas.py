"""
Pydantic Schemas for API - Request/response models for OpenAPI.

All codes in responses are canonical (trimmed, uppercase).

Error Codes:
- INVALID_INPUT: A required code or name is missing or blank
- UNKNOWN_PARTICIPANT: Code is not in the participant directory
- INELIGIBLE_GIVER: A prior receiver tried to give (forbid policy)
- RECEIVER_TAKEN: Receiver already assigned; re-resolve and retry
- NO_ELIGIBLE_RECEIVER: Nobody is left to receive
- DUPLICATE_PARTICIPANT: Participant code already registered
- ASSIGNMENT_NOT_FOUND: Code has no assignment as a giver yet
- STORAGE_FAILURE: Backing store unavailable
- VALIDATION_ERROR: Request body has the wrong shape or types
"""

from typing import Optional, Any
from pydantic import BaseModel, Field

from ..errors import ErrorCode
from ..engine import PriorReceiverPolicy

__all__ = [
    "ErrorCode",
    "ParticipantInfo",
    "ReceiverInfo",
    "AssignmentInfo",
    "CreateAssignmentRequest",
    "SpinRequest",
    "CreateParticipantRequest",
    "ErrorResponse",
    "AssignmentResponse",
    "LookupResponse",
    "ParticipantStatusResponse",
    "ResetResponse",
    "ParticipantResponse",
    "DeleteParticipantResponse",
    "HealthResponse",
]


# =============================================================================
# Shared Models
# =============================================================================

class ParticipantInfo(BaseModel):
    """A participant as listed by the directory and eligibility endpoints."""
    code: str
    name: str

    model_config = {"from_attributes": True}


class ReceiverInfo(BaseModel):
    """The receiving side of a pair, keyed by giver code in listings."""
    receiver_code: str
    receiver_name: str

    model_config = {"from_attributes": True}


class AssignmentInfo(BaseModel):
    """A committed giver -> receiver pair."""
    giver_code: str
    giver_name: str
    receiver_code: str
    receiver_name: str

    model_config = {"from_attributes": True}


# =============================================================================
# Request Models
# =============================================================================

class CreateAssignmentRequest(BaseModel):
    """Request to commit a giver -> receiver pair."""
    giver_code: Optional[str] = Field(None, description="Code of the participant giving")
    receiver_code: Optional[str] = Field(None, description="Code of the chosen receiver")


class SpinRequest(BaseModel):
    """Request to let the server pick a receiver."""
    giver_code: Optional[str] = Field(None, description="Code of the participant spinning")


class CreateParticipantRequest(BaseModel):
    """Request to register a participant."""
    code: Optional[str] = Field(None, description="Unique participant code (case-insensitive)")
    name: Optional[str] = Field(None, description="Display name")


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class AssignmentResponse(BaseModel):
    """Response from creating an assignment or spinning."""
    message: str
    created: bool = Field(..., description="False if the giver already had this assignment")
    assignment: AssignmentInfo
    api_version: str = "v1"


class LookupResponse(BaseModel):
    """Response from looking up a giver's assignment."""
    has_assignment: bool
    assignment: Optional[AssignmentInfo] = None
    error: Optional[str] = None
    error_code: Optional[ErrorCode] = Field(None, description="ASSIGNMENT_NOT_FOUND when absent")
    api_version: str = "v1"


class ParticipantStatusResponse(BaseModel):
    """Giver/receiver standing of a participant code."""
    code: str
    is_giver: bool
    is_receiver: bool
    can_become_giver: bool
    policy: PriorReceiverPolicy
    giver_assignment: Optional[ReceiverInfo] = None
    receiver_assignment: Optional[AssignmentInfo] = None
    api_version: str = "v1"


class ResetResponse(BaseModel):
    """Response after clearing the ledger."""
    message: str
    removed: int


class ParticipantResponse(BaseModel):
    """Response after registering a participant."""
    message: str
    participant: ParticipantInfo


class DeleteParticipantResponse(BaseModel):
    """Response after removing a participant."""
    message: str
    code: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
    env: str
