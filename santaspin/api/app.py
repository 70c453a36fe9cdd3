"""
FastAPI Application - REST API for the gift exchange.

Endpoints:
    GET    /api/v1/assignments                       List all committed pairs
    POST   /api/v1/assignments                       Commit a pair (201 new / 200 existing)
    DELETE /api/v1/assignments                       Clear all pairs
    POST   /api/v1/assignments/spin                  Let the server pick a receiver
    GET    /api/v1/assignments/available/{giver}     Eligible receivers for a giver
    GET    /api/v1/assignments/by-code/{code}        Look up a giver's pair (404 if none)
    GET    /api/v1/assignments/status/{code}         Giver/receiver standing of a code
    GET    /api/v1/participants                      List participants
    POST   /api/v1/participants                      Register a participant
    GET    /api/v1/participants/{code}               Get one participant
    DELETE /api/v1/participants/{code}               Remove a participant

Spin Flow:
    1. GET /assignments/by-code/{code}: 200 means the participant already spun
    2. POST /assignments/spin (or GET /available + POST /assignments)
    3. RECEIVER_TAKEN means another spinner won that receiver: spin again

All responses are JSON with explicit Pydantic schemas. Handlers are sync:
they run on the server's thread pool, so concurrent requests reach the
ledger concurrently and rely on its uniqueness constraints.
"""

from typing import Optional, Union
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import AppConfig
from ..directory import canonical_code
from ..errors import AllocationError, ErrorCode, UnknownParticipant
from .service import AssignmentService
from .schemas import (
    # Request models
    CreateAssignmentRequest,
    SpinRequest,
    CreateParticipantRequest,
    # Response models
    AssignmentResponse,
    LookupResponse,
    ParticipantStatusResponse,
    ResetResponse,
    ParticipantResponse,
    DeleteParticipantResponse,
    ErrorResponse,
    HealthResponse,
    # Nested models
    AssignmentInfo,
    ParticipantInfo,
    ReceiverInfo,
)

logger = logging.getLogger(__name__)

# HTTP status per error code
ERROR_STATUS: dict[ErrorCode, int] = {
    ErrorCode.INVALID_INPUT: 400,
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.UNKNOWN_PARTICIPANT: 400,
    ErrorCode.INELIGIBLE_GIVER: 409,
    ErrorCode.RECEIVER_TAKEN: 409,
    ErrorCode.NO_ELIGIBLE_RECEIVER: 409,
    ErrorCode.DUPLICATE_PARTICIPANT: 409,
    ErrorCode.ASSIGNMENT_NOT_FOUND: 404,
    ErrorCode.STORAGE_FAILURE: 503,
    ErrorCode.INTERNAL_ERROR: 500,
}


def create_app(service: Optional[AssignmentService] = None, config: Optional[AppConfig] = None):
    """
    Create the FastAPI application.

    Args:
        service: Optional AssignmentService instance (built from config if not provided)
        config: Optional AppConfig (read from the environment if not provided)

    Returns:
        FastAPI application instance
    """
    config = config or AppConfig.from_env()
    api_service = service or AssignmentService.from_config(config)

    app = FastAPI(
        title="Santaspin API",
        description="""
Gift exchange assignments - every participant spins once to learn who they give to.

## Guarantees

- A participant gives at most once and receives at most once
- Repeating a submission for the same giver returns the same pair (never an error)
- Concurrent submissions for one giver all receive the first committed pair

## Error Codes

| Code | Description |
|------|-------------|
| `INVALID_INPUT` | A required code is missing or blank |
| `UNKNOWN_PARTICIPANT` | Code is not registered |
| `INELIGIBLE_GIVER` | Participant was already gifted to and may not give |
| `RECEIVER_TAKEN` | Receiver was assigned to someone else: spin again |
| `NO_ELIGIBLE_RECEIVER` | Nobody is left to receive |
| `STORAGE_FAILURE` | Backing store unavailable |
| `ASSIGNMENT_NOT_FOUND` | Lookup: the code has not spun yet |
| `VALIDATION_ERROR` | Request body has the wrong shape or types |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.service = api_service
    app.state.config = config

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code or ERROR_STATUS.get(error_code, 400),
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(AllocationError)
    async def allocation_error_handler(request: Request, exc: AllocationError) -> JSONResponse:
        logger.info(
            "%s %s rejected: %s (%s)",
            request.method, request.url.path, exc.error_code.value, exc.message,
        )
        return make_error_response(exc.error_code, exc.message, details=exc.details or None)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return make_error_response(
            ErrorCode.VALIDATION_ERROR,
            "Request body does not match the expected schema",
            details={"errors": [
                {"loc": list(error.get("loc", ())), "msg": error.get("msg", "")}
                for error in exc.errors()
            ]},
        )

    def _assignment_response(outcome, created_message: str) -> Union[AssignmentResponse, JSONResponse]:
        response = AssignmentResponse(
            message=(
                created_message if outcome.created
                else "Participant already has an assignment as a giver. Returning existing assignment."
            ),
            created=outcome.created,
            assignment=AssignmentInfo.model_validate(outcome.assignment),
        )
        if outcome.created:
            return JSONResponse(status_code=201, content=response.model_dump(mode="json"))
        return response

    # =========================================================================
    # Assignment Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/assignments",
        response_model=dict[str, ReceiverInfo],
        tags=["Assignments"],
        summary="List all committed pairs keyed by giver code",
    )
    def list_assignments() -> dict[str, ReceiverInfo]:
        pairs = api_service.list_assignments()
        return {
            giver: ReceiverInfo.model_validate(receiver)
            for giver, receiver in pairs.items()
        }

    @app.post(
        "/api/v1/assignments",
        response_model=AssignmentResponse,
        status_code=200,
        responses={
            201: {"model": AssignmentResponse, "description": "New pair committed"},
            400: {"model": ErrorResponse, "description": "Missing or unknown code"},
            409: {"model": ErrorResponse, "description": "Receiver taken or giver ineligible"},
            503: {"model": ErrorResponse, "description": "Storage unavailable"},
        },
        tags=["Assignments"],
        summary="Commit a giver -> receiver pair",
    )
    def create_assignment(body: CreateAssignmentRequest) -> Union[AssignmentResponse, JSONResponse]:
        """
        Commit a pair chosen by the client.

        If the giver already has a pair it is returned unchanged with
        `created=false` and status 200. A new pair returns status 201.
        """
        outcome = api_service.create_assignment(body.giver_code, body.receiver_code)
        return _assignment_response(outcome, "Assignment created successfully")

    @app.delete(
        "/api/v1/assignments",
        response_model=ResetResponse,
        responses={503: {"model": ErrorResponse}},
        tags=["Assignments"],
        summary="Clear all pairs",
    )
    def reset_assignments() -> ResetResponse:
        removed = api_service.reset_assignments()
        return ResetResponse(message="All assignments reset successfully", removed=removed)

    @app.post(
        "/api/v1/assignments/spin",
        response_model=AssignmentResponse,
        responses={
            201: {"model": AssignmentResponse, "description": "New pair committed"},
            400: {"model": ErrorResponse},
            409: {"model": ErrorResponse},
            503: {"model": ErrorResponse},
        },
        tags=["Assignments"],
        summary="Spin: pick a random eligible receiver and commit it",
    )
    def spin(body: SpinRequest) -> Union[AssignmentResponse, JSONResponse]:
        outcome = api_service.spin(body.giver_code)
        return _assignment_response(outcome, "Spin complete")

    @app.get(
        "/api/v1/assignments/available/{giver_code}",
        response_model=list[ParticipantInfo],
        tags=["Assignments"],
        summary="Eligible receivers for a giver",
    )
    def available_receivers(giver_code: str) -> list[ParticipantInfo]:
        """Everyone except the giver who is not yet a receiver. May be empty."""
        return [
            ParticipantInfo.model_validate(participant)
            for participant in api_service.available_receivers(giver_code)
        ]

    @app.get(
        "/api/v1/assignments/by-code/{employee_code}",
        response_model=LookupResponse,
        responses={404: {"model": LookupResponse, "description": "No assignment yet"}},
        tags=["Assignments"],
        summary="Look up the pair where a code is the giver",
    )
    def lookup(employee_code: str) -> Union[LookupResponse, JSONResponse]:
        assignment = api_service.lookup(employee_code)
        if assignment is None:
            return JSONResponse(
                status_code=404,
                content=LookupResponse(
                    has_assignment=False,
                    error="No assignment found for this employee code",
                    error_code=ErrorCode.ASSIGNMENT_NOT_FOUND,
                ).model_dump(mode="json"),
            )
        return LookupResponse(
            has_assignment=True,
            assignment=AssignmentInfo.model_validate(assignment),
        )

    @app.get(
        "/api/v1/assignments/status/{employee_code}",
        response_model=ParticipantStatusResponse,
        tags=["Assignments"],
        summary="Whether a code gives, receives, and may still give",
    )
    def participant_status(employee_code: str) -> ParticipantStatusResponse:
        status = api_service.participant_status(employee_code)
        return ParticipantStatusResponse(
            code=status.code,
            is_giver=status.is_giver,
            is_receiver=status.is_receiver,
            can_become_giver=status.can_become_giver,
            policy=api_service.policy,
            giver_assignment=(
                ReceiverInfo.model_validate(status.giver_assignment)
                if status.giver_assignment else None
            ),
            receiver_assignment=(
                AssignmentInfo.model_validate(status.receiver_assignment)
                if status.receiver_assignment else None
            ),
        )

    # =========================================================================
    # Participant Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/participants",
        response_model=list[ParticipantInfo],
        tags=["Participants"],
        summary="List participants sorted by name",
    )
    def list_participants() -> list[ParticipantInfo]:
        return [ParticipantInfo.model_validate(p) for p in api_service.list_participants()]

    @app.post(
        "/api/v1/participants",
        response_model=ParticipantResponse,
        status_code=201,
        responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Participants"],
        summary="Register a participant",
    )
    def create_participant(body: CreateParticipantRequest) -> ParticipantResponse:
        participant = api_service.add_participant(body.code, body.name)
        return ParticipantResponse(
            message="Participant added successfully",
            participant=ParticipantInfo.model_validate(participant),
        )

    @app.get(
        "/api/v1/participants/{code}",
        response_model=ParticipantInfo,
        responses={404: {"model": ErrorResponse}},
        tags=["Participants"],
        summary="Get a participant by code (case-insensitive)",
    )
    def get_participant(code: str) -> Union[ParticipantInfo, JSONResponse]:
        try:
            participant = api_service.get_participant(code)
        except UnknownParticipant as e:
            return make_error_response(e.error_code, e.message, status_code=404, details=e.details)
        return ParticipantInfo.model_validate(participant)

    @app.delete(
        "/api/v1/participants/{code}",
        response_model=DeleteParticipantResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Participants"],
        summary="Remove a participant",
    )
    def delete_participant(code: str) -> Union[DeleteParticipantResponse, JSONResponse]:
        try:
            api_service.remove_participant(code)
        except UnknownParticipant as e:
            return make_error_response(e.error_code, e.message, status_code=404, details=e.details)
        return DeleteParticipantResponse(
            message="Participant deleted successfully",
            code=canonical_code(code),
        )

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="santaspin",
            version=__version__,
            env=config.env,
        )

    @app.get("/", tags=["System"])
    def root():
        """Root endpoint with API info."""
        return {
            "name": "Santaspin API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app


# No module-level app: configuration is read when the app is built.
# For running directly: uvicorn --factory santaspin.api.app:create_app
