"""
Tests for API Pydantic schemas.

Validates that:
- Request/response models serialize correctly
- Error codes are properly structured
- Models build from engine dataclasses
- OpenAPI generation includes every response model
"""

import pytest


class TestPydanticSchemas:
    """Tests for Pydantic schema validation."""

    def test_assignment_info_from_engine_assignment(self):
        """AssignmentInfo reads attributes off the ledger dataclass."""
        from santaspin.api.schemas import AssignmentInfo
        from santaspin.ledger import Assignment

        info = AssignmentInfo.model_validate(Assignment("X", "Y", "Alice", "Bob"))

        assert info.model_dump() == {
            "giver_code": "X",
            "giver_name": "Alice",
            "receiver_code": "Y",
            "receiver_name": "Bob",
        }

    def test_receiver_info_from_assignment(self):
        """ReceiverInfo keeps only the receiving side."""
        from santaspin.api.schemas import ReceiverInfo
        from santaspin.ledger import Assignment

        info = ReceiverInfo.model_validate(Assignment("X", "Y", "Alice", "Bob"))
        assert info.model_dump() == {"receiver_code": "Y", "receiver_name": "Bob"}

    def test_assignment_response_schema(self):
        """AssignmentResponse has all required fields."""
        from santaspin.api.schemas import AssignmentResponse, AssignmentInfo

        response = AssignmentResponse(
            message="Assignment created successfully",
            created=True,
            assignment=AssignmentInfo(
                giver_code="X",
                giver_name="Alice",
                receiver_code="Y",
                receiver_name="Bob",
            ),
        )

        data = response.model_dump()
        assert data["created"] is True
        assert data["assignment"]["receiver_code"] == "Y"
        assert data["api_version"] == "v1"

    def test_request_fields_are_optional(self):
        """Missing codes reach the engine as None and become INVALID_INPUT there."""
        from santaspin.api.schemas import CreateAssignmentRequest, SpinRequest

        request = CreateAssignmentRequest()
        assert request.giver_code is None
        assert request.receiver_code is None
        assert SpinRequest().giver_code is None

    def test_error_response_schema(self):
        """ErrorResponse serializes the code as its string value."""
        from santaspin.api.schemas import ErrorResponse, ErrorCode

        response = ErrorResponse(
            error="Receiver Y is already assigned",
            error_code=ErrorCode.RECEIVER_TAKEN,
            details={"receiver_code": "Y"},
        )

        data = response.model_dump(mode="json")
        assert data["error_code"] == "RECEIVER_TAKEN"
        assert data["details"] == {"receiver_code": "Y"}
        assert data["api_version"] == "v1"

    def test_status_response_policy_serializes_as_value(self):
        from santaspin.api.schemas import ParticipantStatusResponse
        from santaspin.engine import PriorReceiverPolicy

        response = ParticipantStatusResponse(
            code="Y",
            is_giver=False,
            is_receiver=True,
            can_become_giver=False,
            policy=PriorReceiverPolicy.FORBID,
        )

        data = response.model_dump(mode="json")
        assert data["policy"] == "forbid"
        assert data["giver_assignment"] is None

    def test_lookup_response_not_found(self):
        from santaspin.api.schemas import LookupResponse

        data = LookupResponse(has_assignment=False, error="No assignment").model_dump()
        assert data["assignment"] is None
        assert data["has_assignment"] is False


class TestErrorCodes:
    """Tests for error code coverage."""

    def test_all_error_codes_defined(self):
        """All required error codes are defined."""
        from santaspin.api.schemas import ErrorCode

        required_codes = [
            "INVALID_INPUT",
            "UNKNOWN_PARTICIPANT",
            "INELIGIBLE_GIVER",
            "RECEIVER_TAKEN",
            "NO_ELIGIBLE_RECEIVER",
            "STORAGE_FAILURE",
        ]

        for code in required_codes:
            assert hasattr(ErrorCode, code), f"Missing error code: {code}"
            assert ErrorCode[code].value == code

    def test_error_code_values_are_strings(self):
        """Error codes are string enums for JSON serialization."""
        from santaspin.api.schemas import ErrorCode

        for code in ErrorCode:
            assert isinstance(code.value, str)
            # Error codes should be UPPER_SNAKE_CASE
            assert code.value == code.value.upper()

    def test_every_code_has_http_status(self):
        from santaspin.api.app import ERROR_STATUS
        from santaspin.api.schemas import ErrorCode

        for code in ErrorCode:
            assert code in ERROR_STATUS, f"No HTTP status for {code.value}"

    @pytest.mark.parametrize("code,status", [
        ("INVALID_INPUT", 400),
        ("UNKNOWN_PARTICIPANT", 400),
        ("INELIGIBLE_GIVER", 409),
        ("RECEIVER_TAKEN", 409),
        ("NO_ELIGIBLE_RECEIVER", 409),
        ("STORAGE_FAILURE", 503),
    ])
    def test_status_mapping(self, code, status):
        from santaspin.api.app import ERROR_STATUS
        from santaspin.api.schemas import ErrorCode

        assert ERROR_STATUS[ErrorCode[code]] == status


@pytest.fixture
def app():
    """App over an in-memory service, independent of the environment."""
    from santaspin.api.app import create_app
    from santaspin.api.service import AssignmentService
    from santaspin.config import AppConfig

    return create_app(service=AssignmentService(), config=AppConfig())


class TestOpenAPISchema:
    """Tests for OpenAPI schema generation."""

    def test_openapi_schema_generates(self, app):
        """OpenAPI schema generates without errors."""
        from fastapi.openapi.utils import get_openapi

        schema = get_openapi(
            title=app.title,
            version=app.version,
            routes=app.routes,
        )

        assert "paths" in schema
        assert "components" in schema
        assert "schemas" in schema["components"]

    def test_response_models_in_schema(self, app):
        """Response models appear in OpenAPI schema."""
        from fastapi.openapi.utils import get_openapi

        schema = get_openapi(
            title=app.title,
            version=app.version,
            routes=app.routes,
        )

        schemas = schema["components"]["schemas"]

        required_schemas = [
            "AssignmentResponse",
            "LookupResponse",
            "ParticipantStatusResponse",
            "ParticipantInfo",
            "ResetResponse",
            "ErrorResponse",
        ]

        for name in required_schemas:
            assert name in schemas, f"Missing schema: {name}"

    def test_endpoints_have_response_models(self, app):
        """All main endpoints specify response models."""
        from fastapi.openapi.utils import get_openapi

        schema = get_openapi(
            title=app.title,
            version=app.version,
            routes=app.routes,
        )

        paths = schema["paths"]

        assert "/api/v1/assignments" in paths
        post_assignment = paths["/api/v1/assignments"]["post"]
        assert "200" in post_assignment["responses"]
        assert "201" in post_assignment["responses"]
        assert "409" in post_assignment["responses"]

        assert "/api/v1/assignments/by-code/{employee_code}" in paths
        lookup = paths["/api/v1/assignments/by-code/{employee_code}"]["get"]
        assert "404" in lookup["responses"]

        assert "/api/v1/assignments/available/{giver_code}" in paths
        assert "/api/v1/assignments/spin" in paths

    def test_lookup_schema_carries_error_code(self, app):
        from fastapi.openapi.utils import get_openapi

        schema = get_openapi(title=app.title, version=app.version, routes=app.routes)
        assert "error_code" in schema["components"]["schemas"]["LookupResponse"]["properties"]


class TestAppModule:
    """Importing the app module must not read configuration or open stores."""

    def test_import_with_bad_environment(self, monkeypatch):
        monkeypatch.setenv("SANTASPIN_SPIN_ATTEMPTS", "zero")
        import santaspin.api.app as app_module

        assert not hasattr(app_module, "app")
        with pytest.raises(ValueError, match="SANTASPIN_SPIN_ATTEMPTS"):
            app_module.create_app()
