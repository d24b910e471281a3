"""Tests for logging and error handling."""

import pytest
import structlog

from farmreg.core.errors import (
    AppError,
    ErrorDetail,
    InvalidStateError,
    ValidationError,
)
from farmreg.core.logging import (
    bind_ussd_context,
    get_request_id,
    mask_phone,
    mask_phone_numbers,
    set_request_id,
)


class TestErrorClasses:
    """Test custom exception classes."""

    def test_validation_error_creates_correct_response(self):
        exc = ValidationError("Invalid USSD request", details={"fields": ["sessionId"]})

        assert exc.code == "VALIDATION_ERROR"
        assert exc.status_code == 422
        assert exc.details == {"fields": ["sessionId"]}

        response = exc.to_response()
        assert isinstance(response, ErrorDetail)
        assert response.code == "VALIDATION_ERROR"

    def test_invalid_state_error_is_app_error(self):
        exc = InvalidStateError("missing fields", details={"missing": ["crop"]})

        assert isinstance(exc, AppError)
        assert exc.code == "INVALID_STATE"
        assert exc.to_response().details == {"missing": ["crop"]}

    def test_empty_details_are_omitted(self):
        assert AppError("X", "boom").to_response().details is None


class TestRequestIDContext:
    def test_set_and_get_request_id(self):
        set_request_id("test-request-123")

        assert get_request_id() == "test-request-123"

    def test_request_id_default(self):
        set_request_id("no-request-id")
        assert get_request_id() == "no-request-id"


class TestUssdLogContext:
    def test_phone_keeps_prefix_and_last_digits(self):
        assert mask_phone("+254712345678") == "+2547*****678"

    def test_short_or_missing_phone(self):
        assert mask_phone("12345") == "*****"
        assert mask_phone("") == ""
        assert mask_phone(None) is None

    def test_processor_masks_phone_fields_only(self):
        event = {"event": "ussd.request", "phone_number": "+254712345678", "text": "1*Jane"}

        masked = mask_phone_numbers(None, "info", event)

        assert masked["phone_number"] == "+2547*****678"
        assert masked["text"] == "1*Jane"

    def test_bind_ussd_context_tags_following_logs(self):
        structlog.contextvars.clear_contextvars()

        bind_ussd_context("ATUid_1", "+254712345678")

        context = structlog.contextvars.get_contextvars()
        assert context["ussd_session_id"] == "ATUid_1"
        assert context["end_user_id"] == "+254712345678"
        structlog.contextvars.clear_contextvars()


class TestErrorHandling:
    """Test global error handlers and middleware."""

    @pytest.mark.asyncio
    async def test_request_id_header_in_response(self, client):
        test_id = "external-123"
        response = await client.get("/health", headers={"X-Request-ID": test_id})

        assert response.headers.get("X-Request-ID") == test_id

    @pytest.mark.asyncio
    async def test_request_id_generated_when_absent(self, client):
        response = await client.get("/health")

        assert len(response.headers["X-Request-ID"]) > 0

    @pytest.mark.asyncio
    async def test_unknown_route_returns_json_error(self, client):
        response = await client.get("/does-not-exist")

        assert response.status_code == 404
        assert response.json() == {"detail": "Not Found"}
