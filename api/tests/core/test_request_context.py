"""Tests for request context, middleware and log processors."""

from fastapi.testclient import TestClient

from coursehub.core.context import (
    clear_context,
    get_context,
    set_identity,
    set_request_id,
)
from coursehub.core.logging import add_request_context, mask_sensitive_values
from coursehub.core.middleware import extract_traceparent


class TestContext:
    """Tests for the contextvars helpers."""

    def test_context_round_trip(self) -> None:
        clear_context()
        rid = set_request_id()
        set_identity("abc", "teacher")

        assert get_context() == {"request_id": rid, "user_id": "abc", "user_role": "teacher"}

        clear_context()
        assert get_context() == {}

    def test_processor_does_not_override_explicit_keys(self) -> None:
        set_request_id("req-1")
        try:
            event = add_request_context(None, "info", {"event": "x", "request_id": "own"})
        finally:
            clear_context()

        assert event["request_id"] == "own"


class TestMasking:
    """Tests for mask_sensitive_values."""

    def test_masks_secrets(self) -> None:
        event = mask_sensitive_values(
            None,
            "info",
            {"event": "login", "access_token": "abcdefghij", "password": "pw"},
        )

        assert event["access_token"] == "ab******ij"
        assert event["password"] == "***"
        assert event["event"] == "login"

    def test_nested_values(self) -> None:
        event = mask_sensitive_values(
            None, "info", {"headers": {"Authorization": "Bearer xyz123"}}
        )

        assert event["headers"]["Authorization"].startswith("Be")
        assert "xyz" not in event["headers"]["Authorization"]


class TestTraceparent:
    """Tests for extract_traceparent."""

    def test_valid_header(self) -> None:
        header = "00-4bf92f3577b34da6a3ce929d0e0e4736-00f067aa0ba902b7-01"
        assert extract_traceparent(header) == "4bf92f3577b34da6a3ce929d0e0e4736"

    def test_missing_or_malformed(self) -> None:
        assert extract_traceparent(None) is None
        assert extract_traceparent("garbage") is None


class TestRequestContextMiddleware:
    """Tests for RequestContextMiddleware."""

    def test_echoes_request_id(self, client: TestClient) -> None:
        response = client.get("/health/live", headers={"X-Request-ID": "req-42"})

        assert response.headers["X-Request-ID"] == "req-42"

    def test_generates_request_id(self, client: TestClient) -> None:
        response = client.get("/health/live")

        assert response.headers["X-Request-ID"]

    def test_error_envelope_carries_request_id(self, client: TestClient) -> None:
        response = client.get("/v1/admin/users", headers={"X-Request-ID": "req-7"})

        assert response.status_code == 401
        assert response.json() == {
            "error": True,
            "message": "Access token not provided",
            "status_code": 401,
            "request_id": "req-7",
        }
