"""Error Hierarchy tests — REST envelopes and socket payloads.

Invariants:
    - to_response() always carries success: false and an error code
    - Rate limit errors expose retryAfter (seconds) and retry_after_ms
    - Warnings are recoverable over sockets, critical errors are not
"""

from app.core.errors import (
    GeminiAPIError, PayloadTooLargeError, RateLimitExceededError,
    ResourceNotFoundError, RoomStateError, ValidationError,
)


def test_validation_error_details():
    err = ValidationError("Room validation failed", errors=["a", "b"])
    body = err.to_response()
    assert err.http_status == 400
    assert body["success"] is False
    assert body["message"] == "Room validation failed"
    assert body["error"]["code"] == "VALIDATION_ERROR"
    assert body["error"]["details"] == ["a", "b"]


def test_not_found_default_message():
    err = ResourceNotFoundError("Room", "abc")
    assert err.http_status == 404
    assert err.message == "Room 'abc' not found"


def test_rate_limit_response():
    err = RateLimitExceededError("translation", 30)
    body = err.to_response()
    assert err.http_status == 429
    assert body["error"]["retryAfter"] == 30
    assert body["error"]["context"]["retry_after_ms"] == 30_000
    assert body["message"] == "Too many translation requests, please try again later."


def test_payload_too_large_message():
    assert PayloadTooLargeError(10 * 1024 * 1024).message == (
        "Payload exceeds maximum size of 10MB"
    )


def test_socket_event_recoverability():
    assert RoomStateError("Room full", "r1").to_socket_event() == {
        "code": "ROOM_STATE_INVALID", "message": "Room full", "recoverable": True,
    }
    event = GeminiAPIError("boom", "server_error").to_socket_event()
    assert event["recoverable"] is False
    assert event["message"] == "Gemini API error (server_error): boom"
