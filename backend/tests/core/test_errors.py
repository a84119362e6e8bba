"""Error Hierarchy — tests for HTTP status mapping and the response envelope."""

from taskhub.core.errors import (
    BadRequestError,
    ConflictError,
    ErrorCategory,
    ResourceNotFoundError,
    UnauthorizedError,
    UpstreamServiceError,
)


def test_envelope_shape():
    body = ConflictError("Email already registered").to_response()
    assert body["success"] is False
    assert body["error"]["code"] == "CONFLICT"
    assert body["error"]["message"] == "Email already registered"
    assert "timestamp" in body["error"]


def test_status_codes():
    assert BadRequestError("x").http_status == 400
    assert UnauthorizedError("x").http_status == 401
    assert ResourceNotFoundError("Task", "1").http_status == 404
    assert ConflictError("x").http_status == 409
    assert UpstreamServiceError("x", "timeout").http_status == 502


def test_not_found_message_names_resource():
    err = ResourceNotFoundError("Task", "abc")
    assert err.message == "Task not found"
    assert err.category == ErrorCategory.RESOURCE_NOT_FOUND
