"""
Tests for the exception hierarchy, its HTTP/MCP conversions and the app-level handlers.
"""
import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from todo_mcp.exceptions import (
    ServiceError,
    NotFoundError,
    TaskNotFoundError,
    ValidationError,
    DatabaseError,
    to_http_exception,
    to_mcp_error_response,
)
from todo_mcp.exceptions.handlers import setup_exception_handlers


# ============================================================================
# Test Exception Initialization
# ============================================================================

class TestServiceErrorInitialization:
    """Test ServiceError base class initialization."""

    def test_basic_initialization(self):
        """Test basic ServiceError initialization."""
        exc = ServiceError("Test error message")
        assert exc.message == "Test error message"
        assert exc.request_id is None
        assert exc.context == {}
        assert exc.original_error is None
        assert str(exc) == "Test error message"

    def test_to_dict(self):
        """Test ServiceError.to_dict() method."""
        original = ValueError("Original")
        exc = ServiceError(
            "Test error",
            request_id="req-123",
            context={"key": "value"},
            original_error=original
        )
        result = exc.to_dict()
        assert result["error_type"] == "ServiceError"
        assert result["message"] == "Test error"
        assert result["request_id"] == "req-123"
        assert result["context"] == {"key": "value"}
        assert result["original_error"] == {"type": "ValueError", "message": "Original"}

    def test_to_dict_minimal(self):
        """Test ServiceError.to_dict() with minimal fields."""
        assert ServiceError("Test error").to_dict() == {"error_type": "ServiceError", "message": "Test error"}


class TestSubclasses:
    """Test the specific error types."""

    def test_not_found_default_message(self):
        exc = NotFoundError("Todo", "abc")
        assert exc.message == "Todo with ID 'abc' not found"
        assert exc.context == {"resource_type": "Todo", "resource_id": "abc"}

    def test_task_not_found(self):
        exc = TaskNotFoundError("t-1")
        assert isinstance(exc, NotFoundError)
        assert exc.task_id == "t-1"
        assert exc.message == "Task with ID 't-1' not found"

    def test_validation_error_context(self):
        exc = ValidationError("bad", field="priority", value=5)
        assert exc.field == "priority"
        assert exc.context == {"field": "priority", "value": "5"}

    def test_database_error_operation(self):
        original = OSError("disk")
        exc = DatabaseError("write failed", operation="save", original_error=original)
        assert exc.operation == "save"
        assert exc.context == {"operation": "save"}
        assert exc.original_error is original


# ============================================================================
# Test Conversions
# ============================================================================

class TestToHttpException:
    """Test to_http_exception mapping."""

    @pytest.mark.parametrize("exc, status_code", [
        (TaskNotFoundError("1"), 404),
        (ValidationError("bad"), 422),
        (DatabaseError("down"), 500),
        (ServiceError("other"), 400),
    ])
    def test_status_codes(self, exc, status_code):
        http_exc = to_http_exception(exc)
        assert isinstance(http_exc, HTTPException)
        assert http_exc.status_code == status_code
        assert http_exc.detail["error"] == type(exc).__name__
        assert http_exc.detail["message"] == exc.message

    def test_default_status_code_override(self):
        assert to_http_exception(ServiceError("x"), default_status_code=409).status_code == 409

    def test_context_can_be_excluded(self):
        exc = ValidationError("bad", field="title", request_id="r-1")
        assert to_http_exception(exc).detail["context"] == {"field": "title"}
        detail = to_http_exception(exc, include_context=False).detail
        assert "context" not in detail
        assert detail["request_id"] == "r-1"


class TestToMcpErrorResponse:
    """Test to_mcp_error_response mapping."""

    @pytest.mark.parametrize("exc, code", [
        (TaskNotFoundError("1"), -32001),
        (ValidationError("bad"), -32602),
        (DatabaseError("down"), -32603),
        (ServiceError("other"), -32000),
    ])
    def test_codes(self, exc, code):
        response = to_mcp_error_response(exc)
        assert response["success"] is False
        assert response["error"]["code"] == code
        assert response["error"]["error_type"] == type(exc).__name__


# ============================================================================
# Test App-level Handlers
# ============================================================================

@pytest.fixture
def handler_client():
    """App whose routes raise directly, with the handlers installed."""
    app = FastAPI()
    setup_exception_handlers(app)

    @app.get("/boom")
    def boom():
        raise RuntimeError("secret internals")

    @app.get("/store")
    def store():
        raise DatabaseError("connection string leaked", operation="list")

    @app.get("/missing")
    def missing():
        raise TaskNotFoundError("abc")

    @app.post("/mcp/raise")
    def mcp_raise():
        raise ValidationError("bad argument", field="id")

    @app.get("/typed")
    def typed(limit: int):
        return {"limit": limit}

    return TestClient(app, raise_server_exceptions=False)


def test_unhandled_exception_is_generic_500(handler_client):
    response = handler_client.get("/boom")
    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "Internal server error"
    assert "secret" not in response.text
    assert "request_id" in body


def test_database_error_hides_backend_message(handler_client):
    response = handler_client.get("/store")
    assert response.status_code == 500
    detail = response.json()["detail"]
    assert detail["error"] == "DatabaseError"
    assert "leaked" not in response.text


def test_not_found_error(handler_client):
    response = handler_client.get("/missing")
    assert response.status_code == 404
    assert response.json()["detail"]["context"]["resource_id"] == "abc"


def test_mcp_paths_get_success_false(handler_client):
    response = handler_client.post("/mcp/raise")
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == -32602


def test_request_validation_error(handler_client):
    response = handler_client.get("/typed", params={"limit": "many"})
    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "Validation error"
    assert any("limit" in e for e in body["errors"])
