"""
Standard exception hierarchy for the todo service.

Every error raised by the store layer derives from ServiceError so both access
surfaces can tell "no such record" apart from a backend failure:

- NotFoundError / TaskNotFoundError -> HTTP 404, MCP code -32001
- ValidationError                   -> HTTP 422, MCP code -32602
- DatabaseError                     -> HTTP 500, MCP code -32603
"""
from typing import Optional, Dict, Any

from fastapi import HTTPException


class ServiceError(Exception):
    """Base class for all service-level errors."""

    def __init__(
        self,
        message: str,
        request_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        original_error: Optional[BaseException] = None
    ):
        self.message = message
        self.request_id = request_id
        self.context = dict(context) if context else {}
        self.original_error = original_error
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize the error for logs and error payloads.

        Optional keys (request_id, context, original_error) are only present
        when they carry a value.
        """
        result: Dict[str, Any] = {
            "error_type": type(self).__name__,
            "message": self.message,
        }
        if self.request_id:
            result["request_id"] = self.request_id
        if self.context:
            result["context"] = self.context
        if self.original_error is not None:
            result["original_error"] = {
                "type": type(self.original_error).__name__,
                "message": str(self.original_error),
            }
        return result


class NotFoundError(ServiceError):
    """Raised when an operation targets a resource that does not exist."""

    def __init__(
        self,
        resource_type: str,
        resource_id: Any,
        message: Optional[str] = None,
        request_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        self.resource_type = resource_type
        self.resource_id = str(resource_id)
        merged = dict(context) if context else {}
        merged["resource_type"] = resource_type
        merged["resource_id"] = self.resource_id
        super().__init__(
            message or f"{resource_type} with ID '{self.resource_id}' not found",
            request_id=request_id,
            context=merged
        )


class TaskNotFoundError(NotFoundError):
    """Raised when a task id does not exist in the store."""

    def __init__(self, task_id: Any, message: Optional[str] = None, request_id: Optional[str] = None):
        self.task_id = task_id
        super().__init__("Task", task_id, message=message, request_id=request_id)


class ValidationError(ServiceError):
    """Raised when input fails validation at the store boundary."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Any = None,
        request_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        self.field = field
        self.value = value
        merged = dict(context) if context else {}
        if field is not None:
            merged["field"] = field
        if value is not None:
            merged["value"] = str(value)
        super().__init__(message, request_id=request_id, context=merged)


class DatabaseError(ServiceError):
    """Raised for backend faults: I/O errors, malformed data, remote-call failures."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        original_error: Optional[BaseException] = None,
        request_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        self.operation = operation
        merged = dict(context) if context else {}
        if operation is not None:
            merged["operation"] = operation
        super().__init__(message, request_id=request_id, context=merged, original_error=original_error)


_HTTP_STATUS = (
    (NotFoundError, 404),
    (ValidationError, 422),
    (DatabaseError, 500),
)

_MCP_CODES = (
    (NotFoundError, -32001),
    (ValidationError, -32602),
    (DatabaseError, -32603),
)


def to_http_exception(
    exc: ServiceError,
    default_status_code: int = 400,
    include_context: bool = True
) -> HTTPException:
    """
    Convert a ServiceError into a FastAPI HTTPException.

    Args:
        exc: The service error to convert
        default_status_code: Status used for ServiceError subclasses without a mapping
        include_context: Whether to copy exc.context into the detail payload

    Returns:
        HTTPException whose detail is {"error", "message", "request_id"?, "context"?}
    """
    status_code = default_status_code
    for exc_class, code in _HTTP_STATUS:
        if isinstance(exc, exc_class):
            status_code = code
            break

    detail: Dict[str, Any] = {
        "error": type(exc).__name__,
        "message": exc.message,
    }
    if exc.request_id:
        detail["request_id"] = exc.request_id
    if include_context and exc.context:
        detail["context"] = exc.context
    return HTTPException(status_code=status_code, detail=detail)


def to_mcp_error_response(exc: ServiceError) -> Dict[str, Any]:
    """Convert a ServiceError into an MCP-style error dictionary."""
    code = -32000
    for exc_class, mcp_code in _MCP_CODES:
        if isinstance(exc, exc_class):
            code = mcp_code
            break

    error: Dict[str, Any] = {
        "code": code,
        "message": exc.message,
        "error_type": type(exc).__name__,
    }
    if exc.request_id:
        error["request_id"] = exc.request_id
    if exc.context:
        error["context"] = exc.context
    return {"success": False, "error": error}
