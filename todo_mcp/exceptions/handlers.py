"""
Exception handlers for the application.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from todo_mcp.monitoring import get_request_id
from .base import ServiceError, DatabaseError, to_http_exception, to_mcp_error_response

logger = logging.getLogger(__name__)


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """
    Handler for ServiceError raised out of a route.

    MCP endpoints get a 200 with success: False so agents see the failure;
    other paths get the mapped HTTP status. Backend detail is never returned
    for DatabaseError.
    """
    request_id = exc.request_id or get_request_id() or '-'
    if isinstance(exc, DatabaseError):
        logger.error(
            f"Store failure in {request.method} {request.url.path}: {exc.message}",
            exc_info=exc.original_error is not None,
            extra={"request_id": request_id}
        )
    else:
        logger.warning(
            f"{type(exc).__name__} in {request.method} {request.url.path}: {exc.message}",
            extra={"request_id": request_id}
        )

    # POST /mcp turns tool failures into results; this covers ServiceError raised
    # directly by any other route mounted under /mcp
    if request.url.path.startswith("/mcp"):
        content = to_mcp_error_response(exc)
        content["request_id"] = request_id
        return JSONResponse(status_code=200, content=content)

    http_exc = to_http_exception(exc, include_context=not isinstance(exc, DatabaseError))
    detail = dict(http_exc.detail)
    if isinstance(exc, DatabaseError):
        detail["message"] = "A storage operation failed"
    detail["request_id"] = request_id
    return JSONResponse(status_code=http_exc.status_code, content={"detail": detail})


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler for unhandled exceptions.
    """
    request_id = get_request_id() or '-'
    logger.error(
        f"Unhandled exception in {request.method} {request.url.path}: {str(exc)}",
        exc_info=True,
        extra={
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "exception_type": type(exc).__name__,
        }
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": "An unexpected error occurred",
            "path": request.url.path,
            "method": request.method,
            "request_id": request_id
        }
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle request validation errors with clear messages.
    """
    request_id = get_request_id() or '-'
    errors = []
    for error in exc.errors():
        field = " -> ".join(str(loc) for loc in error["loc"])
        errors.append(f"{field}: {error['msg']}")

    logger.warning(
        f"Validation error in {request.method} {request.url.path}: {', '.join(errors)}",
        extra={"request_id": request_id}
    )
    response = JSONResponse(
        status_code=422,
        content={
            "error": "Validation error",
            "detail": "One or more fields failed validation",
            "errors": errors,
            "path": request.url.path,
            "method": request.method,
            "request_id": request_id
        }
    )
    if request_id != '-':
        response.headers["X-Request-ID"] = request_id
    return response


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI app.
    """
    app.add_exception_handler(Exception, global_exception_handler)
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
