"""
Monitoring and observability utilities for the todo service.

Provides:
- Prometheus metrics (requests, latencies, errors, store operations, tool calls)
- Request tracing (unique request IDs carried in a ContextVar)
- Health information for the /health endpoint
"""
import re
import time
import uuid
import logging
from typing import Callable, Dict, Any
from contextvars import ContextVar

from fastapi import Request, Response, status
from starlette.middleware.base import BaseHTTPMiddleware
from prometheus_client import Counter, Histogram, Gauge, generate_latest

# Request context variable for tracing
request_id_var: ContextVar[str] = ContextVar('request_id', default='')

http_requests_total = Counter(
    'http_requests_total',
    'Total number of HTTP requests',
    ['method', 'endpoint', 'status_code']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint', 'status_code'],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)
)

http_errors_total = Counter(
    'http_errors_total',
    'Total number of HTTP errors',
    ['method', 'endpoint', 'status_code', 'error_type']
)

store_operations_total = Counter(
    'todo_store_operations_total',
    'Task store operations by outcome',
    ['operation', 'outcome']
)

mcp_tool_calls_total = Counter(
    'mcp_tool_calls_total',
    'Tool invocations by tool name and error flag',
    ['tool', 'is_error']
)

service_uptime_seconds = Gauge(
    'service_uptime_seconds',
    'Service uptime in seconds'
)

service_start_time = time.time()

_UUID_RE = re.compile(r'[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}', re.IGNORECASE)

logger = logging.getLogger(__name__)


def get_request_id() -> str:
    """Get the current request ID from context."""
    return request_id_var.get('')


def set_request_id(request_id: str) -> None:
    """Set the request ID in context."""
    request_id_var.set(request_id)


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware for collecting Prometheus metrics and request tracing."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid.uuid4())[:8]
        set_request_id(request_id)

        endpoint = self._get_endpoint_path(request.url.path)
        start_time = time.time()
        service_uptime_seconds.set(time.time() - service_start_time)

        logger.debug(f"Request started: {request.method} {request.url.path}")

        try:
            response = await call_next(request)
        except Exception as e:
            duration = time.time() - start_time
            logger.error(
                f"Request failed with exception: {request.method} {request.url.path}",
                exc_info=True,
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "duration_seconds": duration,
                    "exception_type": type(e).__name__,
                }
            )
            http_errors_total.labels(
                method=request.method,
                endpoint=endpoint,
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                error_type="exception"
            ).inc()
            raise

        status_code = response.status_code
        duration = time.time() - start_time
        logger.info(f"{request.method} {request.url.path} -> {status_code} ({duration * 1000:.1f} ms)")

        http_requests_total.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=status_code
        ).inc()
        http_request_duration_seconds.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=status_code
        ).observe(duration)

        if status_code >= 400:
            error_type = "client_error" if status_code < 500 else "server_error"
            http_errors_total.labels(
                method=request.method,
                endpoint=endpoint,
                status_code=status_code,
                error_type=error_type
            ).inc()

        response.headers["X-Request-ID"] = request_id
        return response

    @staticmethod
    def _get_endpoint_path(path: str) -> str:
        """Normalize endpoint path for metrics (ids become {id})."""
        path = _UUID_RE.sub('{id}', path)
        path = re.sub(r'^(/api/todos)/(?!search$)[^/]+', r'\1/{id}', path)
        return path[:100]


def get_metrics() -> bytes:
    """Get Prometheus metrics in text exposition format."""
    return generate_latest()


def check_storage_health(storage) -> Dict[str, Any]:
    """
    Check that the active storage backend can be reached.

    Args:
        storage: StorageInterface implementation

    Returns:
        Dictionary with the backend name, status and response time
    """
    start_time = time.time()
    try:
        storage.ping()
    except Exception as e:
        logger.warning(
            "Storage health check failed",
            extra={"error_type": type(e).__name__, "error_message": str(e)}
        )
        return {
            "status": "unhealthy",
            "backend": storage.backend_name,
            "response_time_ms": round((time.time() - start_time) * 1000, 2),
            "error_type": type(e).__name__,
        }
    return {
        "status": "healthy",
        "backend": storage.backend_name,
        "response_time_ms": round((time.time() - start_time) * 1000, 2),
    }


def get_health_info(storage=None) -> Dict[str, Any]:
    """
    Get health information including uptime and storage status.

    Args:
        storage: Optional storage backend to check

    Returns:
        Dictionary with overall status and per-component status
    """
    uptime = time.time() - service_start_time
    components: Dict[str, Any] = {
        "service": {"status": "healthy", "uptime_seconds": uptime, "uptime_formatted": _format_uptime(uptime)}
    }
    overall_status = "healthy"

    if storage is not None:
        components["storage"] = check_storage_health(storage)
        if components["storage"]["status"] == "unhealthy":
            overall_status = "unhealthy"

    return {
        "status": overall_status,
        "service": "todo-mcp-service",
        "timestamp": time.time(),
        "uptime_seconds": uptime,
        "components": components,
    }


def _format_uptime(seconds: float) -> str:
    """Format uptime in human-readable format."""
    days = int(seconds // 86400)
    hours = int((seconds % 86400) // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)

    if days > 0:
        return f"{days}d {hours}h {minutes}m {secs}s"
    elif hours > 0:
        return f"{hours}h {minutes}m {secs}s"
    elif minutes > 0:
        return f"{minutes}m {secs}s"
    else:
        return f"{secs}s"
