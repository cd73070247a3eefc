"""
Operational routes: health check and Prometheus metrics.
"""
from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST

from todo_mcp.dependencies.services import ServiceContainer, get_services
from todo_mcp.monitoring import get_health_info, get_metrics

router = APIRouter(tags=["operations"])


@router.get("/health")
def health(services: ServiceContainer = Depends(get_services)) -> JSONResponse:
    """Service health including the storage backend; 503 when unhealthy."""
    info = get_health_info(services.storage)
    status_code = 200 if info["status"] == "healthy" else 503
    return JSONResponse(status_code=status_code, content=info)


@router.get("/metrics")
def metrics() -> Response:
    """Prometheus metrics endpoint."""
    return Response(content=get_metrics(), media_type=CONTENT_TYPE_LATEST)
