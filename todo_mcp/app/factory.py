"""
Application factory - creates and configures the FastAPI application.
This isolates all initialization logic from main.py.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from todo_mcp import __version__
from todo_mcp.api.routes import todos_router, mcp_router, health_router
from todo_mcp.config import Settings
from todo_mcp.dependencies.services import ServiceContainer
from todo_mcp.exceptions.handlers import setup_exception_handlers
from todo_mcp.middleware.logging_setup import setup_logging
from todo_mcp.middleware.setup import setup_middleware
from todo_mcp.tracing import setup_tracing, instrument_fastapi, instrument_httpx


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan; the storage backend is released on shutdown."""
    logger = logging.getLogger(__name__)
    services: ServiceContainer = app.state.services
    logger.info(f"Application starting up with {services.storage.backend_name} storage")

    yield

    logger.info("Application shutting down...")
    services.close()
    logger.info("Shutdown complete")


def _enable_tracing(app: FastAPI, settings: Settings) -> None:
    logger = logging.getLogger(__name__)
    try:
        setup_tracing(otlp_endpoint=settings.otlp_endpoint)
        instrument_fastapi(app)
        instrument_httpx()
        logger.info("Distributed tracing enabled")
    except Exception:
        logger.warning("Failed to initialize tracing, continuing without it", exc_info=True)


def create_app(
    settings: Optional[Settings] = None,
    services: Optional[ServiceContainer] = None
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Application settings; read from the environment when None
        services: Pre-built service container (tests inject one); built from settings when None

    Returns:
        Configured FastAPI app instance ready to run.
    """
    if settings is None:
        settings = services.settings if services is not None else Settings.from_env()

    # Setup logging first (must be done before creating logger)
    setup_logging(settings.log_level)
    logger = logging.getLogger(__name__)

    app = FastAPI(
        title="Todo MCP Service",
        description="Todo list service with a REST API and MCP tools",
        version=__version__,
        lifespan=lifespan
    )

    # Instrumentation patches httpx, so it must run before the remote client is built
    if settings.tracing_enabled:
        _enable_tracing(app, settings)

    app.state.services = services or ServiceContainer(settings)

    setup_middleware(app, settings.cors_origins)
    setup_exception_handlers(app)

    app.include_router(todos_router)
    app.include_router(mcp_router)
    app.include_router(health_router)

    logger.info("Application created")
    return app
