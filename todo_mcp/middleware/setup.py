"""
Middleware registration.
"""
import logging
from typing import List

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from todo_mcp.monitoring import MetricsMiddleware

logger = logging.getLogger(__name__)


def setup_middleware(app: FastAPI, cors_origins: List[str]) -> None:
    """
    Register CORS and metrics middleware.

    Args:
        app: FastAPI application
        cors_origins: Allowed origins; ["*"] allows any origin
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(MetricsMiddleware)
    logger.debug(f"CORS allowed origins: {cors_origins}")
