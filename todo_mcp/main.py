"""
Todo MCP Service - REST API and MCP tools for a todo list.

Main entry point for the HTTP server.
All initialization logic is in app/factory.py.
"""
import logging

import uvicorn

from todo_mcp.app import create_app
from todo_mcp.config import Settings

# Get logger (logging is configured in app/factory.py)
logger = logging.getLogger(__name__)


def main() -> None:
    """Run the HTTP server with uvicorn."""
    settings = Settings.from_env()
    app = create_app(settings)

    config = uvicorn.Config(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        access_log=True,
        # Graceful shutdown settings
        timeout_keep_alive=30,
        timeout_graceful_shutdown=30,
    )
    server = uvicorn.Server(config)

    try:
        server.run()
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, shutting down...")
    finally:
        # Cleanup is handled by lifespan context manager in app/factory.py
        logger.info("Service stopped")


if __name__ == "__main__":
    main()
