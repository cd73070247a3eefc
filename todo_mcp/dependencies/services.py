"""
Service container for dependency injection.

The container is built once at startup, attached to app.state, and handed to
request handlers through FastAPI dependencies.
"""
import logging
from typing import Optional

from fastapi import Request

from todo_mcp.config import Settings
from todo_mcp.services.task_service import TaskService
from todo_mcp.storage import StorageInterface, create_storage

logger = logging.getLogger(__name__)


class ServiceContainer:
    """Container for all application services."""

    def __init__(self, settings: Settings, storage: Optional[StorageInterface] = None):
        """
        Args:
            settings: Application settings
            storage: Pre-built backend; built from settings when None
        """
        self.settings = settings
        self.storage = storage or create_storage(settings)
        self.task_service = TaskService(self.storage)
        logger.info(f"Services initialized with {self.storage.backend_name} storage")

    def close(self) -> None:
        """Release the storage backend."""
        self.storage.close()


def get_services(request: Request) -> ServiceContainer:
    """Get the service container attached to the running app."""
    return request.app.state.services


def get_task_service(request: Request) -> TaskService:
    """Get the task service for this request."""
    return get_services(request).task_service
