"""
Shared fixtures: a file-backed store in a temp directory and an app wired to it.
"""
import pytest
from fastapi.testclient import TestClient

from todo_mcp.app import create_app
from todo_mcp.config import Settings
from todo_mcp.dependencies.services import ServiceContainer
from todo_mcp.services.task_service import TaskService
from todo_mcp.storage import JSONFileStorage


@pytest.fixture
def data_file(tmp_path):
    """Path of the JSON file used by the file backend."""
    return tmp_path / "data" / "todos.json"


@pytest.fixture
def storage(data_file):
    """File-backed storage in a temp directory."""
    return JSONFileStorage(str(data_file))


@pytest.fixture
def task_service(storage):
    """TaskService over the temp file storage."""
    return TaskService(storage)


@pytest.fixture
def settings(data_file):
    """Settings pointing at the temp data file."""
    return Settings(data_file=str(data_file), log_level="DEBUG")


@pytest.fixture
def app(settings, storage):
    """Full application with the temp storage injected."""
    return create_app(settings, services=ServiceContainer(settings, storage=storage))


@pytest.fixture
def client(app):
    """Create a test client."""
    return TestClient(app)
