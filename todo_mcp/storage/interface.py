"""
Storage interface - defines the contract for all storage backends.
"""
from abc import ABC, abstractmethod
from typing import Optional, List

from todo_mcp.models import Task, TaskCreate, TaskUpdate, TaskFilter


class StorageInterface(ABC):
    """
    Abstract interface for task persistence.

    Inputs are already validated by the service layer. Point lookups and
    mutations return None when the id does not exist; backend faults raise
    DatabaseError. Listings are ordered newest-created first.
    """

    backend_name = "unknown"

    @abstractmethod
    def create(self, data: TaskCreate) -> Task:
        """Create a task with a store-assigned id and timestamps."""
        pass

    @abstractmethod
    def get(self, task_id: str) -> Optional[Task]:
        """Get a task by ID."""
        pass

    @abstractmethod
    def list(self, task_filter: Optional[TaskFilter] = None) -> List[Task]:
        """List tasks matching every supplied filter field."""
        pass

    @abstractmethod
    def update(self, task_id: str, changes: TaskUpdate) -> Optional[Task]:
        """Write the explicitly supplied fields and advance updatedAt."""
        pass

    @abstractmethod
    def delete(self, task_id: str) -> bool:
        """Delete a task; True if a record existed and was removed."""
        pass

    @abstractmethod
    def search(self, query: str) -> List[Task]:
        """Case-insensitive substring search over title and description."""
        pass

    def complete(self, task_id: str) -> Optional[Task]:
        """Mark a task completed."""
        return self.update(task_id, TaskUpdate(completed=True))

    @abstractmethod
    def ping(self) -> None:
        """Raise DatabaseError if the backend cannot be reached."""
        pass

    def close(self) -> None:
        """Release backend resources."""
