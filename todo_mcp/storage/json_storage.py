"""
JSON file implementation of the storage interface.

The whole collection lives in one JSON array of camelCase records. Every
operation loads the file, works in memory and rewrites the file; a lock
serializes those cycles within the process and the rewrite goes through a
temp file plus os.replace so readers never see a half-written collection.
"""
import os
import json
import uuid
import logging
import tempfile
import threading
from typing import Optional, List

from pydantic import ValidationError as PydanticValidationError

from todo_mcp.exceptions import DatabaseError
from todo_mcp.models import Task, TaskCreate, TaskUpdate, TaskFilter, next_timestamp
from .interface import StorageInterface
from .filters import matches_filter, matches_query, newest_first

logger = logging.getLogger(__name__)


class JSONFileStorage(StorageInterface):
    """File-backed task storage."""

    backend_name = "file"

    def __init__(self, path: str):
        """
        Initialize file storage.

        Args:
            path: Location of the JSON file; created on first write
        """
        self.path = os.path.abspath(path)
        self._lock = threading.RLock()

    def _load(self) -> List[Task]:
        if not os.path.exists(self.path):
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except json.JSONDecodeError as e:
            raise DatabaseError(f"Task file is not valid JSON: {self.path}", operation="load", original_error=e)
        except OSError as e:
            raise DatabaseError(f"Failed to read task file: {self.path}", operation="load", original_error=e)

        if not isinstance(raw, list):
            raise DatabaseError(f"Task file must contain a JSON array: {self.path}", operation="load")
        try:
            return [Task.model_validate(item) for item in raw]
        except PydanticValidationError as e:
            raise DatabaseError(f"Task file contains an invalid record: {self.path}", operation="load", original_error=e)

    def _save(self, tasks: List[Task]) -> None:
        directory = os.path.dirname(self.path)
        payload = [task.to_dict() for task in tasks]
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=".todos-", suffix=".tmp", dir=directory)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(payload, f, indent=2, ensure_ascii=False)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            raise DatabaseError(f"Failed to write task file: {self.path}", operation="save", original_error=e)

    def create(self, data: TaskCreate) -> Task:
        with self._lock:
            tasks = self._load()
            latest = max((t.created_at for t in tasks), default=None)
            now = next_timestamp(latest)
            task = Task(
                id=str(uuid.uuid4()),
                title=data.title,
                description=data.description,
                completed=False,
                priority=data.priority,
                due_date=data.due_date,
                tags=list(data.tags),
                created_at=now,
                updated_at=now,
            )
            tasks.append(task)
            self._save(tasks)
            logger.debug(f"Created task {task.id} in {self.path}")
            return task

    def get(self, task_id: str) -> Optional[Task]:
        with self._lock:
            for task in self._load():
                if task.id == task_id:
                    return task
            return None

    def list(self, task_filter: Optional[TaskFilter] = None) -> List[Task]:
        with self._lock:
            tasks = self._load()
        return newest_first(t for t in tasks if matches_filter(t, task_filter))

    def update(self, task_id: str, changes: TaskUpdate) -> Optional[Task]:
        with self._lock:
            tasks = self._load()
            for index, task in enumerate(tasks):
                if task.id != task_id:
                    continue
                fields = changes.changes()
                fields["updated_at"] = next_timestamp(task.updated_at)
                updated = task.model_copy(update=fields)
                tasks[index] = updated
                self._save(tasks)
                logger.debug(f"Updated task {task_id}: {sorted(fields)}")
                return updated
            return None

    def delete(self, task_id: str) -> bool:
        with self._lock:
            tasks = self._load()
            remaining = [t for t in tasks if t.id != task_id]
            if len(remaining) == len(tasks):
                return False
            self._save(remaining)
            logger.debug(f"Deleted task {task_id}")
            return True

    def search(self, query: str) -> List[Task]:
        with self._lock:
            tasks = self._load()
        return newest_first(t for t in tasks if matches_query(t, query))

    def ping(self) -> None:
        with self._lock:
            self._load()
