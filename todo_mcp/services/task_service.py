"""
Task service - the task-store boundary shared by the REST and tool surfaces.
This layer contains no HTTP framework dependencies.

Raw input is validated into pydantic models here so both surfaces get the
same guarantees; "no such record" becomes TaskNotFoundError.
"""
import logging
from contextlib import contextmanager
from typing import Optional, List, Dict, Any, Mapping, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError as PydanticValidationError

from todo_mcp.exceptions import ServiceError, TaskNotFoundError, ValidationError
from todo_mcp.models import Task, TaskCreate, TaskUpdate, TaskFilter
from todo_mcp.monitoring import store_operations_total
from todo_mcp.storage import StorageInterface
from todo_mcp.tracing import trace_span, add_span_attribute

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_model(model_cls: Type[ModelT], data: Union[Mapping[str, Any], ModelT, None]) -> ModelT:
    """
    Validate raw input into a model, raising ValidationError on the first problem.

    Args:
        model_cls: Target pydantic model
        data: A mapping, an instance of model_cls, or None (treated as empty)

    Returns:
        Validated model instance
    """
    if isinstance(data, model_cls):
        return data
    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise ValidationError("Request body must be a JSON object", value=type(data).__name__)
    try:
        return model_cls.model_validate(dict(data))
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        if first.get("type") == "missing":
            message = f"{field} is required"
        else:
            message = first.get("msg", "Invalid value")
            if message.startswith("Value error, "):
                message = message[len("Value error, "):]
            if field:
                message = f"Invalid {field}: {message}"
        raise ValidationError(message, field=field, value=first.get("input") if first.get("type") != "missing" else None)


def _require_id(task_id: Any) -> str:
    if not isinstance(task_id, str) or not task_id:
        raise ValidationError("id must be a non-empty string", field="id", value=task_id)
    return task_id


class TaskService:
    """Service for task business logic."""

    def __init__(self, storage: StorageInterface):
        """Initialize task service with a storage backend."""
        self.storage = storage

    @contextmanager
    def _operation(self, name: str, **attributes):
        """Trace the operation and count its outcome."""
        with trace_span(f"store.{name}", attributes={"store.backend": self.storage.backend_name, **attributes}):
            try:
                yield
            except TaskNotFoundError:
                store_operations_total.labels(operation=name, outcome="not_found").inc()
                raise
            except ValidationError as e:
                store_operations_total.labels(operation=name, outcome="invalid").inc()
                logger.info(f"Rejected {name}: {e.message}")
                raise
            except ServiceError:
                store_operations_total.labels(operation=name, outcome="error").inc()
                raise
            store_operations_total.labels(operation=name, outcome="ok").inc()

    def create_task(self, data: Union[Mapping[str, Any], TaskCreate]) -> Task:
        """
        Create a new task.

        Args:
            data: title (required) plus optional description, priority, dueDate, tags

        Returns:
            The stored task with its assigned id and timestamps

        Raises:
            ValidationError: Missing/blank title, wrong field types, unknown priority
            DatabaseError: Backend failure
        """
        with self._operation("create"):
            task_create = parse_model(TaskCreate, data)
            task = self.storage.create(task_create)
            add_span_attribute("todo.id", task.id)
            logger.info(f"Created todo {task.id}")
            return task

    def get_task(self, task_id: str) -> Task:
        """Get a task by id, raising TaskNotFoundError if absent."""
        with self._operation("get", **{"todo.id": task_id}):
            task = self.storage.get(_require_id(task_id))
            if task is None:
                raise TaskNotFoundError(task_id)
            return task

    def list_tasks(self, task_filter: Union[Mapping[str, Any], TaskFilter, None] = None) -> List[Task]:
        """
        List tasks newest first, optionally filtered.

        Args:
            task_filter: Any of completed, priority, tag; all supplied fields must match
        """
        with self._operation("list"):
            parsed = parse_model(TaskFilter, task_filter) if task_filter is not None else None
            tasks = self.storage.list(None if parsed is None or parsed.is_empty() else parsed)
            add_span_attribute("todo.count", len(tasks))
            return tasks

    def update_task(self, task_id: str, fields: Union[Mapping[str, Any], TaskUpdate, None]) -> Task:
        """
        Apply a partial update; keys absent from `fields` are left unchanged.

        Raises:
            TaskNotFoundError: No task with this id
            ValidationError: Invalid field values
        """
        with self._operation("update", **{"todo.id": task_id}):
            changes = parse_model(TaskUpdate, fields)
            task = self.storage.update(_require_id(task_id), changes)
            if task is None:
                raise TaskNotFoundError(task_id)
            logger.info(f"Updated todo {task_id} ({', '.join(sorted(changes.model_fields_set)) or 'no fields'})")
            return task

    def complete_task(self, task_id: str) -> Task:
        """Mark a task completed, raising TaskNotFoundError if absent."""
        with self._operation("complete", **{"todo.id": task_id}):
            task = self.storage.complete(_require_id(task_id))
            if task is None:
                raise TaskNotFoundError(task_id)
            logger.info(f"Completed todo {task_id}")
            return task

    def delete_task(self, task_id: str) -> bool:
        """Delete a task. Returns False when nothing was deleted."""
        with self._operation("delete", **{"todo.id": task_id}):
            deleted = self.storage.delete(_require_id(task_id))
            if deleted:
                logger.info(f"Deleted todo {task_id}")
            return deleted

    def search_tasks(self, query: str) -> List[Task]:
        """Case-insensitive substring search over title and description."""
        with self._operation("search"):
            if not isinstance(query, str):
                raise ValidationError("query must be a string", field="query", value=query)
            tasks = self.storage.search(query)
            add_span_attribute("todo.count", len(tasks))
            return tasks

    @staticmethod
    def serialize(tasks: List[Task]) -> List[Dict[str, Any]]:
        """External (camelCase) form of a task list."""
        return [task.to_dict() for task in tasks]
