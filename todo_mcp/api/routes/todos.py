"""
Todo API routes.

Each handler catches store failures itself and answers 500 with a generic
detail; a missing record answers 404 {"detail": "Todo not found"}.
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response

from todo_mcp.dependencies.services import get_task_service
from todo_mcp.exceptions import DatabaseError, TaskNotFoundError, ValidationError, to_http_exception
from todo_mcp.services.task_service import TaskService

router = APIRouter(prefix="/api/todos", tags=["todos"])

logger = logging.getLogger(__name__)

NOT_FOUND_DETAIL = "Todo not found"


def _store_failure(detail: str, exc: DatabaseError) -> HTTPException:
    logger.error(f"{detail}: {exc.message}", exc_info=True)
    return HTTPException(status_code=500, detail=detail)


@router.get("")
def list_todos(
    completed: Optional[bool] = Query(None, description="Filter by completion status"),
    priority: Optional[str] = Query(None, description="Filter by priority level"),
    tag: Optional[str] = Query(None, description="Filter by tag"),
    service: TaskService = Depends(get_task_service)
) -> List[Dict[str, Any]]:
    """List todos newest first, optionally filtered."""
    task_filter = None
    if completed is not None or priority is not None or tag is not None:
        task_filter = {"completed": completed, "priority": priority, "tag": tag}
    try:
        tasks = service.list_tasks(task_filter)
    except ValidationError as e:
        raise to_http_exception(e)
    except DatabaseError as e:
        raise _store_failure("Failed to fetch todos", e)
    return service.serialize(tasks)


@router.get("/search")
def search_todos(
    q: str = Query("", description="Case-insensitive text to find in title or description"),
    service: TaskService = Depends(get_task_service)
) -> List[Dict[str, Any]]:
    """Search todos by title or description."""
    try:
        tasks = service.search_tasks(q)
    except DatabaseError as e:
        raise _store_failure("Failed to search todos", e)
    return service.serialize(tasks)


@router.get("/{todo_id}")
def get_todo(todo_id: str, service: TaskService = Depends(get_task_service)) -> Dict[str, Any]:
    """Get a single todo by id."""
    try:
        task = service.get_task(todo_id)
    except TaskNotFoundError:
        raise HTTPException(status_code=404, detail=NOT_FOUND_DETAIL)
    except ValidationError as e:
        raise to_http_exception(e)
    except DatabaseError as e:
        raise _store_failure("Failed to fetch todo", e)
    return task.to_dict()


@router.post("", status_code=201)
def create_todo(
    body: Any = Body(None),
    service: TaskService = Depends(get_task_service)
) -> Dict[str, Any]:
    """Create a todo; id and timestamps are assigned by the store."""
    try:
        task = service.create_task(_require_object(body))
    except ValidationError as e:
        raise to_http_exception(e)
    except DatabaseError as e:
        raise _store_failure("Failed to create todo", e)
    return task.to_dict()


@router.patch("/{todo_id}")
def update_todo(
    todo_id: str,
    body: Any = Body(None),
    service: TaskService = Depends(get_task_service)
) -> Dict[str, Any]:
    """Apply a partial update; omitted fields are left unchanged."""
    try:
        task = service.update_task(todo_id, _require_object(body))
    except TaskNotFoundError:
        raise HTTPException(status_code=404, detail=NOT_FOUND_DETAIL)
    except ValidationError as e:
        raise to_http_exception(e)
    except DatabaseError as e:
        raise _store_failure("Failed to update todo", e)
    return task.to_dict()


@router.post("/{todo_id}/complete")
def complete_todo(todo_id: str, service: TaskService = Depends(get_task_service)) -> Dict[str, Any]:
    """Mark a todo completed."""
    try:
        task = service.complete_task(todo_id)
    except TaskNotFoundError:
        raise HTTPException(status_code=404, detail=NOT_FOUND_DETAIL)
    except ValidationError as e:
        raise to_http_exception(e)
    except DatabaseError as e:
        raise _store_failure("Failed to update todo", e)
    return task.to_dict()


@router.delete("/{todo_id}", status_code=204)
def delete_todo(todo_id: str, service: TaskService = Depends(get_task_service)) -> Response:
    """Delete a todo."""
    try:
        deleted = service.delete_task(todo_id)
    except ValidationError as e:
        raise to_http_exception(e)
    except DatabaseError as e:
        raise _store_failure("Failed to delete todo", e)
    if not deleted:
        raise HTTPException(status_code=404, detail=NOT_FOUND_DETAIL)
    return Response(status_code=204)


def _require_object(body: Any) -> Dict[str, Any]:
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object", value=type(body).__name__)
    return body
