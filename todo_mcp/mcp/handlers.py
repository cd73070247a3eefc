"""
Tool handlers: dispatch a tools/call invocation onto the task service.

Every outcome, including store failures, is returned as a tool result
({"content": [...], "isError"?: true}); nothing here raises to the transport.
"""
import json
import logging
from typing import Any, Callable, Dict, Mapping

from todo_mcp.exceptions import ServiceError, TaskNotFoundError
from todo_mcp.models import TaskFilter
from todo_mcp.monitoring import mcp_tool_calls_total
from todo_mcp.services.task_service import TaskService
from todo_mcp.tracing import trace_span, add_span_attribute
from .arguments import (
    ensure_arguments,
    required_str,
    optional_str,
    optional_bool,
    optional_str_list,
    optional_priority,
    update_fields,
)

logger = logging.getLogger(__name__)

ToolResult = Dict[str, Any]


def text_result(text: str, is_error: bool = False) -> ToolResult:
    """Build a tool result holding a single text block."""
    result: ToolResult = {"content": [{"type": "text", "text": text}]}
    if is_error:
        result["isError"] = True
    return result


def _pretty(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)


def _not_found(task_id: str) -> ToolResult:
    return text_result(f"Todo not found: {task_id}", is_error=True)


def handle_list_todos(service: TaskService, arguments: Mapping[str, Any]) -> ToolResult:
    task_filter = TaskFilter(
        completed=optional_bool(arguments, "completed"),
        priority=optional_priority(arguments, "priority"),
        tag=optional_str(arguments, "tag"),
    )
    tasks = service.list_tasks(task_filter)
    add_span_attribute("mcp.tasks_count", len(tasks))
    return text_result(_pretty(service.serialize(tasks)))


def handle_add_todo(service: TaskService, arguments: Mapping[str, Any]) -> ToolResult:
    task = service.create_task({
        "title": required_str(arguments, "title"),
        "description": optional_str(arguments, "description"),
        "priority": optional_priority(arguments, "priority"),
        "dueDate": optional_str(arguments, "dueDate"),
        "tags": optional_str_list(arguments, "tags"),
    })
    return text_result(f"Created todo: {_pretty(task.to_dict())}")


def handle_update_todo(service: TaskService, arguments: Mapping[str, Any]) -> ToolResult:
    task_id = required_str(arguments, "id")
    try:
        task = service.update_task(task_id, update_fields(arguments))
    except TaskNotFoundError:
        return _not_found(task_id)
    return text_result(f"Updated todo: {_pretty(task.to_dict())}")


def handle_delete_todo(service: TaskService, arguments: Mapping[str, Any]) -> ToolResult:
    task_id = required_str(arguments, "id")
    if not service.delete_task(task_id):
        return _not_found(task_id)
    return text_result(f"Deleted todo: {task_id}")


def handle_complete_todo(service: TaskService, arguments: Mapping[str, Any]) -> ToolResult:
    task_id = required_str(arguments, "id")
    try:
        task = service.complete_task(task_id)
    except TaskNotFoundError:
        return _not_found(task_id)
    return text_result(f"Completed: {task.title}")


def handle_search_todos(service: TaskService, arguments: Mapping[str, Any]) -> ToolResult:
    tasks = service.search_tasks(required_str(arguments, "query"))
    add_span_attribute("mcp.tasks_count", len(tasks))
    return text_result(_pretty(service.serialize(tasks)))


TOOL_HANDLERS: Dict[str, Callable[[TaskService, Mapping[str, Any]], ToolResult]] = {
    "list_todos": handle_list_todos,
    "add_todo": handle_add_todo,
    "update_todo": handle_update_todo,
    "delete_todo": handle_delete_todo,
    "complete_todo": handle_complete_todo,
    "search_todos": handle_search_todos,
}


def call_tool(service: TaskService, name: str, arguments: Any) -> ToolResult:
    """
    Invoke a tool by name.

    Args:
        service: Task service to run the operation against
        name: Tool name from the catalog
        arguments: Untyped arguments object from the caller

    Returns:
        Tool result; isError is set for unknown tools, not-found ids and failures
    """
    handler = TOOL_HANDLERS.get(name)
    if handler is None:
        result = text_result(f"Unknown tool: {name}", is_error=True)
    else:
        with trace_span("mcp.call_tool", attributes={"mcp.tool": name}):
            try:
                result = handler(service, ensure_arguments(arguments))
            except ServiceError as e:
                logger.warning(f"Tool {name} failed: {e.message}")
                result = text_result(f"Error in {name}: {e.message}", is_error=True)
            except Exception as e:
                logger.error(f"Unexpected error in tool {name}", exc_info=True)
                result = text_result(f"Error in {name}: {e}", is_error=True)

    is_error = result.get("isError", False)
    add_span_attribute("mcp.is_error", is_error)
    mcp_tool_calls_total.labels(tool=name if handler else "unknown", is_error=str(is_error).lower()).inc()
    return result
