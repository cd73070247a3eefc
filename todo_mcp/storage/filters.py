"""
In-process filter and search semantics for backends that hold the full collection.
"""
from typing import Iterable, List, Optional

from todo_mcp.models import Task, TaskFilter


def matches_filter(task: Task, task_filter: Optional[TaskFilter]) -> bool:
    """True when the task satisfies every supplied filter field."""
    if task_filter is None:
        return True
    if task_filter.completed is not None and task.completed != task_filter.completed:
        return False
    if task_filter.priority is not None and task.priority != task_filter.priority:
        return False
    if task_filter.tag is not None and task_filter.tag not in task.tags:
        return False
    return True


def matches_query(task: Task, query: str) -> bool:
    """Case-insensitive substring match on title or description."""
    needle = query.casefold()
    if needle in task.title.casefold():
        return True
    return task.description is not None and needle in task.description.casefold()


def newest_first(tasks: Iterable[Task]) -> List[Task]:
    """
    Order by createdAt descending.

    Among equal timestamps the later-inserted record comes first.
    """
    return sorted(reversed(list(tasks)), key=lambda t: t.created_at, reverse=True)
