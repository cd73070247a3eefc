"""
Pydantic models for the todo service.
"""
from .task_models import (
    Task,
    TaskCreate,
    TaskUpdate,
    TaskFilter,
    Priority,
    PRIORITIES,
    DEFAULT_PRIORITY,
    utc_now,
    parse_timestamp,
    next_timestamp,
)

__all__ = [
    'Task',
    'TaskCreate',
    'TaskUpdate',
    'TaskFilter',
    'Priority',
    'PRIORITIES',
    'DEFAULT_PRIORITY',
    'utc_now',
    'parse_timestamp',
    'next_timestamp',
]
