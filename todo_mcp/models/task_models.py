"""
Pydantic models for task records and the inputs that create, update and filter them.

Wire and file vocabulary is camelCase (dueDate, createdAt, updatedAt); the
remote table uses snake_case columns. Task.from_row / Task.to_row translate.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional, List, Dict, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

Priority = Literal["low", "medium", "high"]
PRIORITIES = ("low", "medium", "high")
DEFAULT_PRIORITY = "medium"

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def utc_now() -> str:
    """Current UTC time as an ISO-8601 string with microseconds and a Z suffix."""
    return datetime.now(timezone.utc).strftime(TIMESTAMP_FORMAT)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def next_timestamp(after: Optional[str] = None) -> str:
    """
    Return "now", bumped past `after` when the clock has not moved beyond it.

    Keeps updatedAt strictly increasing across back-to-back mutations and
    createdAt strictly increasing across back-to-back creates.
    """
    now = datetime.now(timezone.utc)
    if after:
        previous = parse_timestamp(after)
        if now <= previous:
            now = previous + timedelta(microseconds=1)
    return now.strftime(TIMESTAMP_FORMAT)


class Task(BaseModel):
    """A stored task record."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    description: Optional[str] = None
    completed: bool = False
    priority: Priority = DEFAULT_PRIORITY
    due_date: Optional[str] = Field(None, alias="dueDate")
    tags: List[str] = Field(default_factory=list)
    created_at: str = Field(..., alias="createdAt")
    updated_at: str = Field(..., alias="updatedAt")

    def to_dict(self) -> Dict[str, Any]:
        """External (camelCase) form; absent description/dueDate are omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Task":
        """Build a Task from a snake_case row returned by the remote store."""
        return cls(
            id=str(row["id"]),
            title=row["title"],
            description=row.get("description"),
            completed=row.get("completed", False),
            priority=row.get("priority") or DEFAULT_PRIORITY,
            due_date=row.get("due_date"),
            tags=row.get("tags") or [],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )


class TaskCreate(BaseModel):
    """Input for creating a task. Unknown keys (including id) are ignored."""
    model_config = ConfigDict(strict=True, extra="ignore", populate_by_name=True)

    title: str = Field(..., description="Task title")
    description: Optional[str] = Field(None, description="Optional detailed description")
    priority: Priority = Field(DEFAULT_PRIORITY, description="Priority level (defaults to medium)")
    due_date: Optional[str] = Field(None, alias="dueDate", description="Due date in ISO format")
    tags: List[str] = Field(default_factory=list, description="Tags for categorization")

    @field_validator('title')
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Title must be non-empty after stripping whitespace."""
        if not v.strip():
            raise ValueError("title cannot be empty or contain only whitespace")
        return v.strip()

    @field_validator('priority', mode='before')
    @classmethod
    def default_priority(cls, v: Any) -> Any:
        return DEFAULT_PRIORITY if v is None else v

    @field_validator('tags', mode='before')
    @classmethod
    def default_tags(cls, v: Any) -> Any:
        return [] if v is None else v


class TaskUpdate(BaseModel):
    """
    Partial update. Only keys present in the input are written.

    description and dueDate may be explicitly null to clear them; title,
    completed, priority and tags may not.
    """
    model_config = ConfigDict(strict=True, extra="ignore", populate_by_name=True)

    title: Optional[str] = None
    description: Optional[str] = None
    completed: Optional[bool] = None
    priority: Optional[Priority] = None
    due_date: Optional[str] = Field(None, alias="dueDate")
    tags: Optional[List[str]] = None

    @field_validator('title', 'completed', 'priority', 'tags')
    @classmethod
    def reject_null(cls, v: Any, info) -> Any:
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    @field_validator('title')
    @classmethod
    def validate_title(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title cannot be empty or contain only whitespace")
        return v.strip()

    def changes(self) -> Dict[str, Any]:
        """Explicitly supplied fields, keyed by Python field name."""
        return self.model_dump(include=self.model_fields_set)


class TaskFilter(BaseModel):
    """Conjunctive list filter; None fields impose no constraint."""
    model_config = ConfigDict(strict=True, extra="ignore")

    completed: Optional[bool] = None
    priority: Optional[Priority] = None
    tag: Optional[str] = None

    def is_empty(self) -> bool:
        return self.completed is None and self.priority is None and self.tag is None
