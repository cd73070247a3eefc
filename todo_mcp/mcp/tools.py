"""
Catalog of tools advertised through tools/list.
"""
from typing import Any, Dict, List

from todo_mcp.models import PRIORITIES

TODO_TOOLS: List[Dict[str, Any]] = [
    {
        "name": "list_todos",
        "description": "List all todos, optionally filtered by status or priority",
        "inputSchema": {
            "type": "object",
            "properties": {
                "completed": {
                    "type": "boolean",
                    "description": "Filter by completion status",
                },
                "priority": {
                    "type": "string",
                    "enum": list(PRIORITIES),
                    "description": "Filter by priority level",
                },
                "tag": {
                    "type": "string",
                    "description": "Filter by tag",
                },
            },
        },
    },
    {
        "name": "add_todo",
        "description": "Add a new todo item with natural language support",
        "inputSchema": {
            "type": "object",
            "properties": {
                "title": {
                    "type": "string",
                    "description": "The todo title/task description",
                },
                "description": {
                    "type": "string",
                    "description": "Optional detailed description",
                },
                "priority": {
                    "type": "string",
                    "enum": list(PRIORITIES),
                    "description": "Priority level (defaults to medium)",
                },
                "dueDate": {
                    "type": "string",
                    "description": "Due date in ISO format",
                },
                "tags": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Tags for categorization",
                },
            },
            "required": ["title"],
        },
    },
    {
        "name": "update_todo",
        "description": "Update an existing todo item",
        "inputSchema": {
            "type": "object",
            "properties": {
                "id": {
                    "type": "string",
                    "description": "The todo ID to update",
                },
                "title": {
                    "type": "string",
                    "description": "New title",
                },
                "description": {
                    "type": "string",
                    "description": "New description",
                },
                "completed": {
                    "type": "boolean",
                    "description": "Mark as completed or not",
                },
                "priority": {
                    "type": "string",
                    "enum": list(PRIORITIES),
                    "description": "New priority level",
                },
                "dueDate": {
                    "type": "string",
                    "description": "New due date",
                },
                "tags": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "New tags",
                },
            },
            "required": ["id"],
        },
    },
    {
        "name": "delete_todo",
        "description": "Delete a todo item",
        "inputSchema": {
            "type": "object",
            "properties": {
                "id": {
                    "type": "string",
                    "description": "The todo ID to delete",
                },
            },
            "required": ["id"],
        },
    },
    {
        "name": "complete_todo",
        "description": "Mark a todo as completed",
        "inputSchema": {
            "type": "object",
            "properties": {
                "id": {
                    "type": "string",
                    "description": "The todo ID to complete",
                },
            },
            "required": ["id"],
        },
    },
    {
        "name": "search_todos",
        "description": "Search todos by text in title or description",
        "inputSchema": {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "Search query",
                },
            },
            "required": ["query"],
        },
    },
]

TOOL_NAMES = [tool["name"] for tool in TODO_TOOLS]
