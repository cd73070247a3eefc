"""
Typed extraction of tool arguments.

Tool arguments arrive as an untyped JSON object. Each declared field is read
through one of these parsers, which raise ValidationError naming the field
when the value has the wrong type. Undeclared keys are never read.
"""
from typing import Any, Dict, List, Mapping, Optional

from todo_mcp.exceptions import ValidationError
from todo_mcp.models import PRIORITIES


def ensure_arguments(arguments: Any) -> Dict[str, Any]:
    """Normalize the arguments object; a missing object counts as empty."""
    if arguments is None:
        return {}
    if not isinstance(arguments, Mapping):
        raise ValidationError("arguments must be an object", field="arguments", value=type(arguments).__name__)
    return dict(arguments)


def _type_error(name: str, expected: str, value: Any) -> ValidationError:
    return ValidationError(f"{name} must be {expected}", field=name, value=value)


def required_str(arguments: Mapping[str, Any], name: str) -> str:
    value = arguments.get(name)
    if value is None:
        raise ValidationError(f"{name} is required", field=name)
    if not isinstance(value, str):
        raise _type_error(name, "a string", value)
    return value


def optional_str(arguments: Mapping[str, Any], name: str) -> Optional[str]:
    value = arguments.get(name)
    if value is not None and not isinstance(value, str):
        raise _type_error(name, "a string", value)
    return value


def optional_bool(arguments: Mapping[str, Any], name: str) -> Optional[bool]:
    value = arguments.get(name)
    if value is not None and not isinstance(value, bool):
        raise _type_error(name, "a boolean", value)
    return value


def optional_str_list(arguments: Mapping[str, Any], name: str) -> Optional[List[str]]:
    value = arguments.get(name)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise _type_error(name, "an array of strings", value)
    return list(value)


def optional_priority(arguments: Mapping[str, Any], name: str = "priority") -> Optional[str]:
    value = optional_str(arguments, name)
    if value is not None and value not in PRIORITIES:
        raise ValidationError(
            f"Invalid priority '{value}'. Must be one of: {', '.join(PRIORITIES)}",
            field=name,
            value=value
        )
    return value


_UPDATE_PARSERS = {
    "title": optional_str,
    "description": optional_str,
    "completed": optional_bool,
    "priority": optional_priority,
    "dueDate": optional_str,
    "tags": optional_str_list,
}


def update_fields(arguments: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Collect the update fields actually present in the arguments.

    A key given as null is kept as None so the store can clear nullable
    fields (and reject null for the others).
    """
    fields: Dict[str, Any] = {}
    for name, parser in _UPDATE_PARSERS.items():
        if name in arguments:
            fields[name] = parser(arguments, name)
    return fields
