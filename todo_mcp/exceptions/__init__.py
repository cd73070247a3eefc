"""
Exceptions shared by the store layer and both access surfaces.
"""
from .base import (
    ServiceError,
    NotFoundError,
    TaskNotFoundError,
    ValidationError,
    DatabaseError,
    to_http_exception,
    to_mcp_error_response,
)

__all__ = [
    'ServiceError',
    'NotFoundError',
    'TaskNotFoundError',
    'ValidationError',
    'DatabaseError',
    'to_http_exception',
    'to_mcp_error_response',
]
