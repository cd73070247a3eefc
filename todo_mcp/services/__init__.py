"""
Service layer for business logic.
"""
from .task_service import TaskService, parse_model

__all__ = ['TaskService', 'parse_model']
