"""
API route modules.
"""
from .todos import router as todos_router
from .mcp import router as mcp_router
from .health import router as health_router

__all__ = ["todos_router", "mcp_router", "health_router"]
