"""
todo-mcp-service: task storage with a REST surface and an MCP tool surface.
"""

__version__ = "1.0.0"
