"""
HTTP API: routers for the todo REST surface, the MCP transport and operations.
"""
