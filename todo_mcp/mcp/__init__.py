"""
Tool-invocation surface: tool catalog, argument parsing, tool handlers and the
JSON-RPC 2.0 dispatcher used by the HTTP and stdio transports.
"""
from .tools import TODO_TOOLS, TOOL_NAMES
from .handlers import call_tool
from .request_handlers import handle_jsonrpc_request

__all__ = ["TODO_TOOLS", "TOOL_NAMES", "call_tool", "handle_jsonrpc_request"]
