"""Request handler for JSON-RPC 2.0 messages, shared by the HTTP and stdio transports."""
import logging
from typing import Dict, Any, Optional

from todo_mcp import __version__
from todo_mcp.services.task_service import TaskService
from .handlers import call_tool
from .tools import TODO_TOOLS

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "todo-mcp-server"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602


def jsonrpc_error(request_id: Any, code: int, message: str) -> Dict[str, Any]:
    """Build a JSON-RPC error response."""
    return {
        "jsonrpc": "2.0",
        "id": request_id,
        "error": {
            "code": code,
            "message": message
        }
    }


def _result(request_id: Any, result: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "jsonrpc": "2.0",
        "id": request_id,
        "result": result
    }


def handle_jsonrpc_request(service: TaskService, request: Any) -> Optional[Dict[str, Any]]:
    """
    Handle JSON-RPC 2.0 request.

    Args:
        service: Task service used by tools/call
        request: Decoded JSON-RPC message

    Returns:
        JSON-RPC response dictionary, or None for notifications
    """
    if not isinstance(request, dict):
        return jsonrpc_error(None, INVALID_REQUEST, "Invalid Request: expected a JSON object")

    request_id = request.get("id")
    method = request.get("method")
    is_notification = "id" not in request

    if not isinstance(method, str):
        if is_notification:
            return None
        return jsonrpc_error(request_id, INVALID_REQUEST, "Invalid Request: method must be a string")

    if is_notification:
        logger.debug(f"Received notification {method}")
        return None

    params = request.get("params")
    if params is None:
        params = {}

    if method == "initialize":
        return _result(request_id, {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {
                "tools": {}
            },
            "serverInfo": {
                "name": SERVER_NAME,
                "version": __version__
            }
        })
    elif method == "ping":
        return _result(request_id, {})
    elif method == "tools/list":
        return _result(request_id, {"tools": TODO_TOOLS})
    elif method == "prompts/list":
        # The todo server exposes tools only
        return _result(request_id, {"prompts": []})
    elif method == "resources/list":
        return _result(request_id, {"resources": []})
    elif method == "tools/call":
        if not isinstance(params, dict):
            return jsonrpc_error(request_id, INVALID_PARAMS, "Invalid params: expected an object")
        tool_name = params.get("name")
        if not isinstance(tool_name, str):
            return jsonrpc_error(request_id, INVALID_PARAMS, "Invalid params: name must be a string")
        return _result(request_id, call_tool(service, tool_name, params.get("arguments")))

    return jsonrpc_error(request_id, METHOD_NOT_FOUND, f"Method not found: {method}")
