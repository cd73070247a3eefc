"""
MCP (Model Context Protocol) API routes: JSON-RPC 2.0 over HTTP.
"""
import json
import logging

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from todo_mcp.dependencies.services import get_task_service
from todo_mcp.mcp import TODO_TOOLS, handle_jsonrpc_request
from todo_mcp.mcp.request_handlers import jsonrpc_error, PARSE_ERROR
from todo_mcp.services.task_service import TaskService

router = APIRouter(prefix="/mcp", tags=["mcp"])

logger = logging.getLogger(__name__)


async def raw_body(request: Request) -> bytes:
    """Read the undecoded request body so parse failures stay JSON-RPC errors."""
    return await request.body()


@router.post("")
def mcp_jsonrpc(
    body: bytes = Depends(raw_body),
    service: TaskService = Depends(get_task_service)
) -> Response:
    """MCP: Handle one JSON-RPC message. Notifications are acknowledged with 202."""
    try:
        message = json.loads(body)
    except ValueError as e:
        logger.warning(f"Unparseable JSON-RPC message: {e}")
        return JSONResponse(content=jsonrpc_error(None, PARSE_ERROR, f"Parse error: {e}"))
    response = handle_jsonrpc_request(service, message)
    if response is None:
        return Response(status_code=202)
    return JSONResponse(content=response)


@router.get("/tools")
def mcp_list_tools():
    """MCP: List available tools."""
    return {"tools": TODO_TOOLS}
