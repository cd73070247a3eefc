"""
Stdio transport: one JSON-RPC message per line on stdin, one response per line on stdout.

stdout carries protocol traffic only; logging goes to stderr.
"""
import json
import sys
import logging
from typing import Optional, TextIO

from todo_mcp.config import Settings
from todo_mcp.dependencies.services import ServiceContainer
from todo_mcp.middleware.logging_setup import setup_logging
from todo_mcp.services.task_service import TaskService
from .request_handlers import handle_jsonrpc_request, jsonrpc_error, PARSE_ERROR

logger = logging.getLogger(__name__)


def handle_line(service: TaskService, line: str) -> Optional[str]:
    """
    Process one input line.

    Returns:
        Serialized response line (without newline), or None when nothing is sent back
    """
    line = line.strip()
    if not line:
        return None
    try:
        message = json.loads(line)
    except json.JSONDecodeError as e:
        logger.warning(f"Unparseable message: {e}")
        return json.dumps(jsonrpc_error(None, PARSE_ERROR, f"Parse error: {e.msg}"))
    response = handle_jsonrpc_request(service, message)
    if response is None:
        return None
    return json.dumps(response, ensure_ascii=False)


def run_stdio(service: TaskService, stdin: TextIO, stdout: TextIO) -> None:
    """Serve requests until stdin is closed."""
    logger.info("Todo MCP server running on stdio")
    for line in stdin:
        output = handle_line(service, line)
        if output is not None:
            stdout.write(output + "\n")
            stdout.flush()
    logger.info("stdin closed, shutting down")


def main() -> None:
    """Console entry point for the stdio server."""
    settings = Settings.from_env()
    setup_logging(settings.log_level, stream=sys.stderr)
    services = ServiceContainer(settings)
    try:
        run_stdio(services.task_service, sys.stdin, sys.stdout)
    except KeyboardInterrupt:
        logger.info("Interrupted")
    finally:
        services.close()


if __name__ == "__main__":
    main()
