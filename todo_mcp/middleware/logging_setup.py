"""
Logging configuration and setup.
"""
import sys
import logging
from typing import Optional, TextIO

from todo_mcp.monitoring import get_request_id

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class RequestIDFilter(logging.Filter):
    """Logging filter to add the current request ID to log records."""

    def filter(self, record):
        if not getattr(record, 'request_id', None):
            record.request_id = get_request_id() or '-'
        return True


class SafeFormatter(logging.Formatter):
    """Formatter that tolerates records created before the filter ran."""

    def format(self, record):
        if not hasattr(record, 'request_id'):
            record.request_id = '-'
        return super().format(record)


def setup_logging(level: str = "INFO", stream: Optional[TextIO] = None) -> None:
    """
    Configure root logging with request ID support.

    Args:
        level: Log level name (DEBUG, INFO, ...)
        stream: Output stream; stderr when None (the stdio transport owns stdout)
    """
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.addFilter(RequestIDFilter())
    handler.setFormatter(SafeFormatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        handlers=[handler],
        force=True
    )
