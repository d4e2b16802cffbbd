"""
Logging setup for the D2 MCP server.

stdout carries the stdio transport, so log records always go to stderr.
"""

import logging
import sys
from typing import Optional, TextIO, Union

_package_logger = logging.getLogger("d2_mcp")

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(
    level: Union[str, int] = "INFO",
    format: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """Configure the ``d2_mcp`` package logger.

    Args:
        level: Log level name (DEBUG, INFO, ...) or numeric level
        format: Custom log format string
        stream: Output stream (defaults to stderr)
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    _package_logger.setLevel(level)
    _package_logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(format or DEFAULT_FORMAT))
    handler.setLevel(level)
    _package_logger.addHandler(handler)
    _package_logger.propagate = False
