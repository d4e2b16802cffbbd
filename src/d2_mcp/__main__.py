#!/usr/bin/env python3
"""
D2 MCP Server - Entry Point

Supports multiple transport modes:
- stdio: Standard I/O (default, for Claude Desktop)
- sse: Server-Sent Events over HTTP
- http: Streamable HTTP transport
"""

import argparse
import logging
import os
import sys

TRANSPORTS = {
    "stdio": "stdio",
    "sse": "sse",
    "http": "streamable-http",
}


def main():
    parser = argparse.ArgumentParser(
        description="MCP server for the D2 diagram language",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run with STDIO transport (default, for Claude Desktop)
  d2-mcp-server

  # Run with SSE transport on port 8080
  d2-mcp-server --transport sse --port 8080

  # Use a specific d2 binary
  d2-mcp-server --d2-path /usr/local/bin/d2

Note: d2_format requires the d2 binary (https://d2lang.com).
"""
    )
    parser.add_argument(
        "--transport",
        choices=sorted(TRANSPORTS),
        default="stdio",
        help="Transport mode (default: stdio)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8080,
        help="Port for SSE/HTTP transport (default: 8080)"
    )
    parser.add_argument(
        "--host",
        type=str,
        default="0.0.0.0",
        help="Host to bind for SSE/HTTP transport (default: 0.0.0.0)"
    )
    parser.add_argument(
        "--d2-path",
        type=str,
        default=None,
        help="Path to the d2 executable (default: $D2_PATH or d2 on PATH)"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Log level (default: $D2_MCP_LOG_LEVEL or INFO)"
    )
    parser.add_argument(
        "--no-warmup",
        action="store_true",
        help="Skip the background runtime warmup at startup"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__import__('d2_mcp').__version__}"
    )

    args = parser.parse_args()

    # Read at call time by the runtime and the lifespan
    if args.d2_path:
        os.environ["D2_PATH"] = args.d2_path
    if args.no_warmup:
        os.environ["D2_MCP_WARMUP"] = "0"

    from . import config
    from .logging_setup import setup_logging
    from .server import mcp

    setup_logging(args.log_level or config.LOG_LEVEL)
    logger = logging.getLogger("d2_mcp")

    if args.transport != "stdio":
        mcp.settings.host = args.host
        mcp.settings.port = args.port
        logger.info("Starting %s server on %s:%s", args.transport.upper(), args.host, args.port)

    logger.info("D2 MCP server running via %s", args.transport)
    try:
        mcp.run(transport=TRANSPORTS[args.transport])
    except KeyboardInterrupt:
        pass
    except Exception:
        logger.exception("Server error")
        sys.exit(1)


if __name__ == "__main__":
    main()
