"""
D2 MCP Server
=============

MCP server for the D2 diagram language.

Supports:
- Rendering: D2 -> SVG or ASCII art
- Validation: syntax and semantic checks without rendering
- Formatting: canonical D2 style (requires the d2 binary)
- Theme and layout engine catalogs

Transport modes:
- STDIO (default): For Claude Desktop and other MCP clients
- SSE: Server-Sent Events over HTTP
- HTTP: Streamable HTTP transport
"""

__version__ = "1.0.0"

from .server import create_server, mcp

__all__ = ["create_server", "mcp", "__version__"]
