#!/usr/bin/env python3
"""
D2 MCP Server - Server Implementation
=====================================

Exposes the D2 diagram language as MCP tools.

Tools:
- d2_render: Render D2 source to SVG or ASCII art
- d2_validate: Check D2 source for syntax and semantic errors
- d2_format: Format D2 source to canonical style (requires the d2 binary)
- d2_list_themes: List built-in themes
- d2_list_layouts: List layout engines
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Annotated, Any, Dict, Literal, Optional, Sequence

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from mcp.types import TextContent, ToolAnnotations
from pydantic import Field

from . import config
from .tools import D2Tools

logger = logging.getLogger(__name__)

tools = D2Tools()

READ_ONLY = ToolAnnotations(
    readOnlyHint=True,
    destructiveHint=False,
    idempotentHint=True,
    openWorldHint=False,
)


@asynccontextmanager
async def server_lifespan(server: FastMCP):
    """Start the runtime warmup in the background; cancel it on shutdown."""
    warmup = None
    if config.warmup_enabled():
        # Clients can initialize immediately; warmup only shortens the first render
        warmup = asyncio.create_task(tools.compiler.warm_up())
    try:
        yield
    finally:
        if warmup is not None and not warmup.done():
            warmup.cancel()


class D2FastMCP(FastMCP):
    """FastMCP server whose D2 tools validate their arguments strictly.

    FastMCP drops unknown arguments; D2 tool calls are routed through
    ``D2Tools.call`` instead so a misspelled option is rejected before any
    runtime or binary call.
    """

    async def call_tool(self, name: str, arguments: Dict[str, Any]) -> Sequence[TextContent]:
        if name not in tools.names:
            return await super().call_tool(name, arguments)

        result = await tools.call(name, arguments)
        if result.is_error:
            raise ToolError(result.text)
        return [TextContent(type="text", text=result.text)]


# Initialize the MCP server
mcp = D2FastMCP(
    "d2-mcp-server",
    instructions="Render, validate and format D2 diagrams. Use d2_validate before d2_render.",
    lifespan=server_lifespan,
)


def create_server() -> FastMCP:
    """Create and return the MCP server instance."""
    return mcp


async def _invoke(name: str, **arguments: Any) -> str:
    result = await tools.call(name, {k: v for k, v in arguments.items() if v is not None})
    if result.is_error:
        raise ToolError(result.text)
    return result.text


# ============================================================================
# Rendering
# ============================================================================

@mcp.tool(title="Render D2 Diagram", annotations=READ_ONLY, structured_output=False)
async def d2_render(
    d2_code: Annotated[str, Field(description="The D2 diagram source code to render", min_length=1)],
    theme_id: Annotated[Optional[int], Field(description="Theme ID (default: 0). See d2_list_themes")] = None,
    dark_theme_id: Annotated[Optional[int], Field(description="Theme ID used in dark mode")] = None,
    layout: Annotated[Optional[Literal["dagre", "elk"]], Field(description="Layout engine: 'dagre' (default) or 'elk'")] = None,
    sketch: Annotated[Optional[bool], Field(description="Hand-drawn style (default: false)")] = None,
    pad: Annotated[Optional[int], Field(description="Padding in pixels (default: 100)", ge=0)] = None,
    center: Annotated[Optional[bool], Field(description="Center in viewbox (default: false)")] = None,
    ascii: Annotated[Optional[bool], Field(description="Output ASCII art instead of SVG (default: false)")] = None,
    skip_fonts: Annotated[Optional[bool], Field(description="Strip embedded font data from SVG (default: false)")] = None,
) -> str:
    """Render D2 diagram source code to SVG or ASCII art.

    D2 is a diagram scripting language. Key themes: 0=Neutral Default,
    3=Flagship Terrastruct, 300=Terminal, 200=Dark Mauve.

    skip_fonts removes the base64 WOFF data embedded in the SVG (~500KB);
    browsers fall back to system fonts. It has no effect on ascii output.

    Examples:
        - Simple: d2_code="a -> b: connects"
        - Architecture: d2_code="server -> db: query\\nserver -> cache: read"
        - ASCII: d2_code="a -> b -> c", ascii=true

    Returns:
        SVG markup starting with <?xml version="1.0" encoding="utf-8"?>,
        or ASCII art if ascii=true. Output over 200,000 characters is
        rejected; use ascii=true or skip_fonts=true to shrink it.
    """
    return await _invoke(
        "d2_render",
        d2_code=d2_code,
        theme_id=theme_id,
        dark_theme_id=dark_theme_id,
        layout=layout,
        sketch=sketch,
        pad=pad,
        center=center,
        ascii=ascii,
        skip_fonts=skip_fonts,
    )


# ============================================================================
# Validation and Formatting
# ============================================================================

@mcp.tool(title="Validate D2 Code", annotations=READ_ONLY, structured_output=False)
async def d2_validate(
    d2_code: Annotated[str, Field(description="The D2 diagram source code to validate", min_length=1)],
) -> str:
    """Validate D2 source code for syntax and semantic errors without rendering.

    Returns:
        JSON object {"valid": boolean, "error": string}; error is omitted
        when valid. Never fails: invalid code is reported in the result.
    """
    return await _invoke("d2_validate", d2_code=d2_code)


@mcp.tool(title="Format D2 Code", annotations=READ_ONLY, structured_output=False)
async def d2_format(
    d2_code: Annotated[str, Field(description="The D2 diagram source code to format", min_length=1)],
) -> str:
    """Format D2 source code to D2's canonical style with ``d2 fmt``.

    The output is semantically equivalent to the input, e.g.
    "a->b:label" becomes "a -> b: label".

    Requires the d2 binary. Install from https://d2lang.com or set the
    D2_PATH env var. Fails if the code has syntax errors.
    """
    return await _invoke("d2_format", d2_code=d2_code)


# ============================================================================
# Catalogs
# ============================================================================

@mcp.tool(title="List D2 Themes", annotations=READ_ONLY, structured_output=False)
async def d2_list_themes() -> str:
    """List D2 themes with their IDs, for d2_render's theme_id parameter.

    Returns:
        JSON object {"light": [{"id", "name"}], "dark": [{"id", "name"}]}

    Notable: 0 Neutral Default, 3 Flagship Terrastruct, 8 Colorblind Clear,
    200 Dark Mauve, 300 Terminal, 302 Origami, 303 C4.
    """
    return await _invoke("d2_list_themes")


@mcp.tool(title="List D2 Layout Engines", annotations=READ_ONLY, structured_output=False)
async def d2_list_layouts() -> str:
    """List D2 layout engines, for d2_render's layout parameter.

    Returns:
        JSON object {"layouts": [{"name", "description", "features"}]}

    dagre is the fast default. elk handles complex graphs better but is
    much slower.
    """
    return await _invoke("d2_list_layouts")
