"""
D2 MCP Server - Tool Dispatch
=============================

The five tool operations, independent of the MCP transport:

- d2_render: D2 source -> SVG or ASCII art
- d2_validate: D2 source -> {"valid": bool, "error"?: str}
- d2_format: D2 source -> canonical D2 source (needs the d2 binary)
- d2_list_themes: built-in theme catalog
- d2_list_layouts: built-in layout catalog

``D2Tools.call`` validates the arguments, runs the operation and turns
every failure into an error ``ToolResult``. It never raises.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

from pydantic import BaseModel

from . import config
from .binary import format_source
from .catalog import layouts_payload, themes_payload
from .compiler import DiagramCompiler
from .errors import D2Error, FormatError, InputValidationError, OutputTooLargeError
from .fonts import strip_font_faces
from .schemas import FormatInput, RenderInput, ValidateInput, validate_arguments

logger = logging.getLogger(__name__)

RENDER_TIP = "Tip: Use d2_validate to check for syntax errors first."


@dataclass(frozen=True)
class ToolResult:
    text: str
    is_error: bool = False


def _json(payload: Any) -> str:
    return json.dumps(payload, indent=2)


class D2Tools:
    """Tool operations bound to a compiler facade and a formatter.

    Args:
        compiler: Shared compiler facade (default: a new ``DiagramCompiler``)
        formatter: Coroutine function formatting D2 source (default: ``d2 fmt``)
        character_limit: Maximum rendered output size in characters
    """

    def __init__(
        self,
        compiler: Optional[DiagramCompiler] = None,
        formatter: Optional[Callable[[str], Awaitable[str]]] = None,
        character_limit: int = config.CHARACTER_LIMIT,
    ):
        self.compiler = compiler or DiagramCompiler()
        self.formatter = formatter or format_source
        self.character_limit = character_limit
        self._operations: Dict[str, Callable[[Any], Awaitable[ToolResult]]] = {
            "d2_render": self.render,
            "d2_validate": self.validate,
            "d2_format": self.format,
            "d2_list_themes": self.list_themes,
            "d2_list_layouts": self.list_layouts,
        }

    @property
    def names(self):
        return tuple(self._operations)

    async def call(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> ToolResult:
        """Validate ``arguments`` for tool ``name`` and run it."""
        operation = self._operations.get(name)
        if operation is None:
            return ToolResult(f"Error: Unknown tool: {name}", is_error=True)

        try:
            params = validate_arguments(name, arguments)
        except InputValidationError as e:
            logger.info("Rejected %s call: %s", name, e)
            return ToolResult(f"Error: {e}", is_error=True)

        try:
            return await operation(params)
        except Exception as e:
            logger.exception("Unexpected failure in %s", name)
            return ToolResult(f"Error: {e}", is_error=True)

    async def render(self, params: RenderInput) -> ToolResult:
        try:
            result = await self.compiler.compile(
                params.d2_code, params.compile_options(), label="d2_render compile"
            )
            output = await self.compiler.render(result, label="d2_render render")
        except D2Error as e:
            logger.info("d2_render failed: %s", e)
            return ToolResult(f"Error rendering D2 diagram: {e}\n\n{RENDER_TIP}", is_error=True)

        # ASCII output never carries font data
        if params.skip_fonts and not params.ascii:
            output = strip_font_faces(output)

        if len(output) > self.character_limit:
            error = OutputTooLargeError(len(output), self.character_limit)
            logger.info("d2_render output rejected: %s", error.message)
            return ToolResult(f"Error: {error}", is_error=True)

        return ToolResult(output)

    async def validate(self, params: ValidateInput) -> ToolResult:
        try:
            await self.compiler.compile(params.d2_code, label="d2_validate compile")
        except Exception as e:
            return ToolResult(_json({"valid": False, "error": str(e) or type(e).__name__}))
        return ToolResult(_json({"valid": True}))

    async def format(self, params: FormatInput) -> ToolResult:
        try:
            formatted = await self.formatter(params.d2_code)
        except FormatError as e:
            return ToolResult(f"Error formatting D2 code: {e}", is_error=True)
        except D2Error as e:
            return ToolResult(f"Error: {e}", is_error=True)
        return ToolResult(formatted)

    async def list_themes(self, params: BaseModel) -> ToolResult:
        return ToolResult(_json(themes_payload()))

    async def list_layouts(self, params: BaseModel) -> ToolResult:
        return ToolResult(_json(layouts_payload()))
