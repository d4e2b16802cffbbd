"""
Tool input schemas.

Unknown fields are rejected so that a misspelled option is never silently
ignored.
"""

from typing import Annotated, Any, Dict, Literal, Mapping, Optional, Type

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError

from .errors import InputValidationError
from .runtime import CompileOptions


def _integral_float(value: Any) -> Any:
    # JSON clients may send 3.0 for 3
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


WholeNumber = Annotated[int, BeforeValidator(_integral_float)]


class _StrictInput(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True, frozen=True)


class RenderInput(_StrictInput):
    d2_code: str = Field(min_length=1, description="The D2 diagram source code to render")
    theme_id: Optional[WholeNumber] = Field(
        default=None,
        description="Theme ID (default: 0 = Neutral Default). Use d2_list_themes to see all options.",
    )
    dark_theme_id: Optional[WholeNumber] = Field(
        default=None,
        description="Theme ID used when the viewer is in dark mode. If unset, theme_id is used for both modes.",
    )
    layout: Optional[Literal["dagre", "elk"]] = Field(
        default=None,
        description="Layout engine: 'dagre' (default, fast hierarchical) or 'elk' (better for complex graphs, slow)",
    )
    sketch: Optional[bool] = Field(default=None, description="Render in hand-drawn/sketch style")
    pad: Optional[Annotated[WholeNumber, Field(ge=0)]] = Field(default=None, description="Padding in pixels around the diagram (default: 100)")
    center: Optional[bool] = Field(default=None, description="Center the SVG in its viewbox")
    ascii: Optional[bool] = Field(default=None, description="Render as ASCII/Unicode art instead of SVG")
    skip_fonts: Optional[bool] = Field(
        default=None,
        description="Strip embedded font data from SVG output. No effect on ascii output.",
    )

    def compile_options(self) -> CompileOptions:
        return CompileOptions(
            layout=self.layout,
            sketch=self.sketch,
            theme_id=self.theme_id,
            dark_theme_id=self.dark_theme_id,
            pad=self.pad,
            center=self.center,
            ascii=self.ascii,
        )


class ValidateInput(_StrictInput):
    d2_code: str = Field(min_length=1, description="The D2 diagram source code to validate")


class FormatInput(_StrictInput):
    d2_code: str = Field(min_length=1, description="The D2 diagram source code to format")


class NoArguments(_StrictInput):
    pass


TOOL_INPUTS: Dict[str, Type[BaseModel]] = {
    "d2_render": RenderInput,
    "d2_validate": ValidateInput,
    "d2_format": FormatInput,
    "d2_list_themes": NoArguments,
    "d2_list_layouts": NoArguments,
}


def _describe(error: Dict[str, Any]) -> str:
    field = ".".join(str(part) for part in error["loc"]) or "arguments"
    if error["type"] == "extra_forbidden":
        return f"{field}: unknown field"
    if error["type"] == "missing":
        return f"{field}: required field is missing"
    return f"{field}: {error['msg']}"


def validate_arguments(tool_name: str, arguments: Optional[Mapping[str, Any]]) -> BaseModel:
    """Validate raw tool arguments against the tool's schema.

    Args:
        tool_name: Registered tool name
        arguments: Raw argument mapping from the tool call (None means empty)

    Returns:
        The validated input model

    Raises:
        InputValidationError: Naming every offending field and constraint
    """
    schema = TOOL_INPUTS.get(tool_name)
    if schema is None:
        raise InputValidationError(f"Unknown tool: {tool_name}")
    if arguments is not None and not isinstance(arguments, Mapping):
        raise InputValidationError(f"Invalid arguments for {tool_name}: expected an object")

    try:
        return schema.model_validate(dict(arguments or {}))
    except ValidationError as e:
        details = "; ".join(_describe(err) for err in e.errors())
        raise InputValidationError(f"Invalid arguments for {tool_name}: {details}") from None
