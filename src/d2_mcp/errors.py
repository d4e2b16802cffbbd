"""
D2 MCP Server - Errors
======================

Every failure a tool can report is a ``D2Error``. Tools convert these into
error results; nothing here is allowed to escape a tool call.
"""

from typing import Optional


class D2Error(Exception):
    """Base class for all adapter errors."""

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.hint = hint

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message} {self.hint}"
        return self.message


class InputValidationError(D2Error):
    """Tool arguments do not match the tool's input schema."""


class CompileError(D2Error):
    """D2 source failed to parse or compile."""


class RenderError(D2Error):
    """A compiled diagram could not be laid out or drawn."""


class RenderTimeoutError(D2Error):
    """A guarded runtime call did not settle before its deadline."""

    def __init__(self, label: str, timeout_ms: int):
        self.label = label
        self.timeout_ms = timeout_ms
        super().__init__(
            f"{label} timed out after {timeout_ms / 1000:g}s.",
            "If you used layout-engine: elk, switch to dagre (or remove the layout "
            "setting entirely). ELK is extremely slow.",
        )


class BinaryNotFoundError(D2Error):
    """The d2 executable could not be launched because it does not exist."""

    def __init__(self, executable: str):
        self.executable = executable
        super().__init__(
            f"d2 binary not found ({executable}).",
            "Install d2 from https://d2lang.com or set the D2_PATH env var "
            "to the d2 executable.",
        )


class FormatError(D2Error):
    """``d2 fmt`` exited with a non-zero status."""

    def __init__(self, message: str, exit_code: int):
        self.exit_code = exit_code
        super().__init__(message)


class OutputTooLargeError(D2Error):
    """Rendered output exceeds the character limit."""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(
            f"Rendered output is too large ({size} chars, limit {limit}).",
            "Simplify your diagram, use ascii=true, or use skip_fonts=true "
            "for a smaller SVG output.",
        )
