"""
D2 MCP Server - D2 Runtime
==========================

Compile/render runtime behind the compiler facade. The default ``D2``
drives the d2 CLI:

- compile: ``d2 validate <file>``
- render:  ``d2 [flags] <file> <out.svg|out.txt>`` (``.txt`` gives ASCII art)

Every call owns its temporary directory and its subprocess, so a single
instance can serve overlapping requests.
"""

import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .binary import run_d2_binary
from .errors import CompileError, RenderError


@dataclass(frozen=True)
class CompileOptions:
    layout: Optional[str] = None
    sketch: Optional[bool] = None
    theme_id: Optional[int] = None
    dark_theme_id: Optional[int] = None
    pad: Optional[int] = None
    center: Optional[bool] = None
    ascii: Optional[bool] = None


@dataclass(frozen=True)
class RenderOptions:
    sketch: Optional[bool] = None
    theme_id: Optional[int] = None
    dark_theme_id: Optional[int] = None
    pad: Optional[int] = None
    center: Optional[bool] = None
    ascii: Optional[bool] = None


@dataclass(frozen=True)
class CompiledDiagram:
    source: str
    layout: Optional[str] = None


@dataclass(frozen=True)
class CompileResult:
    diagram: CompiledDiagram
    render_options: RenderOptions


def _render_flags(layout: Optional[str], options: RenderOptions) -> List[str]:
    flags = []
    if layout is not None:
        flags += ["--layout", layout]
    if options.theme_id is not None:
        flags += ["--theme", str(options.theme_id)]
    if options.dark_theme_id is not None:
        flags += ["--dark-theme", str(options.dark_theme_id)]
    if options.sketch is not None:
        flags.append(f"--sketch={str(options.sketch).lower()}")
    if options.pad is not None:
        flags += ["--pad", str(options.pad)]
    if options.center is not None:
        flags.append(f"--center={str(options.center).lower()}")
    return flags


def _diagnostic(stderr: str, stdout: str) -> str:
    return (stderr or stdout or "Unknown error").strip()


class D2:
    """d2 CLI runtime.

    Args:
        executable: Path to d2 (default: ``D2_PATH`` or ``d2`` on PATH)
    """

    def __init__(self, executable: Optional[str] = None):
        self.executable = executable

    async def compile(self, source: str, options: Optional[CompileOptions] = None) -> CompileResult:
        options = options or CompileOptions()

        with tempfile.TemporaryDirectory(prefix="d2-mcp-") as tmp:
            input_path = Path(tmp) / "input.d2"
            input_path.write_text(source, encoding="utf-8")
            result = await run_d2_binary(
                ["validate", str(input_path)], executable=self.executable
            )

        if result.exit_code != 0:
            raise CompileError(_diagnostic(result.stderr, result.stdout))

        return CompileResult(
            diagram=CompiledDiagram(source=source, layout=options.layout),
            render_options=RenderOptions(
                sketch=options.sketch,
                theme_id=options.theme_id,
                dark_theme_id=options.dark_theme_id,
                pad=options.pad,
                center=options.center,
                ascii=options.ascii,
            ),
        )

    async def render(self, diagram: CompiledDiagram, render_options: RenderOptions) -> str:
        suffix = ".txt" if render_options.ascii else ".svg"

        with tempfile.TemporaryDirectory(prefix="d2-mcp-") as tmp:
            input_path = Path(tmp) / "input.d2"
            output_path = Path(tmp) / f"output{suffix}"
            input_path.write_text(diagram.source, encoding="utf-8")

            args = _render_flags(diagram.layout, render_options)
            args += [str(input_path), str(output_path)]
            result = await run_d2_binary(args, executable=self.executable)

            if result.exit_code != 0:
                raise RenderError(_diagnostic(result.stderr, result.stdout))
            if not output_path.exists():
                raise RenderError("d2 exited successfully but produced no output")

            return output_path.read_text(encoding="utf-8")
