"""Shared pytest fixtures for d2-mcp-server tests."""

import asyncio
import os
import shutil
import stat
import sys
from pathlib import Path
from typing import Optional

import pytest

from d2_mcp.compiler import DiagramCompiler
from d2_mcp.errors import CompileError
from d2_mcp.runtime import CompiledDiagram, CompileOptions, CompileResult, RenderOptions
from d2_mcp.tools import D2Tools

FONT_STYLE = (
    "<style type=\"text/css\">\n"
    "@font-face {\n  font-family: d2-font;\n  src: url(\"data:application/font-woff;base64,d09GRgABAAAAAAh\");\n}\n"
    "\n\n\n"
    "@font-face { font-family: d2-font-bold; src: url(\"data:application/font-woff;base64,AAAA\"); }\n"
    "</style>"
)

has_d2 = shutil.which(os.environ.get("D2_PATH") or "d2") is not None
requires_d2 = pytest.mark.skipif(not has_d2, reason="d2 binary not installed")
requires_posix = pytest.mark.skipif(sys.platform == "win32", reason="uses /bin/sh scripts")


class FakeD2:
    """Runtime stand-in that counts calls.

    Source containing ``{{`` fails to compile.
    """

    def __init__(self, delay: float = 0.0, output_size: Optional[int] = None):
        self.delay = delay
        self.output_size = output_size
        self.compile_calls = 0
        self.render_calls = 0
        self.finished = 0
        self.active = 0
        self.max_active = 0
        self.rendered_layouts = []

    async def compile(self, source: str, options: Optional[CompileOptions] = None) -> CompileResult:
        self.compile_calls += 1
        options = options or CompileOptions()
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        finally:
            self.active -= 1
        self.finished += 1
        if "{{" in source:
            raise CompileError("err: input.d2:1:5: unexpected map termination character } in file map")
        return CompileResult(
            diagram=CompiledDiagram(source=source, layout=options.layout),
            render_options=RenderOptions(ascii=options.ascii, pad=options.pad),
        )

    async def render(self, diagram: CompiledDiagram, render_options: RenderOptions) -> str:
        self.render_calls += 1
        self.rendered_layouts.append(diagram.layout)
        if render_options.ascii:
            return "┌───┐     ┌───┐\n│ a ├────▶│ b │\n└───┘     └───┘\n"
        body = "x" * self.output_size if self.output_size else "<g></g>"
        return (
            '<?xml version="1.0" encoding="utf-8"?>\n'
            f'<svg xmlns="http://www.w3.org/2000/svg">{FONT_STYLE}{body}</svg>'
        )


@pytest.fixture
def fake_d2() -> FakeD2:
    return FakeD2()


@pytest.fixture
def compiler(fake_d2: FakeD2) -> DiagramCompiler:
    return DiagramCompiler(runtime_factory=lambda: fake_d2, timeout_ms=5000)


@pytest.fixture
def d2_tools(compiler: DiagramCompiler) -> D2Tools:
    return D2Tools(compiler=compiler)


@pytest.fixture
def make_script(tmp_path: Path):
    """Write an executable /bin/sh script and return its path."""

    def _make(body: str, name: str = "fake-d2") -> str:
        script = tmp_path / name
        script.write_text("#!/bin/sh\n" + body + "\n", encoding="utf-8")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(script)

    return _make
