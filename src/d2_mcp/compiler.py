"""
Compiler facade: one shared runtime, every call behind the deadline guard.
"""

import asyncio
import logging
from typing import Callable, Iterable, Optional

from . import config
from .catalog import LAYOUT_NAMES
from .runtime import D2, CompileOptions, CompileResult
from .timeout import with_timeout

logger = logging.getLogger(__name__)

WARMUP_SOURCE = "_warmup"


class DiagramCompiler:
    """Owns a lazily created runtime and guards its compile/render calls.

    Args:
        runtime_factory: Zero-argument callable building the runtime
        timeout_ms: Deadline for each compile or render call
        cancel_on_timeout: Cancel timed-out calls instead of detaching them
    """

    def __init__(
        self,
        runtime_factory: Callable[[], D2] = D2,
        timeout_ms: int = config.RENDER_TIMEOUT_MS,
        cancel_on_timeout: bool = config.CANCEL_ON_TIMEOUT,
    ):
        self._runtime_factory = runtime_factory
        self._runtime: Optional[D2] = None
        self.timeout_ms = timeout_ms
        self.cancel_on_timeout = cancel_on_timeout

    @property
    def runtime(self) -> D2:
        # Single event loop thread, so no init race
        if self._runtime is None:
            logger.debug("Creating D2 runtime")
            self._runtime = self._runtime_factory()
        return self._runtime

    async def compile(
        self,
        source: str,
        options: Optional[CompileOptions] = None,
        label: str = "compile",
    ) -> CompileResult:
        return await with_timeout(
            self.runtime.compile(source, options),
            self.timeout_ms,
            label,
            cancel_on_timeout=self.cancel_on_timeout,
        )

    async def render(self, result: CompileResult, label: str = "render") -> str:
        return await with_timeout(
            self.runtime.render(result.diagram, result.render_options),
            self.timeout_ms,
            label,
            cancel_on_timeout=self.cancel_on_timeout,
        )

    async def _warm_layout(self, layout: str) -> None:
        result = await self.compile(WARMUP_SOURCE, CompileOptions(layout=layout), label=f"warmup {layout} compile")
        await self.render(result, label=f"warmup {layout} render")

    async def warm_up(self, layouts: Iterable[str] = LAYOUT_NAMES) -> bool:
        """Compile and render a trivial diagram under each layout. Never raises.

        Returns:
            True if every layout rendered
        """
        layouts = tuple(layouts)
        try:
            await asyncio.gather(*(self._warm_layout(layout) for layout in layouts))
        except Exception as e:
            logger.warning("D2 runtime warmup error: %s", e)
            return False
        logger.info("D2 runtime warmed up (%s ready)", " + ".join(layouts))
        return True
