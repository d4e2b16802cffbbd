"""
D2 MCP Server - d2 Binary Runner
================================

Spawns the d2 executable with piped stdio. Used by ``d2_format`` and by the
CLI-backed runtime.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from . import config
from .errors import BinaryNotFoundError, FormatError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BinaryResult:
    stdout: str
    stderr: str
    exit_code: int


async def run_d2_binary(
    args: Sequence[str],
    stdin: Optional[str] = None,
    executable: Optional[str] = None,
) -> BinaryResult:
    """Run d2 with ``args``, feeding ``stdin`` and collecting both output streams.

    Args:
        args: Arguments passed after the executable
        stdin: Text written to the process input, which is then closed
        executable: Path to d2 (default: ``D2_PATH`` or ``d2`` on PATH)

    Returns:
        BinaryResult with decoded stdout, stderr and the exit code

    Raises:
        BinaryNotFoundError: If the executable does not exist
    """
    d2_path = executable or config.d2_path()

    try:
        process = await asyncio.create_subprocess_exec(
            d2_path, *args,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError:
        logger.error("d2 binary not found: %s", d2_path)
        raise BinaryNotFoundError(d2_path) from None

    try:
        stdout, stderr = await process.communicate(
            stdin.encode("utf-8") if stdin is not None else None
        )
    finally:
        if process.returncode is None:
            try:
                process.kill()
            except ProcessLookupError:
                pass
            await process.wait()

    exit_code = process.returncode
    return BinaryResult(
        stdout=stdout.decode("utf-8", errors="replace") if stdout else "",
        stderr=stderr.decode("utf-8", errors="replace") if stderr else "",
        exit_code=exit_code if exit_code is not None else 1,
    )


async def format_source(source: str, executable: Optional[str] = None) -> str:
    """Format D2 source with ``d2 fmt -``.

    Raises:
        BinaryNotFoundError: If d2 is not installed
        FormatError: If d2 exits non-zero (usually a syntax error)
    """
    result = await run_d2_binary(["fmt", "-"], source, executable=executable)

    if result.exit_code != 0:
        error_msg = result.stderr or result.stdout or "Unknown error"
        raise FormatError(error_msg.strip(), result.exit_code)

    return result.stdout
