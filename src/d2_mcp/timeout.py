"""
Deadline guard for runtime calls.

The first of the operation and the deadline to settle wins. A timed-out
operation keeps running in the background unless ``cancel_on_timeout`` is
set; its eventual result is discarded.
"""

import asyncio
import logging
from typing import Awaitable, Set, TypeVar

from .errors import RenderTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Strong references to abandoned operations until they settle
_detached: Set["asyncio.Future"] = set()


def _discard(task: "asyncio.Future") -> None:
    _detached.discard(task)
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.debug("Abandoned operation finished with error: %s", exc)


def _detach(task: "asyncio.Future") -> None:
    _detached.add(task)
    task.add_done_callback(_discard)


def pending_detached() -> int:
    """Number of timed-out operations still running."""
    return len(_detached)


async def with_timeout(
    operation: Awaitable[T],
    timeout_ms: int,
    label: str,
    *,
    cancel_on_timeout: bool = False,
) -> T:
    """Await ``operation`` for at most ``timeout_ms`` milliseconds.

    Args:
        operation: Coroutine or future to run
        timeout_ms: Deadline in milliseconds
        label: Name of the phase, used in the timeout message
        cancel_on_timeout: Cancel the operation instead of leaving it running

    Returns:
        The operation's result

    Raises:
        RenderTimeoutError: If the deadline elapses first
    """
    task = asyncio.ensure_future(operation)
    try:
        done, _ = await asyncio.wait({task}, timeout=timeout_ms / 1000)
    except asyncio.CancelledError:
        task.cancel()
        raise

    if task in done:
        return task.result()

    logger.warning("%s timed out after %sms", label, timeout_ms)
    if cancel_on_timeout:
        task.cancel()
    _detach(task)
    raise RenderTimeoutError(label, timeout_ms)
