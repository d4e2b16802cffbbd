"""Tests for the deadline guard."""

import asyncio

import pytest

from d2_mcp.errors import RenderTimeoutError
from d2_mcp.timeout import pending_detached, with_timeout


async def _slow(result, delay, events=None):
    try:
        await asyncio.sleep(delay)
    except asyncio.CancelledError:
        if events is not None:
            events.append("cancelled")
        raise
    if events is not None:
        events.append("finished")
    return result


@pytest.mark.asyncio
async def test_returns_result_when_operation_wins():
    assert await with_timeout(_slow("svg", 0), 1000, "render") == "svg"


@pytest.mark.asyncio
async def test_propagates_operation_failure():
    async def boom():
        raise ValueError("layout failed")

    with pytest.raises(ValueError, match="layout failed"):
        await with_timeout(boom(), 1000, "render")


@pytest.mark.asyncio
async def test_timeout_message_names_label_and_seconds():
    with pytest.raises(RenderTimeoutError) as exc_info:
        await with_timeout(_slow("svg", 0.5), 50, "d2_render compile")

    message = str(exc_info.value)
    assert "d2_render compile" in message
    assert "0.05s" in message
    assert "dagre" in message
    await asyncio.sleep(0.6)


def test_default_deadline_renders_as_whole_seconds():
    assert "30s" in str(RenderTimeoutError("d2_render render", 30_000))


@pytest.mark.asyncio
async def test_timed_out_operation_keeps_running():
    events = []
    before = pending_detached()
    with pytest.raises(RenderTimeoutError):
        await with_timeout(_slow("svg", 0.2, events), 20, "render")

    assert events == []
    assert pending_detached() == before + 1

    await asyncio.sleep(0.4)
    assert events == ["finished"]
    assert pending_detached() == before


@pytest.mark.asyncio
async def test_cancel_on_timeout_stops_operation():
    events = []
    before = pending_detached()
    with pytest.raises(RenderTimeoutError):
        await with_timeout(_slow("svg", 5, events), 20, "render", cancel_on_timeout=True)

    await asyncio.sleep(0.05)
    assert events == ["cancelled"]
    assert pending_detached() == before


@pytest.mark.asyncio
async def test_caller_cancellation_cancels_operation():
    events = []
    waiter = asyncio.ensure_future(with_timeout(_slow("svg", 5, events), 10_000, "render"))
    await asyncio.sleep(0.02)
    waiter.cancel()

    with pytest.raises(asyncio.CancelledError):
        await waiter
    await asyncio.sleep(0.02)
    assert events == ["cancelled"]
