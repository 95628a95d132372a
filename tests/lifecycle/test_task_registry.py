"""
Tests for TaskRegistry bookkeeping.
"""

import asyncio
import contextlib

import pytest

from lifecycle.task_registry import create_tracked_task, TaskCategory, TaskRegistry


@pytest.fixture(autouse=True)
def fresh_registry():
    TaskRegistry.reset()
    yield
    TaskRegistry.reset()


@pytest.mark.asyncio
async def test_tracks_completion_failure_and_cancellation():
    async def ok():
        return 42

    async def boom():
        raise ValueError("boom")

    async def forever():
        await asyncio.sleep(10)

    t_ok = create_tracked_task(ok(), category=TaskCategory.SYSTEM, description="ok")
    t_boom = create_tracked_task(boom(), category=TaskCategory.NETWORK, description="boom")
    t_forever = create_tracked_task(forever(), category=TaskCategory.BACKGROUND, description="forever")

    await asyncio.gather(t_ok, t_boom, return_exceptions=True)
    await asyncio.sleep(0)

    registry = TaskRegistry.instance()
    assert [r.info.description for r in registry.active()] == ["forever"]
    assert [r.info.description for r in registry.failed()] == ["boom"]
    assert registry.get_record_by_task(t_ok).finished_return == 42

    t_forever.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await t_forever
    await asyncio.sleep(0)

    assert [r.info.description for r in registry.cancelled()] == ["forever"]
    assert registry.summary() == "Tasks: total=3, running=0, failed=1, cancelled=1"
