"""
Tests for ShutdownCoordinator critical task monitoring and handler ordering.
"""

import asyncio
import contextlib

import pytest

from lifecycle.shutdown_coordinator import ShutdownCoordinator
from lifecycle.task_registry import create_tracked_task, TaskCategory, TaskRegistry


@pytest.fixture(autouse=True)
def fresh_registry():
    TaskRegistry.reset()
    yield
    TaskRegistry.reset()


class RecordingHandler:
    def __init__(self, name, priority, calls, fail=False):
        self.name = name
        self._priority = priority
        self.calls = calls
        self.fail = fail

    @property
    def shutdown_priority(self):
        return self._priority

    async def shutdown(self):
        self.calls.append(self.name)
        if self.fail:
            raise RuntimeError("handler failed")


@pytest.mark.asyncio
async def test_wait_for_shutdown_on_signal():
    coordinator = ShutdownCoordinator()
    coordinator.setup_signal_handlers(asyncio.get_running_loop())

    async def serve_forever():
        while True:
            await asyncio.sleep(0.1)

    task = create_tracked_task(serve_forever(), category=TaskCategory.API, description="Dummy API")
    asyncio.get_running_loop().call_later(0.2, coordinator.request_shutdown, "test")

    try:
        await asyncio.wait_for(coordinator.wait_for_shutdown(), timeout=2.0)
        assert coordinator.reason == "test"
    finally:
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task


@pytest.mark.asyncio
async def test_wait_for_shutdown_on_critical_task_failure():
    coordinator = ShutdownCoordinator()
    coordinator.setup_signal_handlers(asyncio.get_running_loop())

    async def failing():
        await asyncio.sleep(0.1)
        raise RuntimeError("port 3000 in use")

    task = create_tracked_task(failing(), category=TaskCategory.API, description="Failing API task")

    await asyncio.wait_for(coordinator.wait_for_shutdown(), timeout=2.0)

    assert "Task failure" in coordinator.reason
    assert TaskRegistry.instance().failed()[0].task is task


@pytest.mark.asyncio
async def test_background_failure_is_not_critical():
    coordinator = ShutdownCoordinator()
    coordinator.setup_signal_handlers(asyncio.get_running_loop())

    async def failing():
        raise RuntimeError("ignored")

    create_tracked_task(failing(), category=TaskCategory.BACKGROUND, description="Background")
    await asyncio.sleep(0.05)

    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(coordinator.wait_for_shutdown(), timeout=0.5)


@pytest.mark.asyncio
async def test_handlers_run_by_priority_and_survive_failures():
    calls = []
    coordinator = ShutdownCoordinator()
    coordinator.register(RecordingHandler("tasks", 40, calls))
    coordinator.register(RecordingHandler("api", 90, calls, fail=True))
    coordinator.register(RecordingHandler("udp", 80, calls))

    await coordinator.shutdown_all()

    assert calls == ["api", "udp", "tasks"]
    assert isinstance(coordinator.get_handler(RecordingHandler), RecordingHandler)


def test_register_rejects_incomplete_handler():
    with pytest.raises(ValueError):
        ShutdownCoordinator().register(object())


@pytest.mark.asyncio
async def test_wait_requires_setup():
    with pytest.raises(RuntimeError):
        await ShutdownCoordinator().wait_for_shutdown()
