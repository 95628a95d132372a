import asyncio
import socket

import pytest
from fastapi import FastAPI

from lifecycle.api_server_wrapper import APIServerWrapper
from lifecycle.handlers import APIServerShutdownHandler


async def wait_started(wrapper, timeout=5.0):
    deadline = asyncio.get_running_loop().time() + timeout
    while not (wrapper.server and wrapper.server.started):
        if asyncio.get_running_loop().time() > deadline:
            raise AssertionError("API server did not start")
        await asyncio.sleep(0.05)


@pytest.mark.asyncio
async def test_start_and_stop_releases_port():
    wrapper = APIServerWrapper(FastAPI(), host="127.0.0.1", port=8010)
    task = asyncio.create_task(wrapper.start())
    await wait_started(wrapper)

    assert wrapper.is_running

    await APIServerShutdownHandler(wrapper).shutdown()
    await asyncio.wait_for(task, timeout=2.0)

    assert not wrapper.is_running
    s = socket.socket()
    s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    s.bind(("127.0.0.1", 8010))
    s.close()


@pytest.mark.asyncio
async def test_stop_without_start():
    wrapper = APIServerWrapper(FastAPI(), host="127.0.0.1", port=8011)

    await wrapper.stop()

    assert wrapper.server is None


@pytest.mark.asyncio
async def test_start_cancelled_externally():
    wrapper = APIServerWrapper(FastAPI(), host="127.0.0.1", port=8012)

    task = asyncio.create_task(wrapper.start())
    await wait_started(wrapper)

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert not wrapper.is_running
