"""
Tests for the shutdown handlers that close relay resources.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from lifecycle.handlers import TaskCancellationHandler, UDPShutdownHandler
from models.config import DiscoveryConfig
from services.discovery_service import DiscoveryService
from services.relay_dispatcher import RelayDispatcher
from services.udp_command_listener import UDPCommandListener


@pytest.mark.asyncio
async def test_udp_handler_closes_every_socket(registry, network):
    dispatcher = RelayDispatcher(registry, network)
    listener = UDPCommandListener(network, dispatcher)
    discovery = DiscoveryService(DiscoveryConfig(response_port=0, broadcast_address="127.0.0.1"))

    await dispatcher.open()
    await listener.start()
    await discovery.start()
    assert dispatcher.is_open and listener.is_running and discovery.is_running

    await UDPShutdownHandler(listener, dispatcher, discovery).shutdown()

    assert not dispatcher.is_open
    assert not listener.is_running
    assert not discovery.is_running


@pytest.mark.asyncio
async def test_udp_handler_without_discovery():
    listener = MagicMock()
    listener.drain = AsyncMock()
    dispatcher = MagicMock()

    handler = UDPShutdownHandler(listener, dispatcher)
    await handler.shutdown()

    listener.stop.assert_called_once()
    dispatcher.close.assert_called_once()
    assert handler.shutdown_priority == 80


@pytest.mark.asyncio
async def test_task_cancellation_handler():
    async def forever():
        await asyncio.sleep(10)

    task = asyncio.create_task(forever())
    await TaskCancellationHandler([task]).shutdown()

    assert task.cancelled()
