"""
Tests for the UDP command ingress.
"""

import asyncio

import pytest

from models.config import NetworkConfig
from models.errors import ListenerBindError
from services.udp_command_listener import UDPCommandListener

from conftest import sent_datagrams

SENDER = ("127.0.0.1", 50000)


@pytest.mark.asyncio
async def test_targeted_datagram_is_relayed(network, dispatcher, transport):
    listener = UDPCommandListener(network, dispatcher)

    assert await listener.handle_datagram(b"desk.top:ff00ff", SENDER) is True
    assert sent_datagrams(transport) == [(b"ff00ff\n", ("192.168.1.40", 1337))]


@pytest.mark.asyncio
async def test_bare_color_is_broadcast(network, dispatcher, transport):
    listener = UDPCommandListener(network, dispatcher)

    assert await listener.handle_datagram(b"00ff00", SENDER) is True
    assert transport.sendto.call_count == 3


@pytest.mark.asyncio
async def test_malformed_datagram_is_dropped(network, dispatcher, transport):
    listener = UDPCommandListener(network, dispatcher)

    assert await listener.handle_datagram(b"desk:", SENDER) is False
    assert listener.received == 1
    assert listener.rejected == 1
    transport.sendto.assert_not_called()


@pytest.mark.asyncio
async def test_unknown_device_does_not_stop_listener(network, dispatcher, transport):
    listener = UDPCommandListener(network, dispatcher)

    assert await listener.handle_datagram(b"attic:ff0000", SENDER) is False
    assert await listener.handle_datagram(b"shelf:ff0000", SENDER) is True
    assert transport.sendto.call_count == 1


@pytest.mark.asyncio
async def test_loopback_datagram_reaches_dispatcher(network, dispatcher, transport):
    listener = UDPCommandListener(network, dispatcher)
    await listener.start()
    loop = asyncio.get_running_loop()
    client, _ = await loop.create_datagram_endpoint(
        asyncio.DatagramProtocol, remote_addr=("127.0.0.1", listener.port)
    )

    try:
        assert listener.is_running
        client.sendto(b"window.upper:0000ff")
        client.sendto(b"garbage:")

        for _ in range(100):
            if listener.received == 2:
                break
            await asyncio.sleep(0.01)
        await listener.drain()

        assert listener.received == 2
        assert listener.rejected == 1
        assert sent_datagrams(transport) == [(b"0000ff\n", ("192.168.1.42", 1337))]
    finally:
        client.close()
        listener.stop()

    assert listener.is_running is False


@pytest.mark.asyncio
async def test_port_in_use_raises_bind_error(dispatcher):
    loop = asyncio.get_running_loop()
    holder, _ = await loop.create_datagram_endpoint(
        asyncio.DatagramProtocol, local_addr=("127.0.0.1", 0)
    )
    busy_port = holder.get_extra_info("sockname")[1]
    listener = UDPCommandListener(NetworkConfig(bind_host="127.0.0.1", command_port=busy_port), dispatcher)

    try:
        with pytest.raises(ListenerBindError) as exc_info:
            await listener.start()
        assert exc_info.value.port == busy_port
    finally:
        holder.close()
