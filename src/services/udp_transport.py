"""
UDP transport glue shared by the relay, the command listener and discovery.

Wraps loop.create_datagram_endpoint() so every socket is created the same way
and a failed bind surfaces as ListenerBindError.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Optional, Tuple

from models.errors import ListenerBindError
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SYSTEM)

Address = Tuple[str, int]


class UDPProtocol(asyncio.DatagramProtocol):
    """
    Base datagram protocol.

    Subclasses override on_datagram(); OS errors reported asynchronously by the
    transport are forwarded to on_error() and never close the endpoint. Errors
    raised while send_datagram() is inside sendto() are held for the caller.
    """

    def __init__(self, name: str):
        self.name = name
        self.transport: Optional[asyncio.DatagramTransport] = None
        self._capturing = False
        self._send_error: Optional[Exception] = None

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        self.transport = transport  # type: ignore[assignment]

    def datagram_received(self, data: bytes, addr: Address) -> None:
        self.on_datagram(data, addr)

    def error_received(self, exc: Exception) -> None:
        if self._capturing:
            self._send_error = exc
            return
        self.on_error(exc)

    def connection_lost(self, exc: Optional[Exception]) -> None:
        if exc:
            log.warn(f"[{self.name}] UDP endpoint lost: {exc!r}")
        else:
            log.debug(f"[{self.name}] UDP endpoint closed")
        self.transport = None

    def on_datagram(self, data: bytes, addr: Address) -> None:
        """Handle one inbound datagram"""

    def on_error(self, exc: Exception) -> None:
        log.warn(f"[{self.name}] UDP error: {exc!r}")


async def open_udp_endpoint(
    protocol_factory: Callable[[], UDPProtocol],
    host: str = "0.0.0.0",
    port: int = 0,
    *,
    allow_broadcast: bool = False,
) -> Tuple[asyncio.DatagramTransport, UDPProtocol]:
    """
    Bind a UDP endpoint on host:port (port 0 = ephemeral).

    Raises:
        ListenerBindError: the OS refused the bind
    """
    loop = asyncio.get_running_loop()
    try:
        transport, protocol = await loop.create_datagram_endpoint(
            protocol_factory,
            local_addr=(host, port),
            allow_broadcast=allow_broadcast,
        )
    except OSError as ex:
        raise ListenerBindError(host, port, ex.strerror or str(ex)) from ex

    sockname = transport.get_extra_info("sockname")
    log.debug(f"UDP endpoint bound on {sockname[0]}:{sockname[1]}",
              protocol=type(protocol).__name__,
              broadcast=allow_broadcast)
    return transport, protocol


def bound_port(transport: Optional[asyncio.DatagramTransport]) -> Optional[int]:
    """Actual local port of an endpoint (useful when bound to port 0)."""
    if transport is None:
        return None
    sockname = transport.get_extra_info("sockname")
    return sockname[1] if sockname else None


def send_datagram(transport: asyncio.DatagramTransport, data: bytes, addr: Address) -> None:
    """
    sendto() that raises when the OS rejects the datagram.

    asyncio's datagram transport does not raise a failed socket send; it hands
    the OSError to protocol.error_received() and returns. That error is caught
    here and re-raised. Errors reported later (ICMP unreachable, a send that
    had to be buffered) still reach the protocol's on_error().

    Raises:
        OSError: the kernel refused the send
    """
    protocol = transport.get_protocol()
    if not isinstance(protocol, UDPProtocol):
        transport.sendto(data, addr)
        return

    protocol._send_error = None
    protocol._capturing = True
    try:
        transport.sendto(data, addr)
    finally:
        protocol._capturing = False

    error, protocol._send_error = protocol._send_error, None
    if error is not None:
        raise error
