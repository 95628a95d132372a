"""
UDP Command Listener - raw datagram ingress

Receives `[<id>.<zone>]:<color>` datagrams on the command port, decodes them and
hands the resulting Command to the relay dispatcher.
"""

from __future__ import annotations

import asyncio
from typing import Optional, Set

from models.config import NetworkConfig
from models.errors import MalformedCommandError
from services.command_codec import decode_datagram
from services.relay_dispatcher import RelayDispatcher
from services.udp_transport import Address, UDPProtocol, bound_port, open_udp_endpoint
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.INGRESS)


class CommandProtocol(UDPProtocol):
    def __init__(self, listener: "UDPCommandListener"):
        super().__init__("command")
        self._listener = listener

    def on_datagram(self, data: bytes, addr: Address) -> None:
        self._listener.schedule(data, addr)


class UDPCommandListener:
    """
    Command ingress on the UDP command port.

    Datagram handling runs as a task on the loop so the protocol callback never
    waits on the dispatcher.
    """

    def __init__(self, network: NetworkConfig, dispatcher: RelayDispatcher):
        self._network = network
        self._dispatcher = dispatcher
        self._transport: Optional[asyncio.DatagramTransport] = None
        self._pending: Set[asyncio.Task] = set()
        self.received = 0
        self.rejected = 0

    async def start(self) -> None:
        """
        Bind the command port.

        Raises:
            ListenerBindError: command port unavailable (fatal at startup)
        """
        self._transport, _ = await open_udp_endpoint(
            lambda: CommandProtocol(self),
            host=self._network.bind_host,
            port=self._network.command_port,
        )
        log.info(f"Command listener on {self._network.bind_host}:{self.port}")

    def stop(self) -> None:
        if self._transport is not None:
            self._transport.close()
            self._transport = None
            log.info("Command listener stopped")

    @property
    def port(self) -> Optional[int]:
        return bound_port(self._transport)

    @property
    def is_running(self) -> bool:
        return self._transport is not None and not self._transport.is_closing()

    def schedule(self, data: bytes, addr: Address) -> None:
        task = asyncio.get_running_loop().create_task(self.handle_datagram(data, addr))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def handle_datagram(self, data: bytes, addr: Address) -> bool:
        """Decode one datagram and dispatch it. Malformed datagrams are dropped."""
        self.received += 1
        try:
            command = decode_datagram(data)
        except MalformedCommandError as ex:
            self.rejected += 1
            log.warn(f"Dropping malformed datagram from {addr[0]}:{addr[1]}",
                     reason=ex.details.get("reason"), raw=ex.details.get("raw"))
            return False

        log.debug(f"Datagram from {addr[0]}:{addr[1]}", command=str(command))
        return await self._dispatcher.dispatch(command)

    async def drain(self) -> None:
        """Wait for in-flight datagram handlers."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
