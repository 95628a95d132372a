"""
Discovery Service - UDP broadcast presence probe

Two sockets, no state machine:
1. A listener bound on the discovery response port.
2. Once the listener is bound, an ephemeral broadcast socket sends the hello
   literal once to the limited-broadcast address on the request port.

Every datagram arriving on the listener afterwards is a discovery response: it is
trimmed, logged with the sender address, kept in a bounded history and published
on the event bus. There is no timeout and no completion signal; the listener runs
until stop(). Responses are never merged into the device registry.
"""

from __future__ import annotations

import asyncio
from collections import deque
from typing import Deque, List, Optional

from models.command import DiscoveryResponse
from models.config import DiscoveryConfig
from models.errors import ListenerBindError
from models.events import DiscoveryResponseEvent
from services.event_bus import EventBus
from services.udp_transport import Address, UDPProtocol, bound_port, open_udp_endpoint, send_datagram
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.DISCOVERY)


class DiscoveryListenerProtocol(UDPProtocol):
    def __init__(self, service: "DiscoveryService"):
        super().__init__("discovery-listener")
        self._service = service

    def on_datagram(self, data: bytes, addr: Address) -> None:
        self._service.on_response(data, addr)


class DiscoverySenderProtocol(UDPProtocol):
    def __init__(self):
        super().__init__("discovery-sender")

    def on_error(self, exc: Exception) -> None:
        log.warn(f"Discovery broadcast error: {exc!r}")


class DiscoveryService:
    """
    Send-once, listen-forever UDP discovery.

    Example:
        discovery = DiscoveryService(config.discovery, event_bus)
        await discovery.start()
        ...
        discovery.responses   # [DiscoveryResponse(...), ...]
        discovery.stop()
    """

    def __init__(self, config: DiscoveryConfig, event_bus: Optional[EventBus] = None):
        self._config = config
        self._event_bus = event_bus
        self._listener: Optional[asyncio.DatagramTransport] = None
        self._sender: Optional[asyncio.DatagramTransport] = None
        self._history: Deque[DiscoveryResponse] = deque(maxlen=max(1, config.history_limit))
        self._pending: set = set()
        self.hello_sent = 0
        self.response_count = 0

    async def start(self) -> None:
        """
        Bind the response listener, then broadcast hello once.

        Raises:
            ListenerBindError: response port or sender socket unavailable
        """
        self._listener, _ = await open_udp_endpoint(
            lambda: DiscoveryListenerProtocol(self),
            host="0.0.0.0",
            port=self._config.response_port,
        )
        log.info(f"Discovery listener on port {self.listen_port}")

        try:
            self._sender, _ = await open_udp_endpoint(
                DiscoverySenderProtocol,
                host="0.0.0.0",
                port=0,
                allow_broadcast=True,
            )
        except ListenerBindError:
            self.stop()
            raise
        self._broadcast_hello()

    def _broadcast_hello(self) -> None:
        target = (self._config.broadcast_address, self._config.request_port)
        try:
            send_datagram(self._sender, self._config.hello.encode("utf-8"), target)
        except OSError as ex:
            # Listener stays up without a probe
            log.error(f"Discovery hello to {target[0]}:{target[1]} failed", error=str(ex))
            return

        self.hello_sent += 1
        log.info(f"Discovery hello sent to {target[0]}:{target[1]}",
                 payload=self._config.hello)

    def on_response(self, data: bytes, addr: Address) -> DiscoveryResponse:
        """Record one discovery response (called from the listener protocol)."""
        response = DiscoveryResponse(
            remote_address=addr[0],
            remote_port=addr[1],
            payload=data.decode("utf-8", errors="replace").strip(),
        )
        self._history.append(response)
        self.response_count += 1

        log.info(f"Discovery response from {response.remote_address}",
                 port=response.remote_port, payload=response.payload or "-")

        if self._event_bus is not None:
            task = asyncio.get_running_loop().create_task(
                self._event_bus.publish(DiscoveryResponseEvent(response))
            )
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
        return response

    def stop(self) -> None:
        for transport in (self._sender, self._listener):
            if transport is not None:
                transport.close()
        self._sender = None
        self._listener = None
        log.info("Discovery stopped", responses=self.response_count)

    @property
    def responses(self) -> List[DiscoveryResponse]:
        """Snapshot of recent responses, newest last"""
        return list(self._history)

    @property
    def listen_port(self) -> Optional[int]:
        return bound_port(self._listener)

    @property
    def is_running(self) -> bool:
        return self._listener is not None and not self._listener.is_closing()
