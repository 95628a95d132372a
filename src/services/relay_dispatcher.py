"""
Relay Dispatcher - sends decoded commands to controllers

Owns the single long-lived outbound UDP endpoint. Both ingress paths hand their
Command to dispatch(), which is the only place deciding unicast vs broadcast.

Flow:
    dispatch(command)
      ├─ target_id is None → broadcast_all(color)
      │                        └─ send_by_id(id) for every registry id
      └─ otherwise         → send_by_id(target_id, color, zone)
                               ├─ registry.address_of(id)
                               ├─ send(address, color, zone)
                               ├─ color_cache.update(id, color)
                               └─ event_bus.publish(ColorSentEvent)
"""

from __future__ import annotations

import asyncio
from typing import Dict, Optional

from models.command import Command
from models.config import NetworkConfig
from models.enums import CommandSource
from models.errors import RelayError, TransportSendError, UnknownDeviceError
from models.events import ColorSentEvent
from services.color_cache import ColorCache
from services.command_codec import encode_controller_payload
from services.device_registry import DeviceRegistry
from services.event_bus import EventBus
from services.udp_transport import UDPProtocol, open_udp_endpoint, send_datagram
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.RELAY)


class RelayProtocol(UDPProtocol):
    """Outbound endpoint protocol. Errors reaching on_error() arrived after the send returned."""

    def __init__(self, on_send_error):
        super().__init__("relay")
        self._on_send_error = on_send_error

    def on_datagram(self, data: bytes, addr) -> None:
        log.debug(f"Ignoring datagram from {addr[0]}:{addr[1]} on relay socket")

    def on_error(self, exc: Exception) -> None:
        self._on_send_error(exc)


class RelayDispatcher:
    """
    Unicast / broadcast-all relay to RGB controllers.

    Example:
        dispatcher = RelayDispatcher(registry, config.network, color_cache, event_bus)
        await dispatcher.open()
        await dispatcher.dispatch(decode_datagram(b"desk.top:ff00ff"))
    """

    def __init__(
        self,
        registry: DeviceRegistry,
        network: NetworkConfig,
        color_cache: Optional[ColorCache] = None,
        event_bus: Optional[EventBus] = None,
        transport: Optional[asyncio.DatagramTransport] = None,
    ):
        self._registry = registry
        self._network = network
        self._color_cache = color_cache or ColorCache(registry.ids())
        self._event_bus = event_bus
        self._transport = transport

        self._sent = 0
        self._failed = 0
        self._dropped = 0

    # ----------------------------------------------------------------------
    # LIFECYCLE
    # ----------------------------------------------------------------------
    async def open(self) -> None:
        """
        Bind the outbound endpoint on the fixed source port.

        Raises:
            ListenerBindError: source port unavailable
        """
        if self.is_open:
            return

        transport, _ = await open_udp_endpoint(
            lambda: RelayProtocol(self._on_async_send_error),
            host=self._network.bind_host,
            port=self._network.source_port,
        )
        self._transport = transport
        log.info(f"Relay socket ready on source port {self._network.source_port}",
                 controller_port=self._network.controller_port)

    def close(self) -> None:
        if self._transport is not None:
            self._transport.close()
            self._transport = None
            log.info("Relay socket closed")

    @property
    def is_open(self) -> bool:
        return self._transport is not None and not self._transport.is_closing()

    @property
    def color_cache(self) -> ColorCache:
        return self._color_cache

    @property
    def stats(self) -> Dict[str, int]:
        return {"sent": self._sent, "failed": self._failed, "dropped": self._dropped}

    # ----------------------------------------------------------------------
    # SENDING
    # ----------------------------------------------------------------------
    def send(self, address: str, color: str, zone: str = "") -> None:
        """
        Send one `<color>\\n` datagram to address:controller_port.

        The zone is accepted for logging only; controllers don't receive it.

        Raises:
            TransportSendError: endpoint not open or the OS rejected the send
        """
        port = self._network.controller_port
        if not self.is_open:
            self._failed += 1
            raise TransportSendError(address, port, "relay socket is not open")

        try:
            send_datagram(self._transport, encode_controller_payload(color), (address, port))
        except (OSError, ValueError, TypeError) as ex:
            self._failed += 1
            raise TransportSendError(address, port, str(ex)) from ex

        self._sent += 1
        log.debug(f"Sent {color} → {address}:{port}", zone=zone or "-")

    async def send_by_id(
        self,
        device_id: str,
        color: str,
        zone: str = "",
        origin: Optional[CommandSource] = None,
    ) -> None:
        """
        Resolve a device ID and send to it.

        Raises:
            UnknownDeviceError: ID not in the registry (nothing is sent)
            TransportSendError: OS-level send failure
        """
        address = self._registry.address_of(device_id)
        self.send(address, color, zone)

        self._color_cache.update(device_id, color)
        if self._event_bus is not None:
            await self._event_bus.publish(
                ColorSentEvent(device_id, address, color, zone, origin)
            )

    async def broadcast_all(self, color: str, origin: Optional[CommandSource] = None) -> int:
        """
        Send a color to every registered device in registry order.

        A failure on one device is logged and does not stop the others.

        Returns:
            Number of devices the color was sent to
        """
        delivered = 0
        for device_id in self._registry.ids():
            try:
                await self.send_by_id(device_id, color, origin=origin)
                delivered += 1
            except RelayError as ex:
                log.warn(f"Broadcast to '{device_id}' failed", error=ex.message)

        log.info(f"Broadcast {color} to {delivered}/{len(self._registry)} devices")
        return delivered

    async def dispatch(self, command: Command) -> bool:
        """
        Route a decoded command: broadcast when it has no target, else unicast.

        Per-command errors are logged and the command dropped.

        Returns:
            True if at least one datagram was handed to the OS
        """
        try:
            if command.is_broadcast:
                return await self.broadcast_all(command.color, origin=command.source) > 0

            await self.send_by_id(command.target_id, command.color, command.zone,
                                  origin=command.source)
            log.info(f"Relayed {command}", source=command.source.name)
            return True

        except UnknownDeviceError as ex:
            self._dropped += 1
            log.warn(f"Dropping command for unknown device '{ex.device_id}'",
                     command=str(command), source=command.source.name)
        except TransportSendError as ex:
            self._dropped += 1
            log.error("Dropping command after send failure",
                      command=str(command), error=ex.message)
        return False

    def _on_async_send_error(self, exc: Exception) -> None:
        """OS error reported after sendto() returned (e.g. ICMP unreachable)."""
        self._failed += 1
        log.warn(f"Controller send failed: {exc!r}")
