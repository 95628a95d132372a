from __future__ import annotations
from typing import TYPE_CHECKING, Optional

from lifecycle.shutdown_protocol import IShutdownHandler
from utils.logger import get_logger, LogCategory

if TYPE_CHECKING:
    from services.discovery_service import DiscoveryService
    from services.relay_dispatcher import RelayDispatcher
    from services.udp_command_listener import UDPCommandListener

log = get_logger().for_category(LogCategory.SHUTDOWN)


class UDPShutdownHandler(IShutdownHandler):
    """
    Closes the UDP side of the relay.

    Order: stop accepting commands, let in-flight datagrams finish, stop
    discovery, then close the outbound socket.

    Priority: 80
    """

    def __init__(
        self,
        listener: "UDPCommandListener",
        dispatcher: "RelayDispatcher",
        discovery: Optional["DiscoveryService"] = None,
    ):
        self.listener = listener
        self.dispatcher = dispatcher
        self.discovery = discovery

    @property
    def shutdown_priority(self) -> int:
        return 80

    async def shutdown(self) -> None:
        log.info("Closing UDP sockets...")

        self.listener.stop()
        await self.listener.drain()

        if self.discovery is not None:
            self.discovery.stop()

        self.dispatcher.close()
        log.debug("UDP sockets closed")
