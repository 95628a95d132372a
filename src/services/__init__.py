"""Services layer"""

from .color_cache import ColorCache
from .device_registry import DeviceRegistry
from .event_bus import EventBus
from .relay_dispatcher import RelayDispatcher
from .udp_command_listener import UDPCommandListener
from .discovery_service import DiscoveryService
from .service_container import ServiceContainer

__all__ = [
    "ColorCache",
    "DeviceRegistry",
    "EventBus",
    "RelayDispatcher",
    "UDPCommandListener",
    "DiscoveryService",
    "ServiceContainer",
]
