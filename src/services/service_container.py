"""Service Container - Dependency injection container for all core services"""

from dataclasses import dataclass
from typing import Optional

from models.config import RelayConfig
from services.color_cache import ColorCache
from services.device_registry import DeviceRegistry
from services.discovery_service import DiscoveryService
from services.event_bus import EventBus
from services.relay_dispatcher import RelayDispatcher


@dataclass
class ServiceContainer:
    """
    Centralized dependency injection container for the relay services.

    Services included:
    - config: typed relay configuration
    - registry: device ID → address lookups and enumeration
    - color_cache: last known color per device
    - dispatcher: unicast / broadcast relay to controllers
    - event_bus: pub-sub routing between relay, discovery and Socket.IO
    - discovery: UDP discovery probe (None when disabled)

    Usage:
        services = ServiceContainer(
            config=relay_config,
            registry=registry,
            color_cache=color_cache,
            dispatcher=dispatcher,
            event_bus=event_bus,
            discovery=discovery
        )

        # API endpoints use services via Depends(get_service_container)
        @router.get("/devices")
        async def list_devices(services: ServiceContainer = Depends(get_service_container)):
            return services.registry.devices()
    """

    config: RelayConfig
    registry: DeviceRegistry
    color_cache: ColorCache
    dispatcher: RelayDispatcher
    event_bus: EventBus
    discovery: Optional[DiscoveryService] = None
