from models.events import DiscoveryResponseEvent, EventType
from services.service_container import ServiceContainer


def register_discovery_broadcaster(sio, services: ServiceContainer):
    bus = services.event_bus

    async def on_discovery_response(event: DiscoveryResponseEvent):
        await sio.emit("discovery:response", dict(event.data))

    bus.subscribe(EventType.DISCOVERY_RESPONSE, on_discovery_response)  # type: ignore
