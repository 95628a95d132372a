from models.events import ColorSentEvent, EventType
from services.service_container import ServiceContainer


def register_device_broadcaster(sio, services: ServiceContainer):
    bus = services.event_bus

    async def on_color_sent(event: ColorSentEvent):
        await sio.emit("device:color", {
            "id": event.device_id,
            "zone": event.zone,
            "color": f"#{event.color}",
        })

    bus.subscribe(EventType.COLOR_SENT, on_color_sent)  # type: ignore
