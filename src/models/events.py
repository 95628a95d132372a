"""
Event system for the RGB relay

The dispatcher and the discovery service publish events; the Socket.IO layer
subscribes and forwards them to connected web clients.
"""

from dataclasses import dataclass
import time
from enum import Enum, auto
from typing import Any, Dict, Generic, TypeVar

from models.command import DiscoveryResponse
from models.enums import CommandSource


class EventType(Enum):
    """Event types in the system"""
    COLOR_SENT = auto()
    DISCOVERY_RESPONSE = auto()


class EventSource(Enum):
    """Event source identifiers"""
    RELAY = auto()
    DISCOVERY = auto()


TSource = TypeVar("TSource", bound=Enum)


@dataclass
class Event(Generic[TSource]):
    """
    Base event class

    All events inherit from this and must specify:
    - type: EventType (what kind of event)
    - source: Enum (where it came from)
    - data: dict (event-specific payload)
    - timestamp: float (when it happened)
    """
    type: EventType
    source: TSource | None
    data: Dict[str, Any]
    timestamp: float


@dataclass
class ColorSentEvent(Event[EventSource]):
    """A color datagram was handed to the OS for one device"""

    def __init__(self, device_id: str, address: str, color: str, zone: str = "",
                 origin: CommandSource | None = None):
        super().__init__(
            type=EventType.COLOR_SENT,
            source=EventSource.RELAY,
            data={
                "device_id": device_id,
                "address": address,
                "color": color,
                "zone": zone,
                "origin": origin.name if origin else None,
            },
            timestamp=time.time()
        )

    @property
    def device_id(self) -> str:
        return self.data["device_id"]

    @property
    def color(self) -> str:
        return self.data["color"]

    @property
    def zone(self) -> str:
        return self.data["zone"]


@dataclass
class DiscoveryResponseEvent(Event[EventSource]):
    """A controller answered the discovery broadcast"""

    def __init__(self, response: DiscoveryResponse):
        super().__init__(
            type=EventType.DISCOVERY_RESPONSE,
            source=EventSource.DISCOVERY,
            data={
                "remote_address": response.remote_address,
                "remote_port": response.remote_port,
                "payload": response.payload,
                "received_at": response.received_at,
            },
            timestamp=time.time()
        )

    @property
    def remote_address(self) -> str:
        return self.data["remote_address"]

    @property
    def payload(self) -> str:
        return self.data["payload"]
