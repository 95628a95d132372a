"""Command and discovery response models"""

import time
from dataclasses import dataclass, field
from typing import Optional

from models.enums import CommandSource


@dataclass(frozen=True)
class Command:
    """
    Decoded color command, consumed once by the dispatcher.

    target_id None means broadcast to every registered device.
    zone "" means the whole device.
    """
    target_id: Optional[str]
    zone: str
    color: str
    source: CommandSource = CommandSource.UDP

    @property
    def is_broadcast(self) -> bool:
        return self.target_id is None

    def __str__(self) -> str:
        target = "*" if self.target_id is None else self.target_id
        if self.zone:
            target = f"{target}.{self.zone}"
        return f"{target} <- {self.color}"


@dataclass(frozen=True)
class DiscoveryResponse:
    """Datagram received on the discovery response port"""
    remote_address: str
    remote_port: int
    payload: str
    received_at: float = field(default_factory=time.time)
