"""
Color Cache - last known color per device

Owned by the service container, written by the relay dispatcher after each
successful send, read by the device listing endpoint and the Socket.IO snapshot.
"""

from typing import Dict, Iterable

DEFAULT_COLOR = "fff"


class ColorCache:
    """In-memory map device_id → last color sent."""

    def __init__(self, device_ids: Iterable[str] = (), default: str = DEFAULT_COLOR):
        self._default = default
        self._colors: Dict[str, str] = {device_id: default for device_id in device_ids}

    def get(self, device_id: str) -> str:
        return self._colors.get(device_id, self._default)

    def update(self, device_id: str, color: str) -> None:
        self._colors[device_id] = color

    def snapshot(self) -> Dict[str, str]:
        return dict(self._colors)
