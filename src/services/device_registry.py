"""
Device Registry - Static device ID → IPv4 address mapping

Loaded once at startup from the `devices` configuration list and read-only for
the lifetime of the process. Sole authority for ID → address resolution.
"""

from typing import Any, Dict, Iterable, Iterator, List

from models.device import Device
from models.errors import ConfigError, UnknownDeviceError
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.REGISTRY)


class DeviceRegistry:
    """
    Immutable registry of configured controllers.

    Preserves configuration order for enumeration and broadcast.

    Example:
        registry = DeviceRegistry.from_config([
            {"id": "desk", "ip": "192.168.1.40"},
            {"id": "shelf", "ip": "192.168.1.41"},
        ])
        registry.address_of("desk")   # "192.168.1.40"
        registry.ids()                # ["desk", "shelf"]
    """

    def __init__(self, devices: Iterable[Device]):
        self._devices: Dict[str, Device] = {}
        for device in devices:
            if device.id in self._devices:
                raise ConfigError(
                    f"Duplicate device id '{device.id}'",
                    details={"device_id": device.id}
                )
            self._devices[device.id] = device

        # Tuple snapshot so callers can't mutate the order
        self._order = tuple(self._devices.keys())
        log.info(f"Device registry loaded with {len(self._order)} devices",
                 ids=", ".join(self._order) or "-")

    @classmethod
    def from_config(cls, entries: List[Dict[str, Any]]) -> "DeviceRegistry":
        """Build the registry from raw YAML entries ({id, ip, name?})."""
        return cls(Device.from_dict(entry) for entry in entries or [])

    def devices(self) -> List[Device]:
        """All devices in configuration order."""
        return [self._devices[device_id] for device_id in self._order]

    def ids(self) -> List[str]:
        """All device IDs in configuration order."""
        return list(self._order)

    def get(self, device_id: str) -> Device:
        try:
            return self._devices[device_id]
        except KeyError:
            raise UnknownDeviceError(device_id) from None

    def address_of(self, device_id: str) -> str:
        """
        Resolve a device ID to its IPv4 address.

        Raises:
            UnknownDeviceError: ID not configured
        """
        return self.get(device_id).address

    def __contains__(self, device_id: object) -> bool:
        return device_id in self._devices

    def __len__(self) -> int:
        return len(self._order)

    def __iter__(self) -> Iterator[Device]:
        return iter(self.devices())
