"""Device domain model"""

import ipaddress
from dataclasses import dataclass
from typing import Any, Dict, Optional

from models.errors import ConfigError


@dataclass(frozen=True)
class Device:
    """Immutable controller record from YAML"""
    id: str
    address: str
    name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Device":
        """
        Build a Device from a raw configuration entry.

        Accepts `ip` (config file key) or `address`.

        Raises:
            ConfigError: entry is not a mapping, missing id, missing or invalid IPv4 address
        """
        if not isinstance(data, dict):
            raise ConfigError("Device entry must be a mapping with id and ip",
                              details={"entry": repr(data)})

        device_id = data.get("id")
        if device_id is None or str(device_id).strip() == "":
            raise ConfigError("Device entry without id", details={"entry": data})

        address = data.get("ip", data.get("address"))
        if address is None:
            raise ConfigError(
                f"Device '{device_id}' has no ip address",
                details={"device_id": str(device_id)}
            )

        try:
            ipaddress.IPv4Address(str(address))
        except ValueError:
            raise ConfigError(
                f"Device '{device_id}' has invalid IPv4 address '{address}'",
                details={"device_id": str(device_id), "address": str(address)}
            )

        name = data.get("name")
        return cls(
            id=str(device_id),
            address=str(address),
            name=str(name) if name is not None else None
        )
