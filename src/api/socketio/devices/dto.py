from typing import Any, Dict, List

from api.schemas.device import DeviceResponse
from services.color_cache import ColorCache
from services.device_registry import DeviceRegistry


def device_snapshot(registry: DeviceRegistry, color_cache: ColorCache) -> List[Dict[str, Any]]:
    """Same records as GET /devices, as plain dicts for emit()."""
    return [
        DeviceResponse.from_device(device, color_cache.get(device.id)).model_dump()
        for device in registry.devices()
    ]
