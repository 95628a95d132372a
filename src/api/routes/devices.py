"""
Device Endpoints - read-only device listing

GET /devices keeps the shape web clients already consume:
    [{"id": "desk", "ip": "192.168.1.40", "name": "Desk strip", "color": "#fff"}, ...]
"""

from typing import List

from fastapi import APIRouter, Depends

from api.dependencies import get_service_container
from api.schemas.device import DeviceResponse
from services.service_container import ServiceContainer
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.API)

router = APIRouter(
    prefix="/devices",
    tags=["Devices"],
)


@router.get(
    "",
    response_model=List[DeviceResponse],
    summary="List all devices",
    description="Configured controllers in configuration order with their last known color"
)
async def list_devices(
    services: ServiceContainer = Depends(get_service_container)
) -> List[DeviceResponse]:
    return [
        DeviceResponse.from_device(device, services.color_cache.get(device.id))
        for device in services.registry.devices()
    ]


@router.get(
    "/{device_id}",
    response_model=DeviceResponse,
    summary="Get one device",
    responses={404: {"description": "Unknown device ID"}}
)
async def get_device(
    device_id: str,
    services: ServiceContainer = Depends(get_service_container)
) -> DeviceResponse:
    # UnknownDeviceError is rendered as 404 by the relay exception handler
    device = services.registry.get(device_id)
    return DeviceResponse.from_device(device, services.color_cache.get(device.id))
