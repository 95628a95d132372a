"""
Device schemas - Pydantic models for device listing and push channel commands
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.device import Device


class DeviceResponse(BaseModel):
    """One configured controller with its last known color"""
    id: str = Field(description="Logical device ID")
    ip: str = Field(description="Controller IPv4 address")
    name: Optional[str] = Field(None, description="Display name from config")
    color: str = Field(description="Last color sent, as '#<color>'")

    @classmethod
    def from_device(cls, device: Device, color: str) -> "DeviceResponse":
        return cls(id=device.id, ip=device.address, name=device.name, color=f"#{color}")

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "id": "desk",
            "ip": "192.168.1.40",
            "name": "Desk strip",
            "color": "#ff00ff"
        }
    })


class DiscoveryResponseItem(BaseModel):
    remote_address: str
    remote_port: int
    payload: str
    received_at: float


class DiscoveryListResponse(BaseModel):
    """Discovery responses received since startup (bounded history)"""
    enabled: bool
    hello_sent: int = Field(description="Hello broadcasts issued since startup")
    response_count: int = Field(description="Responses received since startup")
    responses: List[DiscoveryResponseItem]


class SetColorEvent(BaseModel):
    """
    Push channel `set-color` payload.

    device is a dot-joined `<id>.<zone...>` target.
    """
    color: str = Field(min_length=1, description="Opaque color token, e.g. 'ff00ff'")
    device: str = Field(min_length=1, description="Target '<id>' or '<id>.<zone>'")

    @field_validator("color", "device")
    @classmethod
    def strip_whitespace(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value
