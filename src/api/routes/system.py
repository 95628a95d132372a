"""
System endpoints - Relay status, discovery history and task introspection
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from api.dependencies import get_service_container
from api.schemas.device import DiscoveryListResponse, DiscoveryResponseItem
from lifecycle.task_registry import TaskRegistry
from services.service_container import ServiceContainer
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.API)

router = APIRouter(prefix="/system", tags=["System"])


@router.get("/status")
async def get_status(
    services: ServiceContainer = Depends(get_service_container)
) -> Dict[str, Any]:
    """
    Relay counters and socket state.

    Returns:
        - relay: sent / failed / dropped counters and whether the socket is open
        - devices: number of configured devices
        - discovery: whether the discovery listener runs
    """
    discovery = services.discovery
    return {
        "relay": {**services.dispatcher.stats, "open": services.dispatcher.is_open},
        "devices": len(services.registry),
        "discovery": {
            "enabled": discovery is not None,
            "running": discovery.is_running if discovery else False,
        },
    }


@router.get("/discovery", response_model=DiscoveryListResponse)
async def get_discovery_responses(
    services: ServiceContainer = Depends(get_service_container)
) -> DiscoveryListResponse:
    """Discovery responses received since startup, newest last."""
    discovery = services.discovery
    if discovery is None:
        return DiscoveryListResponse(enabled=False, hello_sent=0, response_count=0, responses=[])

    return DiscoveryListResponse(
        enabled=True,
        hello_sent=discovery.hello_sent,
        response_count=discovery.response_count,
        responses=[
            DiscoveryResponseItem(
                remote_address=r.remote_address,
                remote_port=r.remote_port,
                payload=r.payload,
                received_at=r.received_at,
            )
            for r in discovery.responses
        ],
    )


@router.get("/tasks/summary")
async def get_task_summary() -> Dict[str, Any]:
    """
    High-level task summary.

    Returns:
        - summary: Human-readable summary string
        - total / active / failed / cancelled counts
    """
    registry = TaskRegistry.instance()
    return {
        "summary": registry.summary(),
        "total": len(registry.list_all()),
        "active": len(registry.active()),
        "failed": len(registry.failed()),
        "cancelled": len(registry.cancelled())
    }
