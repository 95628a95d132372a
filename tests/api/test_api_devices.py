"""
Tests for the HTTP device listing and system endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from api.dependencies import set_service_container
from api.main import create_app
from models.command import DiscoveryResponse
from models.config import RelayConfig
from services.service_container import ServiceContainer


@pytest.fixture
def services(registry, color_cache, dispatcher, event_bus):
    return ServiceContainer(
        config=RelayConfig(),
        registry=registry,
        color_cache=color_cache,
        dispatcher=dispatcher,
        event_bus=event_bus,
    )


@pytest.fixture
def client(services):
    set_service_container(services)
    yield TestClient(create_app())
    set_service_container(None)


def test_list_devices_original_shape(client):
    response = client.get("/devices")

    assert response.status_code == 200
    assert response.json() == [
        {"id": "desk", "ip": "192.168.1.40", "name": "Desk strip", "color": "#fff"},
        {"id": "shelf", "ip": "192.168.1.41", "name": None, "color": "#fff"},
        {"id": "window", "ip": "192.168.1.42", "name": "Window", "color": "#fff"},
    ]


def test_listing_reflects_last_color(client, color_cache):
    color_cache.update("shelf", "00ff00")

    colors = {d["id"]: d["color"] for d in client.get("/api/v1/devices").json()}

    assert colors == {"desk": "#fff", "shelf": "#00ff00", "window": "#fff"}


def test_get_device(client):
    response = client.get("/api/v1/devices/window")

    assert response.status_code == 200
    assert response.json()["ip"] == "192.168.1.42"


def test_unknown_device_is_404(client):
    response = client.get("/api/v1/devices/attic")

    assert response.status_code == 404
    body = response.json()
    assert body["error"]["code"] == "UNKNOWN_DEVICE"
    assert body["error"]["details"] == {"device_id": "attic"}


def test_listing_without_services_is_503():
    set_service_container(None)
    client = TestClient(create_app())

    assert client.get("/devices").status_code == 503


def test_status_endpoint(client):
    body = client.get("/api/v1/system/status").json()

    assert body["devices"] == 3
    assert body["relay"] == {"sent": 0, "failed": 0, "dropped": 0, "open": True}
    assert body["discovery"] == {"enabled": False, "running": False}


def test_discovery_endpoint_when_disabled(client):
    body = client.get("/api/v1/system/discovery").json()

    assert body == {"enabled": False, "hello_sent": 0, "response_count": 0, "responses": []}


def test_discovery_endpoint_lists_responses(services, client):
    class FakeDiscovery:
        hello_sent = 1
        response_count = 1
        is_running = True
        responses = [DiscoveryResponse("10.0.0.5", 1341, "rgb-01", received_at=1.5)]

    services.discovery = FakeDiscovery()

    body = client.get("/api/v1/system/discovery").json()

    assert body["enabled"] is True
    assert body["hello_sent"] == 1
    assert body["responses"] == [
        {"remote_address": "10.0.0.5", "remote_port": 1341, "payload": "rgb-01", "received_at": 1.5}
    ]


def test_health(client):
    body = client.get("/api/health").json()

    assert body["status"] == "healthy"
    assert body["service"] == "rgb-relay"
