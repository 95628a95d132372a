"""
Shared fixtures for relay tests.
"""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Set UTF-8 encoding for output (fixes Unicode symbol rendering)
if hasattr(sys.stdout, 'reconfigure') and sys.stdout.encoding != 'UTF-8':
    sys.stdout.reconfigure(encoding='utf-8')  # type: ignore
if hasattr(sys.stderr, 'reconfigure') and sys.stderr.encoding != 'UTF-8':
    sys.stderr.reconfigure(encoding='utf-8')  # type: ignore

# Add src to path
SRC_DIR = Path(__file__).parent.parent / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from models.config import NetworkConfig
from services.color_cache import ColorCache
from services.device_registry import DeviceRegistry
from services.event_bus import EventBus
from services.relay_dispatcher import RelayDispatcher


DEVICE_ENTRIES = [
    {"id": "desk", "ip": "192.168.1.40", "name": "Desk strip"},
    {"id": "shelf", "ip": "192.168.1.41"},
    {"id": "window", "ip": "192.168.1.42", "name": "Window"},
]


@pytest.fixture
def registry():
    return DeviceRegistry.from_config(DEVICE_ENTRIES)


@pytest.fixture
def network():
    return NetworkConfig(bind_host="127.0.0.1", command_port=0, controller_port=1337, source_port=0)


@pytest.fixture
def transport():
    """Open datagram transport double recording sendto() calls."""
    fake = MagicMock()
    fake.is_closing.return_value = False
    return fake


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def color_cache(registry):
    return ColorCache(registry.ids())


@pytest.fixture
def dispatcher(registry, network, color_cache, event_bus, transport):
    return RelayDispatcher(registry, network, color_cache=color_cache,
                           event_bus=event_bus, transport=transport)


def sent_datagrams(transport):
    """(payload, (address, port)) tuples passed to transport.sendto()"""
    return [c.args for c in transport.sendto.call_args_list]
