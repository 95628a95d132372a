"""
Models package - Data models for the RGB relay
"""

from .enums import CommandSource, LogLevel, LogCategory
from .device import Device
from .command import Command, DiscoveryResponse
from .config import RelayConfig, NetworkConfig, DiscoveryConfig, APIConfig, LoggingConfig

__all__ = [
    'CommandSource',
    'LogLevel',
    'LogCategory',
    'Device',
    'Command',
    'DiscoveryResponse',
    'RelayConfig',
    'NetworkConfig',
    'DiscoveryConfig',
    'APIConfig',
    'LoggingConfig',
]
