"""
Enums for the RGB relay
"""

from enum import Enum, auto


class CommandSource(Enum):
    """Ingress path a command arrived on"""
    UDP = auto()           # Raw datagram on the command port
    PUSH = auto()          # Socket.IO push channel (set-color)


class LogLevel(Enum):
    """Log severity levels"""
    DEBUG = auto()
    INFO = auto()
    WARN = auto()
    ERROR = auto()


class LogCategory(Enum):
    """Log categories for grouping related events"""
    CONFIG = auto()      # Configuration loading, validation
    REGISTRY = auto()    # Device registry construction and lookups
    CODEC = auto()       # Datagram / push event decoding
    RELAY = auto()       # Outbound controller sends
    INGRESS = auto()     # UDP command listener
    DISCOVERY = auto()   # Discovery broadcast and responses
    EVENT = auto()       # Event bus events and handling
    SYSTEM = auto()      # Startup, shutdown, errors

    API = auto()
    SOCKETIO = auto()

    SHUTDOWN = auto()
    TASK = auto()

    GENERAL = auto()    # Default general category
