"""
Relay error taxonomy

Every error carries a machine-readable code, a message and a details dict so the
same exception can be logged by the relay and rendered by the HTTP layer.

Per-command errors (MalformedCommandError, UnknownDeviceError, TransportSendError)
are dropped and logged where they occur. Startup errors (ListenerBindError,
ConfigError) abort the process.
"""

from typing import Optional


class RelayError(Exception):
    """Base class for relay errors"""
    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
        status_code: int = 400
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        self.status_code = status_code
        super().__init__(message)


class MalformedCommandError(RelayError):
    """Datagram or push event has no usable color / target"""
    def __init__(self, reason: str, raw: Optional[str] = None):
        super().__init__(
            code="MALFORMED_COMMAND",
            message=f"Malformed command: {reason}",
            details={"reason": reason, "raw": raw},
            status_code=422
        )


class UnknownDeviceError(RelayError):
    """Device ID is not present in the registry"""
    def __init__(self, device_id: str):
        self.device_id = device_id
        super().__init__(
            code="UNKNOWN_DEVICE",
            message=f"Device '{device_id}' not found",
            details={"device_id": device_id},
            status_code=404
        )


class TransportSendError(RelayError):
    """OS-level failure while sending a datagram"""
    def __init__(self, address: str, port: int, reason: str):
        self.address = address
        self.port = port
        super().__init__(
            code="TRANSPORT_SEND_FAILED",
            message=f"Send to {address}:{port} failed: {reason}",
            details={"address": address, "port": port, "reason": reason},
            status_code=503
        )


class ListenerBindError(RelayError):
    """A UDP socket could not be bound at startup"""
    def __init__(self, host: str, port: int, reason: str):
        self.host = host
        self.port = port
        super().__init__(
            code="LISTENER_BIND_FAILED",
            message=f"Cannot bind UDP socket on {host}:{port}: {reason}",
            details={"host": host, "port": port, "reason": reason},
            status_code=500
        )


class ConfigError(RelayError):
    """Invalid relay configuration"""
    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(
            code="CONFIG_ERROR",
            message=message,
            details=details,
            status_code=500
        )
