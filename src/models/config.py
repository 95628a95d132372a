"""
Relay configuration models

Typed view of the merged YAML configuration. Built by ConfigManager; every
section falls back to defaults when absent from the files.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from models.enums import LogLevel
from models.errors import ConfigError


@dataclass(frozen=True)
class NetworkConfig:
    """Command ingress and outbound controller ports"""
    bind_host: str = "0.0.0.0"
    command_port: int = 1337       # UDP command ingress
    controller_port: int = 1337    # Controllers listen on the same port number
    source_port: int = 1339        # Fixed source port of the outbound socket (0 = ephemeral)


@dataclass(frozen=True)
class DiscoveryConfig:
    enabled: bool = True
    request_port: int = 1341
    response_port: int = 1340
    broadcast_address: str = "255.255.255.255"
    hello: str = "hello"
    history_limit: int = 100


@dataclass(frozen=True)
class APIConfig:
    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: List[str] = field(default_factory=lambda: ["*"])


@dataclass(frozen=True)
class LoggingConfig:
    level: LogLevel = LogLevel.INFO
    use_colors: bool = True


@dataclass(frozen=True)
class RelayConfig:
    network: NetworkConfig = field(default_factory=NetworkConfig)
    discovery: DiscoveryConfig = field(default_factory=DiscoveryConfig)
    api: APIConfig = field(default_factory=APIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    devices: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RelayConfig":
        """
        Build typed config from the merged YAML dict.

        Unknown keys inside a section raise ConfigError so typos surface at startup.
        """
        data = data or {}
        return cls(
            network=_section(NetworkConfig, data.get("network")),
            discovery=_section(DiscoveryConfig, data.get("discovery")),
            api=_section(APIConfig, data.get("api")),
            logging=_logging_section(data.get("logging")),
            devices=_devices_section(data.get("devices")),
        )


def _section(section_cls, raw: Any):
    if raw is None:
        return section_cls()
    if not isinstance(raw, dict):
        raise ConfigError(f"Section for {section_cls.__name__} must be a mapping")
    try:
        return section_cls(**raw)
    except TypeError as ex:
        raise ConfigError(
            f"Invalid keys for {section_cls.__name__}: {ex}",
            details={"keys": sorted(raw.keys())}
        )


def _devices_section(raw: Any) -> List[Dict[str, Any]]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ConfigError("devices must be a list of device entries",
                          details={"type": type(raw).__name__})
    return list(raw)


def _logging_section(raw: Any) -> LoggingConfig:
    if raw is None:
        return LoggingConfig()
    if not isinstance(raw, dict):
        raise ConfigError("logging section must be a mapping")

    level_name = str(raw.get("level", "INFO")).upper()
    if level_name == "WARNING":
        level_name = "WARN"
    try:
        level = LogLevel[level_name]
    except KeyError:
        raise ConfigError(
            f"Unknown log level '{raw.get('level')}'",
            details={"valid_levels": [lvl.name for lvl in LogLevel]}
        )
    use_colors = raw.get("use_colors", True)
    if not isinstance(use_colors, bool):
        raise ConfigError(
            f"logging.use_colors must be true or false, got '{use_colors}'",
            details={"use_colors": repr(use_colors)}
        )
    return LoggingConfig(level=level, use_colors=use_colors)
