"""
Config Manager

Main configuration manager with include system support.
Loads modular YAML files and builds the typed relay configuration and the
device registry.
"""

import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional

from models.config import RelayConfig
from models.errors import ConfigError
from services.device_registry import DeviceRegistry
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.CONFIG)

SRC_DIR = Path(__file__).resolve().parent.parent


class ConfigManager:
    """
    Main configuration manager with include system support

    Loads config.yaml and processes the include: directive to load modular YAML
    files (e.g. network.yaml, devices.yaml). Relative paths are resolved against
    src/, absolute paths are used as-is.

    Example:
        config = ConfigManager()
        config.load()

        config.relay_config.network.command_port   # 1337
        registry = config.build_registry()
    """

    def __init__(self, config_path="config/config.yaml", defaults_path="config/factory_defaults.yaml"):
        """
        Args:
            config_path: Path to main config.yaml (relative to src/)
            defaults_path: Path to factory defaults fallback
        """
        self.config_path = SRC_DIR / Path(config_path)
        self.factory_defaults_path = SRC_DIR / Path(defaults_path)
        self.data: Dict[str, Any] = {}
        self._relay_config: Optional[RelayConfig] = None

    def load(self) -> Dict[str, Any]:
        """
        Load YAML configuration with include system support

        Process:
        1. Load main config.yaml
        2. If it has 'include:' list, load and merge those files
        3. Otherwise treat as monolithic config
        4. Fallback to factory_defaults.yaml when the main config can't be read
        5. Build typed RelayConfig

        Raises:
            ConfigError: config sections are invalid
        """
        try:
            main_config = self._read_yaml(self.config_path)

            if 'include' in main_config:
                log.info("Using include-based configuration")
                included = self._load_with_includes(main_config['include'], self.config_path.parent)
                # Keys in the main file win over included files
                self.data = {**included, **{k: v for k, v in main_config.items() if k != 'include'}}
            else:
                log.info("Using monolithic configuration")
                self.data = main_config

        except (OSError, yaml.YAMLError) as ex:
            log.error(f"Failed to load {self.config_path.name}", error=str(ex), error_type=type(ex).__name__)
            log.warn("Falling back to factory defaults")
            self.data = self._read_yaml(self.factory_defaults_path)

        self._relay_config = RelayConfig.from_dict(self.data)
        log.info(
            "Configuration ready",
            command_port=self._relay_config.network.command_port,
            controller_port=self._relay_config.network.controller_port,
            devices=len(self._relay_config.devices)
        )
        return self.data

    def _read_yaml(self, path: Path) -> Dict[str, Any]:
        with open(path, "r", encoding="utf-8") as f:
            content = yaml.safe_load(f)
        if content is None:
            return {}
        if not isinstance(content, dict):
            raise ConfigError(f"{path.name} must contain a mapping at top level")
        return content

    def _load_with_includes(self, include_list: List[str], config_dir: Path) -> Dict[str, Any]:
        """
        Load and merge multiple YAML files from include list

        Args:
            include_list: List of filenames to load (e.g., ["network.yaml", "devices.yaml"])
            config_dir: Directory containing config files

        Returns:
            Merged config dict
        """
        merged: Dict[str, Any] = {}

        for filename in include_list:
            filepath = config_dir / filename
            try:
                file_data = self._read_yaml(filepath)
            except FileNotFoundError:
                log.error(f"File not found: {filename}")
                raise
            if file_data:
                merged.update(file_data)
                log.info(f"Loaded {filename}", keys=str(list(file_data.keys())))

        log.info("Config merge complete", total_keys=len(merged), keys=str(list(merged.keys())[:10]))
        return merged

    @property
    def relay_config(self) -> RelayConfig:
        if self._relay_config is None:
            raise ConfigError("Configuration not loaded, call load() first")
        return self._relay_config

    def build_registry(self) -> DeviceRegistry:
        """Device registry from the `devices` list"""
        devices = self.relay_config.devices
        if not devices:
            log.warn("No devices defined in config!")
        return DeviceRegistry.from_config(devices)
