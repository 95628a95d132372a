"""
Tests for ConfigManager include handling and typed config building.
"""

import pytest

from managers.config_manager import ConfigManager
from models.enums import LogLevel
from models.errors import ConfigError


def write(path, text):
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def config_dir(tmp_path):
    write(tmp_path / "network.yaml", """
network:
  command_port: 4000
  controller_port: 4001
discovery:
  enabled: false
""")
    write(tmp_path / "devices.yaml", """
devices:
  - id: desk
    ip: 10.0.0.40
  - id: shelf
    ip: 10.0.0.41
    name: Shelf
""")
    write(tmp_path / "defaults.yaml", """
devices: []
""")
    return tmp_path


def test_include_based_config(config_dir):
    main = write(config_dir / "config.yaml", """
include:
  - network.yaml
  - devices.yaml
logging:
  level: WARNING
  use_colors: false
""")
    manager = ConfigManager(config_path=str(main), defaults_path=str(config_dir / "defaults.yaml"))
    manager.load()
    config = manager.relay_config

    assert config.network.command_port == 4000
    assert config.network.controller_port == 4001
    assert config.network.source_port == 1339
    assert config.discovery.enabled is False
    assert config.discovery.request_port == 1341
    assert config.logging.level == LogLevel.WARN
    assert config.api.port == 3000

    registry = manager.build_registry()
    assert registry.ids() == ["desk", "shelf"]
    assert registry.get("shelf").name == "Shelf"


def test_main_file_overrides_includes(config_dir):
    main = write(config_dir / "config.yaml", """
include:
  - devices.yaml
devices:
  - id: lamp
    ip: 10.0.0.99
""")
    manager = ConfigManager(config_path=str(main), defaults_path=str(config_dir / "defaults.yaml"))
    manager.load()

    assert manager.build_registry().ids() == ["lamp"]


def test_missing_config_falls_back_to_defaults(config_dir):
    manager = ConfigManager(
        config_path=str(config_dir / "missing.yaml"),
        defaults_path=str(config_dir / "defaults.yaml")
    )
    manager.load()

    assert manager.relay_config.network.command_port == 1337
    assert len(manager.build_registry()) == 0


def test_unknown_section_key_raises(config_dir):
    main = write(config_dir / "config.yaml", """
network:
  comand_port: 1337
""")
    manager = ConfigManager(config_path=str(main), defaults_path=str(config_dir / "defaults.yaml"))

    with pytest.raises(ConfigError):
        manager.load()


def test_invalid_device_address_raises(config_dir):
    main = write(config_dir / "config.yaml", """
devices:
  - id: desk
    ip: 10.0.0.400
""")
    manager = ConfigManager(config_path=str(main), defaults_path=str(config_dir / "defaults.yaml"))
    manager.load()

    with pytest.raises(ConfigError):
        manager.build_registry()


def test_relay_config_requires_load():
    with pytest.raises(ConfigError):
        ConfigManager().relay_config


def test_shipped_config_loads():
    manager = ConfigManager()
    manager.load()

    assert manager.relay_config.network.command_port == 1337
    assert manager.build_registry().ids() == ["desk", "shelf", "window"]


@pytest.mark.parametrize("devices_yaml", [
    "devices:\n  - desk\n",
    "devices:\n  desk: 10.0.0.40\n",
])
def test_malformed_devices_raise_config_error(config_dir, devices_yaml):
    main = write(config_dir / "config.yaml", devices_yaml)
    manager = ConfigManager(config_path=str(main), defaults_path=str(config_dir / "defaults.yaml"))

    with pytest.raises(ConfigError):
        manager.load()
        manager.build_registry()


def test_quoted_use_colors_raises(config_dir):
    main = write(config_dir / "config.yaml", """
logging:
  use_colors: "false"
""")
    manager = ConfigManager(config_path=str(main), defaults_path=str(config_dir / "defaults.yaml"))

    with pytest.raises(ConfigError):
        manager.load()
