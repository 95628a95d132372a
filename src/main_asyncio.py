"""
main_asyncio.py - Application entry point for the RGB relay
-----------------------------------------------------------

Responsible for:
- loading configuration and the device registry
- wiring dependencies (Dependency Injection)
- opening the UDP sockets and starting the API / Socket.IO server
- graceful shutdown on Ctrl+C or fatal errors
"""

import sys

# Set UTF-8 encoding for output before the logger prints symbols
if hasattr(sys.stdout, 'reconfigure') and sys.stdout.encoding != 'UTF-8':
    sys.stdout.reconfigure(encoding='utf-8')  # type: ignore
if hasattr(sys.stderr, 'reconfigure') and sys.stderr.encoding != 'UTF-8':
    sys.stderr.reconfigure(encoding='utf-8')  # type: ignore

import asyncio
import os

from api.dependencies import set_service_container
from api.main import create_app
from api.socketio.registry import register_socketio
from api.socketio.server import create_socketio_server, wrap_app_with_socketio
from lifecycle import ShutdownCoordinator
from lifecycle.api_server_wrapper import APIServerWrapper
from lifecycle.handlers import APIServerShutdownHandler, TaskCancellationHandler, UDPShutdownHandler
from lifecycle.task_registry import create_tracked_task, TaskCategory, TaskRegistry
from managers import ConfigManager
from models.enums import LogCategory
from models.errors import ConfigError, ListenerBindError
from services import (
    ColorCache, DiscoveryService, EventBus, RelayDispatcher,
    ServiceContainer, UDPCommandListener
)
from services.middleware import log_middleware
from utils.logger import get_logger, configure_logger

# ---------------------------------------------------------------------------
# LOGGER SETUP
# ---------------------------------------------------------------------------

log = get_logger().for_category(LogCategory.SYSTEM)

CONFIG_PATH = os.environ.get("RGB_RELAY_CONFIG", "config/config.yaml")


# ---------------------------------------------------------------------------
# Application Entry
# ---------------------------------------------------------------------------

async def main() -> int:
    """Main async entry point (dependency injection and event loop startup)."""

    log.info("Starting RGB relay...")

    # ========================================================================
    # 1. CONFIGURATION
    # ========================================================================

    try:
        config_manager = ConfigManager(config_path=CONFIG_PATH)
        config_manager.load()
        config = config_manager.relay_config
        configure_logger(config.logging.level, config.logging.use_colors)
        registry = config_manager.build_registry()
    except ConfigError as ex:
        log.error(f"Invalid configuration: {ex.message}", **ex.details)
        return 1

    # ========================================================================
    # 2. CORE SERVICES
    # ========================================================================

    log.info("Initializing event bus...")
    event_bus = EventBus()
    event_bus.add_middleware(log_middleware)

    color_cache = ColorCache(registry.ids())
    dispatcher = RelayDispatcher(registry, config.network, color_cache=color_cache, event_bus=event_bus)
    listener = UDPCommandListener(config.network, dispatcher)
    discovery = DiscoveryService(config.discovery, event_bus) if config.discovery.enabled else None

    # ========================================================================
    # 3. UDP SOCKETS
    # ========================================================================

    try:
        await dispatcher.open()
        await listener.start()
        if discovery is not None:
            await discovery.start()
    except ListenerBindError as ex:
        log.error(f"Cannot start relay: {ex.message}", **ex.details)
        listener.stop()
        dispatcher.close()
        return 1

    # ========================================================================
    # 4. SERVICE CONTAINER
    # ========================================================================

    services = ServiceContainer(
        config=config,
        registry=registry,
        color_cache=color_cache,
        dispatcher=dispatcher,
        event_bus=event_bus,
        discovery=discovery
    )

    set_service_container(services)
    log.info("Service container registered with API")

    # ========================================================================
    # 5. API SERVER + SOCKET.IO
    # ========================================================================

    app = create_app(cors_origins=list(config.api.cors_origins))
    sio = create_socketio_server(cors_origins=list(config.api.cors_origins))
    register_socketio(sio, services)
    asgi_app = wrap_app_with_socketio(app, sio)

    api_wrapper = APIServerWrapper(asgi_app, host=config.api.host, port=config.api.port)
    api_task = create_tracked_task(
        api_wrapper.start(),
        category=TaskCategory.API,
        description="FastAPI/Uvicorn Server"
    )

    # ========================================================================
    # 6. SHUTDOWN COORDINATOR
    # ========================================================================

    coordinator = ShutdownCoordinator()
    coordinator.register(APIServerShutdownHandler(api_wrapper))
    coordinator.register(UDPShutdownHandler(listener, dispatcher, discovery))
    coordinator.register(TaskCancellationHandler([api_task]))

    coordinator.setup_signal_handlers(asyncio.get_running_loop())

    log.info(
        "🏁 Relay ready. Waiting for exit signal...",
        devices=len(registry),
        command_port=listener.port,
        api=f"http://{config.api.host}:{config.api.port}"
    )

    await coordinator.wait_for_shutdown()
    await coordinator.shutdown_all()

    log.info(TaskRegistry.instance().summary())
    log.info("👋 RGB relay shut down cleanly.")
    return 1 if TaskRegistry.instance().failed() else 0


# ---------------------------------------------------------------------------
# ENTRY POINT
# ---------------------------------------------------------------------------

def run() -> None:
    exit_code = 1
    try:
        exit_code = asyncio.run(main())
    except KeyboardInterrupt:
        log.info("Keyboard interrupt received")
        exit_code = 0
    except Exception as e:
        log.error(f"Fatal error: {e!r}")
    sys.exit(exit_code)


if __name__ == "__main__":
    run()
