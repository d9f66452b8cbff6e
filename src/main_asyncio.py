"""
main_asyncio.py - Application entry point
-----------------------------------------

Responsible for:
- loading the configuration and building the resource registry
- wiring the services (Dependency Injection)
- starting hardware and the HTTP API inside one asyncio loop
- pushing host events (notifications, log lines, hardware ready) over Socket.IO
- graceful shutdown on Ctrl+C / SIGTERM or a critical task failure

Run from src/:
    python main_asyncio.py [path/to/config.yaml]
"""

import sys

# UTF-8 output for the logger's tree glyphs (Raspberry Pi consoles)
if hasattr(sys.stdout, 'reconfigure') and sys.stdout.encoding != 'UTF-8':
    sys.stdout.reconfigure(encoding='utf-8')  # type: ignore

import asyncio

from api.main import create_app
from api.socketio.registry import register_socketio
from api.socketio.server import create_socketio_server, wrap_app_with_socketio
from api.dependencies import set_service_container
from hardware.gpio import create_gpio_manager
from hardware.pwm import create_pwm_driver
from lifecycle import ShutdownCoordinator
from lifecycle.api_server_wrapper import APIServerWrapper
from lifecycle.handlers import (
    AllTasksCancellationHandler,
    AnimationShutdownHandler,
    APIServerShutdownHandler,
    GPIOShutdownHandler,
    LEDShutdownHandler,
)
from lifecycle.task_registry import create_tracked_task, TaskCategory
from managers import ConfigManager
from services import ServiceContainer
from utils.logger import get_logger, configure_for_developer_mode
from models.enums import LogCategory

log = get_logger().for_category(LogCategory.SYSTEM)


async def main(config_path: str = "config/config.yaml"):
    log.info("Starting GPIO engine...")

    # ========================================================================
    # 1. CONFIGURATION
    # ========================================================================

    config_manager = ConfigManager(config_path=config_path)
    config_manager.load()
    app_config = config_manager.app_config
    configure_for_developer_mode(app_config.developer_mode)

    # ========================================================================
    # 2. HARDWARE COLLABORATORS + SERVICES
    # ========================================================================

    gpio = create_gpio_manager()
    pwm = create_pwm_driver(app_config.pwm)

    services = ServiceContainer.build(config_manager, gpio, pwm)

    # Every log line from here on is mirrored to the host
    get_logger().set_broadcaster(services.notifier)
    set_service_container(services)

    # Subscribed before startup so the hardware-ready acknowledgement goes out
    sio = None
    if app_config.api.enabled:
        sio = create_socketio_server()
        await register_socketio(sio, services)

    await services.hardware.start_async()

    # ========================================================================
    # 3. API SERVER
    # ========================================================================

    api_wrapper = None
    if app_config.api.enabled:
        app = wrap_app_with_socketio(create_app(), sio)
        api_wrapper = APIServerWrapper(app, host=app_config.api.host, port=app_config.api.port)
        create_tracked_task(
            api_wrapper.start(),
            category=TaskCategory.API,
            description="FastAPI/Uvicorn Server + Socket.IO"
        )

    # ========================================================================
    # 4. SHUTDOWN COORDINATOR
    # ========================================================================

    coordinator = ShutdownCoordinator()
    coordinator.register(AnimationShutdownHandler(services.hardware))
    coordinator.register(LEDShutdownHandler(services.hardware))
    if api_wrapper is not None:
        coordinator.register(APIServerShutdownHandler(api_wrapper))
    coordinator.register(AllTasksCancellationHandler())
    coordinator.register(GPIOShutdownHandler(services.hardware))

    coordinator.setup_signal_handlers(asyncio.get_running_loop())

    log.info("Application initialized. Waiting for exit signal...")
    await coordinator.wait_for_shutdown()
    await coordinator.shutdown_all()

    get_logger().set_broadcaster(None)
    set_service_container(None)
    log.info("GPIO engine shut down cleanly.")


if __name__ == "__main__":
    try:
        asyncio.run(main(*sys.argv[1:2]))
    except KeyboardInterrupt:
        log.info("Keyboard interrupt received")
