from .all_tasks_cancellation_handler import AllTasksCancellationHandler
from .animation_shutdown_handler import AnimationShutdownHandler
from .api_server_shutdown_handler import APIServerShutdownHandler
from .gpio_shutdown_handler import GPIOShutdownHandler
from .led_shutdown_handler import LEDShutdownHandler

__all__ = [
    "AllTasksCancellationHandler",
    "AnimationShutdownHandler",
    "APIServerShutdownHandler",
    "GPIOShutdownHandler",
    "LEDShutdownHandler",
]
