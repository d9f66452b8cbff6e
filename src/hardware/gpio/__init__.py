from .gpio_manager_interface import IGPIOManager, EdgeCallback
from .gpio_manager_hardware import HardwareGPIOManager
from .gpio_manager_mock import MockGPIOManager
from .gpio_manager_factory import create_gpio_manager


__all__ = [
    "IGPIOManager",
    "EdgeCallback",
    "HardwareGPIOManager",
    "MockGPIOManager",
    "create_gpio_manager",
]
