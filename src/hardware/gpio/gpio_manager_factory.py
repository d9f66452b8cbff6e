from runtime.runtime_info import RuntimeInfo
from hardware.gpio.gpio_manager_interface import IGPIOManager
from hardware.gpio.gpio_manager_hardware import HardwareGPIOManager
from hardware.gpio.gpio_manager_mock import MockGPIOManager


def create_gpio_manager(force_mock: bool = False) -> IGPIOManager:
    if not force_mock and RuntimeInfo.has_gpio():
        return HardwareGPIOManager()
    return MockGPIOManager()
