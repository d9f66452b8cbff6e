from typing import Dict
from hardware.gpio.gpio_manager_interface import EdgeCallback
from models.enums import GPIOInitialState
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.HARDWARE)


class MockGPIOManager:
    """In-memory GPIO used off the Pi and in tests; simulate_edge() stands in for interrupts"""

    def __init__(self):
        self._registry: Dict[int, str] = {}  # pin -> component_name
        self._values: Dict[int, int] = {}
        self._watchers: Dict[int, EdgeCallback] = {}
        self._active_low: Dict[int, bool] = {}
        log.info("Mock GPIO manager initialized")

    # -------------------------------
    # Registration
    # -------------------------------

    def register_input(
        self,
        pin: int,
        component: str,
        on_edge: EdgeCallback,
        debounce_ms: int = 10,
        active_low: bool = False
    ) -> None:
        self._check_available(pin, component)
        self._registry[pin] = component
        self._watchers[pin] = on_edge
        self._active_low[pin] = active_low
        self._values[pin] = 1 if active_low else 0

    def register_output(
        self,
        pin: int,
        component: str,
        initial: GPIOInitialState = GPIOInitialState.LOW
    ) -> None:
        self._check_available(pin, component)
        self._registry[pin] = component
        self._values[pin] = int(initial == GPIOInitialState.HIGH)

    # -------------------------------
    # IO
    # -------------------------------

    def read(self, pin: int) -> int:
        return self._values.get(pin, 0)

    def write(self, pin: int, value: int) -> None:
        if pin not in self._registry:
            raise ValueError(f"GPIO {pin} is not registered")
        self._values[pin] = int(value)

    def simulate_edge(self, pin: int, level: int) -> None:
        """Drive a watched pin to a logical level and deliver the edge synchronously"""
        raw = 1 - level if self._active_low.get(pin) else level
        self._values[pin] = raw
        callback = self._watchers.get(pin)
        if callback:
            callback(pin, level)

    # -------------------------------
    # Lifecycle
    # -------------------------------

    def release(self, pin: int) -> None:
        self._registry.pop(pin, None)
        self._watchers.pop(pin, None)
        self._active_low.pop(pin, None)

    def cleanup(self) -> None:
        count = len(self._registry)
        self._registry.clear()
        self._values.clear()
        self._watchers.clear()
        log.info(f"Mock GPIO Manager cleanup finished ({count} pins)")

    def get_registry(self) -> Dict[int, str]:
        return self._registry.copy()

    def _check_available(self, pin: int, component: str) -> None:
        if pin in self._registry:
            raise ValueError(
                f"GPIO {pin} already registered by {self._registry[pin]}"
            )
