"""
GPIO Manager - Infrastructure Layer Component

Centralized GPIO pin allocation and lifecycle on top of RPi.GPIO.

- Outputs are set up with an explicit initial level
- Buttons are watched on both edges with the driver's own bouncetime, so
  the button engine only ever sees clean 0/1 transitions
- Edge callbacks arrive on the RPi.GPIO worker thread and are marshalled
  onto the asyncio loop with call_soon_threadsafe
"""

import asyncio
from typing import Dict, Optional
from hardware.gpio.gpio_manager_interface import EdgeCallback
from models.enums import GPIOInitialState
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.HARDWARE)


class HardwareGPIOManager:
    """
    Responsibilities:
    - Initialize RPi.GPIO library (BCM mode, disable warnings)
    - Track registered pins (prevent conflicts)
    - Bridge edge interrupts into the event loop
    - Release single pins and clean up everything on shutdown
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        """Initialize GPIO library and empty pin registry"""
        try:
            import RPi.GPIO as GPIO
        except ImportError as e:
            raise RuntimeError("RPi.GPIO not available") from e

        self._gpio = GPIO
        self._loop = loop
        self._registry: Dict[int, str] = {}  # pin -> component_name
        self._watched: Dict[int, bool] = {}  # pin -> active_low

        self._gpio.setmode(self._gpio.BCM)
        self._gpio.setwarnings(False)

        log.info("GPIO manager initialized (BCM mode)")


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
        """
        Register a watched input pin (buttons)

        Args:
            pin: BCM GPIO pin number
            component: Component name for tracking (e.g., "Button(doorbell)")
            on_edge: Called with (pin, logical level) for every debounced edge
            debounce_ms: Driver-level bouncetime
            active_low: Button pulls the pin to ground when pressed

        Raises:
            ValueError: If pin already registered by another component
        """
        self._check_available(pin, component)
        loop = self._loop or asyncio.get_running_loop()

        pull = self._gpio.PUD_UP if active_low else self._gpio.PUD_DOWN
        self._gpio.setup(pin, self._gpio.IN, pull_up_down=pull)

        def _on_interrupt(channel: int) -> None:
            level = int(self._gpio.input(channel))
            if active_low:
                level = 1 - level
            loop.call_soon_threadsafe(on_edge, channel, level)

        self._gpio.add_event_detect(
            pin,
            self._gpio.BOTH,
            callback=_on_interrupt,
            bouncetime=max(1, int(debounce_ms))
        )
        self._registry[pin] = component
        self._watched[pin] = active_low

        log.info(
            "GPIO pin registered (INPUT)",
            pin=pin,
            component=component,
            debounce_ms=debounce_ms,
            active_low=active_low
        )

    def register_output(
        self,
        pin: int,
        component: str,
        initial: GPIOInitialState = GPIOInitialState.LOW
    ) -> None:
        """
        Register and setup output pin

        Raises:
            ValueError: If pin already registered by another component
        """
        self._check_available(pin, component)

        gpio_initial = {
            GPIOInitialState.LOW: self._gpio.LOW,
            GPIOInitialState.HIGH: self._gpio.HIGH
        }[initial]

        self._gpio.setup(pin, self._gpio.OUT, initial=gpio_initial)
        self._registry[pin] = component

        log.info(
            "GPIO pin registered (OUTPUT)",
            pin=pin,
            component=component,
            initial=initial.name
        )


    # -------------------------------
    # IO
    # -------------------------------

    def read(self, pin: int) -> int:
        return int(self._gpio.input(pin))

    def write(self, pin: int, value: int) -> None:
        if pin not in self._registry:
            raise ValueError(f"GPIO {pin} is not registered")
        self._gpio.output(pin, self._gpio.HIGH if value else self._gpio.LOW)


    # -------------------------------
    # Lifecycle
    # -------------------------------

    def release(self, pin: int) -> None:
        component = self._registry.pop(pin, None)
        if component is None:
            return
        if self._watched.pop(pin, None) is not None:
            self._gpio.remove_event_detect(pin)
        self._gpio.cleanup(pin)
        log.debug("GPIO pin released", pin=pin, component=component)

    def cleanup(self) -> None:
        """Called on application shutdown to release GPIO resources."""
        log.info(f"Cleaning up {len(self._registry)} GPIO pins")

        for pin in list(self._watched):
            self._gpio.remove_event_detect(pin)
        self._gpio.cleanup()
        self._registry.clear()
        self._watched.clear()

        log.info("GPIO cleanup complete")

    def get_registry(self) -> Dict[int, str]:
        return self._registry.copy()

    def _check_available(self, pin: int, component: str) -> None:
        if pin in self._registry:
            existing_owner = self._registry[pin]
            error_msg = (
                f"GPIO pin conflict detected: Pin {pin} requested by '{component}' "
                f"is already registered to '{existing_owner}'"
            )
            log.error(error_msg)
            raise ValueError(error_msg)
