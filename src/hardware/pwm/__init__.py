from .pwm_driver_interface import IPWMDriver
from .pi_blaster_driver import PiBlasterDriver
from .pigpio_driver import PigpioDriver
from .pwm_driver_mock import MockPWMDriver
from .pwm_driver_factory import create_pwm_driver


__all__ = [
    "IPWMDriver",
    "PiBlasterDriver",
    "PigpioDriver",
    "MockPWMDriver",
    "create_pwm_driver",
]
