"""
Hardware Layer

Low-level hardware collaborators only:

- Pin mapping table (configured pin numbers -> canonical BCM ids)
- GPIO (IGPIOManager: digital outputs, watched inputs)
- PWM (IPWMDriver: fractional duty cycle for LEDs)
"""
from .pin_mapping import resolve_pin, parse_scheme, is_pin_allowed, PWM_RESERVED_PIN
from .gpio import IGPIOManager, create_gpio_manager
from .pwm import IPWMDriver, create_pwm_driver

__all__ = [
    "resolve_pin",
    "parse_scheme",
    "is_pin_allowed",
    "PWM_RESERVED_PIN",
    "IGPIOManager",
    "create_gpio_manager",
    "IPWMDriver",
    "create_pwm_driver",
]
