from models.config import PWMConfig
from hardware.pwm.pwm_driver_interface import IPWMDriver
from hardware.pwm.pi_blaster_driver import PiBlasterDriver
from hardware.pwm.pigpio_driver import PigpioDriver
from hardware.pwm.pwm_driver_mock import MockPWMDriver


def create_pwm_driver(config: PWMConfig) -> IPWMDriver:
    if config.driver == "pigpio":
        return PigpioDriver(host=config.host, port=config.port)
    if config.driver == "pi-blaster":
        return PiBlasterDriver(
            script_path=config.script_path,
            device=config.device,
            external=config.external
        )
    return MockPWMDriver()
