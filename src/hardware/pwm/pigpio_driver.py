"""
pigpio PWM driver

Talks to an already running pigpiod (e.g. `sudo systemctl start pigpiod`).
The daemon is always externally managed, so start() only connects.
"""

from typing import Optional, Sequence
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.HARDWARE)

PWM_RANGE = 1000


class PigpioDriver:

    def __init__(self, host: str = "localhost", port: int = 8888):
        self.host = host
        self.port = port
        self._pi = None

    def start(self, pins: Sequence[int]) -> bool:
        try:
            import pigpio
        except ImportError as e:
            log.error("pigpio not available", error=str(e))
            return False

        pi = pigpio.pi(self.host, self.port)
        if not pi.connected:
            log.error("Cannot connect to pigpiod", host=self.host, port=self.port)
            return False

        for pin in pins:
            pi.set_PWM_range(pin, PWM_RANGE)
        self._pi = pi
        log.info("Connected to pigpiod", pins=",".join(str(p) for p in pins))
        return True

    def set_duty(self, pin: int, value: float) -> None:
        if self._pi is None:
            raise RuntimeError("pigpiod is not connected")
        self._pi.set_PWM_dutycycle(pin, int(round(value * PWM_RANGE)))

    def release(self, pin: int) -> None:
        if self._pi is not None:
            self._pi.set_PWM_dutycycle(pin, 0)

    def stop(self) -> None:
        if self._pi is not None:
            self._pi.stop()
            self._pi = None
