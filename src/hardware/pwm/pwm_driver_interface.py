from typing import Protocol, Sequence


class IPWMDriver(Protocol):
    """Fractional duty-cycle output for LED pins"""

    def start(self, pins: Sequence[int]) -> bool:
        """Bring the PWM service up for the given pins; False means no LED capability"""
        ...

    def set_duty(self, pin: int, value: float) -> None:
        """Set duty cycle 0.0-1.0 (physical, active-low already applied); raises on failure"""
        ...

    def release(self, pin: int) -> None:
        ...

    def stop(self) -> None:
        ...
