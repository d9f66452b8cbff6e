from typing import Dict, List, Sequence, Tuple
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.HARDWARE)


class MockPWMDriver:
    """Records every duty-cycle write; used off the Pi and in tests"""

    def __init__(self, fail_start: bool = False):
        self.fail_start = fail_start
        self.started = False
        self.pins: Tuple[int, ...] = ()
        self.writes: List[Tuple[int, float]] = []
        self.duty: Dict[int, float] = {}

    def start(self, pins: Sequence[int]) -> bool:
        if self.fail_start:
            log.error("Mock PWM driver refused to start")
            return False
        self.started = True
        self.pins = tuple(pins)
        log.info("Mock PWM driver started", pins=",".join(str(p) for p in pins))
        return True

    def set_duty(self, pin: int, value: float) -> None:
        if not self.started:
            raise RuntimeError("PWM driver is not running")
        self.writes.append((pin, value))
        self.duty[pin] = value

    def history(self, pin: int) -> List[float]:
        return [value for p, value in self.writes if p == pin]

    def release(self, pin: int) -> None:
        self.duty.pop(pin, None)

    def stop(self) -> None:
        self.started = False
