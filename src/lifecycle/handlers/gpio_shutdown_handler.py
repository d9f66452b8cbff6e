from __future__ import annotations
from typing import TYPE_CHECKING

from lifecycle.shutdown_protocol import IShutdownHandler
from utils.logger import get_logger, LogCategory

if TYPE_CHECKING:
    from services.hardware_service import HardwareService

log = get_logger().for_category(LogCategory.SHUTDOWN)


class GPIOShutdownHandler(IShutdownHandler):
    """
    Releases output and button pins, stops the PWM driver and cleans up GPIO.

    Priority: 10 (last)
    """

    def __init__(self, hardware: HardwareService):
        self.hardware = hardware

    @property
    def shutdown_priority(self) -> int:
        return 10

    async def shutdown(self) -> None:
        log.info("Releasing GPIO...")
        self.hardware.release_outputs()
        try:
            self.hardware.stop_hardware()
            log.debug("PWM stopped and GPIO cleaned up")
        except Exception as e:
            log.error(f"Error cleaning up GPIO: {e}")
