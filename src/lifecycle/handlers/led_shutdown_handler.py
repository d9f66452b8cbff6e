from __future__ import annotations
from typing import TYPE_CHECKING

from lifecycle.shutdown_protocol import IShutdownHandler
from utils.logger import get_logger, LogCategory

if TYPE_CHECKING:
    from services.hardware_service import HardwareService

log = get_logger().for_category(LogCategory.SHUTDOWN)


class LEDShutdownHandler(IShutdownHandler):
    """
    Drives every LED to its configured exit value.

    Priority: 100 (after timers are gone, while the PWM daemon is still up)
    """

    def __init__(self, hardware: HardwareService):
        self.hardware = hardware

    @property
    def shutdown_priority(self) -> int:
        return 100

    async def shutdown(self) -> None:
        log.info("Applying LED exit values...")
        self.hardware.apply_exit_values()
