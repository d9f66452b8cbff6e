from __future__ import annotations
from typing import TYPE_CHECKING

from lifecycle.shutdown_protocol import IShutdownHandler
from utils.logger import get_logger, LogCategory

if TYPE_CHECKING:
    from services.hardware_service import HardwareService

log = get_logger().for_category(LogCategory.SHUTDOWN)


class AnimationShutdownHandler(IShutdownHandler):
    """
    Stops running animations and cancels every pending timer (fades, blinks,
    gesture timers, delayed actions) before any pin is touched.

    Priority: 130 (first)
    """

    def __init__(self, hardware: HardwareService):
        self.hardware = hardware

    @property
    def shutdown_priority(self) -> int:
        return 130

    async def shutdown(self) -> None:
        log.info("Stopping animations and timers...")
        self.hardware.stop_effects()
