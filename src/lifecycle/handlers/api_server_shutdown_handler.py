from __future__ import annotations
from typing import TYPE_CHECKING

from lifecycle.shutdown_protocol import IShutdownHandler
from utils.logger import get_logger, LogCategory

if TYPE_CHECKING:
    from lifecycle.api_server_wrapper import APIServerWrapper

log = get_logger().for_category(LogCategory.SHUTDOWN)


class APIServerShutdownHandler(IShutdownHandler):
    """
    Stops the HTTP server so no new action arrives while pins are released.

    Priority: 90
    """

    def __init__(self, api_wrapper: APIServerWrapper):
        self.api_wrapper = api_wrapper

    @property
    def shutdown_priority(self) -> int:
        return 90

    async def shutdown(self) -> None:
        if not self.api_wrapper.is_running:
            log.debug("API server not running")
            return

        log.info("Stopping API server...")
        try:
            await self.api_wrapper.stop()
        except Exception as e:
            log.error(f"Error stopping API server: {e}")
