"""
Shutdown handler protocol for component-based graceful shutdown.
"""

from typing import Protocol


class IShutdownHandler(Protocol):
    """
    Anything with a priority and an async shutdown() can take part in the
    shutdown sequence. The ShutdownCoordinator calls the handlers from the
    highest priority to the lowest.

    Example:
        class LEDShutdownHandler:
            @property
            def shutdown_priority(self) -> int:
                return 100

            async def shutdown(self) -> None:
                self.hardware.apply_exit_values()
    """

    @property
    def shutdown_priority(self) -> int:
        """Higher priority shuts down earlier."""
        ...

    async def shutdown(self) -> None:
        ...
