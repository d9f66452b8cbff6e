"""
Shutdown coordinator - runs the registered shutdown handlers in priority
order once a signal arrives or a critical task dies.
"""

import asyncio
import signal
from typing import List, Optional, Set

from lifecycle.task_registry import TaskRegistry
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SYSTEM)

# A failure in one of these categories takes the whole process down
CRITICAL_CATEGORIES = {"API", "HARDWARE"}


class ShutdownCoordinator:
    """
    Example:
        coordinator = ShutdownCoordinator()
        coordinator.register(AnimationShutdownHandler(hardware))
        coordinator.register(APIServerShutdownHandler(api_wrapper))
        coordinator.register(GPIOShutdownHandler(hardware))

        coordinator.setup_signal_handlers(loop)
        await coordinator.wait_for_shutdown()
        await coordinator.shutdown_all()
    """

    def __init__(self, timeout_per_handler: float = 5.0, total_timeout: float = 15.0):
        self._handlers: List = []
        self._shutdown_event: Optional[asyncio.Event] = None
        self._timeout_per_handler = timeout_per_handler
        self._total_timeout = total_timeout
        self.reason: Optional[str] = None

    def register(self, handler) -> None:
        if not hasattr(handler, "shutdown_priority"):
            raise ValueError(f"Handler {handler} missing shutdown_priority property")
        if not hasattr(handler, "shutdown"):
            raise ValueError(f"Handler {handler} missing shutdown() method")

        self._handlers.append(handler)
        log.debug(f"Registered shutdown handler: {handler.__class__.__name__}")

    def setup_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        """Install SIGINT / SIGTERM handlers that trigger the shutdown"""
        self._shutdown_event = asyncio.Event()

        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, self.request_shutdown, sig.name)

        log.info("Signal handlers installed (SIGINT, SIGTERM)")

    def request_shutdown(self, reason: str = "REQUESTED") -> None:
        if self._shutdown_event is None:
            self._shutdown_event = asyncio.Event()
        if not self._shutdown_event.is_set():
            self.reason = reason
            log.info(f"Shutdown requested: {reason}")
            self._shutdown_event.set()

    def _failed_critical_task(self) -> Optional[str]:
        for record in TaskRegistry.instance().failed():
            if record.info.category.name in CRITICAL_CATEGORIES:
                return record.info.description
        return None

    def _critical_tasks(self) -> Set[asyncio.Task]:
        return {
            r.task for r in TaskRegistry.instance().active()
            if r.info.category.name in CRITICAL_CATEGORIES
        }

    async def wait_for_shutdown(self) -> None:
        """
        Return once a shutdown was requested (signal or request_shutdown())
        or a critical task ended with an exception.
        """
        if self._shutdown_event is None:
            raise RuntimeError("Call setup_signal_handlers() first")

        while not self._shutdown_event.is_set():
            failed = self._failed_critical_task()
            if failed is not None:
                log.error(f"Critical task failed: {failed}")
                self.reason = f"Task failure: {failed}"
                return

            waiter = asyncio.create_task(self._shutdown_event.wait())
            try:
                # Re-check periodically so tasks registered later are watched too
                await asyncio.wait(
                    self._critical_tasks() | {waiter},
                    timeout=1.0,
                    return_when=asyncio.FIRST_COMPLETED
                )
            finally:
                if not waiter.done():
                    waiter.cancel()

        log.debug("Shutdown triggered", reason=self.reason)

    async def shutdown_all(self) -> None:
        """
        Run every handler from the highest priority to the lowest. A handler
        that fails or times out is logged and the sequence continues.
        """
        log.info("Initiating graceful shutdown sequence...", reason=self.reason or "UNKNOWN")

        handlers = sorted(self._handlers, key=lambda h: h.shutdown_priority, reverse=True)
        loop = asyncio.get_running_loop()
        start_time = loop.time()

        for handler in handlers:
            name = handler.__class__.__name__

            elapsed = loop.time() - start_time
            if elapsed > self._total_timeout:
                log.error(f"Total shutdown timeout exceeded ({elapsed:.1f}s > {self._total_timeout}s)")
                break

            try:
                log.debug(f"Shutting down {name} (priority={handler.shutdown_priority})...")
                await asyncio.wait_for(handler.shutdown(), timeout=self._timeout_per_handler)
            except asyncio.TimeoutError:
                log.error(f"{name} shutdown timeout ({self._timeout_per_handler}s)")
            except asyncio.CancelledError:
                log.warn(f"{name} shutdown was cancelled")
                raise
            except Exception as e:
                log.error(f"Error shutting down {name}: {type(e).__name__}: {e}")

        log.info("Shutdown sequence complete")

    def get_handler(self, handler_type: type):
        for handler in self._handlers:
            if isinstance(handler, handler_type):
                return handler
        return None
