from __future__ import annotations
import asyncio
import uvicorn
from typing import Any, Optional
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.API)


class APIServerWrapper:
    """
    Runs uvicorn inside the application's event loop without uvicorn's own
    signal handlers, so the ShutdownCoordinator decides when it stops.

    start() blocks until stop() has been called; schedule it as a tracked
    task. stop() asks uvicorn to exit and cancels the serve task if it does
    not finish in time.
    """

    def __init__(self, app: Any, host: str = "0.0.0.0", port: int = 8000):
        self.app = app
        self.host = host
        self.port = port
        self._server: Optional[uvicorn.Server] = None
        self._serve_task: Optional[asyncio.Task] = None
        self._stop_event: asyncio.Event = asyncio.Event()

    def _create_server(self) -> uvicorn.Server:
        config = uvicorn.Config(
            app=self.app,
            host=self.host,
            port=self.port,
            loop="asyncio",
            log_level="warning",
            access_log=False,
            server_header=False,
        )
        server = uvicorn.Server(config)
        server.install_signal_handlers = lambda: None  # type: ignore
        return server

    async def start(self) -> None:
        if self.is_running:
            raise RuntimeError("API server already started")

        self._server = self._create_server()
        self._stop_event.clear()

        log.info(f"Launching API server on http://{self.host}:{self.port}")
        self._serve_task = asyncio.create_task(self._server.serve(), name="UvicornServe")

        stop_waiter = asyncio.create_task(self._stop_event.wait())
        try:
            done, _ = await asyncio.wait(
                {self._serve_task, stop_waiter},
                return_when=asyncio.FIRST_COMPLETED
            )
            # serve() returning on its own means the port could not be bound
            if self._serve_task in done and not self._stop_event.is_set():
                exc = self._serve_task.exception()
                raise RuntimeError(f"API server exited unexpectedly: {exc}")
        except asyncio.CancelledError:
            await self.stop()
            raise
        finally:
            if not stop_waiter.done():
                stop_waiter.cancel()

    async def stop(self, *, shutdown_timeout: float = 2.0) -> None:
        self._stop_event.set()
        if self._server is None:
            return

        self._server.should_exit = True
        self._server.force_exit = True

        if self._serve_task is not None and not self._serve_task.done():
            try:
                await asyncio.wait_for(asyncio.shield(self._serve_task), timeout=shutdown_timeout)
            except asyncio.TimeoutError:
                log.warn("API server did not exit in time; cancelling")
                self._serve_task.cancel()
                await asyncio.gather(self._serve_task, return_exceptions=True)

        self._server = None
        self._serve_task = None
        log.info("API server stopped")

    @property
    def is_running(self) -> bool:
        return self._serve_task is not None and not self._serve_task.done()
