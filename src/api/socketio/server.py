from typing import List, Optional, Union

from socketio import AsyncServer, ASGIApp
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SOCKETIO)


def create_socketio_server(cors_origins: Optional[List[str]] = None) -> AsyncServer:
    """Create and configure a Socket.IO AsyncServer."""
    origins: Union[str, List[str]] = cors_origins if cors_origins else "*"
    server = AsyncServer(
        async_mode="asgi",
        cors_allowed_origins=origins,
        ping_timeout=60,
        ping_interval=25,
        logger=False,
        engineio_logger=False,
    )
    log.debug("Socket.IO server created", cors=str(origins))
    return server


def wrap_app_with_socketio(app, socketio_server: AsyncServer):
    """Wrap FastAPI app with Socket.IO ASGI middleware."""
    return ASGIApp(socketio_server, app)
