from models.events import EventType, LogLineEvent
from services.service_container import ServiceContainer
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SOCKETIO)


def register_logs(sio, services: ServiceContainer):
    """
    Registers Socket.IO integration for log streaming.

    Every mirrored log line goes out as "log:entry". The handler must not log:
    its own line would come straight back through the notifier.
    """

    async def on_log_line(event: LogLineEvent):
        await sio.emit("log:entry", event.to_data())

    services.event_bus.subscribe(EventType.LOG_LINE, on_log_line)
    log.info("Socket.IO registered as log broadcaster output")

    @sio.event
    async def logs_request_history(sid: str, data: dict):
        """
        Client asks for recent logs snapshot.
        """
        try:
            limit = int((data or {}).get("limit", 100))
            payload = [line.to_data() for line in services.notifier.recent_logs(limit)]

            await sio.emit("logs:snapshot", payload, room=sid)

        except Exception as e:
            log.error("Failed to send log history", error=str(e))
            await sio.emit("error", {"message": str(e)}, room=sid)
