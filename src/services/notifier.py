"""
Notifier - outbound channel to the host process

Three kinds of traffic leave the engine:
- log lines (the logger's broadcaster hook points here)
- named UI notifications with a payload (NOTIFY actions, long-press alerts)
- the hardware-ready acknowledgement

Each one is published on the EventBus as a host event; whatever transport
the host uses subscribes there. Recent log lines are also kept in a bounded
history for the HTTP layer.
"""

from collections import deque
from typing import Any, Deque, List

from models.enums import LogCategory
from models.events import NotificationEvent, LogLineEvent, HardwareReadyEvent
from services.event_bus import EventBus
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.SYSTEM)


class Notifier:

    def __init__(self, event_bus: EventBus, history_size: int = 500):
        self.event_bus = event_bus
        self.log_history: Deque[LogLineEvent] = deque(maxlen=history_size)

    # ------------------------------------------------------------------
    # LogSink
    # ------------------------------------------------------------------

    def log(self, *, timestamp: str, level: str, category: str, message: str) -> None:
        """Mirror one log line to the host"""
        # Event bus chatter would feed back into itself
        if category == LogCategory.EVENT.name:
            return
        line = LogLineEvent(time=timestamp, level=level, category=category, message=message)
        self.log_history.append(line)
        self.event_bus.publish_nowait(line)

    def recent_logs(self, limit: int = 100) -> List[LogLineEvent]:
        return list(self.log_history)[-limit:]

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def notify(self, notification: str, payload: Any = None) -> bool:
        """Forward a named notification; always handled once published"""
        log.debug("Sending notification", notification=notification, payload=payload)
        self.event_bus.publish_nowait(NotificationEvent(notification, payload))
        return True

    def hardware_ready(self, leds_enabled: bool, outputs_enabled: bool, resources: List[str]) -> None:
        log.info("Hardware initialization complete", leds=leds_enabled, outputs=outputs_enabled)
        self.event_bus.publish_nowait(HardwareReadyEvent(leds_enabled, outputs_enabled, resources))
