"""Outbound events for the host process (dashboard / UI collaborator)"""

from dataclasses import dataclass
from typing import Any, List

from models.events.base import Event
from models.events.types import EventType
from models.events.sources import EventSource


@dataclass(init=False)
class NotificationEvent(Event):
    """A named UI notification forwarded to the host (e.g. SHOW_ALERT)"""
    notification: str
    payload: Any

    def __init__(self, notification: str, payload: Any = None):
        super().__init__(
            type=EventType.NOTIFICATION,
            source=EventSource.NOTIFIER,
        )
        self.notification = notification
        self.payload = payload


@dataclass(init=False)
class LogLineEvent(Event):
    """One emitted log line, mirrored to the host"""
    time: str
    level: str
    category: str
    message: str

    def __init__(self, time: str, level: str, category: str, message: str):
        super().__init__(
            type=EventType.LOG_LINE,
            source=EventSource.NOTIFIER,
        )
        self.time = time
        self.level = level
        self.category = category
        self.message = message


@dataclass(init=False)
class HardwareReadyEvent(Event):
    """Acknowledgement that hardware initialization finished"""
    leds_enabled: bool
    outputs_enabled: bool
    resources: List[str]

    def __init__(self, leds_enabled: bool, outputs_enabled: bool, resources: List[str]):
        super().__init__(
            type=EventType.HARDWARE_READY,
            source=EventSource.HARDWARE,
        )
        self.leds_enabled = leds_enabled
        self.outputs_enabled = outputs_enabled
        self.resources = resources
