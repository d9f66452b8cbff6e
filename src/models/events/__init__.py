"""
Event system for the GPIO engine

Backend events routed through the EventBus; the host-facing ones are
produced by the notifier.
"""

from models.events.types import EventType
from models.events.base import Event
from models.events.sources import EventSource

from models.events.button_events import ButtonGestureEvent
from models.events.engine_events import (
    SceneChangedEvent,
    AnimationStartedEvent,
    AnimationStoppedEvent,
)
from models.events.host_events import (
    NotificationEvent,
    LogLineEvent,
    HardwareReadyEvent,
)

__all__ = [
    "EventType",
    "Event",
    "EventSource",

    "ButtonGestureEvent",

    "SceneChangedEvent",
    "AnimationStartedEvent",
    "AnimationStoppedEvent",

    "NotificationEvent",
    "LogLineEvent",
    "HardwareReadyEvent",
]
