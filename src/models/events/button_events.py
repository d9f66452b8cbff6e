"""Button gesture events"""

from dataclasses import dataclass

from models.events.base import Event
from models.events.types import EventType
from models.events.sources import EventSource
from models.enums import Gesture


@dataclass(init=False)
class ButtonGestureEvent(Event):
    """Published once per fired gesture, after its bound actions were dispatched"""
    button: str
    gesture: Gesture
    handled: bool

    def __init__(self, button: str, gesture: Gesture, handled: bool = False):
        super().__init__(
            type=EventType.BUTTON_GESTURE,
            source=EventSource.BUTTON_ENGINE,
        )
        self.button = button
        self.gesture = gesture
        self.handled = handled
