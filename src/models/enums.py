"""
Enums for the GPIO resource-action engine
"""

from enum import Enum, auto
from typing import Optional


class ResourceKind(Enum):
    """Kind of GPIO-backed resource"""
    LED = auto()       # Dimmable, driven by the PWM daemon
    OUTPUT = auto()    # Binary digital output
    BUTTON = auto()    # Watched digital input


class PinScheme(Enum):
    """Pin numbering schemes accepted in configuration"""
    BOARD = "BOARD"    # Physical header position
    BCMv1 = "BCMv1"    # Broadcom numbering, revision 1 boards
    BCMv2 = "BCMv2"    # Broadcom numbering, revision 2+ boards
    WPI = "WPI"        # wiringPi numbering


class ActionVerb(Enum):
    """Verbs accepted by the action dispatcher"""

    # Resource verbs
    SET = auto()
    INCREASE = auto()
    DECREASE = auto()
    TOGGLE = auto()
    BLINK = auto()

    # Scene verbs
    SET_SCENE = auto()
    INCREASE_SCENE = auto()
    DECREASE_SCENE = auto()
    TOGGLE_SCENE = auto()

    # Animation verbs (STOP also cancels a resource effect)
    START = auto()
    STOP = auto()
    STOP_ALL = auto()

    NOTIFY = auto()

    # Gesture verbs (re-enter a button's bound action list)
    PRESS = auto()
    DOUBLE_PRESS = auto()
    TRIPLE_PRESS = auto()
    LONG_PRESS = auto()
    RELEASE = auto()
    DOUBLE_RELEASE = auto()
    TRIPLE_RELEASE = auto()
    LONG_RELEASE = auto()

    @classmethod
    def parse(cls, raw) -> Optional["ActionVerb"]:
        """Case-insensitive lookup, FLASH is accepted as BLINK"""
        if not isinstance(raw, str) or not raw.strip():
            return None
        key = raw.strip().upper()
        if key == "FLASH":
            return cls.BLINK
        return cls.__members__.get(key)

    @property
    def is_scene_verb(self) -> bool:
        return self in SCENE_VERBS

    @property
    def is_gesture_verb(self) -> bool:
        return self.name in Gesture.__members__


SCENE_VERBS = frozenset({
    ActionVerb.SET_SCENE,
    ActionVerb.INCREASE_SCENE,
    ActionVerb.DECREASE_SCENE,
    ActionVerb.TOGGLE_SCENE,
})

LED_VERBS = frozenset({
    ActionVerb.SET,
    ActionVerb.INCREASE,
    ActionVerb.DECREASE,
    ActionVerb.TOGGLE,
    ActionVerb.BLINK,
    ActionVerb.STOP,
})

OUTPUT_VERBS = frozenset({
    ActionVerb.SET,
    ActionVerb.TOGGLE,
    ActionVerb.BLINK,
    ActionVerb.STOP,
})


class Gesture(Enum):
    """Discrete button gesture events"""
    PRESS = "press"
    DOUBLE_PRESS = "double_press"
    TRIPLE_PRESS = "triple_press"
    LONG_PRESS = "long_press"
    RELEASE = "release"
    DOUBLE_RELEASE = "double_release"
    TRIPLE_RELEASE = "triple_release"
    LONG_RELEASE = "long_release"

    @property
    def config_key(self) -> str:
        """Key of the action list in button configuration"""
        return self.value


# Press multiplicity -> (press gesture, release gesture)
SHORT_PRESS_GESTURES = {
    1: (Gesture.PRESS, Gesture.RELEASE),
    2: (Gesture.DOUBLE_PRESS, Gesture.DOUBLE_RELEASE),
    3: (Gesture.TRIPLE_PRESS, Gesture.TRIPLE_RELEASE),
}


class TimerSlot(Enum):
    """Scheduler slots; each owner holds at most one timer per slot"""
    EFFECT = auto()      # Fade / blink on an LED or output
    PRESS = auto()       # Multi-press window
    RELEASE = auto()     # Release debounce window
    LONG_PRESS = auto()  # Long-press threshold
    ALERT = auto()       # Long-press alert
    FRAME = auto()       # Animation frame advance
    DELAYED = auto()     # Delayed action dispatched on behalf of an owner


class LogLevel(Enum):
    """Log severity levels"""
    DEBUG = auto()
    INFO = auto()
    WARN = auto()
    ERROR = auto()


class GPIOInitialState(Enum):
    """GPIO output pin initial state"""
    LOW = auto()         # Start LOW (0V)
    HIGH = auto()        # Start HIGH (3.3V)


class LogCategory(Enum):
    """Log categories for grouping related events"""
    CONFIG = auto()      # Configuration loading, validation
    HARDWARE = auto()    # GPIO pins, PWM daemon
    ACTION = auto()      # Action dispatching
    EFFECT = auto()      # Fades, blinks, toggles
    BUTTON = auto()      # Button gestures
    SCENE = auto()
    ANIMATION = auto()
    TRIGGER = auto()
    EVENT = auto()       # Event bus events and handling
    SYSTEM = auto()      # Startup, shutdown, errors

    API = auto()
    SOCKETIO = auto()

    SHUTDOWN = auto()
    LIFECYCLE = auto()
    TASK = auto()

    GENERAL = auto()    # Default general category
