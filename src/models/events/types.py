from enum import Enum, auto


class EventType(Enum):
    # Hardware
    BUTTON_GESTURE = auto()
    HARDWARE_READY = auto()

    # Engines
    SCENE_CHANGED = auto()
    ANIMATION_STARTED = auto()
    ANIMATION_STOPPED = auto()

    # Host-facing
    NOTIFICATION = auto()
    LOG_LINE = auto()
