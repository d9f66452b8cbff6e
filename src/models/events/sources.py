from enum import Enum, auto


class EventSource(Enum):
    """Event source identifiers for application events"""
    HARDWARE = auto()           # GPIO edges, hardware service
    BUTTON_ENGINE = auto()      # Gesture state machine
    SCENE_ENGINE = auto()
    ANIMATION_ENGINE = auto()
    NOTIFIER = auto()           # Outbound notifications and log lines
    APPLICATION = auto()        # Generic application events
