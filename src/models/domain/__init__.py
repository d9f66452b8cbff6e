"""Domain models - Config and runtime state objects"""

from models.domain.action import Action
from models.domain.resource import Resource, LedResource, OutputResource, ButtonResource, LongPressAlert
from models.domain.scene import Scene
from models.domain.animation import Animation, Frame
from models.domain.trigger import Trigger

__all__ = [
    "Action",
    "Resource",
    "LedResource",
    "OutputResource",
    "ButtonResource",
    "LongPressAlert",
    "Scene",
    "Animation",
    "Frame",
    "Trigger",
]
