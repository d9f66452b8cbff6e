from dataclasses import dataclass

from models.events.base import Event
from models.events.types import EventType
from models.events.sources import EventSource


@dataclass(init=False)
class SceneChangedEvent(Event):
    name: str
    value: float

    def __init__(self, name: str, value: float):
        super().__init__(
            type=EventType.SCENE_CHANGED,
            source=EventSource.SCENE_ENGINE,
        )
        self.name = name
        self.value = value


@dataclass(init=False)
class AnimationStartedEvent(Event):
    name: str

    def __init__(self, name: str):
        super().__init__(
            type=EventType.ANIMATION_STARTED,
            source=EventSource.ANIMATION_ENGINE,
        )
        self.name = name


@dataclass(init=False)
class AnimationStoppedEvent(Event):
    name: str

    def __init__(self, name: str):
        super().__init__(
            type=EventType.ANIMATION_STOPPED,
            source=EventSource.ANIMATION_ENGINE,
        )
        self.name = name
