"""
Scene Engine

A scene is one master dial in [0, 1] fanned out to its member actions: every
member is re-dispatched with master_value set to the scene value (scaling the
member's own value) and, except for BLINK members, the requested fade time.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Optional, Sequence

from models.domain import Action, Scene
from models.enums import ActionVerb
from models.events import SceneChangedEvent
from utils.coerce import to_number, clamp
from utils.logger import get_logger, LogCategory

if TYPE_CHECKING:
    from services.event_bus import EventBus

log = get_logger().for_category(LogCategory.SCENE)

DEFAULT_STEP = 0.1


class SceneEngine:

    def __init__(self, dispatch: Callable[[Sequence[Action]], bool], event_bus: Optional[EventBus] = None):
        self.dispatch = dispatch
        self.event_bus = event_bus

    def set(self, scene: Scene, value=None, time=None) -> bool:
        """Non-numeric value falls back to the scene default"""
        master = to_number(value)
        if master is None:
            master = scene.default
        master = clamp(master, 0.0, 1.0)
        scene.value = master

        log.debug("setSCN()", name=scene.name, value=master, time=time)

        members = [self._member(action, master, time) for action in scene.actions]
        handled = self.dispatch(members)

        if self.event_bus is not None:
            self.event_bus.publish_nowait(SceneChangedEvent(scene.name, master))
        return handled

    def increase(self, scene: Scene, delta=None, time=None) -> bool:
        amount = to_number(delta)
        if amount is None:
            amount = DEFAULT_STEP
        return self.set(scene, scene.value + amount, time)

    def decrease(self, scene: Scene, delta=None, time=None) -> bool:
        amount = to_number(delta)
        if amount is None:
            amount = DEFAULT_STEP
        return self.set(scene, scene.value - amount, time)

    def toggle(self, scene: Scene, value=None, time=None) -> bool:
        """Same algorithm as the LED toggle, one level up"""
        if scene.value == 0:
            on_value = to_number(value)
            if on_value is None or not 0 < on_value <= 1:
                on_value = scene.toggle_value if scene.toggle_value is not None else 1.0
            return self.set(scene, on_value, time)

        scene.toggle_value = scene.value
        return self.set(scene, 0.0, time)

    @staticmethod
    def _member(action: Action, master: float, time) -> Action:
        if action.verb == ActionVerb.BLINK or to_number(time) is None:
            return action.with_overrides(master_value=master)
        return action.with_overrides(master_value=master, time=to_number(time))
