"""
Animation Engine

Frame sequencer: dispatch a frame's actions, wait its duration, move on.
The pending frame advance is the (animation name, TimerSlot.FRAME) timer.
Delayed frame and pre-start actions are deferred on behalf of the animation
(TimerSlot.DELAYED) and die with it on stop.
Start and stop are idempotent. A non-repeating animation that plays its
last frame to the end stops itself, which runs its on-stop actions like an
explicit stop would.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Optional

from engine.scheduler import IScheduler
from managers.resource_registry import ResourceRegistry
from models.domain import Animation
from models.enums import TimerSlot
from models.events import AnimationStartedEvent, AnimationStoppedEvent
from utils.logger import get_logger, LogCategory

if TYPE_CHECKING:
    from services.event_bus import EventBus

log = get_logger().for_category(LogCategory.ANIMATION)


class AnimationEngine:

    def __init__(
        self,
        scheduler: IScheduler,
        registry: ResourceRegistry,
        dispatch: Callable[..., bool],
        event_bus: Optional[EventBus] = None
    ):
        self.scheduler = scheduler
        self.registry = registry
        self.dispatch = dispatch
        self.event_bus = event_bus

    def start(self, animation: Animation) -> bool:
        if animation.running:
            log.debug("Animation already running", name=animation.name)
            return True
        if not animation.frames:
            return False

        animation.running = True
        animation.frame_index = 0
        log.info(f"Animation \"{animation.name}\" started", frames=len(animation.frames), repeat=animation.repeat)

        if animation.pre_start_actions:
            self.dispatch(animation.pre_start_actions, owner=animation.name)

        if self.event_bus is not None:
            self.event_bus.publish_nowait(AnimationStartedEvent(animation.name))

        self._play_frame(animation)
        return True

    def stop(self, animation: Animation) -> bool:
        if not animation.running:
            log.debug("Animation not running", name=animation.name)
            return True

        self.scheduler.cancel((animation.name, TimerSlot.FRAME))
        self.scheduler.cancel_owner(animation.name, TimerSlot.DELAYED)
        animation.running = False
        animation.frame_index = 0
        log.info(f"Animation \"{animation.name}\" stopped")

        if animation.on_stop_actions:
            self.dispatch(animation.on_stop_actions)

        if self.event_bus is not None:
            self.event_bus.publish_nowait(AnimationStoppedEvent(animation.name))
        return True

    def stop_all(self) -> bool:
        for animation in self.registry.animations():
            if animation.running:
                self.stop(animation)
        return True

    def running(self) -> list:
        return [a.name for a in self.registry.animations() if a.running]

    def _play_frame(self, animation: Animation) -> None:
        if not animation.running:
            return
        frame = animation.frames[animation.frame_index]
        log.debug("Frame", name=animation.name, index=animation.frame_index, duration=frame.duration_ms)
        self.dispatch(frame.actions, owner=animation.name)

        # A frame action may have stopped this very animation
        if animation.running:
            self.scheduler.arm((animation.name, TimerSlot.FRAME), frame.duration_ms, self._advance, animation)

    def _advance(self, animation: Animation) -> None:
        if not animation.running:
            return

        next_index = animation.frame_index + 1
        if next_index >= len(animation.frames):
            if not animation.repeat:
                self.stop(animation)
                return
            next_index = 0

        animation.frame_index = next_index
        self._play_frame(animation)
