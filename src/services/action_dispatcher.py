"""
Action Dispatcher

Single entry point for every command (HTTP, button gestures, scenes,
animation frames, triggers). Routes an Action by verb family:

    NOTIFY / STOP_ALL          handled here, no target lookup
    *_SCENE                    scene engine
    START / STOP               animation engine when the name is an animation
                               (STOP on an LED/OUTPUT cancels its effect)
    PRESS ... LONG_RELEASE     the named button's bound action list
    anything else              LED or OUTPUT handler by resource kind

A positive delay defers the action on the scheduler and reports it handled
right away. Unknown names and verbs that do not apply to the target kind are
logged and reported as not handled.

The dispatcher owns the scene, animation, button and trigger engines because
they all call back into dispatch() for composite actions.
"""

from typing import Iterable, Optional, Union

from engine.animation_engine import AnimationEngine
from engine.button_engine import ButtonEngine
from engine.effect_engine import EffectEngine
from engine.scene_engine import SceneEngine
from engine.scheduler import IScheduler
from engine.trigger_engine import TriggerEngine
from managers.resource_registry import ResourceRegistry
from models.domain import Action, ButtonResource, LedResource, OutputResource, Scene
from models.enums import ActionVerb, Gesture, LED_VERBS, OUTPUT_VERBS
from services.event_bus import EventBus
from services.notifier import Notifier
from utils.coerce import to_number
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.ACTION)


class ActionDispatcher:

    def __init__(
        self,
        registry: ResourceRegistry,
        scheduler: IScheduler,
        effects: EffectEngine,
        notifier: Notifier,
        event_bus: Optional[EventBus] = None
    ):
        self.registry = registry
        self.scheduler = scheduler
        self.effects = effects
        self.notifier = notifier

        self.scenes = SceneEngine(self.dispatch, event_bus)
        self.animations = AnimationEngine(scheduler, registry, self.dispatch, event_bus)
        self.buttons = ButtonEngine(scheduler, self.dispatch, event_bus)
        self.triggers = TriggerEngine(registry, self.dispatch)

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def dispatch(self, action: Union[Action, Iterable[Action]], owner: Optional[str] = None) -> bool:
        """
        Dispatch one action or an ordered list of actions.

        Every element of a list is attempted; the result is True only when all
        of them were handled. Delayed actions are deferred under owner (an
        animation name) when given, so the owner can cancel them.
        """
        if isinstance(action, Action):
            return self._dispatch_one(action, owner)

        results = [self._dispatch_one(a, owner) for a in action]
        return all(results)

    def _dispatch_one(self, action: Action, owner: Optional[str] = None) -> bool:
        if not self._target_exists(action):
            return self._unknown(action)

        if action.is_delayed:
            log.debug("Action deferred", verb=action.verb.name, name=action.name, delay=action.delay)
            self.scheduler.defer(action.delay, self._execute, action.without_delay(), owner=owner)
            return True

        return self._execute(action)

    def _target_exists(self, action: Action) -> bool:
        verb = action.verb
        if verb in (ActionVerb.NOTIFY, ActionVerb.STOP_ALL):
            return True
        if verb.is_scene_verb:
            return self.registry.get_scene(action.name) is not None
        if verb == ActionVerb.START:
            return self.registry.get_animation(action.name) is not None
        if verb == ActionVerb.STOP and self.registry.get_animation(action.name) is not None:
            return True
        return action.name in self.registry

    # ------------------------------------------------------------------
    # Routing
    # ------------------------------------------------------------------

    def _execute(self, action: Action) -> bool:
        verb = action.verb
        log.debug("dispatch()", **action.to_dict())

        if verb == ActionVerb.NOTIFY:
            return self.notifier.notify(action.notification, action.payload)

        if verb == ActionVerb.STOP_ALL:
            return self.animations.stop_all()

        if verb.is_scene_verb:
            scene = self.registry.get_scene(action.name)
            if scene is None:
                return self._unknown(action)
            return self._handle_scene(verb, scene, action)

        if verb in (ActionVerb.START, ActionVerb.STOP):
            animation = self.registry.get_animation(action.name)
            if animation is not None:
                return self.animations.start(animation) if verb == ActionVerb.START else self.animations.stop(animation)

        resource = self.registry.get_resource(action.name)
        if resource is None:
            return self._unknown(action)

        if verb.is_gesture_verb:
            return self._handle_gesture(verb, resource, action)
        if isinstance(resource, LedResource):
            return self._handle_led(verb, resource, action)
        if isinstance(resource, OutputResource):
            return self._handle_output(verb, resource, action)

        return self._rejected(action, resource.kind.name)

    def _handle_scene(self, verb: ActionVerb, scene: Scene, action: Action) -> bool:
        if verb == ActionVerb.SET_SCENE:
            return self.scenes.set(scene, action.value, action.time)
        if verb == ActionVerb.INCREASE_SCENE:
            return self.scenes.increase(scene, action.value, action.time)
        if verb == ActionVerb.DECREASE_SCENE:
            return self.scenes.decrease(scene, action.value, action.time)
        return self.scenes.toggle(scene, action.value, action.time)

    def _handle_gesture(self, verb: ActionVerb, resource, action: Action) -> bool:
        if not isinstance(resource, ButtonResource):
            return self._rejected(action, resource.kind.name)
        gesture = Gesture[verb.name]
        if not resource.actions_for(gesture):
            log.warn(f"Button \"{resource.name}\" has no actions bound to {gesture.name}")
            return False
        return self.buttons.fire(resource, gesture)

    def _handle_led(self, verb: ActionVerb, led: LedResource, action: Action) -> bool:
        if verb not in LED_VERBS:
            return self._rejected(action, "LED")

        value = self._scaled(action)
        if verb == ActionVerb.SET:
            return self.effects.set_led(led, self._scaled(action, default=1.0), action.time)
        if verb == ActionVerb.INCREASE:
            return self.effects.increase_led(led, value, action.time)
        if verb == ActionVerb.DECREASE:
            return self.effects.decrease_led(led, value, action.time)
        if verb == ActionVerb.TOGGLE:
            return self.effects.toggle(led, value)
        if verb == ActionVerb.BLINK:
            return self.effects.blink(led, action.time, action.off_time, value)

        self.effects.cancel(led)
        return True

    def _handle_output(self, verb: ActionVerb, output: OutputResource, action: Action) -> bool:
        if verb not in OUTPUT_VERBS:
            return self._rejected(action, "OUTPUT")

        if verb == ActionVerb.SET:
            return self.effects.set_output(output, self._scaled(action, default=1.0))
        if verb == ActionVerb.TOGGLE:
            return self.effects.toggle(output)
        if verb == ActionVerb.BLINK:
            return self.effects.blink(output, action.time, action.off_time)

        self.effects.cancel(output)
        return True

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _scaled(action: Action, default: Optional[float] = None) -> Optional[float]:
        """
        The action's own value multiplied by its master value.

        Scene members may omit their value; under a master value the member
        then counts as `default`.
        """
        value = to_number(action.value)
        master = to_number(action.master_value)
        if master is None:
            return value
        if value is None:
            value = default
        return None if value is None else value * master

    @staticmethod
    def _unknown(action: Action) -> bool:
        log.warn(f"Unable to find a resource, scene or animation named \"{action.name}\"", verb=action.verb.name)
        return False

    @staticmethod
    def _rejected(action: Action, kind: str) -> bool:
        log.warn(f"{action.verb.name} cannot be applied to {kind} \"{action.name}\"")
        return False
