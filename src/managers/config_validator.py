"""
Configuration Validator

Turns raw, untyped configuration entries (YAML dicts) into typed domain
records. Purely functional: no I/O, no registry access, never raises for bad
input. A rejected entry is logged as a warning and None is returned so the
rest of the configuration keeps loading.

Name and pin uniqueness is checked by the ResourceRegistry at registration.
"""

from typing import Any, Dict, List, Optional, Tuple

from hardware.pin_mapping import resolve_pin, is_pin_allowed
from models.config import ButtonDefaults
from models.domain import (
    Action, LedResource, OutputResource, ButtonResource, LongPressAlert,
    Scene, Animation, Frame, Trigger,
)
from models.domain.trigger import ANY
from models.enums import ActionVerb, Gesture, PinScheme, ResourceKind
from utils.coerce import to_number, clamp_unit, positive_int, to_bool
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.CONFIG)

DEFAULT_FRAME_DURATION_MS = 1000

_KIND_LABELS = {
    ResourceKind.LED: "LED",
    ResourceKind.OUTPUT: "Output",
    ResourceKind.BUTTON: "Button",
}

_NUMERIC_ACTION_FIELDS = ("value", "time", "off_time", "master_value", "delay")


def _non_empty_str(raw: Any) -> Optional[str]:
    if isinstance(raw, str) and raw.strip():
        return raw.strip()
    return None


def _as_list(raw: Any) -> List[Any]:
    """Action lists may be written as a single mapping"""
    if raw is None:
        return []
    if isinstance(raw, dict):
        return [raw]
    if isinstance(raw, (list, tuple)):
        return list(raw)
    return []


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------

def validate_action(raw: Any, context: str = "") -> Optional[Action]:
    """
    Validate one action mapping.

    Valid when it has a known non-empty verb ("verb" or "action" key) and,
    unless the verb is STOP_ALL or NOTIFY, a non-empty target name. NOTIFY
    also needs a non-empty notification. Non-numeric numeric fields are
    dropped so handlers apply their own defaults.
    """
    if not isinstance(raw, dict):
        log.warn("Action is not a mapping and was ignored", context=context)
        return None

    verb_raw = raw.get("verb", raw.get("action"))
    verb = ActionVerb.parse(verb_raw)
    if verb is None:
        log.warn("Action has a missing or unknown verb and was ignored", context=context, verb=verb_raw)
        return None

    name = _non_empty_str(raw.get("name"))
    if name is None and verb not in (ActionVerb.STOP_ALL, ActionVerb.NOTIFY):
        log.warn("Action has no target name and was ignored", context=context, verb=verb.name)
        return None

    notification = _non_empty_str(raw.get("notification"))
    if verb == ActionVerb.NOTIFY and notification is None:
        log.warn("NOTIFY action has no notification and was ignored", context=context)
        return None

    numbers = {key: to_number(raw.get(key)) for key in _NUMERIC_ACTION_FIELDS}

    return Action(
        verb=verb,
        name=name,
        notification=notification,
        payload=raw.get("payload"),
        **numbers
    )


def validate_actions(raw: Any, context: str = "") -> Tuple[Action, ...]:
    """Validate an action list, keeping the valid entries in order"""
    actions = []
    for entry in _as_list(raw):
        action = validate_action(entry, context)
        if action is not None:
            actions.append(action)
    return tuple(actions)


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------

def _validate_identity(kind: ResourceKind, raw: Any, scheme: PinScheme) -> Optional[Tuple[str, int]]:
    label = _KIND_LABELS[kind]
    if not isinstance(raw, dict):
        log.warn(f"{label} entry is not a mapping and cannot be initialized")
        return None

    configured_pin = raw.get("pin")
    name = _non_empty_str(raw.get("name"))
    if name is None:
        log.warn(f"A name has not been provided. The {label} on pin {configured_pin} cannot be initialized.")
        return None

    pin = resolve_pin(configured_pin, scheme)
    if pin is None or not is_pin_allowed(pin, kind, scheme):
        log.warn(
            f"Invalid pin number provided ({configured_pin}). The {label} \"{name}\" cannot be initialized.",
            scheme=scheme.value
        )
        return None

    return name, pin


def validate_led(raw: Any, scheme: PinScheme = PinScheme.BCMv2) -> Optional[LedResource]:
    identity = _validate_identity(ResourceKind.LED, raw, scheme)
    if identity is None:
        return None
    name, pin = identity
    return LedResource(
        name=name,
        pin=pin,
        active_low=to_bool(raw.get("active_low")),
        value=clamp_unit(raw.get("value"), default=0.0),
        exit_value=clamp_unit(raw.get("exit_value"), default=None),
    )


def validate_output(raw: Any, scheme: PinScheme = PinScheme.BCMv2) -> Optional[OutputResource]:
    identity = _validate_identity(ResourceKind.OUTPUT, raw, scheme)
    if identity is None:
        return None
    name, pin = identity
    value = to_number(raw.get("value"))
    return OutputResource(
        name=name,
        pin=pin,
        active_low=to_bool(raw.get("active_low")),
        value=int(value) if value in (0.0, 1.0) else 0,
    )


def _validate_alert(raw: Any, name: str) -> Optional[LongPressAlert]:
    if raw is None:
        return None
    if isinstance(raw, str):
        raw = {"message": raw}
    message = _non_empty_str(raw.get("message")) if isinstance(raw, dict) else None
    if message is None:
        log.warn(f"Long press alert of button \"{name}\" has no message and was ignored")
        return None
    return LongPressAlert(
        message=message,
        title=_non_empty_str(raw.get("title")),
        icon=_non_empty_str(raw.get("icon")),
    )


def validate_button(
    raw: Any,
    scheme: PinScheme = PinScheme.BCMv2,
    defaults: ButtonDefaults = ButtonDefaults()
) -> Optional[ButtonResource]:
    identity = _validate_identity(ResourceKind.BUTTON, raw, scheme)
    if identity is None:
        return None
    name, pin = identity

    actions: Dict[Gesture, Tuple[Action, ...]] = {}
    for gesture in Gesture:
        bound = validate_actions(raw.get(gesture.config_key), context=f"{name}.{gesture.config_key}")
        if bound:
            actions[gesture] = bound

    return ButtonResource(
        name=name,
        pin=pin,
        active_low=to_bool(raw.get("active_low")),
        debounce_timeout=positive_int(raw.get("debounce_timeout"), defaults.debounce_timeout),
        multi_press_timeout=positive_int(raw.get("multi_press_timeout"), defaults.multi_press_timeout),
        long_press_time=positive_int(raw.get("long_press_time"), defaults.long_press_time),
        clear_alert_on_release=to_bool(raw.get("clear_alert_on_release")),
        actions=actions,
        long_press_alert=_validate_alert(raw.get("long_press_alert"), name),
    )


# ---------------------------------------------------------------------------
# Scenes, animations, triggers
# ---------------------------------------------------------------------------

def validate_scene(raw: Any) -> Optional[Scene]:
    if not isinstance(raw, dict):
        log.warn("Scene entry is not a mapping and was ignored")
        return None
    name = _non_empty_str(raw.get("name"))
    if name is None:
        log.warn("A scene without a name was ignored")
        return None

    actions = validate_actions(raw.get("actions"), context=f"scene {name}")
    if not actions:
        log.warn(f"Scene \"{name}\" has no valid actions and cannot be initialized.")
        return None

    return Scene(
        name=name,
        actions=actions,
        default=clamp_unit(raw.get("default"), default=1.0),
    )


def validate_frame(raw: Any, context: str) -> Optional[Frame]:
    if not isinstance(raw, dict):
        return None
    actions = validate_actions(raw.get("actions"), context=context)
    if not actions:
        log.warn("Animation frame has no valid actions and was dropped", context=context)
        return None
    duration = raw.get("duration_ms", raw.get("time"))
    return Frame(actions=actions, duration_ms=positive_int(duration, DEFAULT_FRAME_DURATION_MS))


def validate_animation(raw: Any) -> Optional[Animation]:
    if not isinstance(raw, dict):
        log.warn("Animation entry is not a mapping and was ignored")
        return None
    name = _non_empty_str(raw.get("name"))
    if name is None:
        log.warn("An animation without a name was ignored")
        return None

    frames = []
    for index, entry in enumerate(_as_list(raw.get("frames"))):
        frame = validate_frame(entry, context=f"animation {name} frame {index}")
        if frame is not None:
            frames.append(frame)
    if not frames:
        log.warn(f"Animation \"{name}\" has no valid frames and cannot be initialized.")
        return None

    return Animation(
        name=name,
        frames=tuple(frames),
        repeat=to_bool(raw.get("repeat")),
        pre_start_actions=validate_actions(raw.get("pre_start_actions"), context=f"animation {name} start"),
        on_stop_actions=validate_actions(raw.get("on_stop_actions"), context=f"animation {name} stop"),
    )


def validate_trigger(raw: Any) -> Optional[Trigger]:
    if not isinstance(raw, dict):
        log.warn("Trigger entry is not a mapping and was ignored")
        return None
    actions = validate_actions(raw.get("actions"), context="trigger")
    if not actions:
        log.warn("Trigger has no valid actions and was ignored", notification=raw.get("notification"))
        return None
    return Trigger(
        actions=actions,
        notification=raw["notification"] if "notification" in raw else ANY,
        sender=raw["sender"] if "sender" in raw else ANY,
        payload=raw["payload"] if "payload" in raw else ANY,
    )
