"""Resource domain models - LEDs, outputs and buttons"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Optional, Tuple

from models.domain.action import Action
from models.enums import Gesture, ResourceKind, SHORT_PRESS_GESTURES


@dataclass
class FadeState:
    """Bookkeeping for a running linear ramp"""
    target: float
    step: float
    remaining: int
    tick_ms: int


@dataclass
class BlinkState:
    """Bookkeeping for a running blink"""
    on_time: float
    off_time: float
    value: Optional[float] = None


@dataclass
class Resource:
    """
    A single GPIO-backed entity.

    `value` is always the logical value. Active-low inversion is applied only
    when writing to the hardware collaborator.
    """
    kind: ClassVar[ResourceKind]

    name: str
    pin: int
    active_low: bool = False
    value: float = 0.0

    def snapshot(self) -> Dict[str, Any]:
        """Public view for the HTTP layer (no runtime bookkeeping)"""
        return {
            "name": self.name,
            "kind": self.kind.name,
            "pin": self.pin,
            "active_low": self.active_low,
            "value": self.value,
        }


@dataclass
class LedResource(Resource):
    kind: ClassVar[ResourceKind] = ResourceKind.LED

    exit_value: Optional[float] = None
    toggle_value: Optional[float] = None
    fade: Optional[FadeState] = field(default=None, repr=False)
    blink: Optional[BlinkState] = field(default=None, repr=False)

    def snapshot(self) -> Dict[str, Any]:
        data = super().snapshot()
        data["exit_value"] = self.exit_value
        return data


@dataclass
class OutputResource(Resource):
    kind: ClassVar[ResourceKind] = ResourceKind.OUTPUT

    blink: Optional[BlinkState] = field(default=None, repr=False)


@dataclass(frozen=True)
class LongPressAlert:
    """Alert shown while a button is held towards a long press"""
    message: str
    title: Optional[str] = None
    icon: Optional[str] = None

    def to_payload(self, timer_ms: int) -> Dict[str, Any]:
        payload = {"message": self.message, "timer": timer_ms}
        if self.title:
            payload["title"] = self.title
        if self.icon:
            payload["icon"] = self.icon
        return payload


@dataclass
class ButtonResource(Resource):
    kind: ClassVar[ResourceKind] = ResourceKind.BUTTON

    debounce_timeout: int = 10
    multi_press_timeout: int = 300
    long_press_time: int = 1000
    clear_alert_on_release: bool = False
    actions: Dict[Gesture, Tuple[Action, ...]] = field(default_factory=dict)
    long_press_alert: Optional[LongPressAlert] = None

    # Runtime state, owned by the button engine
    press_count: int = field(default=0, repr=False)
    release_count: int = field(default=0, repr=False)
    is_pressed: bool = field(default=False, repr=False)
    alert_active: bool = field(default=False, repr=False)

    def actions_for(self, gesture: Gesture) -> Tuple[Action, ...]:
        return self.actions.get(gesture, ())

    @property
    def num_short_press(self) -> int:
        """Highest press multiplicity with any bound press or release action"""
        highest = 0
        for count, (press, release) in SHORT_PRESS_GESTURES.items():
            if self.actions_for(press) or self.actions_for(release):
                highest = count
        return highest

    @property
    def enable_long_press(self) -> bool:
        return bool(self.actions_for(Gesture.LONG_PRESS) or self.actions_for(Gesture.LONG_RELEASE))

    def reset_runtime(self) -> None:
        self.press_count = 0
        self.release_count = 0

    def snapshot(self) -> Dict[str, Any]:
        data = super().snapshot()
        data.update({
            "debounce_timeout": self.debounce_timeout,
            "multi_press_timeout": self.multi_press_timeout,
            "long_press_time": self.long_press_time,
            "num_short_press": self.num_short_press,
            "enable_long_press": self.enable_long_press,
            "is_pressed": self.is_pressed,
        })
        return data
