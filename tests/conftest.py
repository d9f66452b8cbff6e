import itertools
from typing import Any, Callable, Dict, Hashable, Tuple

import pytest

from engine.effect_engine import EffectEngine
from engine.scheduler import deferred_key, owned_by
from hardware.gpio import MockGPIOManager
from hardware.pwm import MockPWMDriver
from managers.config_manager import ConfigManager
from services.event_bus import EventBus
from services.service_container import ServiceContainer


class ManualScheduler:
    """
    IScheduler driven by hand: advance(ms) moves virtual time forward and
    runs every timer that came due, in due order (timers armed by callbacks
    included).
    """

    def __init__(self):
        self.now = 0.0
        self._timers: Dict[Hashable, Tuple[float, int, Callable[..., Any], Tuple[Any, ...]]] = {}
        self._seq = itertools.count()
        self._deferred_ids = itertools.count(1)

    def arm(self, key, delay_ms, callback, *args):
        self._timers[key] = (self.now + max(0.0, delay_ms), next(self._seq), callback, args)

    def defer(self, delay_ms, callback, *args, owner=None):
        key = deferred_key(owner, next(self._deferred_ids))
        self.arm(key, delay_ms, callback, *args)
        return key

    def cancel(self, key):
        return self._timers.pop(key, None) is not None

    def cancel_owner(self, owner, slot=None):
        keys = [k for k in self._timers if owned_by(k, owner, slot)]
        for key in keys:
            self.cancel(key)
        return len(keys)

    def is_armed(self, key):
        return key in self._timers

    def cancel_all(self):
        count = len(self._timers)
        self._timers.clear()
        return count

    @property
    def pending(self) -> int:
        return len(self._timers)

    def advance(self, ms: float) -> None:
        end = self.now + ms
        while self._timers:
            key, (due, _, callback, args) = min(self._timers.items(), key=lambda item: item[1][:2])
            if due > end:
                break
            del self._timers[key]
            self.now = due
            callback(*args)
        self.now = end

    def run_until_idle(self, limit_ms: float = 60_000) -> None:
        self.advance(limit_ms)


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def pwm():
    return MockPWMDriver()


@pytest.fixture
def gpio():
    return MockGPIOManager()


@pytest.fixture
def effects(scheduler, pwm, gpio):
    pwm.start([17, 18])
    engine = EffectEngine(scheduler, pwm, gpio)
    engine.leds_enabled = True
    engine.outputs_enabled = True
    return engine


BASIC_CONFIG = {
    "pin_scheme": "BCMv2",
    "pwm": {"driver": "mock"},
    "leds": [
        {"name": "lamp", "pin": 17, "value": 0},
        {"name": "shelf", "pin": 18, "value": 0, "exit_value": 0.2},
    ],
    "outputs": [
        {"name": "fan", "pin": 23},
    ],
    "buttons": [
        {
            "name": "desk_button",
            "pin": 24,
            "press": [{"verb": "TOGGLE", "name": "lamp"}],
            "long_press": [{"verb": "TOGGLE", "name": "fan"}],
        },
    ],
    "scenes": [
        {
            "name": "evening",
            "default": 0.6,
            "actions": [
                {"verb": "SET", "name": "lamp", "value": 1},
                {"verb": "SET", "name": "shelf", "value": 0.5},
            ],
        },
    ],
    "animations": [
        {
            "name": "heartbeat",
            "repeat": True,
            "frames": [
                {"duration_ms": 100, "actions": [{"verb": "SET", "name": "shelf", "value": 1}]},
                {"duration_ms": 200, "actions": [{"verb": "SET", "name": "shelf", "value": 0}]},
            ],
            "on_stop_actions": [{"verb": "SET", "name": "shelf", "value": 0.3}],
        },
    ],
    "triggers": [
        {"notification": "USER_PRESENCE", "payload": True, "actions": [{"verb": "SET", "name": "fan", "value": 1}]},
        {"notification": "USER_PRESENCE", "payload": False, "actions": [{"verb": "SET", "name": "fan", "value": 0}]},
    ],
}


@pytest.fixture
def config_manager():
    manager = ConfigManager()
    manager.load_dict(BASIC_CONFIG)
    return manager


@pytest.fixture
def services(config_manager, scheduler, gpio, pwm):
    """Fully wired container on mock hardware, hardware already started"""
    container = ServiceContainer.build(config_manager, gpio, pwm, scheduler=scheduler, event_bus=EventBus())
    container.hardware.start()
    return container
