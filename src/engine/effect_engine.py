"""
Timed-Effect Engine

Immediate sets, toggles, blinks and linear fades for LEDs and outputs.

Every public primitive first cancels whatever timed effect the resource
already has, so at most one fade/blink is in flight per resource. Timers live
in the scheduler under (resource name, TimerSlot.EFFECT).

Physical writes go to the PWM driver (LEDs) or the GPIO manager (outputs).
Active-low inversion happens only at that boundary. The logical `value` is
updated only after the write succeeded; a failed write is logged (developer
mode) and leaves the value untouched.
"""

import math
from typing import Optional, Union

from engine.scheduler import IScheduler
from hardware.gpio import IGPIOManager
from hardware.pwm import IPWMDriver
from models.domain import LedResource, OutputResource
from models.domain.resource import BlinkState, FadeState
from models.enums import TimerSlot
from utils.coerce import to_number, clamp
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.EFFECT)

# Nominal fade tick; fades at or below one tick are immediate sets
FADE_TICK_MS = 15
# Smallest step worth writing to the PWM daemon
MIN_STEP = 0.0005

DEFAULT_BLINK_TIME_MS = 750
DEFAULT_STEP = 0.1

Switchable = Union[LedResource, OutputResource]


def plan_fade(current: float, target: float, time_ms: float):
    """
    Work out the stepping for a fade.

    Returns:
        (step_size, num_steps, tick_ms), or None when the fade should be an
        immediate set (too short, or nothing to do)
    """
    delta = abs(target - current)
    if time_ms <= FADE_TICK_MS or delta == 0:
        return None

    tick = FADE_TICK_MS
    num_steps = math.ceil(time_ms / tick)
    step = delta / num_steps
    if step < MIN_STEP:
        step = MIN_STEP
        num_steps = math.ceil(delta / step)
        tick = round(time_ms / num_steps)
    return step, num_steps, max(1, tick)


class EffectEngine:

    def __init__(self, scheduler: IScheduler, pwm: IPWMDriver, gpio: IGPIOManager):
        self.scheduler = scheduler
        self.pwm = pwm
        self.gpio = gpio

        # Flipped by the hardware service once the collaborators are up
        self.leds_enabled = False
        self.outputs_enabled = False

    # ------------------------------------------------------------------
    # Cancellation
    # ------------------------------------------------------------------

    def cancel(self, resource: Switchable) -> bool:
        """Cancel the running fade/blink on a resource; safe when nothing runs"""
        cancelled = self.scheduler.cancel((resource.name, TimerSlot.EFFECT))
        if isinstance(resource, LedResource):
            resource.fade = None
        resource.blink = None
        if cancelled:
            log.debug("Effect cancelled", name=resource.name)
        return cancelled

    def is_running(self, resource: Switchable) -> bool:
        return self.scheduler.is_armed((resource.name, TimerSlot.EFFECT))

    # ------------------------------------------------------------------
    # Physical writes
    # ------------------------------------------------------------------

    def write_led(self, led: LedResource, value: float) -> bool:
        value = clamp(value, 0.0, 1.0)
        physical = 1.0 - value if led.active_low else value
        try:
            self.pwm.set_duty(led.pin, physical)
        except Exception as e:
            log.debug(f"Unable to set LED \"{led.name}\" to value {value}", error=str(e))
            return False
        led.value = value
        return True

    def write_output(self, output: OutputResource, value: float) -> bool:
        logical = 1 if value else 0
        physical = 1 - logical if output.active_low else logical
        try:
            self.gpio.write(output.pin, physical)
        except Exception as e:
            log.debug(f"Unable to set output \"{output.name}\" to value {logical}", error=str(e))
            return False
        output.value = logical
        return True

    def _enabled(self, resource: Switchable) -> bool:
        if isinstance(resource, LedResource):
            return self.leds_enabled
        return self.outputs_enabled

    # ------------------------------------------------------------------
    # SET / INCREASE / DECREASE
    # ------------------------------------------------------------------

    def set_led(self, led: LedResource, value, time=None) -> bool:
        """Set an LED, fading over `time` ms when time is longer than one tick"""
        if not self.leds_enabled:
            return False
        target = to_number(value)
        if target is None:
            return False
        self.cancel(led)
        target = clamp(target, 0.0, 1.0)
        log.debug("setLED()", name=led.name, pin=led.pin, value=target, time=time)

        duration = to_number(time)
        plan = plan_fade(led.value, target, duration) if duration is not None else None
        if plan is None:
            return self.write_led(led, target)

        step, num_steps, tick = plan
        led.fade = FadeState(target=target, step=step, remaining=num_steps, tick_ms=tick)
        self.scheduler.arm((led.name, TimerSlot.EFFECT), tick, self._fade_tick, led)
        return True

    def increase_led(self, led: LedResource, delta=None, time=None) -> bool:
        amount = to_number(delta)
        if amount is None:
            amount = DEFAULT_STEP
        return self.set_led(led, led.value + amount, time)

    def decrease_led(self, led: LedResource, delta=None, time=None) -> bool:
        amount = to_number(delta)
        if amount is None:
            amount = DEFAULT_STEP
        return self.set_led(led, led.value - amount, time)

    def set_output(self, output: OutputResource, value) -> bool:
        """Nonzero means on"""
        if not self.outputs_enabled:
            return False
        number = to_number(value)
        if number is None:
            return False
        self.cancel(output)
        log.debug("setOUT()", name=output.name, pin=output.pin, value=1 if number else 0)
        return self.write_output(output, number)

    def _fade_tick(self, led: LedResource) -> None:
        state = led.fade
        if state is None:
            return

        state.remaining -= 1
        if led.value < state.target:
            next_value = min(led.value + state.step, state.target)
        else:
            next_value = max(led.value - state.step, state.target)
        if state.remaining <= 0:
            next_value = state.target

        if not self.write_led(led, next_value):
            led.fade = None
            return

        if next_value == state.target:
            led.fade = None
            log.debug("Fade complete", name=led.name, value=led.value)
            return

        self.scheduler.arm((led.name, TimerSlot.EFFECT), state.tick_ms, self._fade_tick, led)

    # ------------------------------------------------------------------
    # TOGGLE
    # ------------------------------------------------------------------

    def toggle(self, resource: Switchable, value=None) -> bool:
        """
        Off -> on (explicit value, else remembered pre-off value, else 1).
        On  -> off, remembering the current value.
        """
        if not self._enabled(resource):
            return False
        self.cancel(resource)
        return self._toggle(resource, value)

    def _toggle(self, resource: Switchable, value=None) -> bool:
        if isinstance(resource, OutputResource):
            return self.write_output(resource, 0 if resource.value else 1)

        on_value = to_number(value)
        if on_value is not None and not 0 < on_value <= 1:
            on_value = None

        if resource.value == 0:
            if on_value is None:
                on_value = resource.toggle_value if resource.toggle_value is not None else 1.0
            return self.write_led(resource, on_value)

        resource.toggle_value = resource.value
        return self.write_led(resource, 0.0)

    # ------------------------------------------------------------------
    # BLINK
    # ------------------------------------------------------------------

    def blink(self, resource: Switchable, time=None, off_time=None, value=None) -> bool:
        """Alternate on/off until cancelled; starts with whichever half changes the state"""
        if not self._enabled(resource):
            return False
        self.cancel(resource)

        on_time = to_number(time)
        if on_time is None or on_time <= 0:
            on_time = DEFAULT_BLINK_TIME_MS
        off = to_number(off_time)
        if off is None or off <= 0:
            off = on_time
        on_value = to_number(value)
        if on_value is not None and not 0 < on_value <= 1:
            on_value = None

        resource.blink = BlinkState(on_time=on_time, off_time=off, value=on_value)
        log.debug("blink()", name=resource.name, time=on_time, off_time=off, value=on_value)

        if resource.value == 0:
            self._blink_on(resource)
        else:
            self._blink_off(resource)
        return True

    def _blink_on(self, resource: Switchable) -> None:
        state = resource.blink
        if state is None:
            return
        self._toggle(resource, state.value)
        self.scheduler.arm((resource.name, TimerSlot.EFFECT), state.on_time, self._blink_off, resource)

    def _blink_off(self, resource: Switchable) -> None:
        state = resource.blink
        if state is None:
            return
        self._toggle(resource, state.value)
        self.scheduler.arm((resource.name, TimerSlot.EFFECT), state.off_time, self._blink_on, resource)

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    def apply_exit_value(self, led: LedResource) -> Optional[bool]:
        """Drive an LED to its exit value; None when it has none"""
        self.cancel(led)
        if led.exit_value is None or not self.leds_enabled:
            return None
        return self.write_led(led, led.exit_value)
