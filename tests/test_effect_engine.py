import pytest

from engine.effect_engine import EffectEngine, plan_fade, FADE_TICK_MS, MIN_STEP
from models.domain import LedResource, OutputResource
from models.enums import TimerSlot


@pytest.fixture
def lamp():
    return LedResource(name="lamp", pin=17)


@pytest.fixture
def fan(gpio):
    gpio.register_output(23, "fan")
    return OutputResource(name="fan", pin=23)


class TestPlanFade:

    def test_short_fade_is_immediate(self):
        assert plan_fade(0.0, 1.0, FADE_TICK_MS) is None
        assert plan_fade(0.0, 1.0, 0) is None

    def test_no_change_is_immediate(self):
        assert plan_fade(0.5, 0.5, 1000) is None

    def test_steps_cover_delta(self):
        step, num_steps, tick = plan_fade(0.0, 1.0, 150)
        assert tick == FADE_TICK_MS
        assert num_steps == 10
        assert step == pytest.approx(0.1)

    def test_tiny_delta_uses_minimum_step(self):
        step, num_steps, tick = plan_fade(0.0, 0.001, 3000)
        assert step == MIN_STEP
        assert num_steps == 2
        assert tick == 1500


class TestSetLED:

    def test_immediate_set(self, effects, pwm, lamp):
        assert effects.set_led(lamp, 0.7) is True
        assert lamp.value == 0.7
        assert pwm.history(17) == [0.7]

    def test_value_is_clamped(self, effects, lamp):
        effects.set_led(lamp, 3)
        assert lamp.value == 1.0
        effects.set_led(lamp, -2)
        assert lamp.value == 0.0

    def test_non_numeric_value_is_rejected(self, effects, pwm, lamp):
        assert effects.set_led(lamp, "bright") is False
        assert pwm.history(17) == []

    def test_active_low_inverts_physical_write_only(self, effects, pwm):
        led = LedResource(name="inv", pin=18, active_low=True)
        effects.set_led(led, 0.25)
        assert led.value == 0.25
        assert pwm.history(18) == [0.75]

    def test_fade_is_monotonic_and_lands_exactly(self, effects, scheduler, pwm, lamp):
        effects.set_led(lamp, 1, time=150)
        scheduler.advance(1000)

        writes = pwm.history(17)
        assert writes[-1] == 1
        assert all(b >= a for a, b in zip(writes, writes[1:]))
        assert len(writes) == 10
        assert not effects.is_running(lamp)

    def test_fade_down(self, effects, scheduler, pwm, lamp):
        effects.set_led(lamp, 1)
        effects.set_led(lamp, 0, time=300)
        scheduler.advance(1000)

        writes = pwm.history(17)[1:]
        assert writes[-1] == 0
        assert all(b <= a for a, b in zip(writes, writes[1:]))

    def test_new_set_cancels_running_fade(self, effects, scheduler, lamp):
        effects.set_led(lamp, 1, time=1500)
        scheduler.advance(100)
        effects.set_led(lamp, 0.2)
        scheduler.advance(2000)

        assert lamp.value == 0.2
        assert lamp.fade is None
        assert scheduler.pending == 0

    def test_write_failure_keeps_value(self, effects, pwm, lamp):
        pwm.stop()
        assert effects.set_led(lamp, 0.5) is False
        assert lamp.value == 0.0

    def test_disabled_leds_do_nothing(self, scheduler, pwm, gpio, lamp):
        engine = EffectEngine(scheduler, pwm, gpio)
        assert engine.set_led(lamp, 1) is False

    def test_increase_and_decrease(self, effects, lamp):
        effects.set_led(lamp, 0.5)
        effects.increase_led(lamp)
        assert lamp.value == pytest.approx(0.6)
        effects.decrease_led(lamp, 0.4)
        assert lamp.value == pytest.approx(0.2)
        effects.increase_led(lamp, 5)
        assert lamp.value == 1.0


class TestToggle:

    def test_toggle_pair_restores_previous_value(self, effects, lamp):
        effects.set_led(lamp, 0.4)
        effects.toggle(lamp)
        assert lamp.value == 0
        assert lamp.toggle_value == 0.4
        effects.toggle(lamp)
        assert lamp.value == 0.4

    def test_toggle_from_off_without_memory_goes_full(self, effects, lamp):
        effects.toggle(lamp)
        assert lamp.value == 1.0

    def test_explicit_on_value_wins(self, effects, lamp):
        lamp.toggle_value = 0.3
        effects.toggle(lamp, 0.8)
        assert lamp.value == 0.8

    def test_out_of_range_on_value_is_ignored(self, effects, lamp):
        effects.toggle(lamp, 7)
        assert lamp.value == 1.0

    def test_output_flips(self, effects, gpio, fan):
        effects.toggle(fan)
        assert fan.value == 1
        assert gpio.read(23) == 1
        effects.toggle(fan)
        assert fan.value == 0
        assert gpio.read(23) == 0


class TestBlink:

    def test_blink_alternates_until_cancelled(self, effects, scheduler, pwm, lamp):
        effects.blink(lamp, time=100, off_time=200)
        assert lamp.value == 1.0

        scheduler.advance(100)
        assert lamp.value == 0.0
        scheduler.advance(200)
        assert lamp.value == 1.0

        assert effects.cancel(lamp) is True
        scheduler.advance(1000)
        assert lamp.value == 1.0
        assert not scheduler.is_armed(("lamp", TimerSlot.EFFECT))

    def test_blink_starts_with_off_half_when_lit(self, effects, scheduler, lamp):
        effects.set_led(lamp, 0.6)
        effects.blink(lamp, time=100)
        assert lamp.value == 0.0
        scheduler.advance(100)
        assert lamp.value == 0.6

    def test_output_blink_default_timing(self, effects, scheduler, fan):
        effects.blink(fan)
        assert fan.value == 1
        scheduler.advance(750)
        assert fan.value == 0

    def test_set_cancels_blink(self, effects, scheduler, lamp):
        effects.blink(lamp, time=100)
        effects.set_led(lamp, 0.5)
        scheduler.advance(1000)
        assert lamp.value == 0.5
        assert lamp.blink is None


def test_exit_value(effects, pwm):
    led = LedResource(name="shelf", pin=18, exit_value=0.2)
    plain = LedResource(name="lamp", pin=17)
    assert effects.apply_exit_value(led) is True
    assert led.value == 0.2
    assert effects.apply_exit_value(plain) is None
