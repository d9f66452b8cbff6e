"""
AsyncioScheduler on a real event loop
"""

import asyncio

import pytest

from engine.effect_engine import EffectEngine
from engine.scheduler import AsyncioScheduler
from hardware.gpio import MockGPIOManager
from hardware.pwm import MockPWMDriver
from models.domain import LedResource
from models.enums import TimerSlot


@pytest.mark.asyncio
async def test_timer_fires_after_delay():
    scheduler = AsyncioScheduler()
    fired = []

    scheduler.arm(("lamp", TimerSlot.EFFECT), 10, fired.append, "done")
    assert scheduler.is_armed(("lamp", TimerSlot.EFFECT))
    assert fired == []

    await asyncio.sleep(0.05)
    assert fired == ["done"]
    assert not scheduler.is_armed(("lamp", TimerSlot.EFFECT))


@pytest.mark.asyncio
async def test_rearming_a_key_replaces_the_pending_timer():
    scheduler = AsyncioScheduler()
    fired = []
    key = ("lamp", TimerSlot.EFFECT)

    scheduler.arm(key, 10, fired.append, "first")
    scheduler.arm(key, 20, fired.append, "second")

    await asyncio.sleep(0.06)
    assert fired == ["second"]


@pytest.mark.asyncio
async def test_cancel_before_and_after_firing():
    scheduler = AsyncioScheduler()
    fired = []

    scheduler.arm(("fan", TimerSlot.EFFECT), 10, fired.append, "fan")
    assert scheduler.cancel(("fan", TimerSlot.EFFECT)) is True

    scheduler.arm(("lamp", TimerSlot.EFFECT), 5, fired.append, "lamp")
    await asyncio.sleep(0.04)

    assert fired == ["lamp"]
    assert scheduler.cancel(("lamp", TimerSlot.EFFECT)) is False
    assert scheduler.cancel(("nothing", TimerSlot.FRAME)) is False


@pytest.mark.asyncio
async def test_defer_hands_out_distinct_keys():
    scheduler = AsyncioScheduler()
    fired = []

    first = scheduler.defer(10, fired.append, 1)
    second = scheduler.defer(10, fired.append, 2)
    owned = scheduler.defer(10, fired.append, 3, owner="pulse")

    assert first != second
    assert owned[:2] == ("pulse", TimerSlot.DELAYED)
    assert all(scheduler.is_armed(k) for k in (first, second, owned))

    await asyncio.sleep(0.05)
    assert sorted(fired) == [1, 2, 3]


@pytest.mark.asyncio
async def test_cancel_owner_and_cancel_all():
    scheduler = AsyncioScheduler()
    fired = []

    scheduler.arm(("pulse", TimerSlot.FRAME), 10, fired.append, "frame")
    scheduler.defer(10, fired.append, "delayed", owner="pulse")
    scheduler.arm(("lamp", TimerSlot.EFFECT), 10, fired.append, "lamp")
    scheduler.arm(("fan", TimerSlot.EFFECT), 10, fired.append, "fan")

    # Slot filter leaves the frame timer alone
    assert scheduler.cancel_owner("pulse", TimerSlot.DELAYED) == 1
    assert scheduler.is_armed(("pulse", TimerSlot.FRAME))
    assert scheduler.cancel_owner("pulse") == 1
    assert scheduler.cancel_owner("pulse") == 0

    assert scheduler.cancel_all() == 2
    assert scheduler.cancel_all() == 0

    await asyncio.sleep(0.04)
    assert fired == []


@pytest.mark.asyncio
async def test_failing_callback_does_not_stop_later_timers():
    scheduler = AsyncioScheduler()
    fired = []

    def broken():
        raise ValueError("boom")

    scheduler.arm(("lamp", TimerSlot.EFFECT), 5, broken)
    scheduler.arm(("fan", TimerSlot.EFFECT), 15, fired.append, "fan")

    await asyncio.sleep(0.05)
    assert fired == ["fan"]
    assert not scheduler.is_armed(("lamp", TimerSlot.EFFECT))


@pytest.mark.asyncio
async def test_callbacks_can_rearm_their_own_key():
    scheduler = AsyncioScheduler()
    ticks = []
    key = ("shelf", TimerSlot.EFFECT)

    def tick():
        ticks.append(len(ticks))
        if len(ticks) < 3:
            scheduler.arm(key, 5, tick)

    scheduler.arm(key, 5, tick)
    await asyncio.sleep(0.1)

    assert ticks == [0, 1, 2]
    assert not scheduler.is_armed(key)


@pytest.mark.asyncio
async def test_fade_completes_on_a_real_loop():
    pwm = MockPWMDriver()
    pwm.start([17])
    effects = EffectEngine(AsyncioScheduler(), pwm, MockGPIOManager())
    effects.leds_enabled = True
    lamp = LedResource(name="lamp", pin=17)

    assert effects.set_led(lamp, 1, time=60) is True
    assert lamp.value < 1.0

    await asyncio.sleep(0.3)
    assert lamp.value == 1.0
    assert pwm.history(17)[-1] == 1.0
