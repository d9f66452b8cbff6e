from unittest.mock import MagicMock

import pytest

from engine.animation_engine import AnimationEngine
from managers.resource_registry import ResourceRegistry
from models.domain import Action, Animation, Frame
from models.enums import ActionVerb, TimerSlot


def frame(name: str, duration_ms: int) -> Frame:
    return Frame(actions=(Action(verb=ActionVerb.TOGGLE, name=name),), duration_ms=duration_ms)


@pytest.fixture
def dispatch():
    return MagicMock(return_value=True)


@pytest.fixture
def registry():
    return ResourceRegistry()


@pytest.fixture
def engine(scheduler, registry, dispatch):
    return AnimationEngine(scheduler, registry, dispatch)


def played(dispatch):
    return [call.args[0][0].name for call in dispatch.call_args_list]


def test_repeating_animation_loops(engine, scheduler, registry, dispatch):
    animation = Animation(name="pulse", frames=(frame("a", 100), frame("b", 200)), repeat=True)
    registry.register(None, animation)

    engine.start(animation)
    assert played(dispatch) == ["a"]
    scheduler.advance(100)
    assert played(dispatch) == ["a", "b"]
    scheduler.advance(200)
    assert played(dispatch) == ["a", "b", "a"]
    scheduler.advance(300)
    assert played(dispatch) == ["a", "b", "a", "b", "a"]
    assert animation.running


def test_stop_halts_frames_and_runs_stop_actions(engine, scheduler, dispatch):
    stop_action = Action(verb=ActionVerb.SET, name="lamp", value=0)
    animation = Animation(
        name="pulse", frames=(frame("a", 100), frame("b", 200)), repeat=True,
        on_stop_actions=(stop_action,)
    )
    engine.start(animation)
    scheduler.advance(150)
    engine.stop(animation)

    assert animation.running is False
    assert animation.frame_index == 0
    assert not scheduler.is_armed(("pulse", TimerSlot.FRAME))
    assert dispatch.call_args.args[0] == (stop_action,)

    dispatch.reset_mock()
    scheduler.advance(1000)
    dispatch.assert_not_called()


def test_non_repeating_animation_stops_itself(engine, scheduler, dispatch):
    stop_action = Action(verb=ActionVerb.SET, name="lamp", value=0)
    animation = Animation(name="once", frames=(frame("a", 100), frame("b", 100)), on_stop_actions=(stop_action,))

    engine.start(animation)
    scheduler.advance(150)
    assert animation.running
    scheduler.advance(100)
    assert animation.running is False
    assert dispatch.call_args.args[0] == (stop_action,)


def test_pre_start_actions_run_first(engine, dispatch):
    pre = Action(verb=ActionVerb.SET, name="lamp", value=1)
    animation = Animation(name="pulse", frames=(frame("a", 100),), pre_start_actions=(pre,))
    engine.start(animation)
    assert dispatch.call_args_list[0].args[0] == (pre,)


def test_start_and_stop_are_idempotent(engine, scheduler, dispatch):
    animation = Animation(name="pulse", frames=(frame("a", 100),), repeat=True)
    assert engine.start(animation) is True
    assert engine.start(animation) is True
    assert played(dispatch) == ["a"]

    assert engine.stop(animation) is True
    assert engine.stop(animation) is True


def test_stop_all(engine, registry):
    first = Animation(name="one", frames=(frame("a", 100),), repeat=True)
    second = Animation(name="two", frames=(frame("b", 100),), repeat=True)
    registry.register(None, first)
    registry.register(None, second)
    engine.start(first)
    engine.start(second)
    assert engine.running() == ["one", "two"]

    engine.stop_all()
    assert engine.running() == []
