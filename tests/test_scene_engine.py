from unittest.mock import MagicMock

import pytest

from engine.scene_engine import SceneEngine
from models.domain import Action, Scene
from models.enums import ActionVerb


@pytest.fixture
def dispatch():
    return MagicMock(return_value=True)


@pytest.fixture
def scene():
    return Scene(
        name="evening",
        default=0.6,
        actions=(
            Action(verb=ActionVerb.SET, name="lamp", value=1),
            Action(verb=ActionVerb.SET, name="shelf", value=0.5),
            Action(verb=ActionVerb.BLINK, name="fan", time=400),
        ),
    )


def members(dispatch):
    return list(dispatch.call_args.args[0])


def test_master_value_and_time_are_injected(dispatch, scene):
    SceneEngine(dispatch).set(scene, 0.5, time=1000)

    lamp, shelf, fan = members(dispatch)
    assert lamp.master_value == 0.5 and lamp.time == 1000
    assert shelf.master_value == 0.5 and shelf.time == 1000
    # Blink timing belongs to the member
    assert fan.master_value == 0.5 and fan.time == 400
    assert scene.value == 0.5


def test_default_used_for_missing_value(dispatch, scene):
    SceneEngine(dispatch).set(scene, None)
    assert scene.value == 0.6
    assert all(a.master_value == 0.6 for a in members(dispatch))


def test_value_is_clamped(dispatch, scene):
    SceneEngine(dispatch).set(scene, 4)
    assert scene.value == 1.0


def test_increase_and_decrease(dispatch, scene):
    engine = SceneEngine(dispatch)
    engine.set(scene, 0.5)
    engine.increase(scene)
    assert scene.value == pytest.approx(0.6)
    engine.decrease(scene, 0.5)
    assert scene.value == pytest.approx(0.1)


def test_toggle_remembers_level(dispatch, scene):
    engine = SceneEngine(dispatch)
    engine.set(scene, 0.3)
    engine.toggle(scene)
    assert scene.value == 0
    assert scene.toggle_value == 0.3
    engine.toggle(scene)
    assert scene.value == 0.3


def test_scene_fans_out_to_leds(services, pwm):
    """masterValue scales each member's own value"""
    services.dispatcher.dispatch(Action(verb=ActionVerb.SET_SCENE, name="evening", value=0.5))

    lamp = services.registry.get_resource("lamp")
    shelf = services.registry.get_resource("shelf")
    assert lamp.value == pytest.approx(0.5)
    assert shelf.value == pytest.approx(0.25)
    assert services.registry.get_scene("evening").value == 0.5
