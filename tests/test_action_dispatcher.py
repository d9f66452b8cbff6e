import pytest

from models.domain import Action
from models.enums import ActionVerb, Gesture
from models.events import EventType


def act(verb: str, name=None, **fields) -> Action:
    return Action(verb=ActionVerb[verb], name=name, **fields)


@pytest.fixture
def dispatcher(services):
    return services.dispatcher


@pytest.fixture
def registry(services):
    return services.registry


class TestResourceVerbs:

    def test_set_led(self, dispatcher, registry):
        assert dispatcher.dispatch(act("SET", "lamp", value=0.4)) is True
        assert registry.get_resource("lamp").value == 0.4

    def test_set_output(self, dispatcher, registry, gpio):
        assert dispatcher.dispatch(act("SET", "fan", value=1)) is True
        assert registry.get_resource("fan").value == 1
        assert gpio.read(23) == 1

    def test_set_led_without_value_is_not_handled(self, dispatcher):
        assert dispatcher.dispatch(act("SET", "lamp")) is False

    def test_increase_defaults_to_one_step(self, dispatcher, registry):
        dispatcher.dispatch(act("INCREASE", "lamp"))
        assert registry.get_resource("lamp").value == pytest.approx(0.1)

    def test_stop_cancels_blink(self, dispatcher, registry, scheduler):
        dispatcher.dispatch(act("BLINK", "fan", time=100))
        assert dispatcher.dispatch(act("STOP", "fan")) is True
        value = registry.get_resource("fan").value
        scheduler.advance(1000)
        assert registry.get_resource("fan").value == value

    def test_verb_not_applicable_to_kind(self, dispatcher, registry):
        assert dispatcher.dispatch(act("INCREASE", "fan")) is False
        assert registry.get_resource("fan").value == 0

    def test_resource_verb_on_button_is_rejected(self, dispatcher):
        assert dispatcher.dispatch(act("SET", "desk_button", value=1)) is False

    def test_unknown_name(self, dispatcher):
        assert dispatcher.dispatch(act("SET", "ghost", value=1)) is False


class TestDelay:

    def test_delayed_action_runs_later(self, dispatcher, registry, scheduler):
        assert dispatcher.dispatch(act("SET", "lamp", value=1, delay=500)) is True
        assert registry.get_resource("lamp").value == 0
        scheduler.advance(499)
        assert registry.get_resource("lamp").value == 0
        scheduler.advance(1)
        assert registry.get_resource("lamp").value == 1

    def test_delayed_action_with_unknown_target_fails_now(self, dispatcher, scheduler):
        assert dispatcher.dispatch(act("SET", "ghost", value=1, delay=500)) is False
        assert scheduler.pending == 0


class TestLists:

    def test_every_element_is_attempted(self, dispatcher, registry):
        result = dispatcher.dispatch([
            act("SET", "ghost", value=1),
            act("SET", "lamp", value=0.3),
        ])
        assert result is False
        assert registry.get_resource("lamp").value == 0.3

    def test_all_handled(self, dispatcher):
        assert dispatcher.dispatch([act("SET", "lamp", value=1), act("TOGGLE", "fan")]) is True


class TestComposites:

    def test_scene_verbs(self, dispatcher, registry):
        assert dispatcher.dispatch(act("TOGGLE_SCENE", "evening")) is True
        assert registry.get_scene("evening").value == 1.0
        assert dispatcher.dispatch(act("DECREASE_SCENE", "evening", value=0.5)) is True
        assert registry.get_scene("evening").value == 0.5

    def test_scene_verb_on_resource_name_is_unknown(self, dispatcher):
        assert dispatcher.dispatch(act("SET_SCENE", "lamp", value=1)) is False

    def test_start_and_stop_animation(self, dispatcher, registry, scheduler):
        assert dispatcher.dispatch(act("START", "heartbeat")) is True
        shelf = registry.get_resource("shelf")
        assert shelf.value == 1
        scheduler.advance(100)
        assert shelf.value == 0

        assert dispatcher.dispatch(act("STOP", "heartbeat")) is True
        assert shelf.value == 0.3
        assert registry.get_animation("heartbeat").running is False

    def test_stop_all(self, dispatcher, registry):
        dispatcher.dispatch(act("START", "heartbeat"))
        assert dispatcher.dispatch(act("STOP_ALL")) is True
        assert registry.get_animation("heartbeat").running is False

    def test_gesture_verb_reenters_button_actions(self, dispatcher, registry):
        assert dispatcher.dispatch(act("PRESS", "desk_button")) is True
        assert registry.get_resource("lamp").value == 1.0

        events = [e for e in dispatcher.notifier.event_bus.get_event_history(50)
                  if e.type == EventType.BUTTON_GESTURE]
        assert events[-1].gesture == Gesture.PRESS

    def test_gesture_without_bound_actions(self, dispatcher):
        assert dispatcher.dispatch(act("DOUBLE_PRESS", "desk_button")) is False

    def test_gesture_verb_on_led_is_rejected(self, dispatcher):
        assert dispatcher.dispatch(act("PRESS", "lamp")) is False

    def test_notify(self, dispatcher, services):
        assert dispatcher.dispatch(act("NOTIFY", notification="SHOW_ALERT", payload={"message": "hi"})) is True
        sent = [e for e in services.event_bus.get_event_history(50) if e.type == EventType.NOTIFICATION]
        assert sent[-1].notification == "SHOW_ALERT"
        assert sent[-1].payload == {"message": "hi"}
