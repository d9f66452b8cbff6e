"""
Event bus: publishing, subscription, middleware, filtering and priorities
"""

import asyncio

import pytest

from models.enums import Gesture
from models.events import ButtonGestureEvent, SceneChangedEvent, EventType
from services.event_bus import EventBus


@pytest.mark.asyncio
async def test_basic_pub_sub():
    bus = EventBus()
    received = []

    async def handler(event):
        received.append(event)

    bus.subscribe(EventType.BUTTON_GESTURE, handler)
    await bus.publish(ButtonGestureEvent("doorbell", Gesture.PRESS, True))

    assert len(received) == 1
    assert received[0].gesture == Gesture.PRESS
    assert received[0].handled is True


@pytest.mark.asyncio
async def test_filtering():
    bus = EventBus()
    doorbell = []
    others = []

    bus.subscribe(EventType.BUTTON_GESTURE, doorbell.append, filter_fn=lambda e: e.button == "doorbell")
    bus.subscribe(EventType.BUTTON_GESTURE, others.append, filter_fn=lambda e: e.button != "doorbell")

    await bus.publish(ButtonGestureEvent("doorbell", Gesture.PRESS))
    await bus.publish(ButtonGestureEvent("desk", Gesture.PRESS))
    await bus.publish(ButtonGestureEvent("doorbell", Gesture.RELEASE))

    assert len(doorbell) == 2
    assert len(others) == 1


@pytest.mark.asyncio
async def test_middleware_can_block():
    bus = EventBus()
    received = []

    def block_desk(event):
        return None if getattr(event, "button", None) == "desk" else event

    bus.add_middleware(block_desk)
    bus.subscribe(EventType.BUTTON_GESTURE, received.append)

    await bus.publish(ButtonGestureEvent("doorbell", Gesture.PRESS))
    await bus.publish(ButtonGestureEvent("desk", Gesture.PRESS))

    assert [e.button for e in received] == ["doorbell"]
    assert len(bus.get_event_history()) == 1


@pytest.mark.asyncio
async def test_priority():
    bus = EventBus()
    order = []

    bus.subscribe(EventType.SCENE_CHANGED, lambda e: order.append("low"), priority=1)
    bus.subscribe(EventType.SCENE_CHANGED, lambda e: order.append("high"), priority=10)
    bus.subscribe(EventType.SCENE_CHANGED, lambda e: order.append("medium"), priority=5)

    await bus.publish(SceneChangedEvent("evening", 0.5))
    assert order == ["high", "medium", "low"]


@pytest.mark.asyncio
async def test_handler_failure_does_not_stop_others():
    bus = EventBus()
    received = []

    def broken(event):
        raise RuntimeError("boom")

    bus.subscribe(EventType.SCENE_CHANGED, broken, priority=10)
    bus.subscribe(EventType.SCENE_CHANGED, received.append)

    await bus.publish(SceneChangedEvent("evening", 0.5))
    assert len(received) == 1


@pytest.mark.asyncio
async def test_publish_nowait_schedules_on_running_loop():
    bus = EventBus()
    received = []
    bus.subscribe(EventType.SCENE_CHANGED, received.append)

    task = bus.publish_nowait(SceneChangedEvent("evening", 1.0))
    assert task is not None
    await task
    assert received[0].value == 1.0


@pytest.mark.asyncio
async def test_publish_nowait_keeps_tasks_until_done():
    bus = EventBus()
    received = []

    async def slow_handler(event):
        await asyncio.sleep(0.01)
        # Publishing from a handler extends the backlog wait_idle() drains
        if event.name == "evening":
            bus.publish_nowait(SceneChangedEvent("night", 0.1))
        received.append(event.name)

    bus.subscribe(EventType.SCENE_CHANGED, slow_handler)
    bus.publish_nowait(SceneChangedEvent("evening", 1.0))
    bus.publish_nowait(SceneChangedEvent("morning", 0.5))
    assert bus.pending == 2

    await bus.wait_idle()

    assert bus.pending == 0
    assert sorted(received) == ["evening", "morning", "night"]


def test_publish_nowait_without_loop_only_records():
    bus = EventBus()
    assert bus.publish_nowait(SceneChangedEvent("evening", 1.0)) is None
    assert bus.get_event_history()[-1].name == "evening"


def test_unsubscribe():
    bus = EventBus()
    handler = lambda e: None  # noqa: E731
    bus.subscribe(EventType.SCENE_CHANGED, handler)
    assert bus.unsubscribe(EventType.SCENE_CHANGED, handler) is True
    assert bus.unsubscribe(EventType.SCENE_CHANGED, handler) is False


def test_event_to_data():
    event = SceneChangedEvent("evening", 0.5)
    assert event.to_data() == {"name": "evening", "value": 0.5}
