"""
Host events pushed to every connected client:

    notification        NOTIFY actions and long-press alerts
    hardware:ready      startup acknowledgement
    scene:changed       scene applied
    animation:started / animation:stopped
    button:gesture      every recognized gesture, handled or not
"""

from models.events import (
    AnimationStartedEvent,
    AnimationStoppedEvent,
    ButtonGestureEvent,
    EventType,
    HardwareReadyEvent,
    NotificationEvent,
    SceneChangedEvent,
)
from services.service_container import ServiceContainer


def register_host_broadcaster(sio, services: ServiceContainer):
    bus = services.event_bus

    async def on_notification(event: NotificationEvent):
        await sio.emit("notification", {"notification": event.notification, "payload": event.payload})

    async def on_hardware_ready(event: HardwareReadyEvent):
        await sio.emit("hardware:ready", event.to_data())

    async def on_scene_changed(event: SceneChangedEvent):
        await sio.emit("scene:changed", event.to_data())

    async def on_animation_started(event: AnimationStartedEvent):
        await sio.emit("animation:started", {"name": event.name})

    async def on_animation_stopped(event: AnimationStoppedEvent):
        await sio.emit("animation:stopped", {"name": event.name})

    async def on_button_gesture(event: ButtonGestureEvent):
        await sio.emit("button:gesture", {
            "button": event.button,
            "gesture": event.gesture.name,
            "handled": event.handled,
        })

    bus.subscribe(EventType.NOTIFICATION, on_notification)
    bus.subscribe(EventType.HARDWARE_READY, on_hardware_ready)
    bus.subscribe(EventType.SCENE_CHANGED, on_scene_changed)
    bus.subscribe(EventType.ANIMATION_STARTED, on_animation_started)
    bus.subscribe(EventType.ANIMATION_STOPPED, on_animation_stopped)
    bus.subscribe(EventType.BUTTON_GESTURE, on_button_gesture)
