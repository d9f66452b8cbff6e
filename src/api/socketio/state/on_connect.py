from services.service_container import ServiceContainer


def register_state_on_connect(sio, services: ServiceContainer):
    @sio.event
    async def connect(sid, environ, auth=None):
        payload = {
            "leds_enabled": services.effects.leds_enabled,
            "outputs_enabled": services.effects.outputs_enabled,
            "running_animations": services.dispatcher.animations.running(),
            **services.registry.snapshot_all(),
        }
        await sio.emit("state:snapshot", payload, room=sid)
