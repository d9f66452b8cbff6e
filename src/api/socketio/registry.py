from api.socketio.host.broadcaster import register_host_broadcaster
from api.socketio.state.on_connect import register_state_on_connect

from api.socketio.logs.broadcaster import register_logs


async def register_socketio(sio, services):
    register_host_broadcaster(sio, services)
    register_state_on_connect(sio, services)

    register_logs(sio, services)
