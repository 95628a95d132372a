from api.socketio.on_connect import register_on_connect
from api.socketio.devices.broadcaster import register_device_broadcaster
from api.socketio.devices.commands import register_device_commands
from api.socketio.discovery.broadcaster import register_discovery_broadcaster


def register_socketio(sio, services):
    register_on_connect(sio, services)
    register_device_commands(sio, services)

    register_device_broadcaster(sio, services)
    register_discovery_broadcaster(sio, services)
