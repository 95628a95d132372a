from api.socketio.devices.dto import device_snapshot
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SOCKETIO)


def register_on_connect(sio, services):
    """
    Registers connection lifecycle handlers for Socket.IO.
    Sends the device listing with last known colors on client connect.
    """

    @sio.event
    async def connect(sid, environ, auth=None):
        """Handle client connection and send initial state"""
        client_ip = environ.get('REMOTE_ADDR', 'unknown')
        log.info(f"Client connected: {sid} from {client_ip}")

        payload = device_snapshot(services.registry, services.color_cache)
        await sio.emit("devices:snapshot", payload, room=sid)

    @sio.event
    async def disconnect(sid):
        """Handle client disconnection"""
        log.info(f"Client disconnected: {sid}")
