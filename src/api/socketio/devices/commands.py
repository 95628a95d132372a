"""
Push channel command ingress

Clients emit `set-color` with {color, device}. The payload is validated,
decoded into a Command and handed to the relay dispatcher. Nothing is sent back
to the client: failures are visible in server logs only.
"""

from typing import Any

from pydantic import ValidationError

from api.schemas.device import SetColorEvent
from models.errors import MalformedCommandError
from services.command_codec import decode_push_event
from services.relay_dispatcher import RelayDispatcher
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SOCKETIO)

SET_COLOR_EVENT = "set-color"


class PushCommandHandler:
    """Converts set-color events to commands for the dispatcher"""

    def __init__(self, dispatcher: RelayDispatcher):
        self._dispatcher = dispatcher

    async def on_set_color(self, sid: str, data: Any) -> bool:
        try:
            event = SetColorEvent.model_validate(data)
        except ValidationError as ex:
            log.warn(f"Dropping invalid {SET_COLOR_EVENT} from {sid}",
                     errors=len(ex.errors()), payload=repr(data))
            return False

        try:
            command = decode_push_event(event.color, event.device)
        except MalformedCommandError as ex:
            log.warn(f"Dropping malformed {SET_COLOR_EVENT} from {sid}",
                     reason=ex.details.get("reason"))
            return False

        return await self._dispatcher.dispatch(command)


def register_device_commands(sio, services) -> PushCommandHandler:
    handler = PushCommandHandler(services.dispatcher)
    sio.on(SET_COLOR_EVENT, handler.on_set_color)
    return handler
