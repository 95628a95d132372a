"""
Command Codec - wire text format <-> Command

Pure functions, no I/O.

Datagram format (UDP command port):
    <color>                 broadcast to every device
    <id>.<zone...>:<color>  one device, optional dot-joined zone

Push channel events carry {color, device} where device is <id>.<zone...>.

Outbound controller format:
    <color>\\n
"""

from typing import Tuple, Union

from models.command import Command
from models.enums import CommandSource
from models.errors import MalformedCommandError
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.CODEC)

FIELD_SEPARATOR = ":"
ZONE_SEPARATOR = "."
TERMINATOR = "\n"


def split_target(target: str) -> Tuple[str, str]:
    """
    Split a composite target into (device_id, zone).

    The first dot segment is the device ID, the rest re-joined with "." is the zone.

        "dev1"            -> ("dev1", "")
        "dev1.zoneA"      -> ("dev1", "zoneA")
        "dev1.sub.sub2"   -> ("dev1", "sub.sub2")
    """
    device_id, _, zone = target.partition(ZONE_SEPARATOR)
    if not device_id:
        raise MalformedCommandError("empty device id in target", raw=target)
    return device_id, zone


def decode_datagram(payload: Union[bytes, str]) -> Command:
    """
    Decode a raw UDP command datagram.

    The last ':' field is the color. The field right before it, when present and
    non-empty, is the composite target; otherwise the command is broadcast-all.

    Raises:
        MalformedCommandError: undecodable bytes, empty color, empty device id
    """
    if isinstance(payload, bytes):
        try:
            text = payload.decode("utf-8")
        except UnicodeDecodeError:
            raise MalformedCommandError("payload is not valid UTF-8", raw=repr(payload)) from None
    else:
        text = payload

    text = text.strip()
    fields = text.split(FIELD_SEPARATOR)
    color = fields.pop()
    if not color:
        raise MalformedCommandError("missing color field", raw=text)

    target = fields.pop() if fields else ""
    if fields:
        log.debug("Ignoring leading datagram fields", ignored=FIELD_SEPARATOR.join(fields))

    if not target:
        return Command(target_id=None, zone="", color=color, source=CommandSource.UDP)

    device_id, zone = split_target(target)
    return Command(target_id=device_id, zone=zone, color=color, source=CommandSource.UDP)


def decode_push_event(color: str, device: str) -> Command:
    """
    Decode a push channel set-color event.

    Always targets one device; there is no broadcast form on this path.
    """
    if not color:
        raise MalformedCommandError("missing color", raw=f"{device}:{color}")
    if not device:
        raise MalformedCommandError("missing device", raw=f"{device}:{color}")

    device_id, zone = split_target(device)
    return Command(target_id=device_id, zone=zone, color=color, source=CommandSource.PUSH)


def encode_command(command: Command) -> str:
    """Inverse of decode_datagram."""
    if command.is_broadcast:
        return command.color
    target = command.target_id
    if command.zone:
        target = f"{target}{ZONE_SEPARATOR}{command.zone}"
    return f"{target}{FIELD_SEPARATOR}{command.color}"


def encode_controller_payload(color: str) -> bytes:
    """Datagram body sent to a controller. Zones are not encoded on the wire."""
    return f"{color}{TERMINATOR}".encode("utf-8")
