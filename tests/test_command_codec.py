"""
Tests for datagram and push event decoding.
"""

import pytest

from models.command import Command
from models.enums import CommandSource
from models.errors import MalformedCommandError
from services.command_codec import (
    decode_datagram,
    decode_push_event,
    encode_command,
    encode_controller_payload,
    split_target,
)


def test_bare_color_is_broadcast():
    command = decode_datagram(b"ff0000")

    assert command.is_broadcast
    assert command.target_id is None
    assert command.zone == ""
    assert command.color == "ff0000"
    assert command.source == CommandSource.UDP


def test_targeted_command_with_zone():
    command = decode_datagram(b"dev1.zoneA:ff00ff")

    assert command.target_id == "dev1"
    assert command.zone == "zoneA"
    assert command.color == "ff00ff"


def test_nested_zone_is_rejoined():
    command = decode_datagram("dev1.sub.sub2:abc")

    assert command.target_id == "dev1"
    assert command.zone == "sub.sub2"
    assert command.color == "abc"


def test_target_without_zone():
    command = decode_datagram(b"shelf:00ff00")

    assert command.target_id == "shelf"
    assert command.zone == ""


def test_trailing_newline_is_stripped():
    command = decode_datagram(b"desk:123456\n")

    assert command.color == "123456"


def test_empty_target_means_broadcast():
    command = decode_datagram(b":0000ff")

    assert command.is_broadcast
    assert command.color == "0000ff"


def test_leading_fields_are_ignored():
    command = decode_datagram(b"extra:desk.top:ffffff")

    assert command.target_id == "desk"
    assert command.zone == "top"
    assert command.color == "ffffff"


@pytest.mark.parametrize("payload", [b"", b"   ", b"desk:", b"desk.top:"])
def test_missing_color_is_malformed(payload):
    with pytest.raises(MalformedCommandError) as exc_info:
        decode_datagram(payload)

    assert exc_info.value.code == "MALFORMED_COMMAND"


def test_empty_device_id_is_malformed():
    with pytest.raises(MalformedCommandError):
        decode_datagram(b".zone:ff0000")


def test_invalid_utf8_is_malformed():
    with pytest.raises(MalformedCommandError):
        decode_datagram(b"\xff\xfe:ff0000")


def test_split_target():
    assert split_target("dev1") == ("dev1", "")
    assert split_target("dev1.zoneA") == ("dev1", "zoneA")
    assert split_target("dev1.a.b.c") == ("dev1", "a.b.c")


def test_push_event_targets_one_device():
    command = decode_push_event("ff00ff", "desk.top")

    assert command == Command(target_id="desk", zone="top", color="ff00ff", source=CommandSource.PUSH)


def test_push_event_requires_device_and_color():
    with pytest.raises(MalformedCommandError):
        decode_push_event("", "desk")
    with pytest.raises(MalformedCommandError):
        decode_push_event("ff00ff", "")


def test_encode_then_decode_preserves_fields():
    for original in (
        Command(target_id="dev1", zone="zoneA", color="ff00ff"),
        Command(target_id="dev1", zone="sub.sub2", color="abc"),
        Command(target_id="desk", zone="", color="fff"),
        Command(target_id=None, zone="", color="000"),
    ):
        assert decode_datagram(encode_command(original)) == original


def test_controller_payload_is_color_with_newline():
    assert encode_controller_payload("ff00ff") == b"ff00ff\n"


def test_command_str():
    assert str(Command(target_id=None, zone="", color="fff")) == "* <- fff"
    assert str(Command(target_id="desk", zone="top", color="f00")) == "desk.top <- f00"
