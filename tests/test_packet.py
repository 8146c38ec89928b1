from __future__ import annotations

import pytest

from pcanid.core import packet
from pcanid.core.errors import ArgumentError
from pcanid.core.model import ListDevices, QueryDeviceId, QuerySerialNumber, SetDeviceId, SetSerialNumber


@pytest.mark.parametrize(
    ("operation", "opcode", "payload"),
    [
        (SetDeviceId(7), (4, 2), b"\x07"),
        (SetSerialNumber(0x12345678), (6, 2), b"\x78\x56\x34\x12"),
        (QueryDeviceId(), (4, 1), b""),
        (QuerySerialNumber(), (6, 1), b""),
    ],
)
def test_packet_shape(operation, opcode, payload) -> None:
    encoded = packet.encode(operation)
    assert len(encoded) == 16
    assert (encoded[0], encoded[1]) == opcode
    assert encoded[2 : 2 + len(payload)] == payload
    assert encoded[2 + len(payload) :] == bytes(16 - 2 - len(payload))


def test_device_id_254_encodes() -> None:
    assert packet.encode(SetDeviceId(254))[2] == 254


@pytest.mark.parametrize("value", [255, 256, -1])
def test_device_id_out_of_range_rejected(value: int) -> None:
    with pytest.raises(ArgumentError):
        packet.encode(SetDeviceId(value))


def test_serial_number_out_of_range_rejected() -> None:
    with pytest.raises(ArgumentError):
        packet.encode(SetSerialNumber(0x1_0000_0000))


def test_list_devices_has_no_packet() -> None:
    with pytest.raises(ArgumentError):
        packet.encode(ListDevices())


def test_decode_device_id() -> None:
    reply = bytes([4, 1, 0x07]) + bytes(13)
    assert packet.decode_device_id(reply) == 7


def test_decode_serial_number_is_little_endian() -> None:
    reply = bytes([6, 1, 0xEF, 0xBE, 0xAD, 0xDE]) + bytes(10)
    assert packet.decode_serial_number(reply) == 0xDEADBEEF


def test_decode_short_reply_returns_none() -> None:
    assert packet.decode_device_id(b"\x04\x01") is None
    assert packet.decode_serial_number(b"\x06\x01\x00\x00") is None


def test_oversized_payload_rejected() -> None:
    with pytest.raises(ArgumentError):
        packet.build_packet(4, 2, bytes(15))
