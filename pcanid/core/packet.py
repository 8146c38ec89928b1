"""Fixed 16-byte command packet codec."""

from __future__ import annotations

import struct

from pcanid.core.errors import ArgumentError
from pcanid.core.model import (
    Operation,
    QueryDeviceId,
    QuerySerialNumber,
    SetDeviceId,
    SetSerialNumber,
)

PACKET_SIZE = 16
PAYLOAD_OFFSET = 2

CATEGORY_DEVICE_ID = 4
CATEGORY_SERIAL_NUMBER = 6

SUBCOMMAND_READ = 1
SUBCOMMAND_WRITE = 2

MAX_DEVICE_ID = 254
MAX_SERIAL_NUMBER = 0xFFFFFFFF

_SERIAL_STRUCT = struct.Struct("<I")


def build_packet(category: int, subcommand: int, payload: bytes = b"") -> bytes:
    if len(payload) > PACKET_SIZE - PAYLOAD_OFFSET:
        raise ArgumentError(
            f"payload of {len(payload)} bytes does not fit a {PACKET_SIZE}-byte packet"
        )
    packet = bytearray(PACKET_SIZE)
    packet[0] = category
    packet[1] = subcommand
    packet[PAYLOAD_OFFSET : PAYLOAD_OFFSET + len(payload)] = payload
    return bytes(packet)


def check_device_id(value: int) -> int:
    if not 0 <= value <= MAX_DEVICE_ID:
        raise ArgumentError(f"invalid device id: {value} (must be 0..{MAX_DEVICE_ID})")
    return value


def check_serial_number(value: int) -> int:
    if not 0 <= value <= MAX_SERIAL_NUMBER:
        raise ArgumentError(
            f"invalid serial number: {value} (must be 0..{MAX_SERIAL_NUMBER})"
        )
    return value


def encode(operation: Operation) -> bytes:
    """Return the request packet written to the command-out endpoint."""
    if isinstance(operation, SetDeviceId):
        device_id = check_device_id(operation.device_id)
        return build_packet(CATEGORY_DEVICE_ID, SUBCOMMAND_WRITE, bytes([device_id]))
    if isinstance(operation, SetSerialNumber):
        serial = check_serial_number(operation.serial_number)
        return build_packet(
            CATEGORY_SERIAL_NUMBER, SUBCOMMAND_WRITE, _SERIAL_STRUCT.pack(serial)
        )
    if isinstance(operation, QueryDeviceId):
        return build_packet(CATEGORY_DEVICE_ID, SUBCOMMAND_READ)
    if isinstance(operation, QuerySerialNumber):
        return build_packet(CATEGORY_SERIAL_NUMBER, SUBCOMMAND_READ)
    raise ArgumentError(f"operation {type(operation).__name__} has no command packet")


def decode_device_id(reply: bytes) -> int | None:
    if len(reply) < PAYLOAD_OFFSET + 1:
        return None
    return reply[PAYLOAD_OFFSET]


def decode_serial_number(reply: bytes) -> int | None:
    if len(reply) < PAYLOAD_OFFSET + _SERIAL_STRUCT.size:
        return None
    return _SERIAL_STRUCT.unpack_from(reply, PAYLOAD_OFFSET)[0]
