"""Run configuration built once from parsed command-line values."""

from __future__ import annotations

import re
import string

from pcanid.core.errors import ArgumentError
from pcanid.core.model import (
    Operation,
    QueryDeviceId,
    QuerySerialNumber,
    RunConfig,
    SetDeviceId,
    SetSerialNumber,
)
from pcanid.core.packet import check_device_id, check_serial_number

_NUMBER_RE = re.compile(r"0[xX](?P<hex>[0-9a-fA-F]+)|(?P<dec>[0-9]+)")


def parse_number(text: str) -> int:
    """Parse a decimal or ``0x``-prefixed hexadecimal literal."""
    if not text or text[0] not in string.digits:
        raise ArgumentError(f"invalid argument: {text}")
    match = _NUMBER_RE.fullmatch(text)
    if match is None:
        raise ArgumentError(f"invalid number: {text}")
    if match.group("hex") is not None:
        return int(match.group("hex"), 16)
    return int(match.group("dec"), 10)


def query_config(device_index: int = 0, *, device_id: bool = True, serial_number: bool = True) -> RunConfig:
    operations: list[Operation] = []
    if device_id:
        operations.append(QueryDeviceId())
    if serial_number:
        operations.append(QuerySerialNumber())
    if not operations:
        raise ArgumentError("Nothing to query: choose the device id, the serial number, or both.")
    return RunConfig(operations=tuple(operations), device_index=device_index)


def set_device_id_config(value: int, device_index: int = 0) -> RunConfig:
    return RunConfig(operations=(SetDeviceId(check_device_id(value)),), device_index=device_index)


def set_serial_number_config(value: int, device_index: int = 0) -> RunConfig:
    return RunConfig(
        operations=(SetSerialNumber(check_serial_number(value)),),
        device_index=device_index,
    )
