"""Request/response exchange of command packets over the bulk endpoints."""

from __future__ import annotations

import logging

from pcanid.core import packet
from pcanid.core.errors import ArgumentError, TransferError
from pcanid.core.model import (
    ListDevices,
    Operation,
    OperationResult,
    QueryDeviceId,
    QuerySerialNumber,
)
from pcanid.core.session import DeviceSession

ENDPOINT_OUT = 0x01
ENDPOINT_IN = 0x81
TIMEOUT_MS = 2000

LOGGER = logging.getLogger(__name__)


class CommandChannel:
    def __init__(self, *, timeout_ms: int = TIMEOUT_MS) -> None:
        self.timeout_ms = timeout_ms

    def execute(self, session: DeviceSession, operation: Operation) -> OperationResult:
        if isinstance(operation, ListDevices):
            raise ArgumentError("Listing devices does not use a device session")

        request = packet.encode(operation)
        errors: list[str] = []

        LOGGER.debug("-> %s", request.hex())
        try:
            session.handle.bulk_write(ENDPOINT_OUT, request, timeout_ms=self.timeout_ms)
        except TransferError as exc:
            LOGGER.debug("error %s", exc)
            errors.append(str(exc))

        if not isinstance(operation, (QueryDeviceId, QuerySerialNumber)):
            return OperationResult(operation=operation, errors=tuple(errors))

        # The read is attempted even when the request write failed.
        reply: bytes | None = None
        try:
            reply = session.handle.bulk_read(
                ENDPOINT_IN, packet.PACKET_SIZE, timeout_ms=self.timeout_ms
            )
        except TransferError as exc:
            LOGGER.debug("error %s", exc)
            errors.append(str(exc))

        value: int | None = None
        if reply is not None:
            LOGGER.debug("<- %s", reply.hex())
            if isinstance(operation, QueryDeviceId):
                value = packet.decode_device_id(reply)
            else:
                value = packet.decode_serial_number(reply)
            if value is None:
                errors.append(f"short reply of {len(reply)} bytes")

        return OperationResult(operation=operation, value=value, errors=tuple(errors))
