"""Stable public API for building tooling on top of pcanid.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

from pcanid.core.channel import CommandChannel
from pcanid.core.config import query_config, set_device_id_config, set_serial_number_config
from pcanid.core.errors import (
    ArgumentError,
    ClaimFailedError,
    DeviceNotFoundError,
    EnumerationError,
    OpenFailedError,
    PcanIdError,
    RegistryLoadError,
    RegistryValidationError,
    TransferError,
)
from pcanid.core.model import (
    DeviceStrings,
    DiscoveredDevice,
    ListDevices,
    Operation,
    OperationResult,
    QueryDeviceId,
    QuerySerialNumber,
    RunConfig,
    RunReport,
    SetDeviceId,
    SetSerialNumber,
    SupportedDevice,
)
from pcanid.core.service import PcanIdService
from pcanid.transports.base import UsbBackend

__all__ = [
    "PcanIdError",
    "ArgumentError",
    "ClaimFailedError",
    "DeviceNotFoundError",
    "EnumerationError",
    "OpenFailedError",
    "RegistryLoadError",
    "RegistryValidationError",
    "TransferError",
    "DeviceStrings",
    "DiscoveredDevice",
    "ListDevices",
    "Operation",
    "OperationResult",
    "QueryDeviceId",
    "QuerySerialNumber",
    "RunConfig",
    "RunReport",
    "SetDeviceId",
    "SetSerialNumber",
    "SupportedDevice",
    "UsbBackend",
    "Client",
]


class Client:
    """Public client for reading and writing PCAN-USB configuration.

    A `Client` wraps registry loading, device enumeration and the command
    exchange behind a stable API intended for third-party tools. Each call
    that talks to a device opens and releases its own session.
    """

    def __init__(
        self,
        *,
        backend: UsbBackend | None = None,
        timeout_ms: int | None = None,
    ) -> None:
        channel = CommandChannel(timeout_ms=timeout_ms) if timeout_ms is not None else None
        self._service = PcanIdService(backend=backend, channel=channel)

    @property
    def load_warnings(self) -> tuple[str, ...]:
        return self._service.load_warnings

    def list_supported(self) -> list[SupportedDevice]:
        return self._service.list_supported()

    def list_devices(self) -> list[DiscoveredDevice]:
        return self._service.list_devices()

    def query(self, *, device_index: int = 0) -> RunReport:
        return self._service.run(query_config(device_index))

    def get_device_id(self, *, device_index: int = 0) -> int | None:
        report = self._service.run(query_config(device_index, serial_number=False))
        return report.results[0].value

    def get_serial_number(self, *, device_index: int = 0) -> int | None:
        report = self._service.run(query_config(device_index, device_id=False))
        return report.results[0].value

    def set_device_id(self, value: int, *, device_index: int = 0) -> OperationResult:
        return self._service.run(set_device_id_config(value, device_index)).results[0]

    def set_serial_number(self, value: int, *, device_index: int = 0) -> OperationResult:
        return self._service.run(set_serial_number_config(value, device_index)).results[0]

    def run(self, config: RunConfig) -> RunReport:
        return self._service.run(config)
