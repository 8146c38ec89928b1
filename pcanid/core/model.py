"""Core data models used across registry, locator, channel, and CLI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class SupportedDevice:
    id: str
    name: str
    vendor_id: int
    product_id: int


@dataclass(frozen=True)
class DiscoveredDevice:
    ref: Any
    supported: SupportedDevice
    index: int
    bus: int
    address: int
    vendor_id: int
    product_id: int


@dataclass(frozen=True)
class SetDeviceId:
    device_id: int


@dataclass(frozen=True)
class SetSerialNumber:
    serial_number: int


@dataclass(frozen=True)
class QueryDeviceId:
    pass


@dataclass(frozen=True)
class QuerySerialNumber:
    pass


@dataclass(frozen=True)
class ListDevices:
    pass


Operation = Union[SetDeviceId, SetSerialNumber, QueryDeviceId, QuerySerialNumber, ListDevices]


@dataclass(frozen=True)
class OperationResult:
    operation: Operation
    value: int | None = None
    errors: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class DeviceStrings:
    manufacturer: str | None
    product: str | None


@dataclass(frozen=True)
class RunConfig:
    """Immutable selection built once from parsed arguments."""

    operations: tuple[Operation, ...]
    device_index: int = 0


@dataclass(frozen=True)
class RunReport:
    device: DiscoveredDevice
    strings: DeviceStrings
    results: tuple[OperationResult, ...]

    @property
    def ok(self) -> bool:
        return all(result.ok for result in self.results)
