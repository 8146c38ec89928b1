"""Service layer used by the CLI and the public API."""

from __future__ import annotations

import logging

from pcanid.core.channel import CommandChannel
from pcanid.core.errors import ArgumentError
from pcanid.core.locator import DeviceLocator
from pcanid.core.model import (
    DiscoveredDevice,
    ListDevices,
    OperationResult,
    RunConfig,
    RunReport,
    SupportedDevice,
)
from pcanid.core.registry_loader import load_registry
from pcanid.core.session import open_session
from pcanid.transports.base import UsbBackend
from pcanid.transports.pyusb import PyUSBBackend

LOGGER = logging.getLogger(__name__)


class PcanIdService:
    def __init__(
        self,
        *,
        backend: UsbBackend | None = None,
        channel: CommandChannel | None = None,
    ) -> None:
        loaded = load_registry()
        self.registry: tuple[SupportedDevice, ...] = loaded.devices
        self.load_warnings = loaded.warnings
        self.backend = backend or PyUSBBackend()
        self.channel = channel or CommandChannel()
        self.locator = DeviceLocator(self.backend, self.registry)

    def list_supported(self) -> list[SupportedDevice]:
        return list(self.registry)

    def list_devices(self) -> list[DiscoveredDevice]:
        return self.locator.enumerate()

    def select(self, index: int) -> DiscoveredDevice:
        return self.locator.select(index)

    def run(self, config: RunConfig) -> RunReport:
        if not config.operations:
            raise ArgumentError("Please specify an operation.")
        if any(isinstance(op, ListDevices) for op in config.operations):
            raise ArgumentError("Listing devices does not use a device session; call list_devices().")

        device = self.select(config.device_index)
        LOGGER.debug(
            "Selected %s at bus %03d device %03d",
            device.supported.name,
            device.bus,
            device.address,
        )
        results: list[OperationResult] = []
        with open_session(self.backend, device) as session:
            strings = session.strings()
            for operation in config.operations:
                results.append(self.channel.execute(session, operation))
        return RunReport(device=device, strings=strings, results=tuple(results))
