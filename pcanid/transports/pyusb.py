"""USB backend implementation using pyusb."""

from __future__ import annotations

import logging
from typing import Any

import usb.core
import usb.util

from pcanid.core.errors import (
    ClaimFailedError,
    EnumerationError,
    OpenFailedError,
    TransferError,
)

LOGGER = logging.getLogger(__name__)


class PyUSBHandle:
    def __init__(self, device: usb.core.Device) -> None:
        self._device = device
        self._claimed: set[int] = set()
        self._detached: set[int] = set()

    def detach_kernel_driver(self, interface: int) -> bool:
        try:
            if not self._device.is_kernel_driver_active(interface):
                return False
            self._device.detach_kernel_driver(interface)
        except NotImplementedError:
            # Not available on every platform backend.
            return False
        except usb.core.USBError as exc:
            LOGGER.debug("Kernel driver detach on interface %d failed: %s", interface, exc)
            return False
        self._detached.add(interface)
        return True

    def claim_interface(self, interface: int) -> None:
        try:
            usb.util.claim_interface(self._device, interface)
        except usb.core.USBError as exc:
            raise ClaimFailedError(f"Could not claim interface {interface}: {exc}") from exc
        self._claimed.add(interface)

    def reset(self) -> None:
        # pyusb releases every interface and closes the handle around a reset.
        self._device.reset()
        for interface in sorted(self._claimed):
            if interface in self._detached:
                self.detach_kernel_driver(interface)
            self.claim_interface(interface)

    def get_strings(self) -> tuple[str | None, str | None]:
        return (
            self._string(self._device.iManufacturer),
            self._string(self._device.iProduct),
        )

    def _string(self, index: int) -> str | None:
        if not index:
            return None
        try:
            return usb.util.get_string(self._device, index)
        except (usb.core.USBError, ValueError) as exc:
            LOGGER.debug("Reading string descriptor %d failed: %s", index, exc)
            return None

    def bulk_write(self, endpoint: int, data: bytes, *, timeout_ms: int) -> int:
        try:
            return self._device.write(endpoint, data, timeout=timeout_ms)
        except usb.core.USBError as exc:
            raise TransferError(f"bulk write to endpoint 0x{endpoint:02x} failed: {exc}") from exc

    def bulk_read(self, endpoint: int, size: int, *, timeout_ms: int) -> bytes:
        try:
            data = self._device.read(endpoint, size, timeout=timeout_ms)
        except usb.core.USBError as exc:
            raise TransferError(f"bulk read from endpoint 0x{endpoint:02x} failed: {exc}") from exc
        return bytes(data)

    def release_interface(self, interface: int) -> None:
        usb.util.release_interface(self._device, interface)
        self._claimed.discard(interface)

    def attach_kernel_driver(self, interface: int) -> None:
        self._device.attach_kernel_driver(interface)

    def close(self) -> None:
        usb.util.dispose_resources(self._device)


class PyUSBBackend:
    def list_devices(self) -> list[Any]:
        try:
            return list(usb.core.find(find_all=True))
        except usb.core.NoBackendError as exc:
            raise EnumerationError(
                "No libusb backend available. Install libusb and retry."
            ) from exc
        except usb.core.USBError as exc:
            raise EnumerationError(f"error retrieving list of devices: {exc}") from exc

    def open(self, ref: Any) -> PyUSBHandle:
        # pyusb opens lazily; setting the configuration forces the handle open.
        try:
            ref.set_configuration()
        except usb.core.USBError as exc:
            if exc.errno == 16:
                # EBUSY: already configured and held by a kernel driver.
                LOGGER.debug("Device busy while configuring, using active configuration")
            else:
                raise OpenFailedError(f"error opening device: {exc}") from exc
        return PyUSBHandle(ref)
