"""Scoped ownership of one opened, claimed device handle."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from pcanid.core.errors import ClaimFailedError, OpenFailedError
from pcanid.core.model import DeviceStrings, DiscoveredDevice
from pcanid.transports.base import UsbBackend, UsbHandle

INTERFACE = 0
LOGGER = logging.getLogger(__name__)


class DeviceSession:
    def __init__(self, device: DiscoveredDevice, handle: UsbHandle) -> None:
        self.device = device
        self.handle = handle

    def strings(self) -> DeviceStrings:
        try:
            manufacturer, product = self.handle.get_strings()
        except Exception as exc:
            LOGGER.warning("Could not read string descriptors: %s", exc)
            return DeviceStrings(manufacturer=None, product=None)
        return DeviceStrings(manufacturer=manufacturer, product=product)


def _best_effort(step: str, func: Callable[..., object], *args: object, level: int = logging.WARNING) -> None:
    try:
        func(*args)
    except Exception as exc:
        LOGGER.log(level, "%s failed: %s", step, exc)


@contextmanager
def open_session(backend: UsbBackend, device: DiscoveredDevice) -> Iterator[DeviceSession]:
    """Open, claim and reset ``device``.

    Release of the interface, kernel driver re-attachment and close are each
    attempted on every exit path; their failures are logged, never raised.
    Open and claim failures abort before any transfer.
    """
    handle = backend.open(device.ref)
    if handle is None:
        raise OpenFailedError(f"error opening device {device.supported.name} at index {device.index}")

    detached = False
    try:
        detached = bool(handle.detach_kernel_driver(INTERFACE))
        if detached:
            LOGGER.debug("Detached kernel driver from interface %d", INTERFACE)
    except Exception as exc:
        LOGGER.debug("Kernel driver detach failed: %s", exc)

    try:
        handle.claim_interface(INTERFACE)
    except Exception as exc:
        if detached:
            _best_effort("kernel driver re-attach", handle.attach_kernel_driver, INTERFACE)
        _best_effort("close", handle.close)
        if isinstance(exc, ClaimFailedError):
            raise
        raise ClaimFailedError(f"Could not claim interface {INTERFACE}: {exc}") from exc

    try:
        _best_effort("reset", handle.reset)
        yield DeviceSession(device, handle)
    finally:
        _best_effort("release interface", handle.release_interface, INTERFACE)
        # Nothing to re-attach is the common case when no driver was bound.
        _best_effort("kernel driver re-attach", handle.attach_kernel_driver, INTERFACE, level=logging.DEBUG)
        _best_effort("close", handle.close)
