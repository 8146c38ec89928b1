"""Enumeration and selection of attached supported devices."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from pcanid.core.device_match import supported_device_for
from pcanid.core.errors import DeviceNotFoundError
from pcanid.core.model import DiscoveredDevice, SupportedDevice
from pcanid.transports.base import UsbBackend

LOGGER = logging.getLogger(__name__)


class DeviceLocator:
    def __init__(self, backend: UsbBackend, registry: Sequence[SupportedDevice]) -> None:
        self.backend = backend
        self.registry = tuple(registry)

    def enumerate(self) -> list[DiscoveredDevice]:
        """Return supported devices indexed in platform list order.

        Unsupported devices are skipped without consuming an index. A device
        whose descriptor cannot be read ends the scan with what was found so far.
        """
        found: list[DiscoveredDevice] = []
        for ref in self.backend.list_devices():
            try:
                vendor_id = int(ref.idVendor)
                product_id = int(ref.idProduct)
            except (AttributeError, TypeError, ValueError) as exc:
                LOGGER.warning("failed to get device descriptor: %s", exc)
                break

            supported = supported_device_for(vendor_id, product_id, self.registry)
            if supported is None:
                continue
            found.append(
                DiscoveredDevice(
                    ref=ref,
                    supported=supported,
                    index=len(found),
                    bus=int(ref.bus),
                    address=int(ref.address),
                    vendor_id=vendor_id,
                    product_id=product_id,
                )
            )
        LOGGER.debug("Enumerated %d supported device(s)", len(found))
        return found

    def select(self, index: int) -> DiscoveredDevice:
        for device in self.enumerate():
            if device.index == index:
                return device
        raise DeviceNotFoundError(f"No supported device found at index {index}")
