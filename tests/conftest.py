from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from pcanid.core.errors import ClaimFailedError, EnumerationError, OpenFailedError, TransferError
from pcanid.core.model import SupportedDevice

PCAN_USB = SupportedDevice(id="pcan_usb", name="PCAN-USB", vendor_id=0x0C72, product_id=0x000C)


def usb_ref(vendor_id: int, product_id: int, *, bus: int = 1, address: int = 2) -> SimpleNamespace:
    return SimpleNamespace(idVendor=vendor_id, idProduct=product_id, bus=bus, address=address)


class FakeHandle:
    """Device that stores what Set* commands write and echoes it back on query."""

    def __init__(
        self,
        *,
        device_id: int = 0,
        serial_number: int = 0,
        reply: bytes | None = None,
        fail_write: bool = False,
        fail_read: bool = False,
        fail_claim: bool = False,
        fail_release: bool = False,
        driver_bound: bool = True,
    ) -> None:
        self.device_id = device_id
        self.serial_number = serial_number
        self.reply = reply
        self.fail_write = fail_write
        self.fail_read = fail_read
        self.fail_claim = fail_claim
        self.fail_release = fail_release
        self.driver_bound = driver_bound
        self.calls: list[tuple] = []
        self.writes: list[bytes] = []
        self._pending_category: int | None = None

    def detach_kernel_driver(self, interface: int) -> bool:
        self.calls.append(("detach", interface))
        return self.driver_bound

    def claim_interface(self, interface: int) -> None:
        self.calls.append(("claim", interface))
        if self.fail_claim:
            raise ClaimFailedError("Could not claim interface 0: [Errno 16] Resource busy")

    def reset(self) -> None:
        self.calls.append(("reset",))

    def get_strings(self) -> tuple[str | None, str | None]:
        return "PEAK-System Technik GmbH", "PCAN-USB"

    def bulk_write(self, endpoint: int, data: bytes, *, timeout_ms: int) -> int:
        self.calls.append(("write", endpoint, timeout_ms))
        if self.fail_write:
            raise TransferError(f"bulk write to endpoint 0x{endpoint:02x} failed: [Errno 110] Operation timed out")
        self.writes.append(bytes(data))
        category, subcommand = data[0], data[1]
        if subcommand == 2 and category == 4:
            self.device_id = data[2]
        elif subcommand == 2 and category == 6:
            self.serial_number = int.from_bytes(data[2:6], "little")
        self._pending_category = category
        return len(data)

    def bulk_read(self, endpoint: int, size: int, *, timeout_ms: int) -> bytes:
        self.calls.append(("read", endpoint, size, timeout_ms))
        if self.fail_read:
            raise TransferError(f"bulk read from endpoint 0x{endpoint:02x} failed: [Errno 110] Operation timed out")
        if self.reply is not None:
            return self.reply
        packet = bytearray(size)
        if self._pending_category == 4:
            packet[0:3] = bytes([4, 1, self.device_id])
        elif self._pending_category == 6:
            packet[0:2] = bytes([6, 1])
            packet[2:6] = self.serial_number.to_bytes(4, "little")
        return bytes(packet)

    def release_interface(self, interface: int) -> None:
        self.calls.append(("release", interface))
        if self.fail_release:
            raise OSError("release failed")

    def attach_kernel_driver(self, interface: int) -> None:
        self.calls.append(("attach", interface))

    def close(self) -> None:
        self.calls.append(("close",))

    def call_names(self) -> list[str]:
        return [call[0] for call in self.calls]


class FakeBackend:
    def __init__(
        self,
        devices: list | None = None,
        handle: FakeHandle | None = None,
        *,
        fail_list: bool = False,
        fail_open: bool = False,
    ) -> None:
        self.devices = devices if devices is not None else []
        self.handle = handle or FakeHandle()
        self.fail_list = fail_list
        self.fail_open = fail_open
        self.opened: list = []

    def list_devices(self) -> list:
        if self.fail_list:
            raise EnumerationError("error retrieving list of devices: [Errno 13] Access denied")
        return list(self.devices)

    def open(self, ref) -> FakeHandle:
        self.opened.append(ref)
        if self.fail_open:
            raise OpenFailedError("error opening device: [Errno 13] Access denied")
        return self.handle


@pytest.fixture(autouse=True)
def isolated_registry_dirs(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
