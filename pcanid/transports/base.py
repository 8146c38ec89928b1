"""USB backend interfaces."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol


class UsbHandle(Protocol):
    def detach_kernel_driver(self, interface: int) -> bool:
        """Detach an active kernel driver; return whether one was detached."""

    def claim_interface(self, interface: int) -> None: ...

    def reset(self) -> None: ...

    def get_strings(self) -> tuple[str | None, str | None]:
        """Return the manufacturer and product string descriptors."""

    def bulk_write(self, endpoint: int, data: bytes, *, timeout_ms: int) -> int: ...

    def bulk_read(self, endpoint: int, size: int, *, timeout_ms: int) -> bytes: ...

    def release_interface(self, interface: int) -> None: ...

    def attach_kernel_driver(self, interface: int) -> None: ...

    def close(self) -> None: ...


class UsbBackend(Protocol):
    def list_devices(self) -> Sequence[Any]:
        """Return platform device references exposing idVendor, idProduct, bus and address."""

    def open(self, ref: Any) -> UsbHandle: ...
