"""Device-to-registry matching logic."""

from __future__ import annotations

from collections.abc import Sequence

from pcanid.core.model import SupportedDevice


def supported_device_for(
    vendor_id: int,
    product_id: int,
    registry: Sequence[SupportedDevice],
) -> SupportedDevice | None:
    for entry in registry:
        if entry.vendor_id == vendor_id and entry.product_id == product_id:
            return entry
    return None


def overlapping_entries(registry: Sequence[SupportedDevice]) -> list[tuple[SupportedDevice, SupportedDevice]]:
    """Return (kept, shadowed) pairs of entries sharing a vendor/product id."""
    seen: dict[tuple[int, int], SupportedDevice] = {}
    overlaps: list[tuple[SupportedDevice, SupportedDevice]] = []
    for entry in registry:
        key = (entry.vendor_id, entry.product_id)
        if key in seen:
            overlaps.append((seen[key], entry))
        else:
            seen[key] = entry
    return overlaps
