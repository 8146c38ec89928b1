from __future__ import annotations

from pathlib import Path

import pytest

from pcanid.core.errors import RegistryValidationError
from pcanid.core.registry_loader import load_registry


def _write_device(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def test_load_packaged_registry() -> None:
    loaded = load_registry()
    assert len(loaded.devices) == 1
    device = loaded.devices[0]
    assert device.id == "pcan_usb"
    assert device.name == "PCAN-USB"
    assert (device.vendor_id, device.product_id) == (0x0C72, 0x000C)
    assert loaded.warnings == ()


def test_user_entry_is_appended(tmp_path: Path) -> None:
    _write_device(
        tmp_path / "cfg" / "pcanid" / "devices" / "pro.yaml",
        """
id: pcan_usb_pro
name: PCAN-USB Pro
vendor_id: "0x0c72"
product_id: "0x000d"
""",
    )

    loaded = load_registry()
    assert [d.id for d in loaded.devices] == ["pcan_usb", "pcan_usb_pro"]
    assert loaded.devices[1].product_id == 0x000D


def test_user_entry_overrides_packaged_in_place(tmp_path: Path) -> None:
    _write_device(
        tmp_path / "data" / "pcanid" / "devices" / "override.yml",
        """
id: pcan_usb
name: My PCAN
vendor_id: "0c72"
product_id: "000c"
""",
    )

    loaded = load_registry()
    assert [d.name for d in loaded.devices] == ["My PCAN"]
    assert any("overrides" in warning for warning in loaded.warnings)


def test_overlapping_ids_warn(tmp_path: Path) -> None:
    _write_device(
        tmp_path / "cfg" / "pcanid" / "devices" / "clone.yaml",
        """
id: clone
name: Clone
vendor_id: "0x0c72"
product_id: "0x000c"
""",
    )

    loaded = load_registry()
    assert any("will never match" in warning for warning in loaded.warnings)


@pytest.mark.parametrize(
    "content",
    [
        # unquoted hex becomes an integer
        'id: bad\nname: Bad\nvendor_id: 0x0c72\nproduct_id: "0x000c"\n',
        'id: bad\nname: Bad\nvendor_id: "0xzz"\nproduct_id: "0x000c"\n',
        'id: bad\nname: Bad\nvendor_id: "0x10000"\nproduct_id: "0x000c"\n',
        'id: bad\nname: Bad\nvendor_id: "0x0c72"\n',
        'id: bad\nname: Bad\nname: Again\nvendor_id: "0x0c72"\nproduct_id: "0x000c"\n',
        "- not a mapping\n",
    ],
)
def test_invalid_user_entry_rejected(tmp_path: Path, content: str) -> None:
    _write_device(tmp_path / "cfg" / "pcanid" / "devices" / "bad.yaml", content)

    with pytest.raises(RegistryValidationError):
        load_registry()
