"""Supported-device registry loading and validation for YAML-based entries."""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from pcanid.core.device_match import overlapping_entries
from pcanid.core.errors import RegistryLoadError, RegistryValidationError
from pcanid.core.model import SupportedDevice

_USB_ID_RE = re.compile(r"^(0x)?[0-9a-f]{1,4}$")
LOGGER = logging.getLogger(__name__)


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise RegistryValidationError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@dataclass(frozen=True)
class LoadedRegistry:
    devices: tuple[SupportedDevice, ...]
    warnings: tuple[str, ...]


def _load_schema_validator() -> Any:
    schema_text = resources.files("pcanid.schemas").joinpath("device.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _registry_dirs() -> tuple[Path, Path]:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    xdg_data = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local/share"))
    return xdg_config / "pcanid/devices", xdg_data / "pcanid/devices"


def _read_yaml(path: Path | Traversable) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise RegistryLoadError(f"Could not read device file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise RegistryValidationError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise RegistryValidationError(f"Device file {path} must contain a mapping at root")
    return loaded


def _normalize_usb_id(value: str, *, context: str) -> int:
    normalized = value.strip().lower()
    if not _USB_ID_RE.match(normalized):
        raise RegistryValidationError(
            f"{context} must be a 16-bit hex id such as '0x0c72', got '{value}'"
        )
    return int(normalized, 16)


def _build_device(doc: dict[str, Any], source: Path | Traversable) -> SupportedDevice:
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise RegistryValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    return SupportedDevice(
        id=doc["id"],
        name=doc["name"],
        vendor_id=_normalize_usb_id(doc["vendor_id"], context=f"{doc['id']}.vendor_id"),
        product_id=_normalize_usb_id(doc["product_id"], context=f"{doc['id']}.product_id"),
    )


def _iter_packaged_device_paths() -> list[Traversable]:
    device_root = resources.files("pcanid.devices")
    return [item for item in device_root.iterdir() if item.name.endswith((".yml", ".yaml"))]


def _iter_user_device_paths() -> list[Path]:
    paths: list[Path] = []
    for directory in _registry_dirs():
        if not directory.exists() or not directory.is_dir():
            continue
        paths.extend(sorted(p for p in directory.iterdir() if p.suffix in {".yml", ".yaml"}))
    return paths


def load_registry() -> LoadedRegistry:
    devices: dict[str, SupportedDevice] = {}
    warnings: list[str] = []

    for path in sorted(_iter_packaged_device_paths(), key=lambda p: p.name):
        device = _build_device(_read_yaml(path), path)
        devices[device.id] = device

    for path in _iter_user_device_paths():
        device = _build_device(_read_yaml(path), path)
        if device.id in devices:
            warning = f"User device entry '{device.id}' overrides packaged entry"
            LOGGER.warning(warning)
            warnings.append(warning)
        devices[device.id] = device

    registry = tuple(devices.values())
    for kept, shadowed in overlapping_entries(registry):
        warning = (
            f"Device entry '{shadowed.id}' shares {shadowed.vendor_id:04x}:{shadowed.product_id:04x} "
            f"with '{kept.id}' and will never match"
        )
        LOGGER.warning(warning)
        warnings.append(warning)

    return LoadedRegistry(devices=registry, warnings=tuple(warnings))
