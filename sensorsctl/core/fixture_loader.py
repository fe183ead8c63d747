"""Loading and validation of YAML chip fixtures."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from sensorsctl.core.chip_name import format_chip_name
from sensorsctl.core.errors import FixtureLoadError, FixtureValidationError
from sensorsctl.core.model import BusKind, DetectedChip, Reading

LOGGER = logging.getLogger(__name__)

_BUS_KINDS = {"isa": BusKind.ISA, "pci": BusKind.PCI, "i2c": BusKind.I2C}


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[Any, Any]:
    mapping: dict[Any, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise FixtureValidationError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@dataclass(frozen=True)
class FixtureChip:
    chip: DetectedChip
    adapter: str | None
    set_status: int
    readings: tuple[Reading, ...]


@dataclass(frozen=True)
class LoadedFixture:
    chips: tuple[FixtureChip, ...]
    adapters: dict[int, str]
    warnings: tuple[str, ...]


def _load_schema_validator() -> Any:
    schema_text = resources.files("sensorsctl.schemas").joinpath("fixture.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise FixtureLoadError(f"Could not read fixture file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise FixtureValidationError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise FixtureValidationError(f"Fixture file {path} must contain a mapping at root")
    # adapter keys are bus numbers; the schema sees them as strings
    if isinstance(loaded.get("adapters"), dict):
        loaded["adapters"] = {str(k): v for k, v in loaded["adapters"].items()}
    return loaded


def _normalize_address(value: int | str) -> int:
    if isinstance(value, str):
        return int(value, 16)
    return value


def _build_chip(doc: dict[str, Any]) -> FixtureChip:
    bus = doc["bus"]
    bus_kind = _BUS_KINDS.get(bus, BusKind.DUMMY)
    chip = DetectedChip(
        prefix=doc["prefix"],
        bus_kind=bus_kind,
        address=_normalize_address(doc["address"]),
        bus_number=int(doc.get("bus_number", 0)),
        bus_name=bus if bus_kind is BusKind.DUMMY else None,
    )
    readings = tuple(
        Reading(
            name=feature["name"],
            label=feature.get("label", feature["name"]),
            type=feature.get("type", "other"),
            value=float(feature["value"]),
        )
        for feature in doc.get("features", [])
    )
    return FixtureChip(
        chip=chip,
        adapter=doc.get("adapter"),
        set_status=int(doc.get("set_status", 0)),
        readings=readings,
    )


def load_fixture(path: Path) -> LoadedFixture:
    doc = _read_yaml(path)
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        where = ".".join(str(p) for p in exc.path)
        where = f" ({where})" if where else ""
        raise FixtureValidationError(f"Schema validation failed for {path}{where}: {exc.message}") from exc

    chips: list[FixtureChip] = []
    warnings: list[str] = []
    seen: set[DetectedChip] = set()
    for chip_doc in doc["chips"]:
        entry = _build_chip(chip_doc)
        if entry.chip in seen:
            warning = f"Fixture chip '{format_chip_name(entry.chip)}' is listed more than once"
            LOGGER.warning(warning)
            warnings.append(warning)
        seen.add(entry.chip)
        chips.append(entry)

    adapters = {int(bus): name for bus, name in doc.get("adapters", {}).items()}
    return LoadedFixture(chips=tuple(chips), adapters=adapters, warnings=tuple(warnings))
