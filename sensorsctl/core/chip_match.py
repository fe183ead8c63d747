"""Detected-chip to chip-name-pattern matching logic."""

from __future__ import annotations

from collections.abc import Sequence

from sensorsctl.core.model import BusKind, ChipNameSpec, DetectedChip


def _prefix_match(chip: DetectedChip, spec: ChipNameSpec) -> bool:
    return spec.prefix is None or spec.prefix == chip.prefix


def _bus_match(chip: DetectedChip, spec: ChipNameSpec) -> bool:
    if spec.bus_kind is BusKind.ANY:
        return True
    if spec.bus_kind is not chip.bus_kind:
        return False
    if spec.bus_kind is BusKind.DUMMY:
        return spec.bus_name == chip.bus_name
    if spec.bus_kind is BusKind.I2C:
        return spec.bus_number is None or spec.bus_number == chip.bus_number
    return True


def _address_match(chip: DetectedChip, spec: ChipNameSpec) -> bool:
    return spec.address is None or spec.address == chip.address


def matches(chip: DetectedChip, spec: ChipNameSpec) -> bool:
    return _prefix_match(chip, spec) and _bus_match(chip, spec) and _address_match(chip, spec)


def first_matching_spec(chip: DetectedChip, specs: Sequence[ChipNameSpec]) -> ChipNameSpec | None:
    for spec in specs:
        if matches(chip, spec):
            return spec
    return None
