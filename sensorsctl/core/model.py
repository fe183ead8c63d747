"""Core data models used across backends, dispatcher, and CLI."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class BusKind(Enum):
    ISA = "isa"
    PCI = "pci"
    I2C = "i2c"
    DUMMY = "dummy"
    ANY = "*"


class Mode(Enum):
    PRINT = "print"
    SET = "set"


@dataclass(frozen=True)
class ChipNameSpec:
    """Chip-name pattern. ``None`` (or ``BusKind.ANY``) in a field matches anything."""

    prefix: str | None = None
    bus_kind: BusKind = BusKind.ANY
    bus_number: int | None = None
    address: int | None = None
    bus_name: str | None = None

    @property
    def has_wildcard_prefix(self) -> bool:
        return self.prefix is None


ANY_CHIP = ChipNameSpec()


@dataclass(frozen=True)
class DetectedChip:
    prefix: str
    bus_kind: BusKind
    address: int
    bus_number: int = 0
    bus_name: str | None = None


@dataclass(frozen=True)
class Reading:
    name: str
    label: str
    type: str
    value: float


@dataclass(frozen=True)
class RunResult:
    handled: int
    error: bool
