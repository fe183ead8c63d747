"""Backend serving chips from a YAML fixture instead of real hardware."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

from sensorsctl.core.errors import strerror
from sensorsctl.core.fixture_loader import FixtureChip, LoadedFixture, load_fixture
from sensorsctl.core.model import BusKind, DetectedChip, Reading

LOGGER = logging.getLogger(__name__)

_BUS_ADAPTERS = {
    BusKind.ISA: "ISA adapter",
    BusKind.PCI: "PCI adapter",
}


class FixtureBackend:
    def __init__(self, fixture: LoadedFixture) -> None:
        self.fixture = fixture
        self.load_warnings = fixture.warnings
        self._entries: dict[DetectedChip, FixtureChip] = {}
        for entry in fixture.chips:
            self._entries.setdefault(entry.chip, entry)

    @classmethod
    def from_path(cls, path: Path) -> FixtureBackend:
        LOGGER.debug("Loading chip fixture from %s", path)
        return cls(load_fixture(path))

    def iter_detected_chips(self) -> Iterator[DetectedChip]:
        for entry in self.fixture.chips:
            yield entry.chip

    def adapter_name(self, chip: DetectedChip) -> str | None:
        entry = self._entries[chip]
        if entry.adapter:
            return entry.adapter
        if chip.bus_kind is BusKind.I2C:
            return self.fixture.adapters.get(chip.bus_number)
        return _BUS_ADAPTERS.get(chip.bus_kind)

    def features(self, chip: DetectedChip) -> list[Reading]:
        return list(self._entries[chip].readings)

    def do_chip_sets(self, chip: DetectedChip) -> int:
        return self._entries[chip].set_status

    def strerror(self, code: int) -> str:
        return strerror(code)

    def cleanup(self) -> None:
        LOGGER.debug("Fixture backend released")
