"""Sensors backend interfaces."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Protocol

from sensorsctl.core.model import DetectedChip, Reading


class SensorsBackend(Protocol):
    def iter_detected_chips(self) -> Iterator[DetectedChip]:
        """Yield every detected chip once, in library order."""

    def adapter_name(self, chip: DetectedChip) -> str | None:
        """Return the adapter name of the chip's bus, or None if unknown."""

    def features(self, chip: DetectedChip) -> list[Reading]:
        """Return the current readings of a chip."""

    def do_chip_sets(self, chip: DetectedChip) -> int:
        """Apply configured set statements; 0 on success, negative status otherwise."""

    def strerror(self, code: int) -> str:
        """Human-readable message for a status code."""

    def cleanup(self) -> None:
        """Release library resources."""
