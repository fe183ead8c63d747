"""Per-chip print and set actions.

Each action returns ``True`` when it failed for the chip. Failure detail is
written to the diagnostic stream right away; only the boolean travels back to
the dispatcher.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from sensorsctl.backends.base import SensorsBackend
from sensorsctl.core.chip_name import format_chip_name
from sensorsctl.core.errors import SensorsErrorCode
from sensorsctl.core.model import BusKind, DetectedChip
from sensorsctl.core.render import render_generic, render_unknown

Echo = Callable[[str], None]


def _bus_label(chip: DetectedChip) -> str:
    if chip.bus_kind is BusKind.I2C:
        return str(chip.bus_number)
    if chip.bus_kind is BusKind.DUMMY:
        return chip.bus_name or BusKind.DUMMY.value
    return chip.bus_kind.value


@dataclass(frozen=True)
class PrintOptions:
    hide_adapter: bool = False
    hide_unknown: bool = False
    unknown: bool = False
    fahrenheit: bool = False
    degrees: str = " C"


class PrintAction:
    """Print a chip's name, adapter and readings.

    Never reports failure: a missing adapter name only produces a diagnostic,
    unlike :class:`SetAction` which classifies every non-zero status.
    """

    def __init__(self, backend: SensorsBackend, out: Echo, err: Echo, options: PrintOptions | None = None) -> None:
        self.backend = backend
        self.out = out
        self.err = err
        self.options = options or PrintOptions()

    def __call__(self, chip: DetectedChip) -> bool:
        if self.options.hide_unknown:
            return False

        self.out(format_chip_name(chip))
        if not self.options.hide_adapter:
            adapter = self.backend.adapter_name(chip)
            if adapter:
                self.out(f"Adapter: {adapter}")
            else:
                self.err(f"Can't get adapter name for bus {_bus_label(chip)}")

        readings = self.backend.features(chip)
        if self.options.unknown:
            lines = render_unknown(readings)
        else:
            lines = render_generic(readings, fahrenheit=self.options.fahrenheit, degrees=self.options.degrees)
        for line in lines:
            self.out(line)
        self.out("")
        return False


class SetAction:
    def __init__(self, backend: SensorsBackend, err: Echo) -> None:
        self.backend = backend
        self.err = err

    def __call__(self, chip: DetectedChip) -> bool:
        status = self.backend.do_chip_sets(chip)
        if status == 0:
            return False

        name = format_chip_name(chip)
        if status == -SensorsErrorCode.KERNEL:
            self.err(f"{name}: {self.backend.strerror(status)} for writing;")
            self.err("Run as root?")
        elif status == -SensorsErrorCode.ACCESS_W:
            self.err(f'{name}: At least one "set" statement failed')
        else:
            self.err(f"{name}: {self.backend.strerror(status)}")
        return True
