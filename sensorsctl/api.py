"""Stable public API for building tooling on top of sensorsctl.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

from collections.abc import Sequence

import typer

from sensorsctl.backends.base import SensorsBackend
from sensorsctl.backends.fixture import FixtureBackend
from sensorsctl.backends.libsensors import LibsensorsBackend
from sensorsctl.core.actions import Echo, PrintOptions
from sensorsctl.core.chip_match import matches
from sensorsctl.core.chip_name import CHIPS_MAX, build_specs, format_chip_name, parse_chip_name
from sensorsctl.core.errors import (
    BackendInitError,
    ChipNameParseError,
    ConfigFileError,
    FixtureLoadError,
    FixtureValidationError,
    SensorsctlError,
    SensorsErrorCode,
    TooManyChipsError,
    strerror,
)
from sensorsctl.core.model import ANY_CHIP, BusKind, ChipNameSpec, DetectedChip, Mode, Reading, RunResult
from sensorsctl.core.service import SensorsService

__all__ = [
    "SensorsctlError",
    "BackendInitError",
    "ChipNameParseError",
    "ConfigFileError",
    "FixtureLoadError",
    "FixtureValidationError",
    "TooManyChipsError",
    "SensorsErrorCode",
    "strerror",
    "ANY_CHIP",
    "BusKind",
    "ChipNameSpec",
    "DetectedChip",
    "Mode",
    "Reading",
    "RunResult",
    "PrintOptions",
    "CHIPS_MAX",
    "build_specs",
    "format_chip_name",
    "parse_chip_name",
    "matches",
    "SensorsBackend",
    "FixtureBackend",
    "LibsensorsBackend",
    "Inspector",
]


def _stderr(message: str) -> None:
    typer.echo(message, err=True)


class Inspector:
    """Public client for selecting detected chips and acting on them.

    An `Inspector` wraps a sensors backend (libsensors or a YAML fixture) and
    the chip selection/dispatch engine behind a stable API intended for
    third-party tools (GUI/TUI/services/scripts).
    """

    def __init__(self, backend: SensorsBackend) -> None:
        self._service = SensorsService(backend)

    @property
    def load_warnings(self) -> tuple[str, ...]:
        return self._service.load_warnings

    def list_chips(self, patterns: Sequence[str] = ()) -> list[str]:
        specs = build_specs(patterns)
        return [
            format_chip_name(chip)
            for chip in self._service.backend.iter_detected_chips()
            if any(matches(chip, spec) for spec in specs)
        ]

    def print_chips(
        self,
        patterns: Sequence[str] = (),
        *,
        out: Echo = typer.echo,
        err: Echo = _stderr,
        options: PrintOptions | None = None,
    ) -> RunResult:
        return self._service.run(build_specs(patterns), Mode.PRINT, out=out, err=err, print_options=options)

    def apply_sets(self, patterns: Sequence[str] = (), *, err: Echo = _stderr) -> RunResult:
        return self._service.run(build_specs(patterns), Mode.SET, out=typer.echo, err=err)

    def close(self) -> None:
        self._service.close()
