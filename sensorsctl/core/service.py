"""Chip selection and dispatch, used by the CLI and the public API."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence

from sensorsctl.backends.base import SensorsBackend
from sensorsctl.core.actions import Echo, PrintAction, PrintOptions, SetAction
from sensorsctl.core.chip_match import first_matching_spec
from sensorsctl.core.chip_name import format_chip_name
from sensorsctl.core.model import ChipNameSpec, DetectedChip, Mode, RunResult

LOGGER = logging.getLogger(__name__)

Action = Callable[[DetectedChip], bool]


def dispatch(
    chips: Iterable[DetectedChip],
    specs: Sequence[ChipNameSpec],
    action: Action,
) -> RunResult:
    """Run ``action`` once for every chip matching at least one spec.

    Specs are tried in order and the first match wins, so a chip is never
    dispatched twice. Chips matching no spec are skipped without output.
    """
    handled = 0
    error = False
    for chip in chips:
        spec = first_matching_spec(chip, specs)
        if spec is None:
            LOGGER.debug("Skipping %s: no pattern matched", format_chip_name(chip))
            continue
        LOGGER.debug("Dispatching %s (matched %s)", format_chip_name(chip), spec)
        if action(chip):
            error = True
        handled += 1
    return RunResult(handled=handled, error=error)


class SensorsService:
    def __init__(self, backend: SensorsBackend) -> None:
        self.backend = backend
        self.load_warnings: tuple[str, ...] = tuple(getattr(backend, "load_warnings", ()))

    def run(
        self,
        specs: Sequence[ChipNameSpec],
        mode: Mode,
        *,
        out: Echo,
        err: Echo,
        print_options: PrintOptions | None = None,
    ) -> RunResult:
        action: Action
        if mode is Mode.SET:
            action = SetAction(self.backend, err)
        else:
            action = PrintAction(self.backend, out, err, print_options)
        return dispatch(self.backend.iter_detected_chips(), specs, action)

    def close(self) -> None:
        self.backend.cleanup()
