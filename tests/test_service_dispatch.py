from __future__ import annotations

from collections.abc import Iterator

from sensorsctl.core.actions import PrintAction, PrintOptions, SetAction
from sensorsctl.core.errors import SensorsErrorCode, strerror
from sensorsctl.core.model import ANY_CHIP, BusKind, ChipNameSpec, DetectedChip, Mode, Reading, RunResult
from sensorsctl.core.service import SensorsService, dispatch

LM75 = DetectedChip(prefix="lm75", bus_kind=BusKind.I2C, bus_number=0, address=0x48)
LM78 = DetectedChip(prefix="lm78", bus_kind=BusKind.ISA, address=0x290)


class FakeBackend:
    def __init__(self, chips: list[DetectedChip], set_status: dict[DetectedChip, int] | None = None) -> None:
        self.chips = chips
        self.set_status = set_status or {}
        self.set_calls: list[DetectedChip] = []
        self.cleaned = False

    def iter_detected_chips(self) -> Iterator[DetectedChip]:
        yield from self.chips

    def adapter_name(self, chip: DetectedChip) -> str | None:
        return "SMBus I801 adapter" if chip.bus_kind is BusKind.I2C else None

    def features(self, chip: DetectedChip) -> list[Reading]:
        return [Reading(name="temp1", label="temp1", type="temp", value=41.5)]

    def do_chip_sets(self, chip: DetectedChip) -> int:
        self.set_calls.append(chip)
        return self.set_status.get(chip, 0)

    def strerror(self, code: int) -> str:
        return strerror(code)

    def cleanup(self) -> None:
        self.cleaned = True


class Recorder:
    def __init__(self) -> None:
        self.lines: list[str] = []

    def __call__(self, message: str) -> None:
        self.lines.append(message)


def test_each_chip_dispatched_once_even_when_several_specs_match() -> None:
    calls: list[DetectedChip] = []

    def action(chip: DetectedChip) -> bool:
        calls.append(chip)
        return False

    specs = [ANY_CHIP, ChipNameSpec(prefix="lm75"), ChipNameSpec(bus_kind=BusKind.ISA)]
    result = dispatch([LM75, LM78], specs, action)
    assert result == RunResult(handled=2, error=False)
    assert calls == [LM75, LM78]


def test_unmatched_chips_are_skipped() -> None:
    calls: list[DetectedChip] = []
    result = dispatch([LM75, LM78], [ChipNameSpec(prefix="lm78")], lambda chip: calls.append(chip) or False)
    assert result.handled == 1
    assert calls == [LM78]


def test_no_detected_chips() -> None:
    assert dispatch([], [ANY_CHIP], lambda chip: True) == RunResult(handled=0, error=False)


def test_error_flag_never_resets() -> None:
    outcomes = iter([True, False])
    result = dispatch([LM75, LM78], [ANY_CHIP], lambda chip: next(outcomes))
    assert result == RunResult(handled=2, error=True)


def test_dispatch_consumes_lazy_iterator() -> None:
    def chips() -> Iterator[DetectedChip]:
        yield LM75
        yield LM78

    assert dispatch(chips(), [ANY_CHIP], lambda chip: False).handled == 2


def test_set_partial_failure_continues_with_next_chip() -> None:
    backend = FakeBackend([LM75, LM78], {LM75: -SensorsErrorCode.ACCESS_W})
    err = Recorder()
    result = SensorsService(backend).run([ANY_CHIP], Mode.SET, out=Recorder(), err=err)
    assert result == RunResult(handled=2, error=True)
    assert backend.set_calls == [LM75, LM78]
    assert err.lines == ['lm75-i2c-0-48: At least one "set" statement failed']


def test_set_kernel_error_suggests_root() -> None:
    err = Recorder()
    failed = SetAction(FakeBackend([LM78], {LM78: -SensorsErrorCode.KERNEL}), err)(LM78)
    assert failed is True
    assert err.lines == ["lm78-isa-0290: Kernel interface error for writing;", "Run as root?"]


def test_set_other_error_uses_library_message() -> None:
    err = Recorder()
    failed = SetAction(FakeBackend([LM78], {LM78: -SensorsErrorCode.IO}), err)(LM78)
    assert failed is True
    assert err.lines == ["lm78-isa-0290: I/O error"]


def test_set_success_is_silent() -> None:
    err = Recorder()
    assert SetAction(FakeBackend([LM78]), err)(LM78) is False
    assert err.lines == []


def test_print_action_output() -> None:
    out, err = Recorder(), Recorder()
    failed = PrintAction(FakeBackend([LM75]), out, err)(LM75)
    assert failed is False
    assert out.lines[0] == "lm75-i2c-0-48"
    assert out.lines[1] == "Adapter: SMBus I801 adapter"
    assert out.lines[2].startswith("temp1:")
    assert out.lines[2].endswith("+41.5 C")
    assert out.lines[-1] == ""
    assert err.lines == []


def test_print_missing_adapter_is_diagnostic_only() -> None:
    out, err = Recorder(), Recorder()
    failed = PrintAction(FakeBackend([LM78]), out, err)(LM78)
    assert failed is False
    assert err.lines == ["Can't get adapter name for bus isa"]
    assert not any(line.startswith("Adapter:") for line in out.lines)


def test_missing_adapter_names_the_real_bus() -> None:
    err = Recorder()
    pci = DetectedChip(prefix="k10temp", bus_kind=BusKind.PCI, address=0xC3)
    spi = DetectedChip(prefix="max31722", bus_kind=BusKind.DUMMY, bus_name="spi1", address=0)
    i2c = DetectedChip(prefix="lm75", bus_kind=BusKind.I2C, bus_number=3, address=0x48)
    backend = FakeBackend([pci, spi, i2c])
    backend.adapter_name = lambda chip: None
    action = PrintAction(backend, Recorder(), err)
    for chip in (pci, spi, i2c):
        action(chip)
    assert err.lines == [
        "Can't get adapter name for bus pci",
        "Can't get adapter name for bus spi1",
        "Can't get adapter name for bus 3",
    ]


def test_print_options() -> None:
    out, err = Recorder(), Recorder()
    PrintAction(FakeBackend([LM75]), out, err, PrintOptions(hide_adapter=True, unknown=True))(LM75)
    assert out.lines == ["lm75-i2c-0-48", "temp1: 41.50", ""]

    hidden = Recorder()
    assert PrintAction(FakeBackend([LM75]), hidden, err, PrintOptions(hide_unknown=True))(LM75) is False
    assert hidden.lines == []


def test_print_run_never_sets_error_flag() -> None:
    service = SensorsService(FakeBackend([LM75, LM78]))
    result = service.run([ANY_CHIP], Mode.PRINT, out=Recorder(), err=Recorder())
    assert result == RunResult(handled=2, error=False)


def test_close_cleans_up_backend() -> None:
    backend = FakeBackend([])
    SensorsService(backend).close()
    assert backend.cleaned
