"""libsensors backend implemented on top of the PySensors bindings."""

from __future__ import annotations

import ctypes
import logging
import os
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from sensorsctl.core.errors import BackendInitError, ConfigFileError
from sensorsctl.core.model import BusKind, DetectedChip, Reading

LOGGER = logging.getLogger(__name__)

_BUS_TYPES = {
    0: BusKind.I2C,
    1: BusKind.ISA,
    2: BusKind.PCI,
}
# virtual and acpi buses have a single instance; the others are numbered
_DUMMY_BUS_NAMES = {
    3: "spi",
    4: "virtual",
    5: "acpi",
    6: "hid",
    7: "mdio",
    8: "scsi",
}
_SINGLE_INSTANCE_BUSES = {4, 5}
_FEATURE_TYPES = {0: "in", 1: "fan", 2: "temp"}


def _text(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def _import_pysensors() -> Any:
    try:
        import sensors  # type: ignore
    except Exception as exc:  # pragma: no cover - import failure path
        raise BackendInitError(
            "libsensors backend requires 'PySensors' and the libsensors shared library."
        ) from exc
    return sensors


def library_version() -> str | None:
    """Version of the installed libsensors, or None when it can't be loaded."""
    try:
        return _text(_import_pysensors().VERSION)
    except BackendInitError:
        return None


class LibsensorsBackend:
    def __init__(self, config_file: str | None = None) -> None:
        sensors = _import_pysensors()
        self._lib = sensors
        self._handles: dict[DetectedChip, Any] = {}

        lib = sensors.SENSORS_LIB
        self._do_chip_sets = lib.sensors_do_chip_sets
        self._do_chip_sets.argtypes = [sensors.CHIP_P]
        self._do_chip_sets.restype = ctypes.c_int
        self._get_adapter_name = lib.sensors_get_adapter_name
        self._get_adapter_name.argtypes = [ctypes.POINTER(sensors.Bus)]
        self._get_adapter_name.restype = ctypes.c_char_p
        self._strerror = lib.sensors_strerror
        self._strerror.argtypes = [ctypes.c_int]
        self._strerror.restype = ctypes.c_char_p

        path = _resolve_config_file(config_file)
        try:
            if path is None:
                sensors.init()
            else:
                sensors.init(os.fsencode(path))
        except OSError as exc:
            raise ConfigFileError(f"Could not open config file {config_file}: {exc}") from exc
        except sensors.SensorsError as exc:
            raise BackendInitError(f"sensors_init: {exc}") from exc
        LOGGER.debug("libsensors %s initialized (config=%s)", sensors.VERSION, path or "<default>")

    def iter_detected_chips(self) -> Iterator[DetectedChip]:
        for handle in self._lib.iter_detected_chips():
            chip = _to_detected_chip(handle)
            # only the chip currently being dispatched keeps its library handle
            self._handles = {chip: handle}
            yield chip
        self._handles = {}

    def adapter_name(self, chip: DetectedChip) -> str | None:
        name = self._get_adapter_name(ctypes.byref(self._handles[chip].bus))
        return _text(name) if name else None

    def features(self, chip: DetectedChip) -> list[Reading]:
        readings: list[Reading] = []
        for feature in self._handles[chip]:
            name = _text(feature.name)
            try:
                value = float(feature.get_value())
            except self._lib.SensorsError as exc:
                LOGGER.debug("Skipping %s: %s", name, exc)
                continue
            readings.append(
                Reading(
                    name=name,
                    label=_text(feature.label),
                    type=_FEATURE_TYPES.get(feature.type, "other"),
                    value=value,
                )
            )
        return readings

    def do_chip_sets(self, chip: DetectedChip) -> int:
        return int(self._do_chip_sets(ctypes.byref(self._handles[chip])))

    def strerror(self, code: int) -> str:
        message = self._strerror(code)
        return _text(message) if message else "Unknown error"

    def cleanup(self) -> None:
        self._handles = {}
        self._lib.cleanup()
        LOGGER.debug("libsensors cleaned up")


def _resolve_config_file(config_file: str | None) -> str | None:
    if config_file is None:
        return None
    if config_file == "-":
        return "/dev/stdin"
    path = Path(config_file)
    try:
        with path.open("r", encoding="utf-8"):
            pass
    except OSError as exc:
        raise ConfigFileError(f"Could not open config file {config_file}: {exc}") from exc
    return str(path)


def _dummy_bus_name(bus_type: int, bus_nr: int) -> str:
    if bus_type not in _DUMMY_BUS_NAMES:
        return f"bus{bus_type}.{bus_nr}"
    name = _DUMMY_BUS_NAMES[bus_type]
    if bus_type in _SINGLE_INSTANCE_BUSES:
        return name
    return f"{name}{bus_nr}"


def _to_detected_chip(handle: Any) -> DetectedChip:
    prefix = _text(handle.prefix)
    bus_type = int(handle.bus.type)
    bus_nr = int(handle.bus.nr)
    bus_kind = _BUS_TYPES.get(bus_type, BusKind.DUMMY)
    return DetectedChip(
        prefix=prefix,
        bus_kind=bus_kind,
        address=int(handle.addr),
        bus_number=bus_nr,
        bus_name=_dummy_bus_name(bus_type, bus_nr) if bus_kind is BusKind.DUMMY else None,
    )
