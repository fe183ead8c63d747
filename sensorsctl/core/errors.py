"""Domain-specific errors and library status codes for sensorsctl."""

from __future__ import annotations

from enum import IntEnum


class SensorsctlError(Exception):
    """Base error for sensorsctl."""


class ChipNameParseError(SensorsctlError):
    """Raised when a chip-name pattern given on the command line is malformed."""


class TooManyChipsError(SensorsctlError):
    """Raised when more chip patterns are given than the run can hold."""


class ConfigFileError(SensorsctlError):
    """Raised when the libsensors configuration file cannot be opened."""


class BackendInitError(SensorsctlError):
    """Raised when the sensors backend cannot be initialized."""


class FixtureLoadError(SensorsctlError):
    """Raised when reading a chip fixture file fails."""


class FixtureValidationError(SensorsctlError):
    """Raised when a chip fixture does not conform to schema or semantics."""


class SensorsErrorCode(IntEnum):
    WILDCARDS = 1
    NO_ENTRY = 2
    ACCESS_R = 3
    KERNEL = 4
    DIV_ZERO = 5
    CHIP_NAME = 6
    BUS_NAME = 7
    PARSE = 8
    ACCESS_W = 9
    IO = 10
    RECURSION = 11


_MESSAGES = {
    SensorsErrorCode.WILDCARDS: "Wildcard found in chip name",
    SensorsErrorCode.NO_ENTRY: "No such subfeature known",
    SensorsErrorCode.ACCESS_R: "Can't read",
    SensorsErrorCode.KERNEL: "Kernel interface error",
    SensorsErrorCode.DIV_ZERO: "Divide by zero",
    SensorsErrorCode.CHIP_NAME: "Can't parse chip name",
    SensorsErrorCode.BUS_NAME: "Can't parse bus name",
    SensorsErrorCode.PARSE: "General parse error",
    SensorsErrorCode.ACCESS_W: "Can't write",
    SensorsErrorCode.IO: "I/O error",
    SensorsErrorCode.RECURSION: "Evaluation recurses too deep",
}


def strerror(code: int) -> str:
    """Human-readable message for a libsensors status code (sign ignored)."""
    try:
        return _MESSAGES[SensorsErrorCode(abs(code))]
    except ValueError:
        return "Unknown error"
