"""Text rendering of chip readings."""

from __future__ import annotations

from collections.abc import Iterable

from sensorsctl.core.model import Reading

LABEL_WIDTH = 16


def degree_suffix(fahrenheit: bool, encoding: str | None) -> str:
    """Return the temperature unit, falling back to plain text when the degree sign can't be encoded."""
    unit = "F" if fahrenheit else "C"
    try:
        "\N{DEGREE SIGN}".encode(encoding or "ascii")
    except (UnicodeEncodeError, LookupError):
        return f" {unit}"
    return f"\N{DEGREE SIGN}{unit}"


def celsius_to_fahrenheit(value: float) -> float:
    return value * 9 / 5 + 32


def _format_value(reading: Reading, *, fahrenheit: bool, degrees: str) -> str:
    if reading.type == "temp":
        value = celsius_to_fahrenheit(reading.value) if fahrenheit else reading.value
        return f"{value:+.1f}{degrees}"
    if reading.type == "in":
        return f"{reading.value:+.2f} V"
    if reading.type == "fan":
        return f"{reading.value:.0f} RPM"
    return f"{reading.value:.2f}"


def render_generic(readings: Iterable[Reading], *, fahrenheit: bool = False, degrees: str = " C") -> list[str]:
    return [
        f"{reading.label + ':':<{LABEL_WIDTH}}{_format_value(reading, fahrenheit=fahrenheit, degrees=degrees)}"
        for reading in readings
    ]


def render_unknown(readings: Iterable[Reading]) -> list[str]:
    return [f"{reading.name}: {reading.value:.2f}" for reading in readings]
