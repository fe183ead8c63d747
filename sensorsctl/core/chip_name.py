"""Chip-name pattern parsing and canonical chip-name rendering.

The rendered form of a detected chip is also valid pattern syntax, so a name
printed by ``sensorsctl`` can always be passed back on the command line.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from sensorsctl.core.errors import ChipNameParseError, TooManyChipsError
from sensorsctl.core.model import ANY_CHIP, BusKind, ChipNameSpec, DetectedChip

CHIPS_MAX = 20
NAME_BUFFER_SIZE = 200

_HEX_RE = re.compile(r"^[0-9a-fA-F]+$")
_DEC_RE = re.compile(r"^[0-9]+$")
_WILDCARD = "*"


def _parse_address(tokens: Sequence[str], pattern: str) -> int | None:
    if not tokens:
        return None
    if len(tokens) > 1:
        raise ChipNameParseError(f"Parse error in chip name `{pattern}': trailing fields")
    token = tokens[0]
    if token == _WILDCARD:
        return None
    if not _HEX_RE.match(token):
        raise ChipNameParseError(f"Parse error in chip name `{pattern}': bad address '{token}'")
    return int(token, 16)


def _parse_bus_number(token: str, pattern: str) -> int | None:
    if token == _WILDCARD:
        return None
    if not _DEC_RE.match(token):
        raise ChipNameParseError(f"Parse error in chip name `{pattern}': bad bus number '{token}'")
    return int(token)


def parse_chip_name(pattern: str) -> ChipNameSpec:
    """Parse ``<prefix>[-<bus>[-<busnr>][-<addr>]]`` into a spec; omitted fields are wildcards."""
    tokens = pattern.split("-")
    prefix_token = tokens[0]
    if not prefix_token:
        raise ChipNameParseError(f"Parse error in chip name `{pattern}': empty prefix")
    prefix = None if prefix_token == _WILDCARD else prefix_token

    if len(tokens) == 1:
        return ChipNameSpec(prefix=prefix)

    bus_token, tail = tokens[1], tokens[2:]
    if not bus_token:
        raise ChipNameParseError(f"Parse error in chip name `{pattern}': empty bus")

    if bus_token == _WILDCARD:
        return ChipNameSpec(prefix=prefix, address=_parse_address(tail, pattern))
    if bus_token == "isa":
        return ChipNameSpec(prefix=prefix, bus_kind=BusKind.ISA, address=_parse_address(tail, pattern))
    if bus_token == "pci":
        return ChipNameSpec(prefix=prefix, bus_kind=BusKind.PCI, address=_parse_address(tail, pattern))
    if bus_token == "i2c":
        bus_number = _parse_bus_number(tail[0], pattern) if tail else None
        return ChipNameSpec(
            prefix=prefix,
            bus_kind=BusKind.I2C,
            bus_number=bus_number,
            address=_parse_address(tail[1:], pattern),
        )
    return ChipNameSpec(
        prefix=prefix,
        bus_kind=BusKind.DUMMY,
        bus_name=bus_token,
        address=_parse_address(tail, pattern),
    )


def build_specs(patterns: Sequence[str]) -> tuple[ChipNameSpec, ...]:
    """Turn command-line patterns into the immutable spec list for a run."""
    if not patterns:
        return (ANY_CHIP,)
    if len(patterns) > CHIPS_MAX:
        raise TooManyChipsError("Too many chips on command line!")
    return tuple(parse_chip_name(pattern) for pattern in patterns)


def format_chip_name(chip: DetectedChip, max_length: int = NAME_BUFFER_SIZE) -> str:
    if chip.bus_kind is BusKind.ISA:
        text = f"{chip.prefix}-isa-{chip.address:04x}"
    elif chip.bus_kind is BusKind.PCI:
        text = f"{chip.prefix}-pci-{chip.address:04x}"
    elif chip.bus_kind is BusKind.DUMMY:
        text = f"{chip.prefix}-{chip.bus_name}-{chip.address:04x}"
    else:
        text = f"{chip.prefix}-i2c-{chip.bus_number:d}-{chip.address:02x}"
    # max_length counts the terminating NUL, as libsensors name buffers do
    return text[: max(max_length - 1, 0)]
