"""Typer CLI entrypoint."""

from __future__ import annotations

import logging
import sys
from importlib import metadata
from pathlib import Path

import typer

from sensorsctl.backends.base import SensorsBackend
from sensorsctl.backends.fixture import FixtureBackend
from sensorsctl.backends.libsensors import LibsensorsBackend, library_version
from sensorsctl.core.actions import PrintOptions
from sensorsctl.core.chip_name import build_specs
from sensorsctl.core.errors import ChipNameParseError, SensorsctlError, TooManyChipsError
from sensorsctl.core.model import Mode
from sensorsctl.core.render import degree_suffix
from sensorsctl.core.service import SensorsService

PROGRAM = "sensorsctl"

EPILOG = """\
Use `-' after `-c' to read the config file from stdin.
If no chips are specified, all chip info will be printed.

Example chip names:

\b
    lm78-i2c-0-2d     *-i2c-0-2d
    lm78-i2c-0-*      *-i2c-0-*
    lm78-i2c-*-2d     *-i2c-*-2d
    lm78-i2c-*-*      *-i2c-*-*
    lm78-isa-0290     *-isa-0290
    lm78-isa-*        *-isa-*
    lm78-*
"""

app = typer.Typer(
    help="Show readings of hardware sensor chips, or apply their configured set statements.",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _echo_err(message: str) -> None:
    typer.echo(message, err=True)


def _program_version() -> str:
    try:
        return metadata.version(PROGRAM)
    except metadata.PackageNotFoundError:
        return "unknown"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"{PROGRAM} version {_program_version()} with libsensors version {library_version() or 'unknown'}")
        raise typer.Exit()


def _build_backend(config_file: str | None, fixture: Path | None) -> SensorsBackend:
    if fixture is not None:
        return FixtureBackend.from_path(fixture)
    return LibsensorsBackend(config_file=config_file)


def _build_service(config_file: str | None, fixture: Path | None) -> SensorsService:
    service = SensorsService(_build_backend(config_file, fixture))
    for warning in service.load_warnings:
        typer.echo(f"Warning: {warning}", err=True)
    return service


def _not_found_message(wildcard_prefix: bool) -> str:
    if wildcard_prefix:
        return (
            "No sensors found!\n"
            "Make sure you loaded all the kernel drivers you need.\n"
            "Try sensors-detect to find out which these are."
        )
    return "Specified sensor(s) not found!"


@app.command(epilog=EPILOG)
def main(
    chips: list[str] | None = typer.Argument(None, metavar="[CHIP]...", help="Chip name patterns"),
    config_file: str | None = typer.Option(
        None, "--config-file", "-c", help="Specify a config file (default: libsensors default)"
    ),
    do_sets: bool = typer.Option(False, "--set", "-s", help="Execute `set' statements too (root only)"),
    fahrenheit: bool = typer.Option(False, "--fahrenheit", "-f", help="Show temperatures in degrees fahrenheit"),
    no_adapter: bool = typer.Option(False, "--no-adapter", "-A", help="Do not show adapter for each chip"),
    no_unknown: bool = typer.Option(False, "--no-unknown", "-U", help="Do not show unknown chips"),
    unknown: bool = typer.Option(False, "--unknown", "-u", help="Treat chips as unknown ones (testing only)"),
    fixture: Path | None = typer.Option(
        None, "--fixture", envvar="SENSORSCTL_FIXTURE", help="Read chips from a YAML fixture instead of libsensors"
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
    version: bool = typer.Option(
        False, "--version", "-v", callback=_version_callback, is_eager=True, help="Display the program version"
    ),
) -> None:
    """Show sensor readings for every detected chip matching CHIP (all chips if none given)."""
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        specs = build_specs(chips or [])
    except ChipNameParseError as exc:
        typer.echo(str(exc), err=True)
        typer.echo(f"Try `{PROGRAM} -h' for more information", err=True)
        raise typer.Exit(code=1) from None
    except TooManyChipsError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from None

    try:
        service = _build_service(config_file, fixture)
    except SensorsctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None

    try:
        options = PrintOptions(
            hide_adapter=no_adapter,
            hide_unknown=no_unknown,
            unknown=unknown,
            fahrenheit=fahrenheit,
            degrees=degree_suffix(fahrenheit, sys.stdout.encoding),
        )
        result = service.run(
            specs,
            Mode.SET if do_sets else Mode.PRINT,
            out=typer.echo,
            err=_echo_err,
            print_options=options,
        )
    except SensorsctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None
    finally:
        service.close()

    if result.handled == 0:
        typer.echo(_not_found_message(specs[0].has_wildcard_prefix), err=True)
        raise typer.Exit(code=1)
    if result.error:
        raise typer.Exit(code=1)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
