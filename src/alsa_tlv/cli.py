"""CLI interface for alsa-tlv."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, NoReturn, Optional

import typer
from pydantic import ValidationError

from .domain.errors import DbCalculationError, TlvDecodeError
from .interfaces.cli_handlers import (
    DecodeMode,
    convert_from_db,
    convert_to_db,
    render_decoded,
    resolve_request,
    resolve_tlv_item,
    sweep_lines,
)

app = typer.Typer(help="dB calculation and decoding for TLV data of ALSA control elements")

_DATA_HELP = (
    "TLV data as space-separated decimal or hexadecimal words, "
    "or '-' to read native-endian bytes from standard input."
)


def _fail(error: Exception) -> NoReturn:
    typer.echo(str(error), err=True)
    raise typer.Exit(code=1)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Emit debug logs."),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command("to-db")
def to_db_command(
    value: str = typer.Option(..., "--value", help="Raw control value; -9999999 means mute."),
    minimum: Optional[str] = typer.Option(None, "--min", help="Minimum raw value."),
    maximum: Optional[str] = typer.Option(None, "--max", help="Maximum raw value."),
    step: Optional[str] = typer.Option(None, "--step", help="Step of raw value."),
    profile: Optional[Path] = typer.Option(None, "--profile", help="JSON/YAML control profile."),
    data: Optional[List[str]] = typer.Argument(None, help=_DATA_HELP),
) -> None:
    """Convert a raw control value into dB."""

    try:
        value_range, item = resolve_request(
            profile_path=profile,
            minimum=minimum,
            maximum=maximum,
            step=step,
            data=data or [],
            stdin=sys.stdin.buffer,
        )
        db = convert_to_db(value, value_range, item)
    except (DbCalculationError, TlvDecodeError, ValidationError, ValueError, OSError) as error:
        _fail(error)
    typer.echo(str(db))


@app.command("from-db")
def from_db_command(
    db: float = typer.Option(..., "--db", help="Value in dB; -inf means mute."),
    minimum: Optional[str] = typer.Option(None, "--min", help="Minimum raw value."),
    maximum: Optional[str] = typer.Option(None, "--max", help="Maximum raw value."),
    step: Optional[str] = typer.Option(None, "--step", help="Step of raw value."),
    profile: Optional[Path] = typer.Option(None, "--profile", help="JSON/YAML control profile."),
    data: Optional[List[str]] = typer.Argument(None, help=_DATA_HELP),
) -> None:
    """Convert a dB value into a raw control value."""

    try:
        value_range, item = resolve_request(
            profile_path=profile,
            minimum=minimum,
            maximum=maximum,
            step=step,
            data=data or [],
            stdin=sys.stdin.buffer,
        )
        value = convert_from_db(db, value_range, item)
    except (DbCalculationError, TlvDecodeError, ValidationError, ValueError, OSError) as error:
        _fail(error)
    typer.echo(str(value))


@app.command("decode")
def decode_command(
    mode: DecodeMode = typer.Argument(..., case_sensitive=False, help="Output representation."),
    data: List[str] = typer.Argument(..., help=_DATA_HELP),
) -> None:
    """Decode TLV data and print it in the requested representation."""

    try:
        item = resolve_tlv_item(None, data, sys.stdin.buffer)
    except (TlvDecodeError, ValueError) as error:
        _fail(error)
    typer.echo(render_decoded(mode, item), nl=mode is not DecodeMode.RAW)


@app.command("sweep")
def sweep_command(
    minimum: Optional[str] = typer.Option(None, "--min", help="Minimum raw value."),
    maximum: Optional[str] = typer.Option(None, "--max", help="Maximum raw value."),
    step: Optional[str] = typer.Option(None, "--step", help="Step of raw value."),
    profile: Optional[Path] = typer.Option(None, "--profile", help="JSON/YAML control profile."),
    data: Optional[List[str]] = typer.Argument(None, help=_DATA_HELP),
) -> None:
    """Print the dB value of every raw value in the range."""

    try:
        value_range, item = resolve_request(
            profile_path=profile,
            minimum=minimum,
            maximum=maximum,
            step=step,
            data=data or [],
            stdin=sys.stdin.buffer,
        )
    except (TlvDecodeError, ValidationError, ValueError, OSError) as error:
        _fail(error)
    for line in sweep_lines(item, value_range):
        typer.echo(line)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
