"""CLI-facing handlers that turn command-line text into conversions."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import BinaryIO, Sequence
import logging

from alsa_tlv.calculation import val_from_db, val_to_db
from alsa_tlv.codec import decode_tlv, encode_tlv, words_from_bytes, words_to_bytes
from alsa_tlv.constants import U32_MASK
from alsa_tlv.domain.models import TlvItem, ValueRange
from alsa_tlv.macro import format_as_macro
from alsa_tlv.sweep import SweepTable, build_sweep
from alsa_tlv.utils.config import ControlProfile, load_control_profile

logger = logging.getLogger(__name__)

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1
_HEX_LETTERS = frozenset("abcdefABCDEF")
STDIN_MARKER = "-"


class DecodeMode(str, Enum):
    """Output representations of decoded TLV data."""

    STRUCTURE = "structure"
    LITERAL = "literal"
    RAW = "raw"
    MACRO = "macro"


def _parse_integer(text: str) -> int:
    raw = text
    if "_" in raw or raw != raw.strip():
        raise ValueError(f"Invalid integer: {text!r}")
    if raw.startswith("0x"):
        return int(raw[2:], 16)
    if any(char in _HEX_LETTERS for char in raw):
        return int(raw, 16)
    return int(raw, 10)


def parse_i32(text: str) -> int:
    """Parse a decimal or hexadecimal signed 32-bit value."""

    value = _parse_integer(text)
    if not _I32_MIN <= value <= _I32_MAX:
        raise ValueError(f"{text} is out of the 32-bit signed range.")
    return value


def parse_word(text: str) -> int:
    """Parse a decimal or hexadecimal unsigned 32-bit TLV word."""

    try:
        value = _parse_integer(text)
    except ValueError as exc:
        raise ValueError(f"Invalid argument for data of TLV: {text}") from exc
    if not 0 <= value <= U32_MASK:
        raise ValueError(f"Invalid argument for data of TLV: {text}")
    return value


def read_tlv_words(data: Sequence[str], stdin: BinaryIO | None) -> list[int]:
    """Collect TLV words from arguments, or from native-endian bytes on stdin."""

    if list(data) == [STDIN_MARKER]:
        if stdin is None:
            raise ValueError("Standard input is not available.")
        return words_from_bytes(stdin.read())
    return [parse_word(arg) for arg in data]


def _load_profile(profile: Path | None) -> ControlProfile | None:
    if profile is None:
        return None
    loaded = load_control_profile(profile)
    logger.info("Loaded control profile %s from %s", loaded.name or "<unnamed>", profile)
    return loaded


def resolve_value_range(
    profile: ControlProfile | None,
    minimum: str | None,
    maximum: str | None,
    step: str | None,
) -> ValueRange:
    """Merge explicit range options over the profile's range."""

    base = profile.value_range() if profile is not None else None
    if base is None and (minimum is None or maximum is None):
        raise ValueError("--min and --max are required without --profile.")
    return ValueRange(
        min=parse_i32(minimum) if minimum is not None else base.min,
        max=parse_i32(maximum) if maximum is not None else base.max,
        step=parse_i32(step) if step is not None else (base.step if base is not None else 1),
    )


def resolve_tlv_item(
    profile: ControlProfile | None,
    data: Sequence[str],
    stdin: BinaryIO | None,
) -> TlvItem:
    if data:
        words = read_tlv_words(data, stdin)
    elif profile is not None:
        words = list(profile.tlv)
    else:
        raise ValueError("TLV data is required without --profile.")
    return decode_tlv(words)


def resolve_request(
    *,
    profile_path: Path | None,
    minimum: str | None,
    maximum: str | None,
    step: str | None,
    data: Sequence[str],
    stdin: BinaryIO | None,
) -> tuple[ValueRange, TlvItem]:
    profile = _load_profile(profile_path)
    value_range = resolve_value_range(profile, minimum, maximum, step)
    return value_range, resolve_tlv_item(profile, data, stdin)


def convert_to_db(value: str, value_range: ValueRange, item: TlvItem) -> float:
    return val_to_db(item, parse_i32(value), value_range)


def convert_from_db(db: float, value_range: ValueRange, item: TlvItem) -> int:
    return val_from_db(item, db, value_range)


def render_decoded(mode: DecodeMode, item: TlvItem) -> str | bytes:
    """Render a decoded item; raw mode yields native-endian bytes."""

    if mode is DecodeMode.STRUCTURE:
        return repr(item)
    if mode is DecodeMode.MACRO:
        return format_as_macro(item)
    words = encode_tlv(item)
    if mode is DecodeMode.LITERAL:
        return " ".join(str(word) for word in words)
    return words_to_bytes(words)


def sweep_lines(item: TlvItem, value_range: ValueRange) -> list[str]:
    table: SweepTable = build_sweep(item, value_range)
    lines = []
    for raw, db in table.rows():
        if raw in table.failures:
            lines.append(f"{raw}\terror: {table.failures[raw]}")
        else:
            lines.append(f"{raw}\t{db}")
    return lines
