"""Rendering of TLV items as the C macros used by kernel drivers."""

from __future__ import annotations

from alsa_tlv.domain.models import (
    Chmap,
    ChmapEntry,
    ChmapMode,
    Container,
    DbInterval,
    DbRange,
    DbRangeEntry,
    DbScale,
    TlvItem,
)

INDENTS_PER_LEVEL = 4

_CHMAP_LABELS: dict[ChmapMode, str] = {
    ChmapMode.FIXED: "SNDRV_CTL_TLVT_CHMAP_FIXED",
    ChmapMode.ARBITRARY_EXCHANGEABLE: "SNDRV_CTL_TLVT_CHMAP_VAR",
    ChmapMode.PAIRED_EXCHANGEABLE: "SNDRV_CTL_TLVT_CHMAP_PAIRED",
}


def _indent(level: int) -> str:
    return " " * (level * INDENTS_PER_LEVEL)


def _hex(value: int) -> str:
    return f"0x{value & 0xFFFF_FFFF:x}"


def _nested(label: str, children: list[str], level: int) -> str:
    lines = [f"SNDRV_CTL_TLVD_ITEM ( {label},"]
    lines.extend(f"{_indent(level + 1)}{child}," for child in children)
    lines.append(f"{_indent(level)})")
    return "\n".join(lines)


def format_as_macro(item: TlvItem, level: int = 0) -> str:
    """Render ``item`` as ``SNDRV_CTL_TLVD_ITEM`` macro text."""

    if isinstance(item, DbScale):
        mute = " | SNDRV_CTL_TLVD_DB_SCALE_MUTE" if item.mute_avail else ""
        return f"SNDRV_CTL_TLVD_ITEM ( SNDRV_CTL_TLVT_DB_SCALE, {_hex(item.min)}, {_hex(item.step)}{mute} )"
    if isinstance(item, DbInterval):
        if item.linear:
            label = "SNDRV_CTL_TLVT_DB_LINEAR"
        elif item.mute_avail:
            label = "SNDRV_CTL_TLVT_DB_MINMAX_MUTE"
        else:
            label = "SNDRV_CTL_TLVT_DB_MINMAX"
        return f"SNDRV_CTL_TLVD_ITEM ( {label}, {_hex(item.min)}, {_hex(item.max)} )"
    if isinstance(item, DbRange):
        children = [_format_range_entry(entry, level + 1) for entry in item.entries]
        return _nested("SNDRV_CTL_TLVT_DB_RANGE", children, level)
    if isinstance(item, Container):
        children = [format_as_macro(entry, level + 1) for entry in item.entries]
        return _nested("SNDRV_CTL_TLVT_CONTAINER", children, level)
    if isinstance(item, Chmap):
        children = [_format_chmap_entry(entry) for entry in item.entries]
        return _nested(_CHMAP_LABELS[item.mode], children, level)
    raise TypeError(f"Unsupported TLV item: {type(item).__name__}")


def _format_range_entry(entry: DbRangeEntry, level: int) -> str:
    return f"{entry.min_val}, {entry.max_val}, {format_as_macro(entry.data, level)}"


def _format_chmap_entry(entry: ChmapEntry) -> str:
    if entry.driver_specific:
        label = f"{int(entry.pos)} | SNDRV_CHMAP_DRIVER_SPEC"
    else:
        label = f"SNDRV_CHMAP_{entry.pos.name}"
    if entry.phase_inverse:
        label += " | SNDRV_CHMAP_PHASE_INVERSE"
    return label
