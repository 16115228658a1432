"""Codec between TLV word arrays and the domain model.

TLV data of ALSA control elements is an array of unsigned 32-bit words laid
out as ``[type, length, value...]`` where ``length`` counts bytes of the value
field. Containers and dB ranges nest further items inside their value field.
"""

from __future__ import annotations

import struct
from typing import Sequence

from alsa_tlv.constants import (
    CHMAP_TYPES,
    DB_INTERVAL_TYPES,
    SNDRV_CHMAP_DRIVER_SPEC,
    SNDRV_CHMAP_PHASE_INVERSE,
    SNDRV_CHMAP_POSITION_MASK,
    SNDRV_CTL_TLVD_DB_SCALE_MASK,
    SNDRV_CTL_TLVD_DB_SCALE_MUTE,
    SNDRV_CTL_TLVT_CHMAP_FIXED,
    SNDRV_CTL_TLVT_CHMAP_PAIRED,
    SNDRV_CTL_TLVT_CHMAP_VAR,
    SNDRV_CTL_TLVT_CONTAINER,
    SNDRV_CTL_TLVT_DB_LINEAR,
    SNDRV_CTL_TLVT_DB_MINMAX,
    SNDRV_CTL_TLVT_DB_MINMAX_MUTE,
    SNDRV_CTL_TLVT_DB_RANGE,
    SNDRV_CTL_TLVT_DB_SCALE,
    U32_MASK,
)
from alsa_tlv.domain.errors import TlvDecodeError
from alsa_tlv.domain.models import (
    Chmap,
    ChmapEntry,
    ChmapGenericPos,
    ChmapMode,
    Container,
    DbInterval,
    DbRange,
    DbRangeEntry,
    DbRangeEntryData,
    DbScale,
    TlvItem,
)

ITEM_TYPES: tuple[int, ...] = (
    SNDRV_CTL_TLVT_CONTAINER,
    SNDRV_CTL_TLVT_DB_SCALE,
    SNDRV_CTL_TLVT_DB_RANGE,
    *DB_INTERVAL_TYPES,
    *CHMAP_TYPES,
)
DB_RANGE_ENTRY_TYPES: tuple[int, ...] = (
    SNDRV_CTL_TLVT_DB_SCALE,
    SNDRV_CTL_TLVT_DB_RANGE,
    *DB_INTERVAL_TYPES,
)

_CHMAP_MODES: dict[int, ChmapMode] = {
    SNDRV_CTL_TLVT_CHMAP_FIXED: ChmapMode.FIXED,
    SNDRV_CTL_TLVT_CHMAP_VAR: ChmapMode.ARBITRARY_EXCHANGEABLE,
    SNDRV_CTL_TLVT_CHMAP_PAIRED: ChmapMode.PAIRED_EXCHANGEABLE,
}
_CHMAP_TYPES_BY_MODE: dict[ChmapMode, int] = {mode: value for value, mode in _CHMAP_MODES.items()}


def _to_signed(word: int) -> int:
    return word - (1 << 32) if word & 0x8000_0000 else word


def _to_word(value: int) -> int:
    return value & U32_MASK


def _format_types(types: Sequence[int]) -> str:
    return ", ".join(str(value) for value in types)


def decode_tlv(words: Sequence[int]) -> TlvItem:
    """Decode an array of 32-bit words into a TLV item."""

    for index, word in enumerate(words):
        if not 0 <= word <= U32_MASK:
            raise TlvDecodeError(f"Invalid value {word} for 32-bit unsigned word", index)
    return _decode_item(list(words), 0, ITEM_TYPES)


def _split_value(words: list[int], offset: int) -> tuple[int, list[int]]:
    if len(words) < 2:
        raise TlvDecodeError(
            f"Insufficient length of array {len(words)}, should be greater than 2", offset
        )
    value_type, length = words[0], words[1]
    if length % 4:
        raise TlvDecodeError(f"Invalid value {length} in length field, not multiples of 4", offset + 1)
    value_length = length // 4
    if len(words) - 2 < value_length:
        raise TlvDecodeError(
            f"Invalid value {length} in length field, actual {4 * (len(words) - 2)}", offset + 1
        )
    return value_type, words[2 : 2 + value_length]


def _decode_item(words: list[int], offset: int, allowed: Sequence[int]) -> TlvItem:
    value_type, value = _split_value(words, offset)
    if value_type not in allowed:
        raise TlvDecodeError(
            f"Invalid value {value_type} in type field, expected {_format_types(allowed)}", offset
        )

    value_offset = offset + 2
    if value_type == SNDRV_CTL_TLVT_CONTAINER:
        return _decode_container(value, value_offset)
    if value_type == SNDRV_CTL_TLVT_DB_RANGE:
        return _decode_db_range(value, value_offset)
    if value_type == SNDRV_CTL_TLVT_DB_SCALE:
        return _decode_db_scale(value, value_offset)
    if value_type in DB_INTERVAL_TYPES:
        return _decode_db_interval(value_type, value, value_offset)
    return _decode_chmap(value_type, value, value_offset)


def _decode_db_scale(value: list[int], offset: int) -> DbScale:
    if len(value) != 2:
        raise TlvDecodeError(f"Invalid length of value {len(value)} for DbScale, expected 2", offset)
    return DbScale(
        min=_to_signed(value[0]),
        step=value[1] & SNDRV_CTL_TLVD_DB_SCALE_MASK,
        mute_avail=bool(value[1] & SNDRV_CTL_TLVD_DB_SCALE_MUTE),
    )


def _decode_db_interval(value_type: int, value: list[int], offset: int) -> DbInterval:
    if len(value) < 2:
        raise TlvDecodeError(
            f"Invalid length of value {len(value)} for DbInterval, expected 2", offset
        )
    return DbInterval(
        min=_to_signed(value[0]),
        max=_to_signed(value[1]),
        linear=value_type == SNDRV_CTL_TLVT_DB_LINEAR,
        mute_avail=value_type in (SNDRV_CTL_TLVT_DB_LINEAR, SNDRV_CTL_TLVT_DB_MINMAX_MUTE),
    )


def _decode_db_range(value: list[int], offset: int) -> DbRange:
    entries: list[DbRangeEntry] = []
    pos = 0
    while pos < len(value):
        rest = value[pos:]
        if len(rest) < 4:
            raise TlvDecodeError(
                f"Insufficient length of array {len(rest)}, should be greater than 4", offset + pos
            )
        data = _decode_item(rest[2:], offset + pos + 2, DB_RANGE_ENTRY_TYPES)
        entries.append(
            DbRangeEntry(min_val=_to_signed(rest[0]), max_val=_to_signed(rest[1]), data=data)
        )
        pos += 4 + rest[3] // 4
    return DbRange(entries=tuple(entries))


def _decode_container(value: list[int], offset: int) -> Container:
    entries: list[TlvItem] = []
    pos = 0
    while pos < len(value):
        rest = value[pos:]
        entries.append(_decode_item(rest, offset + pos, ITEM_TYPES))
        pos += 2 + rest[1] // 4
    return Container(entries=tuple(entries))


def _decode_chmap(value_type: int, value: list[int], offset: int) -> Chmap:
    mode = _CHMAP_MODES[value_type]
    if mode is ChmapMode.PAIRED_EXCHANGEABLE and len(value) % 2:
        raise TlvDecodeError(
            f"Invalid length of value {len(value)} for paired channel map, expected even", offset
        )
    entries = []
    for index, word in enumerate(value):
        position = word & SNDRV_CHMAP_POSITION_MASK
        pos: ChmapGenericPos | int
        if word & SNDRV_CHMAP_DRIVER_SPEC:
            pos = position
        else:
            try:
                pos = ChmapGenericPos(position)
            except ValueError as exc:
                raise TlvDecodeError(
                    f"Invalid value {position} for channel position", offset + index
                ) from exc
        entries.append(ChmapEntry(pos=pos, phase_inverse=bool(word & SNDRV_CHMAP_PHASE_INVERSE)))
    return Chmap(mode=mode, entries=tuple(entries))


def encode_tlv(item: TlvItem | DbRangeEntryData) -> list[int]:
    """Encode a TLV item into an array of 32-bit words."""

    value_type, value = _encode_value(item)
    return [value_type, 4 * len(value), *value]


def _encode_value(item: TlvItem) -> tuple[int, list[int]]:
    if isinstance(item, Container):
        value: list[int] = []
        for entry in item.entries:
            value.extend(encode_tlv(entry))
        return SNDRV_CTL_TLVT_CONTAINER, value
    if isinstance(item, DbRange):
        value = []
        for range_entry in item.entries:
            value.extend((_to_word(range_entry.min_val), _to_word(range_entry.max_val)))
            value.extend(encode_tlv(range_entry.data))
        return SNDRV_CTL_TLVT_DB_RANGE, value
    if isinstance(item, DbScale):
        step = item.step & SNDRV_CTL_TLVD_DB_SCALE_MASK
        if item.mute_avail:
            step |= SNDRV_CTL_TLVD_DB_SCALE_MUTE
        return SNDRV_CTL_TLVT_DB_SCALE, [_to_word(item.min), step]
    if isinstance(item, DbInterval):
        if item.linear:
            value_type = SNDRV_CTL_TLVT_DB_LINEAR
        elif item.mute_avail:
            value_type = SNDRV_CTL_TLVT_DB_MINMAX_MUTE
        else:
            value_type = SNDRV_CTL_TLVT_DB_MINMAX
        return value_type, [_to_word(item.min), _to_word(item.max)]
    if isinstance(item, Chmap):
        return _CHMAP_TYPES_BY_MODE[item.mode], [_encode_chmap_entry(e) for e in item.entries]
    raise TypeError(f"Unsupported TLV item: {type(item).__name__}")


def _encode_chmap_entry(entry: ChmapEntry) -> int:
    word = int(entry.pos) & SNDRV_CHMAP_POSITION_MASK
    if entry.driver_specific:
        word |= SNDRV_CHMAP_DRIVER_SPEC
    if entry.phase_inverse:
        word |= SNDRV_CHMAP_PHASE_INVERSE
    return word


def words_from_bytes(data: bytes) -> list[int]:
    """Interpret raw bytes as 32-bit words in host byte order."""

    if not data:
        raise TlvDecodeError("Nothing available in given bytes")
    if len(data) % 4:
        raise TlvDecodeError("The length of bytes is not multiples of 4", len(data) // 4)
    return list(struct.unpack(f"={len(data) // 4}I", data))


def words_to_bytes(words: Sequence[int]) -> bytes:
    return struct.pack(f"={len(words)}I", *words)
