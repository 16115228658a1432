"""Resolution of TLV nodes into raw value ranges and representative dB intervals.

Composite nodes are reduced to the hull of their entries. Both helpers raise
:class:`DbCalculationError` when a node carries no usable dB information.
"""

from __future__ import annotations

from typing import Iterable, Union

from alsa_tlv.domain.errors import DbCalculationError, ErrorCause, ErrorTarget
from alsa_tlv.domain.models import (
    Chmap,
    Container,
    DbInterval,
    DbRange,
    DbRangeEntry,
    DbScale,
    TlvItem,
    ValueRange,
)

RangeNode = Union[TlvItem, DbRangeEntry]


def error_target_for(node: RangeNode) -> ErrorTarget:
    """Map a node to the error target labelling its kind."""

    if isinstance(node, Container):
        return ErrorTarget.CONTAINER
    if isinstance(node, (DbRange, DbRangeEntry)):
        return ErrorTarget.DB_RANGE
    if isinstance(node, DbScale):
        return ErrorTarget.DB_SCALE
    if isinstance(node, DbInterval):
        return ErrorTarget.DB_INTERVAL
    if isinstance(node, Chmap):
        return ErrorTarget.CHMAP
    raise TypeError(f"Unsupported TLV node: {type(node).__name__}")


def to_valuerange(node: RangeNode, value_range: ValueRange) -> ValueRange:
    """Raw value range the node covers inside ``value_range``."""

    if isinstance(node, (DbScale, DbInterval)):
        return value_range
    if isinstance(node, DbRangeEntry):
        return ValueRange(min=node.min_val, max=node.max_val, step=value_range.step)
    if isinstance(node, DbRange):
        if not node.entries:
            raise DbCalculationError(
                ErrorTarget.DB_RANGE, ErrorCause.NO_ENTRY_AVAIL, "DbRange includes no entry"
            )
        return ValueRange(
            min=min(entry.min_val for entry in node.entries),
            max=max(entry.max_val for entry in node.entries),
            step=value_range.step,
        )
    if isinstance(node, Container):
        ranges = []
        for entry in node.entries:
            try:
                ranges.append(to_valuerange(entry, value_range))
            except DbCalculationError:
                continue
        if not ranges:
            raise DbCalculationError(
                ErrorTarget.CONTAINER,
                ErrorCause.NO_ENTRY_AVAIL,
                "Container includes no entry with value range",
            )
        return ValueRange(
            min=min(r.min for r in ranges),
            max=max(r.max for r in ranges),
            step=value_range.step,
        )
    if isinstance(node, Chmap):
        raise DbCalculationError(
            ErrorTarget.CHMAP, ErrorCause.TO_DB_INTERVAL, "Chmap includes no value range"
        )
    raise TypeError(f"Unsupported TLV node: {type(node).__name__}")


def to_dbinterval(node: RangeNode, value_range: ValueRange) -> DbInterval:
    """Representative dB interval of the node over ``value_range``."""

    if isinstance(node, DbScale):
        return DbInterval(
            min=node.min,
            max=node.min + node.step * value_range.length(),
            linear=False,
            mute_avail=node.mute_avail,
        )
    if isinstance(node, DbInterval):
        return node
    if isinstance(node, DbRangeEntry):
        return to_dbinterval(node.data, to_valuerange(node, value_range))
    if isinstance(node, DbRange):
        intervals = []
        for entry in node.entries:
            if not (value_range.contains(entry.min_val) and value_range.contains(entry.max_val)):
                raise DbCalculationError(
                    ErrorTarget.DB_RANGE,
                    ErrorCause.TO_DB_INTERVAL,
                    "DbRange includes entry in which value range is out of expectation:"
                    f"{entry.min_val}:{entry.max_val} but {value_range.min}:{value_range.max}",
                )
            intervals.append(to_dbinterval(entry, value_range))
        return _merge_intervals(intervals, ErrorTarget.DB_RANGE, "DbRange")
    if isinstance(node, Container):
        intervals = [to_dbinterval(entry, value_range) for entry in node.entries]
        return _merge_intervals(intervals, ErrorTarget.CONTAINER, "Container")
    if isinstance(node, Chmap):
        raise DbCalculationError(
            ErrorTarget.CHMAP,
            ErrorCause.TO_DB_INTERVAL,
            "Container includes entry without dB information",
        )
    raise TypeError(f"Unsupported TLV node: {type(node).__name__}")


def _merge_intervals(intervals: Iterable[DbInterval], target: ErrorTarget, label: str) -> DbInterval:
    # Plain min/max hull: disjoint entries widen it as well, so an earlier
    # lower interval is never dropped in favour of a later disjoint one.
    merged: DbInterval | None = None
    for interval in intervals:
        if merged is None:
            merged = interval
            continue
        if interval.linear != merged.linear:
            raise DbCalculationError(
                target,
                ErrorCause.TO_DB_INTERVAL,
                f"{label} includes entries for both of non-linear and linear value",
            )
        low, mute_avail = merged.min, merged.mute_avail
        if interval.min < low:
            low, mute_avail = interval.min, interval.mute_avail
        merged = DbInterval(
            min=low,
            max=max(merged.max, interval.max),
            linear=merged.linear,
            mute_avail=mute_avail,
        )
    if merged is None:
        raise DbCalculationError(
            target, ErrorCause.TO_DB_INTERVAL, f"{label} includes no entry for dB information"
        )
    return merged
