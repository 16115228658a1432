"""Conversion between raw control values and dB values.

Every conversion takes the node describing the dB mapping, the query and the
raw :class:`ValueRange` of the control element. Results are plain numbers;
failures raise :class:`DbCalculationError` carrying the node kind and cause.

Two dispatch paths exist:

* :func:`val_to_db` / :func:`val_from_db` treat the node as the outermost TLV
  item. It is reduced to one representative :class:`DbInterval` first.
* Nodes reached from inside a :class:`DbRange` entry or a :class:`Container`
  keep their structure, so a nested ``DbRange`` searches its own entries.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, TypeVar

from alsa_tlv.constants import CTL_VALUE_MUTE, DB_VALUE_MULTIPLIER
from alsa_tlv.domain.errors import DbCalculationError, ErrorCause, ErrorTarget
from alsa_tlv.domain.models import (
    Container,
    DbInterval,
    DbRange,
    DbRangeEntry,
    DbRangeEntryData,
    DbScale,
    TlvItem,
    ValueRange,
)
from alsa_tlv.ranges import error_target_for, to_dbinterval, to_valuerange

logger = logging.getLogger(__name__)

# Reference factor between amplitude ratio and dB.
_REFERENCE = 20.0
_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1

EntryT = TypeVar("EntryT")


def _out_of_range(message: str) -> DbCalculationError:
    return DbCalculationError(ErrorTarget.DB_INTERVAL, ErrorCause.OUT_OF_RANGE, message)


def _mute_unsupported(db: float) -> DbCalculationError:
    return _out_of_range(f"{db} is not supported for mute")


def _db_to_linear(db: float) -> float:
    """Signal amplitude of a dB value, saturating to infinity on overflow."""

    try:
        return 10.0 ** (db / _REFERENCE)
    except OverflowError:
        return math.inf


def _linear_to_db(linear: float) -> float:
    if linear <= 0.0:
        return -math.inf
    return _REFERENCE * math.log10(linear)


def val_to_linear_for_db(interval: DbInterval, val: int, value_range: ValueRange) -> float:
    """Raw value to dB for a control linear in signal amplitude."""

    if val == CTL_VALUE_MUTE and interval.mute_avail:
        return -math.inf
    if not value_range.contains(val):
        raise _out_of_range(f"{val} is not between {value_range.min} and {value_range.max}")
    if val == value_range.min:
        return interval.min_f()
    if val == value_range.max:
        return interval.max_f()

    linear_min = _db_to_linear(interval.min_f())
    linear_max = _db_to_linear(interval.max_f())
    linear_length = abs(linear_min - linear_max)
    linear_val = linear_min + linear_length * (val - value_range.min) / value_range.length()
    db = _linear_to_db(linear_val)
    if math.isnan(db):
        raise _out_of_range(
            f"{val} has no dB value between {interval.min_f()} and {interval.max_f()}"
        )
    return db


def val_from_linear_for_db(interval: DbInterval, db: float, value_range: ValueRange) -> int:
    """dB to raw value for a control linear in signal amplitude."""

    if db == -math.inf:
        if interval.mute_avail:
            return CTL_VALUE_MUTE
        raise _mute_unsupported(db)

    db_min = interval.min_f()
    db_max = interval.max_f()
    if math.isnan(db) or db < db_min or db > db_max:
        raise _out_of_range(f"{db} is not between {db_min} and {db_max}")
    if db == db_min:
        return value_range.min
    if db >= db_max:
        return value_range.max

    linear_val = _db_to_linear(db)
    linear_min = _db_to_linear(db_min)
    linear_max = _db_to_linear(db_max)
    linear_length = abs(linear_max - linear_min)
    ratio = (linear_val - linear_min) / linear_length if linear_length else math.nan
    val = value_range.min + value_range.length() * ratio
    if not math.isfinite(val):
        raise _out_of_range(f"{db} has no raw value between {db_min} and {db_max}")
    return int(val)


def interval_val_to_db(interval: DbInterval, val: int, value_range: ValueRange) -> float:
    if interval.linear:
        return val_to_linear_for_db(interval, val, value_range)

    if val == CTL_VALUE_MUTE and interval.mute_avail:
        return -math.inf
    if not value_range.contains(val):
        raise _out_of_range(f"{val} is not between {value_range.min} and {value_range.max}")
    if val == value_range.min:
        return interval.min_f()
    if val == value_range.max:
        return interval.max_f()

    db_min = interval.min_f()
    db_max = interval.max_f()
    db_length = abs(db_max - db_min)
    return db_min + db_length * (val - value_range.min) / value_range.length()


def interval_val_from_db(interval: DbInterval, db: float, value_range: ValueRange) -> int:
    if interval.linear:
        return val_from_linear_for_db(interval, db, value_range)

    if db == -math.inf:
        if interval.mute_avail:
            return CTL_VALUE_MUTE
        raise _mute_unsupported(db)

    db_min = interval.min_f()
    db_max = interval.max_f()
    if math.isnan(db) or db < db_min or db > db_max:
        raise _out_of_range(f"{db} is not between {db_min} and {db_max}")
    if db == db_min:
        return value_range.min
    if db == db_max:
        return value_range.max

    db_length = abs(db_max - db_min)
    return int(value_range.min + value_range.length() * (db - db_min) / db_length)


def scale_val_to_db(scale: DbScale, val: int, value_range: ValueRange) -> float:
    return interval_val_to_db(to_dbinterval(scale, value_range), val, value_range)


def scale_val_from_db(scale: DbScale, db: float, value_range: ValueRange) -> int:
    return interval_val_from_db(to_dbinterval(scale, value_range), db, value_range)


def entry_val_to_db(entry: DbRangeEntry, val: int, value_range: ValueRange) -> float:
    """Delegate to the entry data over the entry's own raw sub-range."""

    return _data_val_to_db(entry.data, val, to_valuerange(entry, value_range))


def entry_val_from_db(entry: DbRangeEntry, db: float, value_range: ValueRange) -> int:
    return _data_val_from_db(entry.data, db, to_valuerange(entry, value_range))


def _data_val_to_db(data: DbRangeEntryData, val: int, value_range: ValueRange) -> float:
    if isinstance(data, DbScale):
        return scale_val_to_db(data, val, value_range)
    if isinstance(data, DbInterval):
        return interval_val_to_db(data, val, value_range)
    if isinstance(data, DbRange):
        return range_val_to_db(data, val, value_range)
    raise TypeError(f"Unsupported DbRange entry data: {type(data).__name__}")


def _data_val_from_db(data: DbRangeEntryData, db: float, value_range: ValueRange) -> int:
    if isinstance(data, DbScale):
        return scale_val_from_db(data, db, value_range)
    if isinstance(data, DbInterval):
        return interval_val_from_db(data, db, value_range)
    if isinstance(data, DbRange):
        return range_val_from_db(data, db, value_range)
    raise TypeError(f"Unsupported DbRange entry data: {type(data).__name__}")


def _select_quietest(
    candidates: Iterable[tuple[int, ValueRange, EntryT]],
) -> tuple[ValueRange, EntryT] | None:
    """Pick the candidate with the lowest dB bound; the last one wins ties."""

    selected: tuple[int, ValueRange, EntryT] | None = None
    for candidate in candidates:
        if selected is None or candidate[0] <= selected[0]:
            selected = candidate
    if selected is None:
        return None
    return selected[1], selected[2]


def _devalue_db(db: float) -> int:
    """Truncate a dB value to centidB, saturating at the 32-bit bounds."""

    if math.isnan(db):
        return 0
    scaled = db * DB_VALUE_MULTIPLIER
    if scaled <= _I32_MIN:
        return _I32_MIN
    if scaled >= _I32_MAX:
        return _I32_MAX
    return int(scaled)


def _range_mute_candidates(
    dbrange: DbRange, value_range: ValueRange
) -> Iterable[tuple[int, ValueRange, DbRangeEntry]]:
    for entry in dbrange.entries:
        r = to_valuerange(entry, value_range)
        try:
            interval = to_dbinterval(entry, r)
        except DbCalculationError as error:
            logger.debug("Skipping DbRange entry without dB interval: %s", error)
            continue
        yield interval.min, r, entry


def _wrap_failure(
    error: DbCalculationError, target: ErrorTarget, entry: object
) -> DbCalculationError:
    return DbCalculationError(target, ErrorCause.CALCULATION_FAILED, f"{error.message}: {entry!r}")


def range_val_to_db(dbrange: DbRange, val: int, value_range: ValueRange) -> float:
    """Raw value to dB searching the entries of a DbRange.

    A mute query uses the entry with the lowest dB bound. Any other value uses
    the first entry whose raw sub-range contains it.
    """

    selected: tuple[ValueRange, DbRangeEntry] | None
    if val == CTL_VALUE_MUTE:
        selected = _select_quietest(_range_mute_candidates(dbrange, value_range))
    else:
        selected = None
        for entry in dbrange.entries:
            r = to_valuerange(entry, value_range)
            if r.contains(val):
                selected = (r, entry)
                break

    if selected is None:
        raise DbCalculationError(ErrorTarget.DB_RANGE, ErrorCause.NO_ENTRY_AVAIL, repr(dbrange))

    r, entry = selected
    logger.debug("DbRange entry %d..%d selected for value %d", entry.min_val, entry.max_val, val)
    try:
        return entry_val_to_db(entry, val, r)
    except DbCalculationError as error:
        raise _wrap_failure(error, ErrorTarget.DB_RANGE, entry) from error


def range_val_from_db(dbrange: DbRange, db: float, value_range: ValueRange) -> int:
    """dB to raw value searching the entries of a DbRange.

    Any value other than mute is truncated to centidB and matched against the
    dB interval of each entry in declaration order.
    """

    selected: tuple[ValueRange, DbRangeEntry] | None
    if db == -math.inf:
        selected = _select_quietest(_range_mute_candidates(dbrange, value_range))
    else:
        db_devalued = _devalue_db(db)
        selected = None
        for entry in dbrange.entries:
            r = to_valuerange(entry, value_range)
            try:
                interval = to_dbinterval(entry, r)
            except DbCalculationError as error:
                logger.debug("Skipping DbRange entry without dB interval: %s", error)
                continue
            if interval.contains(db_devalued):
                selected = (r, entry)
                break

    if selected is None:
        raise DbCalculationError(ErrorTarget.DB_RANGE, ErrorCause.NO_ENTRY_AVAIL, repr(dbrange))

    r, entry = selected
    logger.debug("DbRange entry %d..%d selected for %s dB", entry.min_val, entry.max_val, db)
    try:
        return entry_val_from_db(entry, db, r)
    except DbCalculationError as error:
        raise _wrap_failure(error, ErrorTarget.DB_RANGE, entry) from error


def _container_ranges(
    container: Container, value_range: ValueRange
) -> Iterable[tuple[ValueRange, TlvItem]]:
    for entry in container.entries:
        try:
            yield to_valuerange(entry, value_range), entry
        except DbCalculationError as error:
            logger.debug("Skipping Container entry without value range: %s", error)


def _container_mute_candidates(
    container: Container, value_range: ValueRange, interval_range_is_outer: bool
) -> Iterable[tuple[int, ValueRange, TlvItem]]:
    for r, entry in _container_ranges(container, value_range):
        try:
            interval = to_dbinterval(entry, value_range if interval_range_is_outer else r)
        except DbCalculationError as error:
            logger.debug("Skipping Container entry without dB interval: %s", error)
            continue
        yield interval.min, r, entry


# NOTE: most Container failures are reported against ErrorTarget.DB_RANGE; only a
# failed val_to_db delegation names ErrorTarget.CONTAINER.
def container_val_to_db(container: Container, val: int, value_range: ValueRange) -> float:
    selected: tuple[ValueRange, TlvItem] | None
    if val == CTL_VALUE_MUTE:
        selected = _select_quietest(_container_mute_candidates(container, value_range, False))
    else:
        selected = next(
            ((r, entry) for r, entry in _container_ranges(container, value_range) if r.contains(val)),
            None,
        )

    if selected is None:
        raise DbCalculationError(ErrorTarget.DB_RANGE, ErrorCause.NO_ENTRY_AVAIL, repr(container))

    r, entry = selected
    try:
        return val_to_db(entry, val, r)
    except DbCalculationError as error:
        raise _wrap_failure(error, ErrorTarget.CONTAINER, entry) from error


def container_val_from_db(container: Container, db: float, value_range: ValueRange) -> int:
    selected: tuple[ValueRange, TlvItem] | None
    if db == -math.inf:
        selected = _select_quietest(_container_mute_candidates(container, value_range, True))
    else:
        db_devalued = _devalue_db(db)
        selected = None
        for r, entry in _container_ranges(container, value_range):
            try:
                interval = to_dbinterval(entry, r)
            except DbCalculationError as error:
                logger.debug("Skipping Container entry without dB interval: %s", error)
                continue
            if interval.contains(db_devalued):
                selected = (r, entry)
                break

    if selected is None:
        raise DbCalculationError(ErrorTarget.DB_RANGE, ErrorCause.NO_ENTRY_AVAIL, repr(container))

    r, entry = selected
    try:
        return val_from_db(entry, db, r)
    except DbCalculationError as error:
        raise _wrap_failure(error, ErrorTarget.DB_RANGE, entry) from error


def _representative_interval(item: TlvItem, value_range: ValueRange) -> DbInterval:
    try:
        return to_dbinterval(item, value_range)
    except DbCalculationError as error:
        raise DbCalculationError(
            error_target_for(item), ErrorCause.TO_DB_INTERVAL, f"{error.message}: {item!r}"
        ) from error


def val_to_db(item: TlvItem, val: int, value_range: ValueRange) -> float:
    """Convert a raw control value into dB using a top-level TLV item."""

    return interval_val_to_db(_representative_interval(item, value_range), val, value_range)


def val_from_db(item: TlvItem, db: float, value_range: ValueRange) -> int:
    """Convert a dB value into a raw control value using a top-level TLV item."""

    return interval_val_from_db(_representative_interval(item, value_range), db, value_range)
