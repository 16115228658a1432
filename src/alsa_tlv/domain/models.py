"""Domain models for TLV dB metadata of ALSA control elements."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Union

from alsa_tlv.constants import DB_VALUE_MULTIPLIER


@dataclass(frozen=True, slots=True)
class ValueRange:
    """Raw value domain of a control element."""

    min: int
    max: int
    step: int = 1

    def length(self) -> int:
        return self.max - self.min

    def contains(self, val: int) -> bool:
        return self.min <= val <= self.max


@dataclass(frozen=True, slots=True)
class DbScale:
    """Uniform dB scale: ``min`` plus ``step`` per raw unit, both in centidB."""

    min: int
    step: int
    mute_avail: bool = False


@dataclass(frozen=True, slots=True)
class DbInterval:
    """dB interval between two centidB bounds.

    ``linear`` marks controls whose raw value is linear in signal amplitude, so
    dB must be derived through ``20 * log10``. Otherwise raw steps are already
    linear in dB.
    """

    min: int
    max: int
    linear: bool = False
    mute_avail: bool = False

    def min_f(self) -> float:
        return self.min / DB_VALUE_MULTIPLIER

    def max_f(self) -> float:
        return self.max / DB_VALUE_MULTIPLIER

    def length(self) -> int:
        return abs(self.max - self.min)

    def contains(self, db: int) -> bool:
        """Whether a centidB value lies inside the interval."""

        return self.min <= db <= self.max


@dataclass(frozen=True, slots=True)
class DbRangeEntry:
    """One sub-section of the raw value domain with its own dB description."""

    min_val: int
    max_val: int
    data: DbRangeEntryData


@dataclass(frozen=True, slots=True)
class DbRange:
    """Piecewise dB description; entry order decides which entry wins."""

    entries: tuple[DbRangeEntry, ...] = ()


class ChmapMode(str, Enum):
    """How channels in a channel map may be exchanged."""

    FIXED = "fixed"
    ARBITRARY_EXCHANGEABLE = "arbitrary-exchangeable"
    PAIRED_EXCHANGEABLE = "paired-exchangeable"


class ChmapGenericPos(IntEnum):
    """Generic channel positions, named after ``SNDRV_CHMAP_*``."""

    UNKNOWN = 0
    NA = 1
    MONO = 2
    FL = 3
    FR = 4
    RL = 5
    RR = 6
    FC = 7
    LFE = 8
    SL = 9
    SR = 10
    RC = 11
    FLC = 12
    FRC = 13
    RLC = 14
    RRC = 15
    FLW = 16
    FRW = 17
    FLH = 18
    FCH = 19
    FRH = 20
    TC = 21
    TFL = 22
    TFR = 23
    TFC = 24
    TRL = 25
    TRR = 26
    TRC = 27
    TFLC = 28
    TFRC = 29
    TSL = 30
    TSR = 31
    LLFE = 32
    RLFE = 33
    BC = 34
    BLC = 35
    BRC = 36


@dataclass(frozen=True, slots=True)
class ChmapEntry:
    """Position of one channel.

    ``pos`` is a :class:`ChmapGenericPos` or, for driver-specific positions,
    the plain integer programmed by the driver.
    """

    pos: ChmapGenericPos | int = ChmapGenericPos.UNKNOWN
    phase_inverse: bool = False

    @property
    def driver_specific(self) -> bool:
        return not isinstance(self.pos, ChmapGenericPos)


@dataclass(frozen=True, slots=True)
class Chmap:
    """Channel map of a PCM substream. Carries no dB information."""

    mode: ChmapMode = ChmapMode.FIXED
    entries: tuple[ChmapEntry, ...] = ()


@dataclass(frozen=True, slots=True)
class Container:
    """Aggregate of unrelated TLV items; entry order is significant."""

    entries: tuple[TlvItem, ...] = ()


DbRangeEntryData = Union[DbScale, DbInterval, DbRange]
TlvItem = Union[Container, DbRange, DbScale, DbInterval, Chmap]

TLV_ITEM_TYPES: tuple[type, ...] = (Container, DbRange, DbScale, DbInterval, Chmap)
DB_RANGE_ENTRY_DATA_TYPES: tuple[type, ...] = (DbScale, DbInterval, DbRange)
