"""Error types raised by the TLV codec and the dB calculation engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorTarget(str, Enum):
    """Kind of TLV node an error is reported against."""

    CONTAINER = "Container"
    DB_RANGE = "DbRange"
    DB_SCALE = "DbScale"
    DB_INTERVAL = "DbInterval"
    CHMAP = "Chmap"


class ErrorCause(str, Enum):
    """Why a dB calculation failed."""

    NO_ENTRY_AVAIL = "no_entry_avail"
    CALCULATION_FAILED = "calculation_failed"
    TO_DB_INTERVAL = "to_db_interval"
    OUT_OF_RANGE = "out_of_range"

    @property
    def label(self) -> str:
        return _CAUSE_LABELS[self]


_CAUSE_LABELS: dict[ErrorCause, str] = {
    ErrorCause.NO_ENTRY_AVAIL: "No entry available",
    ErrorCause.CALCULATION_FAILED: "Calculation failed",
    ErrorCause.TO_DB_INTERVAL: "dB information not found",
    ErrorCause.OUT_OF_RANGE: "Out of range",
}


@dataclass(frozen=True, slots=True)
class DbCalculationError(ValueError):
    target: ErrorTarget
    cause: ErrorCause
    message: str

    def __str__(self) -> str:
        return f"target: {self.target.value}, ctx: {self.cause.label}, msg: {self.message}"

    def as_dict(self) -> dict[str, str]:
        return {"target": self.target.value, "cause": self.cause.value, "message": self.message}


@dataclass(frozen=True, slots=True)
class TlvDecodeError(ValueError):
    """Malformed TLV words; ``offset`` counts words from the start of the array."""

    message: str
    offset: int = 0

    def __str__(self) -> str:
        return f"{self.message}, at {self.offset}"

    def as_dict(self) -> dict[str, str | int]:
        return {"message": self.message, "offset": self.offset}
