"""Tabulation of dB values across the raw range of a control element."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from alsa_tlv.calculation import val_to_db
from alsa_tlv.domain.errors import DbCalculationError
from alsa_tlv.domain.models import TlvItem, ValueRange


@dataclass(frozen=True, slots=True)
class SweepTable:
    """Raw values paired with their dB values; failed conversions are NaN."""

    raw_values: np.ndarray
    db_values: np.ndarray
    failures: dict[int, str]

    def rows(self) -> list[tuple[int, float]]:
        return [(int(raw), float(db)) for raw, db in zip(self.raw_values, self.db_values)]


def build_sweep(item: TlvItem, value_range: ValueRange) -> SweepTable:
    """Evaluate ``val_to_db`` for every raw value from min to max by step."""

    step = value_range.step if value_range.step > 0 else 1
    raw_values = np.arange(value_range.min, value_range.max + 1, step, dtype=np.int64)
    if raw_values.size and raw_values[-1] != value_range.max:
        raw_values = np.append(raw_values, np.int64(value_range.max))

    db_values = np.full(raw_values.shape, np.nan, dtype=np.float64)
    failures: dict[int, str] = {}
    for index, raw in enumerate(raw_values.tolist()):
        try:
            db_values[index] = val_to_db(item, raw, value_range)
        except DbCalculationError as error:
            failures[raw] = str(error)
    return SweepTable(raw_values=raw_values, db_values=db_values, failures=failures)
