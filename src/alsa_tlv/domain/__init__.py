"""Data model and error types for TLV dB metadata."""

from .errors import DbCalculationError, ErrorCause, ErrorTarget, TlvDecodeError
from .models import (
    DB_RANGE_ENTRY_DATA_TYPES,
    TLV_ITEM_TYPES,
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
    ValueRange,
)

__all__ = [
    "DbCalculationError",
    "ErrorCause",
    "ErrorTarget",
    "TlvDecodeError",
    "Chmap",
    "ChmapEntry",
    "ChmapGenericPos",
    "ChmapMode",
    "Container",
    "DbInterval",
    "DbRange",
    "DbRangeEntry",
    "DbRangeEntryData",
    "DbScale",
    "TlvItem",
    "ValueRange",
    "TLV_ITEM_TYPES",
    "DB_RANGE_ENTRY_DATA_TYPES",
]
