"""Public package exports for alsa_tlv with lazy imports."""

from __future__ import annotations

from importlib import import_module
from typing import Any

__all__ = [
    "ValueRange",
    "DbScale",
    "DbInterval",
    "DbRange",
    "DbRangeEntry",
    "Container",
    "Chmap",
    "ChmapEntry",
    "ChmapMode",
    "DbCalculationError",
    "TlvDecodeError",
    "val_to_db",
    "val_from_db",
    "to_valuerange",
    "to_dbinterval",
    "decode_tlv",
    "encode_tlv",
    "format_as_macro",
    "build_sweep",
    "ControlProfile",
    "load_control_profile",
]

_EXPORT_MODULES: dict[str, str] = {
    "ValueRange": "alsa_tlv.domain.models",
    "DbScale": "alsa_tlv.domain.models",
    "DbInterval": "alsa_tlv.domain.models",
    "DbRange": "alsa_tlv.domain.models",
    "DbRangeEntry": "alsa_tlv.domain.models",
    "Container": "alsa_tlv.domain.models",
    "Chmap": "alsa_tlv.domain.models",
    "ChmapEntry": "alsa_tlv.domain.models",
    "ChmapMode": "alsa_tlv.domain.models",
    "DbCalculationError": "alsa_tlv.domain.errors",
    "TlvDecodeError": "alsa_tlv.domain.errors",
    "val_to_db": "alsa_tlv.calculation",
    "val_from_db": "alsa_tlv.calculation",
    "to_valuerange": "alsa_tlv.ranges",
    "to_dbinterval": "alsa_tlv.ranges",
    "decode_tlv": "alsa_tlv.codec",
    "encode_tlv": "alsa_tlv.codec",
    "format_as_macro": "alsa_tlv.macro",
    "build_sweep": "alsa_tlv.sweep",
    "ControlProfile": "alsa_tlv.utils.config",
    "load_control_profile": "alsa_tlv.utils.config",
}


def __getattr__(name: str) -> Any:
    if name not in _EXPORT_MODULES:
        raise AttributeError(f"module 'alsa_tlv' has no attribute {name!r}")

    module = import_module(_EXPORT_MODULES[name])
    value = getattr(module, name)
    globals()[name] = value
    return value
