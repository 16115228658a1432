from __future__ import annotations

from pathlib import Path

import json

from pydantic import BaseModel, Field, field_validator, model_validator

from alsa_tlv.codec import decode_tlv
from alsa_tlv.constants import U32_MASK
from alsa_tlv.domain.models import TlvItem, ValueRange


class ControlProfile(BaseModel):
    """Raw range and TLV data of one control element."""

    name: str | None = None
    min: int
    max: int
    step: int = Field(1, ge=0)
    tlv: list[int] = Field(..., min_length=1)

    @field_validator("tlv")
    @classmethod
    def _validate_tlv_words(cls, value: list[int]) -> list[int]:
        for word in value:
            if not 0 <= word <= U32_MASK:
                raise ValueError(f"TLV word {word} is not a 32-bit unsigned value.")
        return value

    @model_validator(mode="after")
    def _validate_bounds(self) -> "ControlProfile":
        if self.min > self.max:
            raise ValueError("min must be <= max.")
        return self

    def value_range(self) -> ValueRange:
        return ValueRange(min=self.min, max=self.max, step=self.step)

    def tlv_item(self) -> TlvItem:
        return decode_tlv(self.tlv)


def load_control_profile(path: Path) -> ControlProfile:
    data = _load_config_data(path)
    return ControlProfile.model_validate(data)


def _load_config_data(path: Path) -> dict:
    if path.suffix.lower() in {".yaml", ".yml"}:
        try:
            import yaml
        except ImportError as exc:
            raise ImportError("PyYAML is required to load YAML profiles.") from exc

        with path.open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle) or {}

    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)
