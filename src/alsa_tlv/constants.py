"""Constants shared with the ALSA control interface UAPI.

Values mirror ``include/uapi/sound/tlv.h`` and ``asound.h`` so that TLV data
read from the kernel can be interpreted without any C bindings.
"""

from __future__ import annotations

# Raw control value reserved for an explicit mute.
CTL_VALUE_MUTE = -9_999_999

# dB bounds in TLV data are stored in hundredths of a dB.
DB_VALUE_MULTIPLIER = 100

# Type field values.
SNDRV_CTL_TLVT_CONTAINER = 0
SNDRV_CTL_TLVT_DB_SCALE = 1
SNDRV_CTL_TLVT_DB_LINEAR = 2
SNDRV_CTL_TLVT_DB_RANGE = 3
SNDRV_CTL_TLVT_DB_MINMAX = 4
SNDRV_CTL_TLVT_DB_MINMAX_MUTE = 5
SNDRV_CTL_TLVT_CHMAP_FIXED = 0x101
SNDRV_CTL_TLVT_CHMAP_VAR = 0x102
SNDRV_CTL_TLVT_CHMAP_PAIRED = 0x103

DB_INTERVAL_TYPES: tuple[int, ...] = (
    SNDRV_CTL_TLVT_DB_LINEAR,
    SNDRV_CTL_TLVT_DB_MINMAX,
    SNDRV_CTL_TLVT_DB_MINMAX_MUTE,
)
CHMAP_TYPES: tuple[int, ...] = (
    SNDRV_CTL_TLVT_CHMAP_FIXED,
    SNDRV_CTL_TLVT_CHMAP_VAR,
    SNDRV_CTL_TLVT_CHMAP_PAIRED,
)

SNDRV_CTL_TLVD_DB_SCALE_MASK = 0xFFFF
SNDRV_CTL_TLVD_DB_SCALE_MUTE = 0x10000

SNDRV_CHMAP_POSITION_MASK = 0xFFFF
SNDRV_CHMAP_PHASE_INVERSE = 0x10000
SNDRV_CHMAP_DRIVER_SPEC = 0x20000

U32_MASK = 0xFFFF_FFFF
