"""Run the alsa-tlv command line via ``python -m alsa_tlv``."""

from __future__ import annotations

from alsa_tlv.cli import app

if __name__ == "__main__":
    app(prog_name="alsa-tlv")
