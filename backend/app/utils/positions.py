"""Position parsing for the four valuation positions."""

from __future__ import annotations

from typing import Optional

from ..config import league_config

# Alternate labels seen in Sleeper exports and league spreadsheets
POSITION_ALIASES: dict[str, str] = {
    "QUARTERBACK": "QB",
    "RUNNING BACK": "RB",
    "HB": "RB",
    "FB": "RB",
    "WIDE RECEIVER": "WR",
    "TIGHT END": "TE",
}


def normalize_position(pos_str: str) -> Optional[str]:
    """Map a raw position to QB/RB/WR/TE. Returns None for anything else.

    Multi-position strings like 'WR/RB' take the first listed position.
    """
    if not pos_str:
        return None
    for sep in ("/", ",", "|"):
        if sep in pos_str:
            pos_str = pos_str.split(sep)[0]
            break
    pos = pos_str.strip().upper()
    pos = POSITION_ALIASES.get(pos, pos)
    return pos if league_config.is_valuation_position(pos) else None
