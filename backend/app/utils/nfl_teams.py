"""NFL team abbreviations for player team affiliation."""

from __future__ import annotations

from typing import Optional

NFL_TEAMS: set[str] = {
    "ARI", "ATL", "BAL", "BUF", "CAR", "CHI", "CIN", "CLE",
    "DAL", "DEN", "DET", "GB", "HOU", "IND", "JAX", "KC",
    "LAC", "LAR", "LV", "MIA", "MIN", "NE", "NO", "NYG",
    "NYJ", "PHI", "PIT", "SEA", "SF", "TB", "TEN", "WAS",
}

# Common alternate abbreviations used by different data sources
NFL_TEAM_ALIASES: dict[str, str] = {
    "JAC": "JAX",
    "WSH": "WAS",
    "LA": "LAR",
    "STL": "LAR",
    "SD": "LAC",
    "OAK": "LV",
    "GNB": "GB",
    "KAN": "KC",
    "NWE": "NE",
    "NOR": "NO",
    "SFO": "SF",
    "TAM": "TB",
}


def normalize_team(team: Optional[str]) -> Optional[str]:
    """Normalize a team abbreviation. Returns None for free agents/unknown."""
    if team is None:
        return None
    team = str(team).strip().upper()
    if not team or team in ("FA", "NAN", "NONE"):
        return None
    canonical = NFL_TEAM_ALIASES.get(team, team)
    return canonical if canonical in NFL_TEAMS else None
