"""Fetch season stats from the free Sleeper API and score them (PPR)."""

from __future__ import annotations

import json
import logging
import urllib.request
from typing import Optional

from ..config import LeagueConfig, league_config
from ..models.player import SeasonStats

logger = logging.getLogger(__name__)

# PPR scoring: raw Sleeper stat key -> points per unit
PPR_SCORING: dict[str, float] = {
    "pass_yd": 0.04,
    "pass_td": 4,
    "pass_int": -1,
    "rush_yd": 0.1,
    "rush_td": 6,
    "rec": 1,
    "rec_yd": 0.1,
    "rec_td": 6,
    "fum_lost": -2,
}


def _fetch_json(url: str, config: LeagueConfig) -> Optional[dict]:
    """Fetch JSON from the Sleeper API. Returns None on any failure."""
    try:
        req = urllib.request.Request(url, headers={"User-Agent": config.user_agent})
        with urllib.request.urlopen(req, timeout=config.stats_timeout) as resp:
            return json.loads(resp.read().decode())
    except (OSError, ValueError) as e:
        logger.warning(f"Sleeper API fetch failed: {url} ({e})")
        return None


def fetch_season_stats(season: str, config: LeagueConfig = league_config) -> Optional[dict[str, dict]]:
    """Raw per-category season totals for every player, keyed by player id.

    Returns None when the API is unreachable or returns junk, so callers can
    tell an outage apart from a season with no stats yet.
    """
    data = _fetch_json(f"{config.sleeper_api_base}/stats/nfl/regular/{season}", config)
    if not isinstance(data, dict):
        return None
    logger.info(f"Fetched Sleeper {season} stats for {len(data)} players")
    return data


def calculate_ppr_points(raw: dict) -> float:
    """PPR fantasy points from raw category totals."""
    return sum((raw.get(stat) or 0) * pts for stat, pts in PPR_SCORING.items())


def games_played(raw: dict) -> int:
    """`gp`, or `gms_active` only when `gp` is absent. An explicit 0 stays 0."""
    gp = raw.get("gp")
    if gp is None:
        gp = raw.get("gms_active")
    return int(gp or 0)


def score_player(raw: dict) -> SeasonStats:
    """Points, games, and PPG for one player, rounded to 2 decimals.

    Shared by the live stats cache and the stored-stats sync so both paths
    produce identical numbers.
    """
    pts = calculate_ppr_points(raw)
    gp = games_played(raw)
    return SeasonStats(
        total_points=round(pts, 2),
        games_played=gp,
        points_per_game=round(pts / gp, 2) if gp > 0 else 0.0,
    )


def process_season_stats(raw_table: dict[str, dict]) -> dict[str, SeasonStats]:
    """Score every player, keeping only those who played and scored."""
    result: dict[str, SeasonStats] = {}
    for player_id, raw in raw_table.items():
        if not isinstance(raw, dict):
            continue
        stats = score_player(raw)
        if stats.has_data:
            result[player_id] = stats
    return result
