"""Season stats endpoints: lookup, cache refresh, and stored-stats sync."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter

from ..config import league_config
from ..services.league_store import get_store
from ..services.stats_resolver import get_stats_resolver, sync_stats_to_store

router = APIRouter()


@router.get("/{player_id}")
def get_player_stats(player_id: str, season: Optional[str] = None):
    """PPR stats for a player. Zeros when nothing is known."""
    season = season or league_config.current_season
    player = get_store().get_player(player_id)
    stats = get_stats_resolver().resolve(player_id, season, local=player)
    return {"player_id": player_id, "season": season, **stats.model_dump()}


@router.post("/clear")
def clear_stats_cache():
    """Drop the cached season so the next request refetches from Sleeper."""
    get_stats_resolver().clear_cache()
    return {"status": "cleared"}


@router.post("/sync")
def sync_stats(season: Optional[str] = None):
    """Copy the season's Sleeper stats into each player's stored fallback stats."""
    return sync_stats_to_store(season or league_config.current_season)
