"""Season stats resolution with a single-season, single-flight cache."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from typing import Callable, Optional

from ..config import LeagueConfig, league_config
from ..models.player import Player, SeasonStats
from .league_store import LeagueStore, get_store
from .sleeper_client import fetch_season_stats, process_season_stats

logger = logging.getLogger(__name__)

StatsTable = dict[str, SeasonStats]


class SeasonStatsCache:
    """Holds the scored stats table for one season.

    Asking for a different season drops the held one. Callers asking for the
    season currently being fetched wait on that fetch instead of starting
    another. An empty table is not a hit, so the next caller refetches.
    A provider outage (the loader returns None) is held as an empty table
    until ``clear()`` or a season switch, so an outage costs one fetch.
    No TTL: use ``clear()`` to force a refresh.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._season: Optional[str] = None
        self._stats: StatsTable = {}
        self._unavailable = False
        self._pending: Optional[Future] = None

    @property
    def season(self) -> Optional[str]:
        return self._season

    def get(self, season: str, loader: Callable[[str], Optional[StatsTable]]) -> StatsTable:
        with self._lock:
            if self._season == season and (self._stats or self._unavailable):
                return self._stats
            if self._season == season and self._pending is not None:
                pending, owner = self._pending, False
            else:
                self._season = season
                self._stats = {}
                self._unavailable = False
                pending = self._pending = Future()
                owner = True

        if not owner:
            return pending.result()

        try:
            stats = loader(season)
        except Exception as exc:
            self._finish(pending, season, None, failed=True)
            pending.set_exception(exc)
            raise
        self._finish(pending, season, stats)
        result = stats if stats is not None else {}
        pending.set_result(result)
        return result

    def _finish(
        self,
        pending: Future,
        season: str,
        stats: Optional[StatsTable],
        failed: bool = False,
    ) -> None:
        with self._lock:
            # A clear() or season switch mid-fetch means this result is stale
            if self._pending is not pending:
                return
            self._pending = None
            if failed or self._season != season:
                return
            if stats is None:
                self._unavailable = True
            else:
                self._stats = stats

    def seed(self, season: str, stats: StatsTable) -> None:
        with self._lock:
            self._season = season
            self._stats = dict(stats)
            self._unavailable = False
            self._pending = None

    def clear(self) -> None:
        with self._lock:
            self._season = None
            self._stats = {}
            self._unavailable = False
            self._pending = None


class StatsResolver:
    """Resolve a player's season PPG / games / points.

    Live Sleeper stats win; otherwise the player's stored aggregate is used;
    otherwise zeros. Never raises for a missing player.

    ``fetch_stats`` returns the raw season table, or None when the provider
    is unreachable.
    """

    def __init__(
        self,
        cache: Optional[SeasonStatsCache] = None,
        fetch_stats: Optional[Callable[[str], Optional[dict]]] = None,
        config: LeagueConfig = league_config,
    ) -> None:
        self.cache = cache if cache is not None else SeasonStatsCache()
        self._fetch_stats = fetch_stats or (lambda season: fetch_season_stats(season, config))

    def _load(self, season: str) -> Optional[StatsTable]:
        raw = self._fetch_stats(season)
        if raw is None:
            logger.warning(f"Stats for season {season} unavailable, using stored stats until the cache is cleared")
            return None
        table = process_season_stats(raw)
        logger.info(f"Cached {len(table)} player stat lines for season {season}")
        return table

    def season_table(self, season: str) -> StatsTable:
        return self.cache.get(season, self._load)

    def resolve(self, player_id: str, season: str, local: Optional[Player] = None) -> SeasonStats:
        stats = self.season_table(season).get(player_id)
        if stats is not None:
            return stats
        if local is not None:
            return local.stored_stats()
        return SeasonStats()

    def clear_cache(self) -> None:
        self.cache.clear()
        logger.info("Stats cache cleared")


# ---------------------------------------------------------------------------
# Singleton resolver instance
# ---------------------------------------------------------------------------
_resolver: Optional[StatsResolver] = None


def get_stats_resolver() -> StatsResolver:
    global _resolver
    if _resolver is None:
        _resolver = StatsResolver()
    return _resolver


def set_stats_resolver(resolver: StatsResolver) -> None:
    global _resolver
    _resolver = resolver


def reset_stats_resolver() -> None:
    global _resolver
    _resolver = None


def sync_stats_to_store(
    season: str,
    store: Optional[LeagueStore] = None,
    resolver: Optional[StatsResolver] = None,
) -> dict:
    """Write the season's scored stats into each known player's stored fields."""
    store = store or get_store()
    resolver = resolver or get_stats_resolver()

    table = resolver.season_table(season)
    updated = 0
    for player_id, stats in table.items():
        player = store.get_player(player_id)
        if player is None:
            continue
        player.ppg = stats.points_per_game
        player.games_played = stats.games_played
        player.fantasy_points = stats.total_points
        updated += 1

    logger.info(f"Synced {season} stats into {updated} stored players")
    return {"season": season, "stats_available": len(table), "players_updated": updated}
