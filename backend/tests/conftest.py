"""Shared fixtures: an in-memory league with seeded season stats."""
from __future__ import annotations

from typing import Optional

import pytest

from app.models.league import Contract, Team
from app.models.player import Player, SeasonStats
from app.services.league_store import LeagueStore
from app.services.stats_resolver import SeasonStatsCache, StatsResolver

SEASON = "2025"


class LeagueBuilder:
    """Builds a LeagueStore plus a resolver whose cache is pre-seeded."""

    def __init__(self):
        self.store = LeagueStore()
        self.stats: dict[str, SeasonStats] = {}
        self.store.add_team(Team(id="team_1", team_name="Gridiron Gang", owner_name="Tony"))

    def player(
        self,
        pid: str,
        position: str,
        ppg: float = 0.0,
        games: int = 0,
        age: Optional[int] = 27,
        years_exp: Optional[int] = 4,
        salary: Optional[int] = None,
        contract_type: str = "standard",
        status: str = "active",
        start_season: int = 2025,
        years_remaining: int = 2,
    ) -> "LeagueBuilder":
        self.store.add_player(Player(
            id=pid, full_name=f"Player {pid}", position=position,
            age=age, years_exp=years_exp,
        ))
        if ppg > 0 and games > 0:
            self.stats[pid] = SeasonStats(
                total_points=round(ppg * games, 2),
                games_played=games,
                points_per_game=ppg,
            )
        if salary is not None:
            self.store.add_contract(Contract(
                id=f"c_{pid}",
                team_id="team_1",
                player_id=pid,
                salary=salary,
                years_total=years_remaining,
                years_remaining=years_remaining,
                start_season=start_season,
                contract_type=contract_type,
                status=status,
            ))
        return self

    def resolver(self) -> StatsResolver:
        cache = SeasonStatsCache()
        cache.seed(SEASON, self.stats)
        return StatsResolver(cache=cache, fetch_stats=lambda season: {})

    def ctx(self) -> dict:
        """Keyword arguments for the engine functions."""
        return {"store": self.store, "resolver": self.resolver()}


@pytest.fixture
def league():
    return LeagueBuilder()
