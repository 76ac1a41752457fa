"""Player and SeasonStats models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class SeasonStats(BaseModel):
    """PPR production for one player in one season."""
    total_points: float = 0.0
    games_played: int = 0
    points_per_game: float = 0.0

    @property
    def has_data(self) -> bool:
        return self.games_played > 0 and self.total_points > 0


class Player(BaseModel):
    id: str  # Sleeper player ID
    full_name: str
    position: str  # QB / RB / WR / TE
    team: Optional[str] = None  # None for free agents
    age: Optional[int] = None
    years_exp: Optional[int] = None

    # Locally stored season aggregate, written by the stats sync.
    # Used when the live stats table has no entry for this player.
    ppg: float = 0.0
    games_played: int = 0
    fantasy_points: float = 0.0

    def stored_stats(self) -> SeasonStats:
        return SeasonStats(
            total_points=self.fantasy_points,
            games_played=self.games_played,
            points_per_game=self.ppg,
        )
