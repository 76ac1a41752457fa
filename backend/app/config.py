"""League configuration for The 586 Dynasty salary-cap league."""

from __future__ import annotations

from pydantic import BaseModel


class PositionProfile(BaseModel):
    """Salary bounds and valuation knobs for one position."""
    min_salary: int
    max_salary: int
    avg_salary: int
    ppg_window: float  # +/- PPG for comparable search
    quick_multiplier: float
    tag_pool_size: int  # top-K salaries averaged for the franchise tag


DEFAULT_POSITIONS: dict[str, PositionProfile] = {
    # QB scoring varies more, so the comparable window is wider
    "QB": PositionProfile(min_salary=1, max_salary=100, avg_salary=55, ppg_window=3, quick_multiplier=3.5, tag_pool_size=10),
    "RB": PositionProfile(min_salary=1, max_salary=60, avg_salary=25, ppg_window=2, quick_multiplier=2.5, tag_pool_size=20),
    "WR": PositionProfile(min_salary=1, max_salary=70, avg_salary=30, ppg_window=2, quick_multiplier=2.5, tag_pool_size=20),
    "TE": PositionProfile(min_salary=1, max_salary=50, avg_salary=22, ppg_window=2, quick_multiplier=2.5, tag_pool_size=10),
}


class LeagueConfig(BaseModel):
    league_name: str = "The 586 Dynasty"
    salary_cap: int = 500
    current_season: str = "2025"

    # Sleeper stats provider
    sleeper_api_base: str = "https://api.sleeper.app/v1"
    stats_timeout: int = 10
    user_agent: str = "DynastyCapManager/1.0"

    positions: dict[str, PositionProfile] = DEFAULT_POSITIONS
    fallback_position: str = "WR"

    # Dead cap owed on release, by years remaining (year 1 first)
    dead_cap_percentages: dict[int, list[float]] = {
        5: [0.75, 0.50, 0.25, 0.10, 0.10],
        4: [0.75, 0.50, 0.25, 0.10],
        3: [0.50, 0.25, 0.10],
        2: [0.50, 0.25],
        1: [0.50],
    }
    # Minimum salary by total contract years
    min_salaries: dict[int, int] = {1: 1, 2: 4, 3: 8, 4: 12, 5: 15}
    max_contract_years: int = 5

    def position_profile(self, position: str) -> PositionProfile:
        """Profile for *position*, falling back to the WR profile."""
        return self.positions.get(position) or self.positions[self.fallback_position]

    def is_valuation_position(self, position: str) -> bool:
        return position in self.positions


# Default league config singleton
league_config = LeagueConfig()
