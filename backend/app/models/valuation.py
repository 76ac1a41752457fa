"""Contract estimate, evaluation, and franchise tag models."""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, computed_field

ConfidenceLevel = Literal["high", "medium", "low"]

RATINGS = ("LEGENDARY", "CORNERSTONE", "STEAL", "GOOD", "BUST", "ROOKIE")

# kind -> sentence template, formatted with the step's params
REASONING_TEMPLATES: dict[str, str] = {
    # estimation
    "player_summary": "{name} ({position}): {ppg:.1f} PPG, {games} GP, age {age}",
    "comparable_average": "Weighted avg of {count} comparable{plural}: ${salary}",
    "position_fallback": "No comparables found, estimated from position average: ${salary}",
    "prime_age_bonus": "Prime age bonus (24-26): +${delta}",
    "age_decline": "Age decline ({age}): -${delta}",
    "availability": "Availability ({games} GP): -${delta}",
    "salary_anchor": "Previous salary anchor (${previous_salary}): adjusted to ${salary}",
    "confidence": "Confidence: {level} ({comparables} comps, {games} GP)",
    "final_estimate": "Final estimate: ${salary} (range ${low}-${high})",
    # evaluation
    "legendary_rank": "LEGENDARY: Top {rank} contract in the league by value.",
    "salary_vs_market": "{name} ({position}): ${actual} salary, estimated market value ${estimated}.",
    "market_difference": "Paying ${amount} {direction} market ({percent}% {label}).",
    "at_market": "Paying exactly at market value.",
    "production": "{ppg:.1f} PPG in {games} games.",
    "position_rank": "Ranked #{rank} at {position} by PPG.",
    "rating_cornerstone": "CORNERSTONE: Top {top_n} {position} by production. A franchise-caliber player.",
    "rating_steal": "STEAL: Saving {percent}% vs market value. Outstanding deal.",
    "rating_good": "GOOD: Fairly valued contract near market price.",
    "rating_bust": "BUST: Overpaying by {percent}% vs market value. Consider restructuring.",
    "rating_rookie": "ROOKIE: First contract, no established stats yet.",
}


class ReasoningStep(BaseModel):
    kind: str
    params: dict[str, Any] = {}

    def render(self) -> str:
        return REASONING_TEMPLATES[self.kind].format(**self.params)


def render_reasoning(steps: list[ReasoningStep], sep: str) -> str:
    return sep.join(step.render() for step in steps)


class SalaryRange(BaseModel):
    min: int
    max: int


class ComparablePlayer(BaseModel):
    player_id: str
    full_name: str
    position: str
    team: Optional[str] = None
    age: Optional[int] = None
    salary: int
    ppg: float
    total_points: float = 0.0
    games_played: int = 0
    years_remaining: int = 0


class ContractEstimate(BaseModel):
    estimated_salary: int
    salary_range: SalaryRange
    confidence: ConfidenceLevel
    comparable_players: list[ComparablePlayer] = []
    reasoning: list[ReasoningStep] = []

    @computed_field
    @property
    def reasoning_text(self) -> str:
        return render_reasoning(self.reasoning, "\n")


class PlayerStatsSnapshot(BaseModel):
    ppg: float = 0.0
    games_played: int = 0


class ContractEvaluation(BaseModel):
    contract_id: str
    player_id: str
    player_name: str
    position: str
    rating: str
    value_score: float  # ((estimated - actual) / estimated) * 100
    actual_salary: int
    estimated_salary: int
    salary_difference: int  # estimated - actual
    league_rank: Optional[int] = None  # set by the league ranking pass
    position_rank: Optional[int] = None
    total_contracts: int = 0
    comparable_contracts: list[ComparablePlayer] = []
    reasoning: list[ReasoningStep] = []
    player_stats: PlayerStatsSnapshot = PlayerStatsSnapshot()

    @computed_field
    @property
    def reasoning_text(self) -> str:
        return render_reasoning(self.reasoning, " ")


class PositionRankEntry(BaseModel):
    player_id: str
    full_name: str
    ppg: float
    rank: int


class TagSalary(BaseModel):
    full_name: str
    salary: int


class FranchiseTagResult(BaseModel):
    position: str
    tag_salary: int
    pool_size: int
    enough_data: bool = True
    explanation: str = ""
    top_salaries: list[TagSalary] = []
