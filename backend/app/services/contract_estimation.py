"""Fair-salary estimation from comparable league contracts.

Market value for a player is the closeness-weighted average salary of up to
five active contracts at the same position with similar PPG, adjusted for
age, availability, and (optionally) the player's previous salary.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

from ..config import LeagueConfig, PositionProfile, league_config
from ..models.valuation import (
    ComparablePlayer,
    ConfidenceLevel,
    ContractEstimate,
    FranchiseTagResult,
    ReasoningStep,
    SalaryRange,
    TagSalary,
)
from ..utils.salary_math import clamp, round_half_up
from .league_store import LeagueStore, get_store
from .stats_resolver import StatsResolver, get_stats_resolver

logger = logging.getLogger(__name__)

COMPARABLE_LIMIT = 5     # comparables used for the weighted average
COMPARABLES_SHOWN = 3    # comparables returned to the caller

DEFAULT_AGE = 26
PRIME_AGE_LOW = 24
PRIME_AGE_HIGH = 26
PRIME_AGE_BONUS = 3
DECLINE_AGE = 28
DECLINE_PER_YEAR = 2

FULL_SEASON_GAMES = 14
MISSED_GAME_PENALTY = 1.5

ANCHOR_MIN_SALARY = 3
ANCHOR_WEIGHT = 0.3

RANGE_PCT = 0.10
RANGE_MIN_SPREAD = 5

FALLBACK_PPG_FACTOR = 2  # $ per PPG above/below the position's implied average


# ---------------------------------------------------------------------------
# Adjustments
# ---------------------------------------------------------------------------

def age_adjustment(age: int) -> int:
    """+$3 in the 24-26 prime window, -$2 per year past 28."""
    if PRIME_AGE_LOW <= age <= PRIME_AGE_HIGH:
        return PRIME_AGE_BONUS
    if age > DECLINE_AGE:
        return -DECLINE_PER_YEAR * (age - DECLINE_AGE)
    return 0


def availability_penalty(games_played: int) -> int:
    """$1.5 per game below 14. Zero games means no data, not zero availability."""
    if 0 < games_played < FULL_SEASON_GAMES:
        return round_half_up((FULL_SEASON_GAMES - games_played) * MISSED_GAME_PENALTY)
    return 0


def apply_salary_anchor(estimate: int, previous_salary: Optional[int]) -> int:
    """Pull the estimate 30% toward a previous salary above $3."""
    if previous_salary and previous_salary > ANCHOR_MIN_SALARY:
        return round_half_up(estimate * (1 - ANCHOR_WEIGHT) + previous_salary * ANCHOR_WEIGHT)
    return estimate


def position_baseline(profile: PositionProfile, ppg: float) -> int:
    """Estimate with no comparables: position average shifted by PPG delta."""
    avg_ppg = profile.avg_salary / profile.quick_multiplier
    return round_half_up(profile.avg_salary + (ppg - avg_ppg) * FALLBACK_PPG_FACTOR)


def build_salary_range(estimate: int, profile: PositionProfile) -> SalaryRange:
    spread = max(RANGE_MIN_SPREAD, round_half_up(estimate * RANGE_PCT))
    return SalaryRange(
        min=max(profile.min_salary, estimate - spread),
        max=min(profile.max_salary, estimate + spread),
    )


def confidence_level(comparable_count: int, games_played: int) -> ConfidenceLevel:
    if comparable_count >= 3 and games_played >= 10:
        return "high"
    if comparable_count >= 1 or games_played >= 6:
        return "medium"
    return "low"


# ---------------------------------------------------------------------------
# Comparables
# ---------------------------------------------------------------------------

def find_comparables(
    player_id: str,
    position: str,
    ppg: float,
    season: str,
    *,
    store: Optional[LeagueStore] = None,
    resolver: Optional[StatsResolver] = None,
    config: LeagueConfig = league_config,
) -> list[ComparablePlayer]:
    """Up to five active contracts at *position* within the PPG window.

    Closest PPG first. Ties keep the store's salary-descending order.
    """
    store = store or get_store()
    resolver = resolver or get_stats_resolver()
    window = config.position_profile(position).ppg_window

    comparables: list[ComparablePlayer] = []
    for record in store.active_contracts(position=position, exclude_player_id=player_id):
        player = record.player
        stats = resolver.resolve(player.id, season, local=player)
        if abs(stats.points_per_game - ppg) > window:
            continue
        comparables.append(ComparablePlayer(
            player_id=player.id,
            full_name=player.full_name,
            position=player.position,
            team=player.team,
            age=player.age,
            salary=record.contract.salary,
            ppg=stats.points_per_game,
            total_points=stats.total_points,
            games_played=stats.games_played,
            years_remaining=record.contract.years_remaining,
        ))

    comparables.sort(key=lambda c: abs(c.ppg - ppg))
    return comparables[:COMPARABLE_LIMIT]


def weighted_salary(comparables: list[ComparablePlayer], ppg: float) -> int:
    """Average salary weighted by 1 / (1 + |PPG diff|)."""
    weighted_sum = 0.0
    total_weight = 0.0
    for comp in comparables:
        w = 1 / (1 + abs(comp.ppg - ppg))
        weighted_sum += comp.salary * w
        total_weight += w
    return round_half_up(weighted_sum / total_weight)


# ---------------------------------------------------------------------------
# Estimation
# ---------------------------------------------------------------------------

def estimate_contract(
    player_id: str,
    position: str,
    age: Optional[int] = None,
    previous_salary: Optional[int] = None,
    season: Optional[str] = None,
    *,
    store: Optional[LeagueStore] = None,
    resolver: Optional[StatsResolver] = None,
    config: LeagueConfig = league_config,
) -> ContractEstimate:
    """Estimate a fair salary for a player.

    1. Resolve PPG / games played
    2. Find comparables and take their weighted-average salary
       (or the position baseline when there are none)
    3. Adjust for age, availability, and previous salary
    4. Clamp to the position range and build a +/-10% (min $5) range
    """
    store = store or get_store()
    resolver = resolver or get_stats_resolver()
    season = season or config.current_season
    profile = config.position_profile(position)

    player = store.get_player(player_id)
    stats = resolver.resolve(player_id, season, local=player)
    ppg = stats.points_per_game
    games = stats.games_played
    if age is None:
        age = player.age if player is not None and player.age is not None else DEFAULT_AGE

    steps = [ReasoningStep(kind="player_summary", params={
        "name": player.full_name if player is not None else "Player",
        "position": position,
        "ppg": ppg,
        "games": games,
        "age": age,
    })]

    comparables = find_comparables(
        player_id, position, ppg, season, store=store, resolver=resolver, config=config,
    )

    if comparables:
        estimate = weighted_salary(comparables, ppg)
        steps.append(ReasoningStep(kind="comparable_average", params={
            "count": len(comparables),
            "plural": "s" if len(comparables) > 1 else "",
            "salary": estimate,
        }))
    else:
        estimate = position_baseline(profile, ppg)
        steps.append(ReasoningStep(kind="position_fallback", params={"salary": estimate}))

    age_delta = age_adjustment(age)
    if age_delta > 0:
        steps.append(ReasoningStep(kind="prime_age_bonus", params={"delta": age_delta}))
    elif age_delta < 0:
        steps.append(ReasoningStep(kind="age_decline", params={"age": age, "delta": -age_delta}))
    estimate += age_delta

    gp_penalty = availability_penalty(games)
    if gp_penalty:
        estimate -= gp_penalty
        steps.append(ReasoningStep(kind="availability", params={"games": games, "delta": gp_penalty}))

    anchored = apply_salary_anchor(estimate, previous_salary)
    if anchored != estimate:
        steps.append(ReasoningStep(kind="salary_anchor", params={
            "previous_salary": previous_salary,
            "salary": anchored,
            "delta": anchored - estimate,
        }))
    estimate = anchored

    estimate = clamp(estimate, profile.min_salary, profile.max_salary)
    salary_range = build_salary_range(estimate, profile)
    confidence = confidence_level(len(comparables), games)

    steps.append(ReasoningStep(kind="confidence", params={
        "level": confidence,
        "comparables": len(comparables),
        "games": games,
    }))
    steps.append(ReasoningStep(kind="final_estimate", params={
        "salary": estimate,
        "low": salary_range.min,
        "high": salary_range.max,
    }))

    logger.debug(f"Estimate {player_id} ({position}): ${estimate} [{confidence}]")
    return ContractEstimate(
        estimated_salary=estimate,
        salary_range=salary_range,
        confidence=confidence,
        comparable_players=comparables[:COMPARABLES_SHOWN],
        reasoning=steps,
    )


def quick_estimate(
    position: str,
    ppg: float,
    age: int,
    previous_salary: Optional[int] = None,
    config: LeagueConfig = league_config,
) -> int:
    """Fast estimate for bulk operations: PPG x position multiplier.

    Same age and previous-salary adjustments as the full estimate, no lookups.
    """
    profile = config.position_profile(position)
    estimate = round_half_up(ppg * profile.quick_multiplier)
    estimate += age_adjustment(age)
    estimate = apply_salary_anchor(estimate, previous_salary)
    return clamp(estimate, profile.min_salary, profile.max_salary)


# ---------------------------------------------------------------------------
# Franchise tag
# ---------------------------------------------------------------------------

def calculate_franchise_tag(
    position: str,
    season: Optional[str] = None,
    *,
    store: Optional[LeagueStore] = None,
    config: LeagueConfig = league_config,
) -> Optional[FranchiseTagResult]:
    """Franchise tag cost: mean of the top-K prior-season salaries, rounded up.

    K is 10 for QB/TE and 20 for RB/WR. Returns None for a non-taggable
    position.
    """
    profile = config.positions.get(position)
    if profile is None:
        return None
    store = store or get_store()
    season_num = int(season or config.current_season)

    records = store.active_contracts(position=position, max_start_season=season_num - 1)
    records = records[:profile.tag_pool_size]

    if not records:
        return FranchiseTagResult(
            position=position,
            tag_salary=profile.avg_salary,
            pool_size=profile.tag_pool_size,
            enough_data=False,
            explanation="No contracts found, using position average.",
        )

    top_salaries = [
        TagSalary(full_name=r.player.full_name, salary=r.contract.salary)
        for r in records
    ]
    total_salary = sum(s.salary for s in top_salaries)
    tag_salary = math.ceil(total_salary / len(top_salaries))

    return FranchiseTagResult(
        position=position,
        tag_salary=tag_salary,
        pool_size=profile.tag_pool_size,
        explanation=(
            f"Average of top {len(top_salaries)} {position} salaries"
            f" (${total_salary} / {len(top_salaries)} = ${tag_salary})."
            f" Pool size: {profile.tag_pool_size}."
        ),
        top_salaries=top_salaries,
    )
