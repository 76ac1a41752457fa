"""Contract evaluation: value score, position rank, rating, league rankings."""

from __future__ import annotations

import logging
import math
from typing import Optional

from ..config import LeagueConfig, league_config
from ..models.valuation import (
    ContractEvaluation,
    PlayerStatsSnapshot,
    PositionRankEntry,
    ReasoningStep,
)
from ..utils.salary_math import round_half_up
from .contract_estimation import estimate_contract
from .league_store import LeagueStore, get_store
from .stats_resolver import StatsResolver, get_stats_resolver

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Thresholds
# ---------------------------------------------------------------------------
LEGENDARY_TOP_N = 10        # top N contracts by value score
LEGENDARY_MIN_PPG = 10
CORNERSTONE_TOP_N = 5       # top N at position by PPG
STEAL_THRESHOLD = 25.0      # value score %, savings
BUST_THRESHOLD = -25.0      # value score %, overpay
ROOKIE_MAX_YEARS_EXP = 2
ROOKIE_MIN_GAMES = 6        # at or above both of these = established production
ROOKIE_MIN_PPG = 5


def value_score(estimated: int, actual: int) -> float:
    """Positive = paying below market, negative = overpaying. 0 if no estimate."""
    if estimated == 0:
        return 0.0
    return ((estimated - actual) / estimated) * 100


def is_rookie(
    contract_type: str,
    years_exp: Optional[int],
    games_played: int,
    ppg: float,
) -> bool:
    """Rookie-type contract, under two years in the league, no real production yet.

    Keeps productive players still on a rookie deal out of the ROOKIE bucket.
    Unknown experience counts as zero years.
    """
    if contract_type != "rookie":
        return False
    if (years_exp or 0) >= ROOKIE_MAX_YEARS_EXP:
        return False
    return games_played < ROOKIE_MIN_GAMES or ppg < ROOKIE_MIN_PPG


def determine_rating(score: float, position_rank: Optional[int], rookie: bool) -> str:
    """First match wins: ROOKIE, CORNERSTONE, STEAL, GOOD, BUST.

    LEGENDARY is only assigned by the league ranking pass.
    """
    if rookie:
        return "ROOKIE"
    if position_rank is not None and position_rank <= CORNERSTONE_TOP_N and score >= BUST_THRESHOLD:
        return "CORNERSTONE"
    if score >= STEAL_THRESHOLD:
        return "STEAL"
    if score >= BUST_THRESHOLD:
        return "GOOD"
    return "BUST"


def build_reasoning(
    rating: str,
    player_name: str,
    position: str,
    actual_salary: int,
    estimated_salary: int,
    score: float,
    ppg: float,
    games_played: int,
    position_rank: Optional[int],
) -> list[ReasoningStep]:
    diff = estimated_salary - actual_salary
    percent = abs(round_half_up(score))
    steps = [ReasoningStep(kind="salary_vs_market", params={
        "name": player_name,
        "position": position,
        "actual": actual_salary,
        "estimated": estimated_salary,
    })]

    if diff != 0:
        steps.append(ReasoningStep(kind="market_difference", params={
            "amount": abs(diff),
            "direction": "below" if diff > 0 else "above",
            "percent": percent,
            "label": "savings" if diff > 0 else "premium",
        }))
    else:
        steps.append(ReasoningStep(kind="at_market"))

    if ppg > 0:
        steps.append(ReasoningStep(kind="production", params={"ppg": ppg, "games": games_played}))
    if position_rank is not None:
        steps.append(ReasoningStep(kind="position_rank", params={"rank": position_rank, "position": position}))

    if rating == "CORNERSTONE":
        params = {"top_n": CORNERSTONE_TOP_N, "position": position}
    elif rating in ("STEAL", "BUST"):
        params = {"percent": percent}
    else:
        params = {}
    steps.append(ReasoningStep(kind=f"rating_{rating.lower()}", params=params))
    return steps


# ---------------------------------------------------------------------------
# Position rankings
# ---------------------------------------------------------------------------

def get_position_rankings(
    position: str,
    season: Optional[str] = None,
    *,
    store: Optional[LeagueStore] = None,
    resolver: Optional[StatsResolver] = None,
    config: LeagueConfig = league_config,
) -> list[PositionRankEntry]:
    """Players under active contract at *position*, ranked by PPG (1 = best)."""
    store = store or get_store()
    resolver = resolver or get_stats_resolver()
    season = season or config.current_season

    entries = []
    for record in store.active_contracts(position=position):
        stats = resolver.resolve(record.player.id, season, local=record.player)
        entries.append((record.player.id, record.player.full_name, stats.points_per_game))
    entries.sort(key=lambda e: e[2], reverse=True)

    return [
        PositionRankEntry(player_id=pid, full_name=name, ppg=ppg, rank=i + 1)
        for i, (pid, name, ppg) in enumerate(entries)
    ]


def get_player_position_rank(
    player_id: str,
    position: str,
    season: Optional[str] = None,
    **kwargs,
) -> Optional[int]:
    rankings = get_position_rankings(position, season, **kwargs)
    return next((e.rank for e in rankings if e.player_id == player_id), None)


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------

def evaluate_contract(
    contract_id: str,
    season: Optional[str] = None,
    *,
    store: Optional[LeagueStore] = None,
    resolver: Optional[StatsResolver] = None,
    config: LeagueConfig = league_config,
) -> Optional[ContractEvaluation]:
    """Compare a contract's salary to estimated market value and rate it.

    Returns None when there is nothing to evaluate: unknown contract,
    missing player, or a $0 placeholder salary.
    """
    store = store or get_store()
    resolver = resolver or get_stats_resolver()
    season = season or config.current_season

    record = store.get_contract_record(contract_id)
    if record is None or record.player is None:
        return None
    contract = record.contract
    player = record.player
    if contract.salary == 0:
        return None

    stats = resolver.resolve(player.id, season, local=player)
    ppg = stats.points_per_game
    games = stats.games_played
    rookie = is_rookie(contract.contract_type, player.years_exp, games, ppg)

    # No previous salary: unbiased market comparison
    estimate = estimate_contract(
        player.id,
        player.position,
        age=player.age,
        previous_salary=None,
        season=season,
        store=store,
        resolver=resolver,
        config=config,
    )
    estimated = estimate.estimated_salary
    score = value_score(estimated, contract.salary)

    position_rank = get_player_position_rank(
        player.id, player.position, season, store=store, resolver=resolver, config=config,
    )
    rating = determine_rating(score, position_rank, rookie)
    reasoning = build_reasoning(
        rating, player.full_name, player.position, contract.salary, estimated,
        score, ppg, games, position_rank,
    )

    logger.debug(f"Evaluated contract {contract_id}: {player.full_name} {rating} ({score:.1f}%)")
    return ContractEvaluation(
        contract_id=contract.id,
        player_id=player.id,
        player_name=player.full_name,
        position=player.position,
        rating=rating,
        value_score=round_half_up(score * 10) / 10,
        actual_salary=contract.salary,
        estimated_salary=estimated,
        salary_difference=estimated - contract.salary,
        position_rank=position_rank,
        comparable_contracts=estimate.comparable_players,
        reasoning=reasoning,
        player_stats=PlayerStatsSnapshot(ppg=ppg, games_played=games),
    )


def _sort_score(evaluation: ContractEvaluation) -> float:
    score = evaluation.value_score
    return 0.0 if math.isnan(score) else score


def get_league_contract_rankings(
    season: Optional[str] = None,
    *,
    store: Optional[LeagueStore] = None,
    resolver: Optional[StatsResolver] = None,
    config: LeagueConfig = league_config,
) -> list[ContractEvaluation]:
    """Rank every active, non-zero contract by value score (best deal = 1).

    Contracts are evaluated one at a time so ranks and reasoning come out in
    a fixed order. The top 10 are upgraded to LEGENDARY when PPG > 10 and
    the contract is not a ROOKIE.
    """
    store = store or get_store()
    resolver = resolver or get_stats_resolver()

    evaluations: list[ContractEvaluation] = []
    for record in store.active_contracts():
        evaluation = evaluate_contract(
            record.contract.id, season, store=store, resolver=resolver, config=config,
        )
        if evaluation is not None:
            evaluations.append(evaluation)

    evaluations.sort(key=_sort_score, reverse=True)

    total = len(evaluations)
    for i, evaluation in enumerate(evaluations):
        evaluation.league_rank = i + 1
        evaluation.total_contracts = total

    for i, evaluation in enumerate(evaluations[:LEGENDARY_TOP_N]):
        if evaluation.player_stats.ppg > LEGENDARY_MIN_PPG and evaluation.rating != "ROOKIE":
            evaluation.rating = "LEGENDARY"
            evaluation.reasoning = [
                ReasoningStep(kind="legendary_rank", params={"rank": i + 1}),
                *evaluation.reasoning,
            ]

    logger.info(f"Ranked {total} contracts")
    return evaluations
