"""Contract estimation, evaluation, and ranking endpoints.

Handlers are sync so FastAPI runs them in its threadpool; concurrent
requests then share a single in-flight stats fetch.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from ..config import league_config
from ..services.contract_estimation import (
    calculate_franchise_tag,
    estimate_contract,
    quick_estimate,
)
from ..services.contract_evaluation import (
    evaluate_contract,
    get_league_contract_rankings,
    get_position_rankings,
)
from ..models.valuation import RATINGS
from ..services.league_store import get_store

router = APIRouter()


def _check_position(position: str) -> str:
    position = position.upper()
    if not league_config.is_valuation_position(position):
        raise HTTPException(status_code=400, detail=f"Unknown position '{position}'")
    return position


@router.get("/estimate/{player_id}")
def get_estimate(
    player_id: str,
    position: Optional[str] = Query(None, description="Defaults to the player's stored position"),
    age: Optional[int] = None,
    previous_salary: Optional[int] = None,
    season: Optional[str] = None,
):
    """Estimate a fair salary from comparable league contracts."""
    if position is None:
        player = get_store().get_player(player_id)
        if player is None:
            raise HTTPException(status_code=404, detail=f"Player '{player_id}' not found; pass a position")
        position = player.position
    position = _check_position(position)

    estimate = estimate_contract(
        player_id, position, age=age, previous_salary=previous_salary, season=season,
    )
    return estimate.model_dump()


@router.get("/quick")
def get_quick_estimate(
    position: str,
    ppg: float,
    age: int,
    previous_salary: Optional[int] = None,
):
    """PPG x multiplier estimate with no comparable search."""
    position = _check_position(position)
    return {
        "position": position,
        "estimated_salary": quick_estimate(position, ppg, age, previous_salary),
    }


@router.get("/contracts/{contract_id}")
def get_contract_evaluation(contract_id: str, season: Optional[str] = None):
    """Rate a single contract against market value."""
    evaluation = evaluate_contract(contract_id, season)
    if evaluation is None:
        raise HTTPException(
            status_code=404,
            detail=f"Contract '{contract_id}' not found or has no salary to evaluate",
        )
    return evaluation.model_dump()


@router.get("/rankings")
def get_rankings(
    season: Optional[str] = None,
    position: Optional[str] = None,
    rating: Optional[str] = None,
):
    """League-wide contract rankings, best value first."""
    if rating and rating.upper() not in RATINGS:
        raise HTTPException(status_code=400, detail=f"Unknown rating '{rating}'")
    evaluations = get_league_contract_rankings(season)
    if position:
        evaluations = [e for e in evaluations if e.position == position.upper()]
    if rating:
        evaluations = [e for e in evaluations if e.rating == rating.upper()]
    return {
        "contracts": [e.model_dump() for e in evaluations],
        "count": len(evaluations),
    }


@router.get("/positions/{position}")
def get_position_ladder(position: str, season: Optional[str] = None):
    """Players under contract at a position ranked by PPG."""
    position = _check_position(position)
    rankings = get_position_rankings(position, season)
    return {
        "position": position,
        "players": [r.model_dump() for r in rankings],
        "count": len(rankings),
    }


@router.get("/franchise-tag/{position}")
def get_franchise_tag(position: str, season: Optional[str] = None):
    """Franchise tag cost for a position."""
    result = calculate_franchise_tag(position.upper(), season)
    if result is None:
        raise HTTPException(status_code=400, detail=f"Position '{position}' cannot be tagged")
    return result.model_dump()
