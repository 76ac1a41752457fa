"""League data endpoints: CSV imports, contracts, team cap usage."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, File, HTTPException, UploadFile

from ..config import league_config
from ..services.league_store import (
    get_store,
    import_contracts_csv,
    import_players_csv,
)
from ..utils.salary_math import calculate_cap_savings, calculate_dead_cap, total_dead_cap

router = APIRouter()


@router.get("/teams")
async def list_teams():
    """Teams with committed salary and cap room."""
    summaries = get_store().team_cap_summaries()
    return {
        "salary_cap": league_config.salary_cap,
        "teams": [s.model_dump() for s in summaries],
        "count": len(summaries),
    }


@router.post("/players/import")
async def import_players(file: UploadFile = File(...)):
    """Bulk import players from CSV.

    Expected columns: player_id, full_name, position
    (optional: team, age, years_exp, ppg, games_played, fantasy_points)
    """
    content = await file.read()
    try:
        result = import_players_csv(content)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return {**result, "total_players": len(get_store().players)}


@router.post("/contracts/import")
async def import_contracts(file: UploadFile = File(...)):
    """Bulk import contracts from CSV.

    Expected columns: player_name or player_id, owner_name or team_name, salary
    (optional: years_total, years_remaining, start_season, contract_type, status)
    """
    content = await file.read()
    try:
        result = import_contracts_csv(content)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return {**result, "total_contracts": len(get_store().contracts)}


@router.get("/contracts")
async def list_contracts(team_id: Optional[str] = None, position: Optional[str] = None):
    """Active contracts with player and team, highest salary first."""
    records = get_store().active_contracts(position=position.upper() if position else None)
    if team_id:
        records = [r for r in records if r.contract.team_id == team_id]
    return {
        "contracts": [r.model_dump() for r in records],
        "count": len(records),
    }


@router.get("/contracts/{contract_id}/dead-cap")
async def get_dead_cap(contract_id: str):
    """Dead cap schedule and this season's savings if the contract is released."""
    record = get_store().get_contract_record(contract_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"Contract '{contract_id}' not found")
    contract = record.contract
    return {
        "contract_id": contract.id,
        "player_name": record.player.full_name if record.player else None,
        "salary": contract.salary,
        "years_remaining": contract.years_remaining,
        "schedule": calculate_dead_cap(contract.salary, contract.years_remaining),
        "total_dead_cap": total_dead_cap(contract.salary, contract.years_remaining),
        "cap_savings": calculate_cap_savings(contract.salary, contract.years_remaining),
    }
