"""Export endpoints for contract ranking spreadsheets."""

from __future__ import annotations

import io
from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import StreamingResponse

import pandas as pd

from ..services.contract_evaluation import get_league_contract_rankings

router = APIRouter()


@router.get("/rankings")
def export_rankings(
    format: str = Query("csv", description="Export format: 'csv' or 'xlsx'"),
    season: Optional[str] = None,
):
    """Export league contract rankings sorted by value score descending.

    Columns: Rank, Player, Position, Rating, Salary, Market Value,
    Difference, Value Score, Position Rank, PPG, GP
    """
    evaluations = get_league_contract_rankings(season)
    if not evaluations:
        return {"error": "No active contracts loaded. Import contracts first."}

    rows = []
    for e in evaluations:
        rows.append({
            "Rank": e.league_rank,
            "Player": e.player_name,
            "Position": e.position,
            "Rating": e.rating,
            "Salary": e.actual_salary,
            "Market Value": e.estimated_salary,
            "Difference": e.salary_difference,
            "Value Score": e.value_score,
            "Position Rank": e.position_rank,
            "PPG": e.player_stats.ppg,
            "GP": e.player_stats.games_played,
        })

    df = pd.DataFrame(rows)

    if format.lower() == "xlsx":
        buf = io.BytesIO()
        with pd.ExcelWriter(buf, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name="Contract Rankings")
        buf.seek(0)
        return StreamingResponse(
            buf,
            media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            headers={"Content-Disposition": "attachment; filename=contract_rankings.xlsx"},
        )
    else:
        buf = io.StringIO()
        df.to_csv(buf, index=False)
        buf.seek(0)
        return StreamingResponse(
            buf,
            media_type="text/csv",
            headers={"Content-Disposition": "attachment; filename=contract_rankings.csv"},
        )
