"""Team, Contract, and ContractRecord models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, computed_field

from .player import Player

CONTRACT_TYPES = ("standard", "rookie", "extension", "free_agent", "tag")
CONTRACT_STATUSES = ("active", "released", "traded", "expired", "voided")


class Team(BaseModel):
    id: str
    team_name: str
    owner_name: str = ""


class Contract(BaseModel):
    id: str
    team_id: Optional[str] = None
    player_id: str
    salary: int  # per-year, whole dollars
    years_total: int = 1
    years_remaining: int = 1
    start_season: int = 2025
    contract_type: str = "standard"
    status: str = "active"

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    @property
    def counts_for_valuation(self) -> bool:
        """$0 contracts are placeholders (e.g. pending tag decision)."""
        return self.is_active and self.salary > 0


class ContractRecord(BaseModel):
    """A contract with its player and team joins.

    Either join may be missing; callers check before using them.
    """
    contract: Contract
    player: Optional[Player] = None
    team: Optional[Team] = None


class TeamCapSummary(BaseModel):
    team_id: str
    team_name: str
    owner_name: str = ""
    contract_count: int = 0
    committed_salary: int = 0
    salary_cap: int = 0

    @computed_field
    @property
    def cap_room(self) -> int:
        return self.salary_cap - self.committed_salary
