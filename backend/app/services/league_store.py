"""In-process league store: players, teams, and contracts.

Read side mirrors the queries the valuation engines need (active contracts
at a position ordered by salary, single contract with player/team joins).
Write side is CSV import only.
"""

from __future__ import annotations

import io
import logging
import uuid
from typing import Optional

import pandas as pd
from thefuzz import fuzz, process

from ..config import LeagueConfig, league_config
from ..models.league import (
    CONTRACT_STATUSES,
    CONTRACT_TYPES,
    Contract,
    ContractRecord,
    Team,
    TeamCapSummary,
)
from ..models.player import Player
from ..utils.nfl_teams import normalize_team
from ..utils.positions import normalize_position
from ..utils.salary_math import validate_salary

logger = logging.getLogger(__name__)

# Column name mappings for Sleeper exports and the league spreadsheet
PLAYER_COLUMN_MAP = {
    "player_id": "id",
    "sleeper_id": "id",
    "Name": "full_name",
    "Player": "full_name",
    "Pos": "position",
    "Position": "position",
    "Team": "team",
    "Age": "age",
    "Exp": "years_exp",
    "YearsExp": "years_exp",
    "PPG": "ppg",
    "GP": "games_played",
    "PTS": "fantasy_points",
}

CONTRACT_COLUMN_MAP = {
    "contract_id": "id",
    "Player": "player_name",
    "Owner": "owner_name",
    "Team": "team_name",
    "Salary": "salary",
    "Years": "years_remaining",
    "Type": "contract_type",
    "Status": "status",
}

NAME_MATCH_THRESHOLD = 85


class LeagueStore:
    def __init__(self) -> None:
        self.players: dict[str, Player] = {}
        self.teams: dict[str, Team] = {}
        self.contracts: dict[str, Contract] = {}

    # -----------------------------------------------------------------------
    # Writes
    # -----------------------------------------------------------------------

    def add_player(self, player: Player) -> Player:
        self.players[player.id] = player
        return player

    def add_team(self, team: Team) -> Team:
        self.teams[team.id] = team
        return team

    def add_contract(self, contract: Contract) -> Contract:
        self.contracts[contract.id] = contract
        return contract

    def clear(self) -> None:
        self.players.clear()
        self.teams.clear()
        self.contracts.clear()

    # -----------------------------------------------------------------------
    # Reads
    # -----------------------------------------------------------------------

    def get_player(self, player_id: str) -> Optional[Player]:
        return self.players.get(player_id)

    def get_team(self, team_id: Optional[str]) -> Optional[Team]:
        if team_id is None:
            return None
        return self.teams.get(team_id)

    def _record(self, contract: Contract) -> ContractRecord:
        return ContractRecord(
            contract=contract,
            player=self.players.get(contract.player_id),
            team=self.get_team(contract.team_id),
        )

    def get_contract_record(self, contract_id: str) -> Optional[ContractRecord]:
        contract = self.contracts.get(contract_id)
        if contract is None:
            return None
        return self._record(contract)

    def active_contracts(
        self,
        position: Optional[str] = None,
        exclude_player_id: Optional[str] = None,
        max_start_season: Optional[int] = None,
    ) -> list[ContractRecord]:
        """Active, non-zero-salary contracts joined to their player.

        Contracts whose player is missing are dropped (inner join).
        Ordered by salary descending; equal salaries keep insertion order.
        """
        records = []
        # snapshot: imports may add contracts while a threadpool request reads
        for contract in list(self.contracts.values()):
            if not contract.counts_for_valuation:
                continue
            if exclude_player_id is not None and contract.player_id == exclude_player_id:
                continue
            if max_start_season is not None and contract.start_season > max_start_season:
                continue
            record = self._record(contract)
            if record.player is None:
                continue
            if position is not None and record.player.position != position:
                continue
            records.append(record)
        records.sort(key=lambda r: r.contract.salary, reverse=True)
        return records

    def team_cap_summaries(self, config: LeagueConfig = league_config) -> list[TeamCapSummary]:
        summaries = {
            team.id: TeamCapSummary(
                team_id=team.id,
                team_name=team.team_name,
                owner_name=team.owner_name,
                salary_cap=config.salary_cap,
            )
            for team in list(self.teams.values())
        }
        for contract in list(self.contracts.values()):
            summary = summaries.get(contract.team_id or "")
            if summary is None or not contract.is_active:
                continue
            summary.contract_count += 1
            summary.committed_salary += contract.salary
        return sorted(summaries.values(), key=lambda s: s.committed_salary, reverse=True)

    # -----------------------------------------------------------------------
    # Team helpers
    # -----------------------------------------------------------------------

    def find_team(self, name: str) -> Optional[Team]:
        """Match a team by owner or team name, case-insensitive."""
        key = name.strip().lower()
        for team in list(self.teams.values()):
            if team.owner_name.lower() == key or team.team_name.lower() == key:
                return team
        return None

    def get_or_create_team(self, owner_name: str, team_name: str = "") -> Team:
        team = self.find_team(owner_name) if owner_name else None
        if team is None and team_name:
            team = self.find_team(team_name)
        if team is None:
            team = Team(
                id=f"team_{len(self.teams) + 1}",
                team_name=team_name or owner_name,
                owner_name=owner_name,
            )
            self.add_team(team)
            logger.info(f"Created team {team.id} for '{team.team_name}'")
        return team

    # -----------------------------------------------------------------------
    # Fuzzy name matching
    # -----------------------------------------------------------------------

    def match_player(self, name: str, threshold: int = NAME_MATCH_THRESHOLD) -> Optional[str]:
        """Return the best matching player_id for *name*, or None."""
        choices = {pid: p.full_name for pid, p in list(self.players.items())}
        if not choices:
            return None
        result = process.extractOne(name, choices, scorer=fuzz.token_sort_ratio, score_cutoff=threshold)
        if result is None:
            return None
        # result is (matched_name, score, key)
        _matched_name, _score, player_id = result
        return player_id


# ---------------------------------------------------------------------------
# Singleton store instance
# ---------------------------------------------------------------------------
_store: Optional[LeagueStore] = None


def get_store() -> LeagueStore:
    """Return the current store, initializing if necessary."""
    global _store
    if _store is None:
        _store = LeagueStore()
    return _store


def reset_store() -> None:
    """Tear down the singleton (useful in tests)."""
    global _store
    _store = None


# ---------------------------------------------------------------------------
# CSV import
# ---------------------------------------------------------------------------

def _normalize_columns(df: pd.DataFrame, col_map: dict) -> pd.DataFrame:
    rename = {orig: target for orig, target in col_map.items() if orig in df.columns}
    return df.rename(columns=rename)


def _read_csv(csv_content: bytes, col_map: dict) -> pd.DataFrame:
    df = pd.read_csv(io.BytesIO(csv_content), dtype=str, keep_default_na=False, encoding="utf-8-sig")
    df.columns = [c.strip() for c in df.columns]
    return _normalize_columns(df, col_map)


def _to_int(raw: str, default: Optional[int] = None) -> Optional[int]:
    raw = (raw or "").strip().replace("$", "")
    if not raw:
        return default
    return int(float(raw))


def _to_float(raw: str, default: float = 0.0) -> float:
    raw = (raw or "").strip()
    return float(raw) if raw else default


def import_players_csv(csv_content: bytes, store: Optional[LeagueStore] = None) -> dict:
    """Load players from CSV.

    Required columns: player_id, full_name, position. Optional: team, age,
    years_exp, ppg, games_played, fantasy_points. Non-skill positions are skipped.
    """
    store = store or get_store()
    df = _read_csv(csv_content, PLAYER_COLUMN_MAP)

    missing = {"id", "full_name", "position"} - set(df.columns)
    if missing:
        raise ValueError(f"CSV missing required columns: {sorted(missing)}")

    imported = 0
    skipped = 0
    errors: list[str] = []

    for _, row in df.iterrows():
        player_id = str(row["id"]).strip()
        name = str(row["full_name"]).strip()
        position = normalize_position(str(row["position"]))
        if not player_id or not name:
            errors.append(f"Skipping incomplete row: {dict(row)}")
            continue
        if position is None:
            skipped += 1
            continue

        try:
            player = Player(
                id=player_id,
                full_name=name,
                position=position,
                team=normalize_team(row.get("team")),
                age=_to_int(row.get("age", "")),
                years_exp=_to_int(row.get("years_exp", "")),
                ppg=_to_float(row.get("ppg", "")),
                games_played=_to_int(row.get("games_played", ""), 0),
                fantasy_points=_to_float(row.get("fantasy_points", "")),
            )
        except ValueError as e:
            errors.append(f"Invalid numbers for {name}: {e}")
            continue

        store.add_player(player)
        imported += 1

    logger.info(f"Imported {imported} players ({skipped} non-skill skipped, {len(errors)} errors)")
    return {"imported": imported, "skipped": skipped, "errors": errors}


def import_contracts_csv(
    csv_content: bytes,
    store: Optional[LeagueStore] = None,
    config: LeagueConfig = league_config,
) -> dict:
    """Load contracts from CSV.

    Each row names its player by ``player_id`` or ``player_name`` (fuzzy
    matched against loaded players) and its team by ``owner_name`` or
    ``team_name``. Teams are created on first sight.
    """
    store = store or get_store()
    df = _read_csv(csv_content, CONTRACT_COLUMN_MAP)

    if "salary" not in df.columns:
        raise ValueError("CSV must contain a 'salary' column")
    if "player_id" not in df.columns and "player_name" not in df.columns:
        raise ValueError("CSV must contain 'player_id' or 'player_name'")

    default_season = int(config.current_season)
    imported = 0
    errors: list[str] = []
    warnings: list[str] = []

    for _, row in df.iterrows():
        player_id = str(row.get("player_id", "")).strip()
        player_name = str(row.get("player_name", "")).strip()
        label = player_name or player_id

        if player_id and store.get_player(player_id) is None:
            player_id = ""
        if not player_id and player_name:
            player_id = store.match_player(player_name) or ""
        if not player_id:
            errors.append(f"Player not found: {label}")
            continue

        owner_name = str(row.get("owner_name", "")).strip()
        team_name = str(row.get("team_name", "")).strip()
        if not owner_name and not team_name:
            errors.append(f"Team not given for {label}")
            continue

        try:
            salary = _to_int(row["salary"])
            years_remaining = _to_int(row.get("years_remaining", ""), 1)
            years_total = _to_int(row.get("years_total", ""), years_remaining)
            start_season = _to_int(row.get("start_season", ""), default_season)
        except ValueError:
            errors.append(f"Invalid numbers for {label}")
            continue
        if salary is None or salary < 0:
            errors.append(f"Invalid salary '{row['salary']}' for {label}")
            continue

        contract_type = str(row.get("contract_type", "")).strip().lower() or "standard"
        status = str(row.get("status", "")).strip().lower() or "active"
        if contract_type not in CONTRACT_TYPES:
            errors.append(f"Unknown contract type '{contract_type}' for {label}")
            continue
        if status not in CONTRACT_STATUSES:
            errors.append(f"Unknown status '{status}' for {label}")
            continue

        # $0 placeholders are exempt from the contract minimum
        if salary > 0:
            valid, reason = validate_salary(store.players[player_id].position, salary, years_total, config)
            if not valid:
                warnings.append(f"{label}: {reason}")

        team = store.get_or_create_team(owner_name, team_name)
        contract_id = str(row.get("id", "")).strip() or str(uuid.uuid4())[:8]
        store.add_contract(Contract(
            id=contract_id,
            team_id=team.id,
            player_id=player_id,
            salary=salary,
            years_total=years_total,
            years_remaining=years_remaining,
            start_season=start_season,
            contract_type=contract_type,
            status=status,
        ))
        imported += 1

    if errors:
        logger.warning(f"Contract import: {len(errors)} rows not imported")
    logger.info(f"Imported {imported} contracts")
    return {"imported": imported, "errors": errors, "warnings": warnings}
