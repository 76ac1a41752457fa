"""Tests for CSV import, the league store queries, and salary math."""

import pytest

from app.config import LeagueConfig
from app.models.league import Contract, Team
from app.models.player import Player
from app.services.league_store import (
    LeagueStore,
    import_contracts_csv,
    import_players_csv,
)
from app.utils.nfl_teams import normalize_team
from app.utils.positions import normalize_position
from app.utils.salary_math import (
    calculate_cap_savings,
    calculate_dead_cap,
    get_min_salary,
    round_half_up,
    total_dead_cap,
    validate_salary,
)

PLAYERS_CSV = (
    "player_id,full_name,position,team,age,years_exp,ppg,games_played\n"
    "4046,Patrick Mahomes,QB,KC,29,8,21.4,16\n"
    "6794,Justin Jefferson,WR,MIN,26,5,19.5,16\n"
    "9509,Bijan Robinson,RB,ATL,23,2,18.1,17\n"
    "4981,Travis Kelce,TE,FA,35,12,11.2,16\n"
    "1111,Justin Tucker,K,BAL,35,13,,\n"
)


@pytest.fixture
def store():
    s = LeagueStore()
    import_players_csv(PLAYERS_CSV.encode(), store=s)
    return s


@pytest.fixture
def config():
    return LeagueConfig()


class TestImportPlayers:
    def test_skill_positions_only(self, store):
        assert set(store.players) == {"4046", "6794", "9509", "4981"}

    def test_fields(self, store):
        mahomes = store.get_player("4046")
        assert mahomes.full_name == "Patrick Mahomes"
        assert mahomes.team == "KC"
        assert mahomes.age == 29
        assert mahomes.ppg == 21.4
        assert mahomes.games_played == 16
        assert store.get_player("4981").team is None

    def test_counts(self):
        result = import_players_csv(PLAYERS_CSV.encode(), store=LeagueStore())
        assert result == {"imported": 4, "skipped": 1, "errors": []}

    def test_spreadsheet_headers_and_bom(self):
        csv = "\ufeffsleeper_id,Name,Pos,Team,Age\n8146,Garrett Wilson,WR/RB,NYJ,24\n"
        s = LeagueStore()
        import_players_csv(csv.encode("utf-8"), store=s)
        wilson = s.get_player("8146")
        assert wilson.position == "WR"
        assert wilson.age == 24

    def test_missing_columns(self):
        with pytest.raises(ValueError, match="missing required columns"):
            import_players_csv(b"full_name,team\nNobody,KC\n", store=LeagueStore())

    def test_bad_numbers_reported(self):
        csv = b"player_id,full_name,position,age\n1,Some Guy,RB,old\n"
        result = import_players_csv(csv, store=LeagueStore())
        assert result["imported"] == 0
        assert len(result["errors"]) == 1


class TestImportContracts:
    def test_by_fuzzy_name_and_owner(self, store):
        csv = (
            "Player,Owner,Team,Salary,Years,Type\n"
            "Patrick Mahomes,Tony,Gridiron Gang,$62,3,standard\n"
            "Jeferson Justin,Maria,Purple Reign,45,2,extension\n"
            "Bijan Robinson,tony,,8,3,rookie\n"
            "Tom Brady,Tony,,10,1,standard\n"
        )
        result = import_contracts_csv(csv.encode(), store=store)

        assert result["errors"] == ["Player not found: Tom Brady"]
        assert result["imported"] == 3
        jefferson = next(c for c in store.contracts.values() if c.salary == 45)
        assert jefferson.player_id == "6794"
        assert store.get_team(jefferson.team_id).team_name == "Purple Reign"
        assert len(store.teams) == 2
        tony = store.find_team("Tony")
        bijan = next(c for c in store.contracts.values() if c.player_id == "9509")
        assert bijan.team_id == tony.id
        assert bijan.contract_type == "rookie"
        assert bijan.years_total == 3
        assert bijan.start_season == 2025

    def test_by_player_id(self, store):
        csv = (
            "contract_id,player_id,owner_name,salary,years_remaining,start_season,status\n"
            "k1,4981,Sam,30,1,2023,active\n"
            "k2,0000,Sam,30,1,2023,active\n"
        )
        result = import_contracts_csv(csv.encode(), store=store)

        assert result["imported"] == 1
        contract = store.contracts["k1"]
        assert contract.start_season == 2023
        assert store.get_team(contract.team_id).owner_name == "Sam"

    def test_rejects_unknown_type_status_and_missing_team(self, store):
        csv = (
            "player_id,owner_name,salary,contract_type,status\n"
            "4046,Sam,30,mystery,active\n"
            "6794,Sam,30,standard,retired\n"
            "9509,,30,standard,active\n"
            "4981,Sam,-4,standard,active\n"
        )
        result = import_contracts_csv(csv.encode(), store=store)

        assert result["imported"] == 0
        assert len(result["errors"]) == 4
        assert store.contracts == {}

    def test_out_of_range_salary_is_imported_with_warning(self, store):
        csv = (
            "player_id,owner_name,salary,years_total,years_remaining\n"
            "9509,Sam,5,3,3\n"
            "4981,Sam,80,1,1\n"
            "6794,Sam,0,1,1\n"
        )
        result = import_contracts_csv(csv.encode(), store=store)

        assert result["imported"] == 3
        assert result["warnings"] == [
            "9509: Minimum salary for 3-year contract is $8",
            "4981: Maximum TE salary is $50",
        ]

    def test_requires_salary_and_player(self, store):
        with pytest.raises(ValueError):
            import_contracts_csv(b"player_id,owner_name\n4046,Sam\n", store=store)
        with pytest.raises(ValueError):
            import_contracts_csv(b"owner_name,salary\nSam,10\n", store=store)


class TestStoreQueries:
    def _contract(self, store, cid, pid, salary, **kwargs):
        store.add_contract(Contract(id=cid, team_id="t1", player_id=pid, salary=salary, **kwargs))

    def test_active_contracts_order_and_filters(self, store):
        store.add_team(Team(id="t1", team_name="Gridiron Gang", owner_name="Tony"))
        self._contract(store, "a", "4046", 40)
        self._contract(store, "b", "6794", 55)
        self._contract(store, "c", "9509", 40)
        self._contract(store, "d", "4981", 0)
        self._contract(store, "e", "4981", 70, status="released")
        self._contract(store, "f", "missing", 90)

        records = store.active_contracts()
        assert [r.contract.id for r in records] == ["b", "a", "c"]
        assert [r.contract.id for r in store.active_contracts(position="RB")] == ["c"]
        assert [r.contract.id for r in store.active_contracts(exclude_player_id="6794")] == ["a", "c"]
        assert records[0].team.team_name == "Gridiron Gang"

    def test_max_start_season(self, store):
        self._contract(store, "old", "4046", 40, start_season=2024)
        self._contract(store, "new", "6794", 50, start_season=2025)
        ids = [r.contract.id for r in store.active_contracts(max_start_season=2024)]
        assert ids == ["old"]

    def test_team_cap_summaries(self, store, config):
        store.add_team(Team(id="t1", team_name="Gridiron Gang", owner_name="Tony"))
        store.add_team(Team(id="t2", team_name="Purple Reign", owner_name="Maria"))
        self._contract(store, "a", "4046", 60)
        self._contract(store, "b", "6794", 45)
        self._contract(store, "c", "9509", 30, status="released")

        summaries = store.team_cap_summaries(config)
        assert [s.team_id for s in summaries] == ["t1", "t2"]
        assert summaries[0].committed_salary == 105
        assert summaries[0].contract_count == 2
        assert summaries[0].cap_room == 395
        assert summaries[1].cap_room == 500

    def test_reads_survive_a_concurrent_import(self, store):
        store.add_team(Team(id="t1", team_name="Gridiron Gang", owner_name="Tony"))

        class ImportedMidRead(Contract):
            @property
            def is_active(self) -> bool:
                # an import landing while the read loop is running
                store.add_contract(Contract(
                    id=f"late{len(store.contracts)}", team_id="t1", player_id="6794", salary=5,
                ))
                return True

        store.add_contract(ImportedMidRead(id="a", team_id="t1", player_id="4046", salary=40))
        self._contract(store, "b", "9509", 30)

        assert [r.contract.id for r in store.active_contracts()] == ["a", "b"]
        summary = store.team_cap_summaries()[0]
        assert summary.contract_count == 3  # a, b, and the contract added during the first read
        assert summary.committed_salary == 75

    def test_match_player(self, store):
        assert store.match_player("Travis Kelce") == "4981"
        assert store.match_player("Kelce Travis") == "4981"
        assert store.match_player("Tom Brady") is None
        assert LeagueStore().match_player("Travis Kelce") is None

    def test_get_or_create_team(self):
        s = LeagueStore()
        first = s.get_or_create_team("Tony", "Gridiron Gang")
        again = s.get_or_create_team("", "gridiron gang")
        other = s.get_or_create_team("Maria")
        assert first is again
        assert first.id == "team_1"
        assert other.id == "team_2"
        assert other.team_name == "Maria"

    def test_stored_stats(self):
        p = Player(id="1", full_name="X", position="WR", ppg=9.0, games_played=10, fantasy_points=90.0)
        stats = p.stored_stats()
        assert stats.points_per_game == 9.0
        assert stats.has_data


class TestNormalization:
    def test_positions(self):
        assert normalize_position("wr") == "WR"
        assert normalize_position("RB/WR") == "RB"
        assert normalize_position("HB") == "RB"
        assert normalize_position("Tight End") == "TE"
        assert normalize_position("K") is None
        assert normalize_position("") is None

    def test_teams(self):
        assert normalize_team("kc") == "KC"
        assert normalize_team("JAC") == "JAX"
        assert normalize_team("FA") is None
        assert normalize_team("XYZ") is None
        assert normalize_team(None) is None


class TestSalaryMath:
    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(24.75) == 25
        assert round_half_up(-2.5) == -2
        assert round_half_up(4.4) == 4

    def test_dead_cap_schedule(self):
        schedule = calculate_dead_cap(30, 3)
        assert [row["amount"] for row in schedule] == [15, 8, 3]
        assert [row["year"] for row in schedule] == [1, 2, 3]
        assert total_dead_cap(30, 3) == 26
        assert calculate_cap_savings(30, 3) == 15

    def test_dead_cap_rounds_up(self):
        assert [row["amount"] for row in calculate_dead_cap(7, 2)] == [4, 2]

    def test_one_dollar_contract(self):
        assert calculate_dead_cap(1, 4) == [{"year": 1, "percentage": 1.0, "amount": 1}]
        assert calculate_cap_savings(1, 4) == 0

    def test_min_salary(self):
        assert get_min_salary(1) == 1
        assert get_min_salary(5) == 15

    def test_validate_salary(self):
        assert validate_salary("WR", 30, 3) == (True, None)
        ok, msg = validate_salary("WR", 5, 3)
        assert not ok
        assert "$8" in msg
        ok, msg = validate_salary("TE", 51, 1)
        assert not ok
        assert "TE" in msg
        assert validate_salary("K", 500, 1) == (True, None)
