from __future__ import annotations

import json
from pathlib import Path

import pytest

from hds.cli import default_team, main
from hds.persistence import CareerStatsStore
from tests.helpers import team_payload


def test_default_team_fields_one_player_per_position():
    team = default_team("Home", 4)
    assert [p.position.value for p in team.players] == ["PG", "SG", "SF", "PF", "C"]
    assert all(p.skill_level == 4 for p in team.players)


def test_seeded_run_prints_final_score(capsys):
    assert main(["--seed", "7"]) == 0
    out = capsys.readouterr().out
    assert "Final: Home " in out
    assert "Winner: " in out
    assert "Home:" in out and "Away:" in out


def test_seeded_runs_are_identical(capsys):
    main(["--seed", "11", "--events"])
    first = capsys.readouterr().out
    main(["--seed", "11", "--events"])
    second = capsys.readouterr().out
    assert first == second
    assert "[Q1 R000] match_start: Match started" in first


def test_narrate_prints_commentary(capsys):
    assert main(["--seed", "3", "--narrate"]) == 0
    out = capsys.readouterr().out
    assert "Home" in out.splitlines()[0]


def test_teams_file_and_stats_db(tmp_path: Path, capsys):
    teams = tmp_path / "teams.json"
    teams.write_text(json.dumps({"home": team_payload("Hawks"), "away": team_payload("Owls")}), encoding="utf-8")
    db = tmp_path / "career.duckdb"

    assert main(["--seed", "5", "--teams", str(teams), "--stats-db", str(db)]) == 0
    out = capsys.readouterr().out
    assert "Final: Hawks " in out
    assert "Career top scorers:" in out
    assert CareerStatsStore(db).match_count() == 1


def test_invalid_roster_exits_with_validation_report(tmp_path: Path, capsys):
    teams = tmp_path / "teams.json"
    teams.write_text(json.dumps([team_payload("Hawks", count=3), team_payload("Owls")]), encoding="utf-8")

    assert main(["--teams", str(teams)]) == 2
    out = capsys.readouterr().out
    assert "Match cannot start:" in out
    assert "NOT_ENOUGH_PLAYERS" in out


def test_out_of_range_skill_is_rejected(capsys):
    assert main(["--seed", "1", "--home-skill", "9"]) == 2
    assert "SKILL_LEVEL_OUT_OF_RANGE" in capsys.readouterr().out


@pytest.mark.parametrize(
    "content",
    [
        json.dumps({"home": {"players": []}, "away": team_payload("Owls")}),
        json.dumps({"home": {"name": "Hawks", "players": {"name": "A"}}, "away": team_payload("Owls")}),
        json.dumps({"home": {"name": "Hawks", "players": [{"name": "A"}]}, "away": team_payload("Owls")}),
        json.dumps({"home": team_payload("Hawks")}),
        "{not json",
    ],
)
def test_malformed_teams_file_exits_with_report(tmp_path: Path, capsys, content):
    teams = tmp_path / "teams.json"
    teams.write_text(content, encoding="utf-8")

    assert main(["--teams", str(teams)]) == 2
    out = capsys.readouterr().out
    assert out.startswith("Match cannot start:")
    assert "INVALID_TEAMS_FILE" in out
