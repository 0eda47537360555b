from __future__ import annotations

from pathlib import Path

import pytest

from hds.basketball import MatchEngine
from hds.contracts import MatchSummary, PlayerBoxScore, Position
from hds.core import seeded_random
from hds.persistence import CareerStatsStore
from tests.helpers import make_team


def _box(player_id: str, name: str, team: str, position: Position = Position.PG, **stats: int) -> PlayerBoxScore:
    values = {
        "points": 0,
        "assists": 0,
        "rebounds": 0,
        "offensive_rebounds": 0,
        "defensive_rebounds": 0,
        "steals": 0,
        "blocks": 0,
        "fouls": 0,
        "turnovers": 0,
        "two_point_attempts": 0,
        "two_point_made": 0,
        "three_point_attempts": 0,
        "three_point_made": 0,
        "free_throw_attempts": 0,
        "free_throw_made": 0,
    }
    values.update(stats)
    return PlayerBoxScore(player_id=player_id, name=name, team=team, position=position, active=True, **values)


def _summary(match_id: str, home_boxes: list[PlayerBoxScore], away_boxes: list[PlayerBoxScore]) -> MatchSummary:
    home = sum(b.points for b in home_boxes)
    away = sum(b.points for b in away_boxes)
    return MatchSummary(
        match_id=match_id,
        home_team="Hawks",
        away_team="Owls",
        home_score=home,
        away_score=away,
        winner="Hawks" if home > away else "Owls" if away > home else "TIE",
        total_rounds=100,
        events=[],
        home_stats=home_boxes,
        away_stats=away_boxes,
    )


@pytest.fixture
def store(tmp_path: Path) -> CareerStatsStore:
    return CareerStatsStore(tmp_path / "stats" / "career.duckdb")


def test_record_summary_accumulates_career_totals(store: CareerStatsStore):
    first = _summary(
        "M1",
        [_box("ada", "Ada", "Hawks", points=12, two_point_attempts=6, two_point_made=3, three_point_attempts=4, three_point_made=2, rebounds=3, defensive_rebounds=3)],
        [_box("bo", "Bo", "Owls", Position.C, points=4, two_point_attempts=5, two_point_made=2, blocks=2)],
    )
    second = _summary(
        "M2",
        [_box("ada", "Ada", "Hawks", points=5, two_point_attempts=4, two_point_made=2, free_throw_attempts=2, free_throw_made=1, assists=4)],
        [_box("bo", "Bo", "Owls", Position.C, points=14, two_point_attempts=10, two_point_made=7, rebounds=9, offensive_rebounds=4, defensive_rebounds=5)],
    )

    assert store.record_summary(first)
    assert store.record_summary(second)

    ada = store.player_career("ada")
    assert ada is not None
    assert ada.games_played == 2
    assert ada.total_points == 17
    assert ada.highest_points == 12
    assert ada.double_digit_games == 1
    assert ada.assists == 4
    assert ada.points_per_game == 8.5
    assert ada.last_game_at is not None

    bo = store.player_career("bo")
    assert bo.rebounds == 9 and bo.offensive_rebounds == 4
    assert bo.blocks_per_game == 1.0
    assert store.match_count() == 2


def test_recording_the_same_match_twice_is_ignored(store: CareerStatsStore):
    summary = _summary("M1", [_box("ada", "Ada", "Hawks", points=6)], [])
    assert store.record_summary(summary)
    assert not store.record_summary(summary)
    assert store.player_career("ada").games_played == 1
    assert store.match_count() == 1


def test_top_scorers_and_per_game_leaders(store: CareerStatsStore):
    for n in range(3):
        store.record_summary(
            _summary(
                f"M{n}",
                [_box("ada", "Ada", "Hawks", points=10), _box("cy", "Cy", "Hawks", points=2)],
                [_box("bo", "Bo", "Owls", points=20 if n == 0 else 0)],
            )
        )
    store.record_summary(_summary("M9", [_box("dee", "Dee", "Hawks", points=40)], []))

    assert [r.player_id for r in store.top_scorers(limit=2)] == ["dee", "ada"]
    assert [r.player_id for r in store.top_points_per_game(limit=3)] == ["ada", "bo", "cy"]
    assert [r.player_id for r in store.top_points_per_game(limit=1, min_games=1)] == ["dee"]


def test_leaderboard_whitelists_columns(store: CareerStatsStore):
    store.record_summary(
        _summary("M1", [_box("ada", "Ada", "Hawks", steals=3), _box("cy", "Cy", "Hawks", steals=5)], [])
    )
    assert [r.player_id for r in store.leaderboard("steals")] == ["cy", "ada"]
    with pytest.raises(ValueError):
        store.leaderboard("points; DROP TABLE career_stats")


def test_shooting_percentages_and_player_summary(store: CareerStatsStore):
    store.record_summary(
        _summary(
            "M1",
            [
                _box(
                    "ada",
                    "Ada",
                    "Hawks",
                    points=13,
                    two_point_attempts=8,
                    two_point_made=4,
                    three_point_attempts=3,
                    three_point_made=1,
                    free_throw_attempts=4,
                    free_throw_made=2,
                )
            ],
            [],
        )
    )
    pct = store.shooting_percentages("ada")
    assert pct == {"two_point": 50.0, "three_point": 33.3, "free_throw": 50.0, "field_goal": 45.5}

    summary = store.player_summary("ada")
    assert summary["ppg"] == 13.0
    assert summary["position"] == "PG"
    assert summary["shooting"] == pct

    assert store.player_career("nobody") is None
    assert store.shooting_percentages("nobody") is None
    assert store.player_summary("nobody") is None


def test_clear_wipes_everything(store: CareerStatsStore):
    store.record_summary(_summary("M1", [_box("ada", "Ada", "Hawks", points=2)], []))
    store.clear()
    assert store.all_players() == []
    assert store.match_count() == 0


def test_simulated_match_feeds_career_stats(store: CareerStatsStore):
    summary = MatchEngine(make_team("Hawks"), make_team("Owls"), random_source=seeded_random(17)).simulate_match()
    store.record_summary(summary)

    players = store.all_players()
    assert len(players) == 10
    assert all(r.games_played == 1 for r in players)
    assert sum(r.total_points for r in players if r.team == "Hawks") == summary.home_score
    assert sum(r.total_points for r in players if r.team == "Owls") == summary.away_score
