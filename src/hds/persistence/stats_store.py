from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import duckdb

from hds.contracts import MatchSummary, PlayerBoxScore
from hds.core.ids import now_utc

DOUBLE_DIGIT_POINTS = 10

# Column order of career_stats; rows are read and written positionally.
CAREER_COLUMNS: tuple[str, ...] = (
    "player_id",
    "name",
    "position",
    "team",
    "games_played",
    "total_points",
    "two_point_attempts",
    "two_point_made",
    "three_point_attempts",
    "three_point_made",
    "free_throw_attempts",
    "free_throw_made",
    "rebounds",
    "offensive_rebounds",
    "defensive_rebounds",
    "assists",
    "steals",
    "blocks",
    "turnovers",
    "fouls",
    "highest_points",
    "double_digit_games",
    "created_at",
    "last_game_at",
)

_ACCUMULATED: tuple[tuple[str, str], ...] = (
    ("total_points", "points"),
    ("two_point_attempts", "two_point_attempts"),
    ("two_point_made", "two_point_made"),
    ("three_point_attempts", "three_point_attempts"),
    ("three_point_made", "three_point_made"),
    ("free_throw_attempts", "free_throw_attempts"),
    ("free_throw_made", "free_throw_made"),
    ("rebounds", "rebounds"),
    ("offensive_rebounds", "offensive_rebounds"),
    ("defensive_rebounds", "defensive_rebounds"),
    ("assists", "assists"),
    ("steals", "steals"),
    ("blocks", "blocks"),
    ("turnovers", "turnovers"),
    ("fouls", "fouls"),
)

LEADERBOARD_STATS = frozenset(
    {"total_points", "rebounds", "assists", "steals", "blocks", "games_played", "highest_points", "double_digit_games"}
)


@dataclass(slots=True)
class CareerRecord:
    player_id: str
    name: str
    position: str
    team: str
    games_played: int
    total_points: int
    two_point_attempts: int
    two_point_made: int
    three_point_attempts: int
    three_point_made: int
    free_throw_attempts: int
    free_throw_made: int
    rebounds: int
    offensive_rebounds: int
    defensive_rebounds: int
    assists: int
    steals: int
    blocks: int
    turnovers: int
    fouls: int
    highest_points: int
    double_digit_games: int
    created_at: str
    last_game_at: str | None

    def per_game(self, total: int) -> float:
        if self.games_played == 0:
            return 0.0
        return round(total / self.games_played, 1)

    @property
    def points_per_game(self) -> float:
        return self.per_game(self.total_points)

    @property
    def rebounds_per_game(self) -> float:
        return self.per_game(self.rebounds)

    @property
    def assists_per_game(self) -> float:
        return self.per_game(self.assists)

    @property
    def steals_per_game(self) -> float:
        return self.per_game(self.steals)

    @property
    def blocks_per_game(self) -> float:
        return self.per_game(self.blocks)


def _pct(made: int, attempts: int) -> float:
    return round(made / attempts * 100, 1) if attempts > 0 else 0.0


class CareerStatsStore:
    """Career totals accumulated across recorded matches, kept in DuckDB."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def connect(self) -> Any:
        return duckdb.connect(str(self.db_path))

    def initialize_schema(self) -> None:
        with self.connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS career_stats (
                    player_id VARCHAR PRIMARY KEY,
                    name VARCHAR,
                    position VARCHAR,
                    team VARCHAR,
                    games_played INTEGER,
                    total_points INTEGER,
                    two_point_attempts INTEGER,
                    two_point_made INTEGER,
                    three_point_attempts INTEGER,
                    three_point_made INTEGER,
                    free_throw_attempts INTEGER,
                    free_throw_made INTEGER,
                    rebounds INTEGER,
                    offensive_rebounds INTEGER,
                    defensive_rebounds INTEGER,
                    assists INTEGER,
                    steals INTEGER,
                    blocks INTEGER,
                    turnovers INTEGER,
                    fouls INTEGER,
                    highest_points INTEGER,
                    double_digit_games INTEGER,
                    created_at VARCHAR,
                    last_game_at VARCHAR
                );

                CREATE TABLE IF NOT EXISTS recorded_matches (
                    match_id VARCHAR PRIMARY KEY,
                    home_team VARCHAR,
                    away_team VARCHAR,
                    home_score INTEGER,
                    away_score INTEGER,
                    winner VARCHAR,
                    total_rounds INTEGER,
                    recorded_at VARCHAR
                );
                """
            )

    def record_summary(self, summary: MatchSummary) -> bool:
        """Fold one match into career totals. Returns False if the match was already recorded."""
        self.initialize_schema()
        recorded_at = now_utc().isoformat()
        with self.connect() as conn:
            seen = conn.execute("SELECT 1 FROM recorded_matches WHERE match_id = ?", [summary.match_id]).fetchone()
            if seen is not None:
                return False
            conn.execute(
                "INSERT INTO recorded_matches VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                [
                    summary.match_id,
                    summary.home_team,
                    summary.away_team,
                    summary.home_score,
                    summary.away_score,
                    summary.winner,
                    summary.total_rounds,
                    recorded_at,
                ],
            )
            for box in summary.home_stats + summary.away_stats:
                self._accumulate(conn, box, recorded_at)
        return True

    def player_career(self, player_id: str) -> CareerRecord | None:
        self.initialize_schema()
        with self.connect() as conn:
            row = conn.execute(
                f"SELECT {', '.join(CAREER_COLUMNS)} FROM career_stats WHERE player_id = ?",
                [player_id],
            ).fetchone()
        return CareerRecord(*row) if row is not None else None

    def all_players(self) -> list[CareerRecord]:
        return self._select("ORDER BY player_id")

    def top_scorers(self, limit: int = 10) -> list[CareerRecord]:
        return self._select("ORDER BY total_points DESC, player_id LIMIT ?", [limit])

    def top_points_per_game(self, limit: int = 10, min_games: int = 3) -> list[CareerRecord]:
        return self._select(
            "WHERE games_played >= ? ORDER BY CAST(total_points AS DOUBLE) / games_played DESC, player_id LIMIT ?",
            [min_games, limit],
        )

    def leaderboard(self, stat: str, limit: int = 10) -> list[CareerRecord]:
        if stat not in LEADERBOARD_STATS:
            raise ValueError(f"unknown leaderboard stat '{stat}', expected one of {sorted(LEADERBOARD_STATS)}")
        return self._select(f"ORDER BY {stat} DESC, player_id LIMIT ?", [limit])

    def shooting_percentages(self, player_id: str) -> dict[str, float] | None:
        record = self.player_career(player_id)
        if record is None:
            return None
        return {
            "two_point": _pct(record.two_point_made, record.two_point_attempts),
            "three_point": _pct(record.three_point_made, record.three_point_attempts),
            "free_throw": _pct(record.free_throw_made, record.free_throw_attempts),
            "field_goal": _pct(
                record.two_point_made + record.three_point_made,
                record.two_point_attempts + record.three_point_attempts,
            ),
        }

    def player_summary(self, player_id: str) -> dict[str, Any] | None:
        record = self.player_career(player_id)
        if record is None:
            return None
        return {
            "player_id": record.player_id,
            "name": record.name,
            "position": record.position,
            "team": record.team,
            "games_played": record.games_played,
            "total_points": record.total_points,
            "highest_points": record.highest_points,
            "ppg": record.points_per_game,
            "rpg": record.rebounds_per_game,
            "apg": record.assists_per_game,
            "spg": record.steals_per_game,
            "bpg": record.blocks_per_game,
            "shooting": self.shooting_percentages(player_id),
        }

    def match_count(self) -> int:
        self.initialize_schema()
        with self.connect() as conn:
            row = conn.execute("SELECT COUNT(*) FROM recorded_matches").fetchone()
        return int(row[0])

    def clear(self) -> None:
        self.initialize_schema()
        with self.connect() as conn:
            conn.execute("DELETE FROM career_stats")
            conn.execute("DELETE FROM recorded_matches")

    def _select(self, clause: str, params: list[Any] | None = None) -> list[CareerRecord]:
        self.initialize_schema()
        with self.connect() as conn:
            rows = conn.execute(f"SELECT {', '.join(CAREER_COLUMNS)} FROM career_stats {clause}", params or []).fetchall()
        return [CareerRecord(*row) for row in rows]

    def _accumulate(self, conn: Any, box: PlayerBoxScore, recorded_at: str) -> None:
        row = conn.execute(
            f"SELECT {', '.join(CAREER_COLUMNS)} FROM career_stats WHERE player_id = ?",
            [box.player_id],
        ).fetchone()
        if row is None:
            values: dict[str, Any] = {column: 0 for column in CAREER_COLUMNS}
            values["created_at"] = recorded_at
        else:
            values = dict(zip(CAREER_COLUMNS, row))

        values["player_id"] = box.player_id
        values["name"] = box.name
        values["position"] = box.position.value
        values["team"] = box.team
        values["games_played"] += 1
        for column, attr in _ACCUMULATED:
            values[column] += getattr(box, attr)
        values["highest_points"] = max(values["highest_points"], box.points)
        if box.points >= DOUBLE_DIGIT_POINTS:
            values["double_digit_games"] += 1
        values["last_game_at"] = recorded_at

        conn.execute("DELETE FROM career_stats WHERE player_id = ?", [box.player_id])
        placeholders = ", ".join(["?"] * len(CAREER_COLUMNS))
        conn.execute(
            f"INSERT INTO career_stats VALUES ({placeholders})",
            [values[column] for column in CAREER_COLUMNS],
        )
