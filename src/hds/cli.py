from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Sequence

from hds.basketball import MatchEngine, TemplateNarrator, teams_from_payload
from hds.contracts import MatchSummary, PlayerBoxScore, PlayerDescriptor, Position, TeamDescriptor, ValidationError
from hds.core import EngineIntegrityError, gameplay_random, persist_forensic_artifact, seeded_random
from hds.persistence import CareerStatsStore


def default_team(name: str, skill_level: int) -> TeamDescriptor:
    return TeamDescriptor(
        name=name,
        players=[PlayerDescriptor(name=f"{name} {p.value}", position=p, skill_level=skill_level) for p in Position],
    )


def _load_teams(path: Path) -> tuple[TeamDescriptor, TeamDescriptor]:
    payload = json.loads(path.read_text(encoding="utf-8"))
    return teams_from_payload(payload)


def _print_box(title: str, rows: list[PlayerBoxScore]) -> None:
    print(f"{title}:")
    for b in rows:
        flag = "" if b.active else " (fouled out)"
        print(
            f"- {b.name} [{b.position.value}] pts={b.points} reb={b.rebounds} ast={b.assists} "
            f"stl={b.steals} blk={b.blocks} pf={b.fouls} to={b.turnovers} "
            f"fg={b.field_goals_made}/{b.field_goal_attempts} "
            f"3p={b.three_point_made}/{b.three_point_attempts} ft={b.free_throw_made}/{b.free_throw_attempts}{flag}"
        )


def _print_summary(summary: MatchSummary) -> None:
    print(f"Final: {summary.home_team} {summary.home_score} - {summary.away_score} {summary.away_team}")
    print(f"Winner: {summary.winner}")
    _print_box(summary.home_team, summary.home_stats)
    _print_box(summary.away_team, summary.away_stats)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Hardwood Dice: turn-based basketball match simulator")
    parser.add_argument("--seed", type=int, default=None, help="seed for deterministic runs")
    parser.add_argument("--home-skill", type=int, default=3, help="skill level (1-5) of the default home roster")
    parser.add_argument("--away-skill", type=int, default=3, help="skill level (1-5) of the default away roster")
    parser.add_argument("--teams", type=Path, default=None, help="JSON file with 'home' and 'away' rosters")
    parser.add_argument("--narrate", action="store_true", help="print play-by-play commentary")
    parser.add_argument("--events", action="store_true", help="print the full event log")
    parser.add_argument("--stats-db", type=Path, default=None, help="DuckDB file that accumulates career stats")
    parser.add_argument("--forensics-dir", type=Path, default=None, help="where to write integrity failure artifacts")
    args = parser.parse_args(argv)

    random_source = seeded_random(args.seed) if args.seed is not None else gameplay_random()
    if args.teams is not None:
        try:
            home, away = _load_teams(args.teams)
        except ValueError as exc:
            print("Match cannot start:")
            print(f"- INVALID_TEAMS_FILE [{args.teams}] teams: {exc}")
            return 2
    else:
        home = default_team("Home", args.home_skill)
        away = default_team("Away", args.away_skill)

    narrator = TemplateNarrator(random_source.spawn("narration")) if args.narrate else None
    try:
        engine = MatchEngine(home, away, random_source=random_source, narrator=narrator)
    except ValidationError as exc:
        print("Match cannot start:")
        for issue in exc.issues:
            print(f"- {issue.code} [{issue.entity_id}] {issue.field_path}: {issue.message}")
        return 2

    try:
        summary = engine.simulate_match()
    except EngineIntegrityError as exc:
        print(f"Match halted ({exc.error_code}): {exc}")
        if args.forensics_dir is not None:
            path = persist_forensic_artifact(exc.artifact, args.forensics_dir)
            print(f"Forensic artifact written to {path}")
        return 1

    for event in summary.events:
        if args.events:
            print(f"[Q{event.quarter} R{event.round:03d}] {event.event_type.value}: {event.description}")
        if args.narrate and event.narration:
            print(event.narration)

    _print_summary(summary)

    if args.stats_db is not None:
        store = CareerStatsStore(args.stats_db)
        store.record_summary(summary)
        print("Career top scorers:")
        for record in store.top_scorers(limit=5):
            print(f"- {record.name} ({record.team}): {record.total_points} pts in {record.games_played} games")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
