from __future__ import annotations

from dataclasses import dataclass, field

from hds.contracts import PlayerAttributes, PlayerBoxScore, PlayerStats, Position, ShotType, Side


@dataclass(slots=True)
class PlayerState:
    """One roster entry for the duration of a single match."""

    index: int
    player_id: str
    name: str
    position: Position
    skill_level: int
    side: Side
    attributes: PlayerAttributes
    active: bool = True
    foul_count: int = 0
    stats: PlayerStats = field(default_factory=PlayerStats)

    def record_shot(self, shot_type: ShotType, made: bool) -> None:
        if shot_type is ShotType.TWO:
            self.stats.two_point_attempts += 1
            if made:
                self.stats.two_point_made += 1
        else:
            self.stats.three_point_attempts += 1
            if made:
                self.stats.three_point_made += 1
        if made:
            self.stats.points += shot_type.points

    def record_free_throw(self, made: bool) -> None:
        self.stats.free_throw_attempts += 1
        if made:
            self.stats.free_throw_made += 1
            self.stats.points += 1

    def record_rebound(self, offensive: bool) -> None:
        self.stats.rebounds += 1
        if offensive:
            self.stats.offensive_rebounds += 1
        else:
            self.stats.defensive_rebounds += 1

    def record_foul(self) -> None:
        self.foul_count += 1
        self.stats.fouls += 1

    def box_score(self, team_name: str) -> PlayerBoxScore:
        s = self.stats
        return PlayerBoxScore(
            player_id=self.player_id,
            name=self.name,
            team=team_name,
            position=self.position,
            active=self.active,
            points=s.points,
            assists=s.assists,
            rebounds=s.rebounds,
            offensive_rebounds=s.offensive_rebounds,
            defensive_rebounds=s.defensive_rebounds,
            steals=s.steals,
            blocks=s.blocks,
            fouls=s.fouls,
            turnovers=s.turnovers,
            two_point_attempts=s.two_point_attempts,
            two_point_made=s.two_point_made,
            three_point_attempts=s.three_point_attempts,
            three_point_made=s.three_point_made,
            free_throw_attempts=s.free_throw_attempts,
            free_throw_made=s.free_throw_made,
        )


@dataclass(slots=True)
class TeamState:
    name: str
    team_id: str
    side: Side
    roster: list[int]
    score: int = 0

    def add_points(self, points: int) -> None:
        if points < 0:
            raise ValueError(f"cannot add negative points: {points}")
        self.score += points


ON_COURT_COUNT = 5


class MatchRoster:
    """Match-scoped owner of every player; everything else refers to players by index."""

    def __init__(self, players: list[PlayerState], home: TeamState, away: TeamState) -> None:
        for expected, player in enumerate(players):
            if player.index != expected:
                raise ValueError(f"player '{player.name}' has index {player.index}, expected {expected}")
        self._players = players
        self._teams = {Side.HOME: home, Side.AWAY: away}

    @property
    def players(self) -> list[PlayerState]:
        return self._players

    def player(self, index: int) -> PlayerState:
        if index < 0 or index >= len(self._players):
            raise ValueError(f"unknown player index {index}")
        return self._players[index]

    def team(self, side: Side) -> TeamState:
        return self._teams[side]

    def on_court(self, side: Side) -> list[int]:
        active = [i for i in self._teams[side].roster if self._players[i].active]
        return active[:ON_COURT_COUNT]

    def bench(self, side: Side) -> list[int]:
        on_court = set(self.on_court(side))
        return [i for i in self._teams[side].roster if self._players[i].active and i not in on_court]

    def box_scores(self, side: Side) -> list[PlayerBoxScore]:
        team = self._teams[side]
        return [self._players[i].box_score(team.name) for i in team.roster]
