from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Protocol, Sequence


class Position(str, Enum):
    PG = "PG"
    SG = "SG"
    SF = "SF"
    PF = "PF"
    C = "C"


class ActionKind(str, Enum):
    TWO_POINT = "2point"
    THREE_POINT = "3point"
    REBOUND = "rebound"
    ASSIST = "assist"
    STEAL = "steal"
    BLOCK = "block"
    DRIBBLE = "dribble"


class Side(str, Enum):
    HOME = "home"
    AWAY = "away"

    @property
    def other(self) -> Side:
        return Side.AWAY if self is Side.HOME else Side.HOME


class ShotType(str, Enum):
    TWO = "2pt"
    THREE = "3pt"

    @property
    def points(self) -> int:
        return 2 if self is ShotType.TWO else 3


class ShotZone(str, Enum):
    CLOSE = "close"
    MID = "mid"
    THREE = "three"


class MatchPhase(str, Enum):
    PRE_MATCH = "pre_match"
    IN_PROGRESS = "in_progress"
    POST_MATCH = "post_match"


class EventType(str, Enum):
    MATCH_START = "match_start"
    BALL_CARRIER = "ball_carrier"
    MOVEMENT = "movement"
    DRIBBLE_CONTEST = "dribble_contest"
    TURNOVER = "turnover"
    FAST_BREAK = "fast_break"
    PASS_COMPLETED = "pass_completed"
    SHOT_MADE = "shot_made"
    SHOT_MISSED = "shot_missed"
    SHOT_BLOCKED = "shot_blocked"
    FAST_BREAK_SCORE = "fast_break_score"
    FAST_BREAK_MISS = "fast_break_miss"
    SHOOTING_FOUL = "shooting_foul"
    FOUL_OUT = "foul_out"
    FREE_THROW_MADE = "free_throw_made"
    FREE_THROW_MISSED = "free_throw_missed"
    DEFENSIVE_REBOUND = "defensive_rebound"
    OFFENSIVE_REBOUND = "offensive_rebound"
    POSSESSION_CHANGE = "possession_change"
    ROUND_END = "round_end"
    QUARTER_END = "quarter_end"
    CLOSE_GAME = "close_game"
    BLOWOUT = "blowout"
    MATCH_END = "match_end"


SCORING_EVENT_TYPES = frozenset({EventType.SHOT_MADE, EventType.FAST_BREAK_SCORE, EventType.FREE_THROW_MADE})


class NarrationTag(str, Enum):
    MATCH_START = "matchStart"
    MATCH_END = "matchEnd"
    MATCH_TIE = "matchTie"
    POSSESSION = "possession"
    SCORE_2PT = "score2pt"
    SCORE_3PT = "score3pt"
    SCORE_2PT_FAST_BREAK = "score2ptFastBreak"
    SCORE_3PT_FAST_BREAK = "score3ptFastBreak"
    MISS_2PT = "miss2pt"
    MISS_3PT = "miss3pt"
    STEAL = "steal"
    STEAL_ATTEMPT_FAIL = "stealAttemptFail"
    BLOCK = "block"
    REBOUND_DEFENSE = "reboundDefense"
    REBOUND_OFFENSE = "reboundOffense"
    PASS = "pass"
    ASSIST = "assist"
    TURNOVER = "turnover"
    FOUL = "foul"
    FREE_THROW_MADE = "freeThrowMade"
    FREE_THROW_MISSED = "freeThrowMissed"
    FAST_BREAK_START = "fastBreakStart"
    QUARTER_END = "quarterEnd"
    CLOSE_GAME = "closeGame"
    BLOWOUT = "blowout"


class RandomSource(Protocol):
    def rand(self) -> float: ...

    def randint(self, a: int, b: int) -> int: ...

    def roll(self, sides: int) -> int: ...

    def percent(self) -> float: ...

    def choice(self, items: Sequence[Any]) -> Any: ...

    def shuffle(self, items: list[Any]) -> None: ...

    def spawn(self, substream_id: str) -> RandomSource: ...


class Narrator(Protocol):
    def narrate(self, event_type: NarrationTag | str, data: Mapping[str, Any]) -> str: ...


@dataclass(slots=True)
class PlayerDescriptor:
    name: str
    position: Position | str
    skill_level: int = 3
    attributes: dict[str, float] = field(default_factory=dict)
    player_id: str | None = None


@dataclass(slots=True)
class TeamDescriptor:
    name: str
    players: list[PlayerDescriptor]
    team_id: str | None = None


@dataclass(slots=True)
class PlayerAttributes:
    shooting: float
    shooting3pt: float
    defense: float
    perimeter_defense: float
    blocking: float
    rebounding: float
    passing: float
    stealing: float
    dribbling: float


@dataclass(slots=True)
class PlayerStats:
    points: int = 0
    assists: int = 0
    rebounds: int = 0
    offensive_rebounds: int = 0
    defensive_rebounds: int = 0
    steals: int = 0
    blocks: int = 0
    fouls: int = 0
    turnovers: int = 0
    two_point_attempts: int = 0
    two_point_made: int = 0
    three_point_attempts: int = 0
    three_point_made: int = 0
    free_throw_attempts: int = 0
    free_throw_made: int = 0


@dataclass(slots=True)
class DiceTerm:
    quantity: int
    sides: int


@dataclass(slots=True)
class DiceRoll:
    rolls: list[int]
    total: int
    notation: str
    can_perform: bool
    reason: str | None = None


@dataclass(slots=True)
class ShotResult:
    shot_type: ShotType
    can_perform: bool
    shooter: str
    defender: str
    dice: DiceRoll
    made: bool = False
    blocked: bool = False
    points: int = 0
    blocker: str | None = None
    success_percent: float = 0.0
    block_chance: float = 0.0
    reason: str | None = None

    @property
    def kind(self) -> ActionKind:
        return ActionKind.TWO_POINT if self.shot_type is ShotType.TWO else ActionKind.THREE_POINT


@dataclass(slots=True)
class ReboundResult:
    defense_wins: bool
    offense_player: str
    defense_player: str
    offense_roll: DiceRoll
    defense_roll: DiceRoll
    offense_total: int
    defense_total: int
    can_perform: bool = True
    kind: ActionKind = ActionKind.REBOUND

    @property
    def winner(self) -> str:
        return "defense" if self.defense_wins else "offense"

    @property
    def winner_player(self) -> str:
        return self.defense_player if self.defense_wins else self.offense_player


@dataclass(slots=True)
class PassResult:
    can_perform: bool
    passer: str
    receiver: str
    defender: str
    completed: bool = False
    stolen: bool = False
    stealer: str | None = None
    success_percent: float = 0.0
    steal_chance: float = 0.0
    steal_dice: DiceRoll | None = None
    reason: str | None = None
    kind: ActionKind = ActionKind.ASSIST

    @property
    def turnover(self) -> bool:
        return self.can_perform and not self.completed


@dataclass(slots=True)
class StealResult:
    can_perform: bool
    stealer: str
    ball_handler: str
    dice: DiceRoll
    stolen: bool = False
    success_percent: float = 0.0
    reason: str | None = None
    kind: ActionKind = ActionKind.STEAL


@dataclass(slots=True)
class BlockResult:
    can_perform: bool
    blocker: str
    shooter: str
    dice: DiceRoll
    blocked: bool = False
    block_chance: float = 0.0
    reason: str | None = None
    kind: ActionKind = ActionKind.BLOCK


@dataclass(slots=True)
class DribbleResult:
    success: bool
    roll: int
    threshold: int
    success_percent: float
    dribbler: str
    defender: str
    dribble_skill: int
    steal_skill: int
    can_perform: bool = True
    kind: ActionKind = ActionKind.DRIBBLE

    @property
    def outcome(self) -> str:
        return "advance" if self.success else "turnover"


@dataclass(slots=True)
class MatchEvent:
    sequence: int
    round: int
    quarter: int
    possession: Side
    event_type: EventType
    description: str
    details: dict[str, Any]
    home_score: int
    away_score: int
    timestamp: datetime
    narration: str | None = None


@dataclass(slots=True)
class PlayerBoxScore:
    player_id: str
    name: str
    team: str
    position: Position
    active: bool
    points: int
    assists: int
    rebounds: int
    offensive_rebounds: int
    defensive_rebounds: int
    steals: int
    blocks: int
    fouls: int
    turnovers: int
    two_point_attempts: int
    two_point_made: int
    three_point_attempts: int
    three_point_made: int
    free_throw_attempts: int
    free_throw_made: int

    @property
    def field_goal_attempts(self) -> int:
        return self.two_point_attempts + self.three_point_attempts

    @property
    def field_goals_made(self) -> int:
        return self.two_point_made + self.three_point_made


@dataclass(slots=True)
class MatchSummary:
    match_id: str
    home_team: str
    away_team: str
    home_score: int
    away_score: int
    winner: str
    total_rounds: int
    events: list[MatchEvent]
    home_stats: list[PlayerBoxScore]
    away_stats: list[PlayerBoxScore]

    @property
    def score(self) -> str:
        return f"{self.home_score}-{self.away_score}"

    @property
    def is_tie(self) -> bool:
        return self.home_score == self.away_score

    def to_dict(self) -> dict[str, Any]:
        def _event(e: MatchEvent) -> dict[str, Any]:
            return {
                "sequence": e.sequence,
                "round": e.round,
                "quarter": e.quarter,
                "possession": e.possession.value,
                "type": e.event_type.value,
                "description": e.description,
                "details": dict(e.details),
                "home_score": e.home_score,
                "away_score": e.away_score,
                "narration": e.narration,
                "timestamp": e.timestamp.isoformat(),
            }

        def _box(b: PlayerBoxScore) -> dict[str, Any]:
            row = asdict(b)
            row["position"] = b.position.value
            return row

        return {
            "match_id": self.match_id,
            "home_team": self.home_team,
            "away_team": self.away_team,
            "score": self.score,
            "winner": self.winner,
            "total_rounds": self.total_rounds,
            "events": [_event(e) for e in self.events],
            "home_stats": [_box(b) for b in self.home_stats],
            "away_stats": [_box(b) for b in self.away_stats],
        }


@dataclass(slots=True)
class ValidationIssue:
    code: str
    severity: str
    field_path: str
    entity_id: str
    message: str


@dataclass(slots=True)
class ValidationResult:
    ok: bool
    issues: list[ValidationIssue]


class ValidationError(ValueError):
    def __init__(self, issues: list[ValidationIssue]) -> None:
        message = "; ".join(f"{i.code}:{i.entity_id}:{i.message}" for i in issues)
        super().__init__(message)
        self.issues = issues


@dataclass(slots=True)
class AttributeCatalogEntry:
    attribute_code: str
    min_value: float
    max_value: float
    skill_offset: float
    description: str


@dataclass(slots=True)
class ForensicArtifact:
    artifact_id: str
    timestamp: datetime
    engine_scope: str
    error_code: str
    message: str
    state_snapshot: Mapping[str, Any]
    context: Mapping[str, Any]
    identifiers: Mapping[str, str]
    causal_fragment: Sequence[str]
