from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Mapping

from hds.contracts import Position

# Who brings the ball up when possession has no carrier yet.
CARRIER_WEIGHTS: dict[Position, float] = {
    Position.PG: 40,
    Position.SG: 25,
    Position.SF: 15,
    Position.PF: 12,
    Position.C: 8,
}

# Who crashes the glass after a miss, on either side.
REBOUND_WEIGHTS: dict[Position, float] = {
    Position.C: 35,
    Position.PF: 30,
    Position.SF: 20,
    Position.SG: 10,
    Position.PG: 5,
}

# Probability of pulling up for three from mid range.
THREE_POINT_TENDENCY: dict[Position, float] = {
    Position.PG: 0.4,
    Position.SG: 0.4,
    Position.SF: 0.2,
    Position.PF: 0.05,
    Position.C: 0.0,
}

FAST_BREAK_THREE_TENDENCY: dict[Position, float] = {
    Position.PG: 0.5,
    Position.SG: 0.6,
    Position.SF: 0.3,
    Position.PF: 0.1,
    Position.C: 0.0,
}

# Court units per movement call.
MOVEMENT_SPEED: dict[Position, float] = {
    Position.PG: 10,
    Position.SG: 8,
    Position.SF: 7,
    Position.PF: 6,
    Position.C: 5,
}


@dataclass(slots=True, frozen=True)
class MatchRules:
    quarters: int = 4
    rounds_per_quarter: int = 25
    court_width: int = 50
    court_height: int = 30
    steal_attempt_chance: float = 0.25
    steal_proximity: float = 5.0
    pass_attempt_chance: float = 0.3
    pass_range: float = 15.0
    shooting_foul_chance: float = 0.08
    foul_limit: int = 5
    free_throw_difficulty: float = 45.0
    # In skill levels, not attribute points: each level is SKILL_STEP (15) on the shooting attribute.
    fast_break_skill_bonus: int = 3
    close_game_margin: int = 5
    blowout_margin: int = 15

    @property
    def total_rounds(self) -> int:
        return self.quarters * self.rounds_per_quarter

    def validate(self) -> None:
        if self.quarters < 1 or self.rounds_per_quarter < 1:
            raise ValueError("a match needs at least one quarter of at least one round")
        if self.court_width < 30 or self.court_height < 25:
            raise ValueError("court must be at least 30 x 25 to hold the starting formation")
        for name in ("steal_attempt_chance", "pass_attempt_chance", "shooting_foul_chance"):
            value = getattr(self, name)
            if value < 0.0 or value > 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value}")
        if self.steal_proximity < 0 or self.pass_range < 0:
            raise ValueError("interaction ranges must be non-negative")
        if self.foul_limit < 1:
            raise ValueError("foul limit must be positive")
        if self.free_throw_difficulty < 1 or self.free_throw_difficulty > 99:
            raise ValueError("free throw difficulty must be on the 1-99 attribute scale")
        if self.fast_break_skill_bonus < 0:
            raise ValueError("fast break bonus must be non-negative")
        if self.close_game_margin < 0 or self.blowout_margin <= self.close_game_margin:
            raise ValueError("blowout margin must exceed the close game margin")


def default_match_rules() -> MatchRules:
    return MatchRules()


def rules_from_mapping(config: Mapping[str, Any], base: MatchRules | None = None) -> MatchRules:
    known = {f.name for f in fields(MatchRules)}
    unknown = sorted(set(config) - known)
    if unknown:
        raise ValueError(f"unknown match rule keys: {unknown}")
    rules = replace(base or default_match_rules(), **dict(config))
    rules.validate()
    return rules
