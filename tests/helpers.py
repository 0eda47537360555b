from __future__ import annotations

from typing import Any, Iterable, Sequence

from hds.basketball.attributes import resolve_attributes
from hds.basketball.models import PlayerState
from hds.contracts import PlayerDescriptor, Position, Side, TeamDescriptor

STARTING_FIVE = [Position.PG, Position.SG, Position.SF, Position.PF, Position.C]


class FixedRandomSource:
    """Scripted randomness: each method pops from its own queue, then falls back to a default.

    Defaults are chosen so unscripted draws fail every probability check
    (``rand`` 0.99, ``percent`` 99.9) and dice land on 1.
    """

    def __init__(
        self,
        *,
        rands: Iterable[float] = (),
        rolls: Iterable[int] = (),
        percents: Iterable[float] = (),
        default_rand: float = 0.99,
        default_roll: int = 1,
        default_percent: float = 99.9,
    ) -> None:
        self._rands = list(rands)
        self._rolls = list(rolls)
        self._percents = list(percents)
        self.default_rand = default_rand
        self.default_roll = default_roll
        self.default_percent = default_percent
        self.rand_calls = 0
        self.roll_calls = 0
        self.percent_calls = 0

    @property
    def calls(self) -> int:
        return self.rand_calls + self.roll_calls + self.percent_calls

    def rand(self) -> float:
        self.rand_calls += 1
        return self._rands.pop(0) if self._rands else self.default_rand

    def randint(self, a: int, b: int) -> int:
        return a

    def roll(self, sides: int) -> int:
        self.roll_calls += 1
        value = self._rolls.pop(0) if self._rolls else self.default_roll
        return max(1, min(sides, value))

    def percent(self) -> float:
        self.percent_calls += 1
        return self._percents.pop(0) if self._percents else self.default_percent

    def choice(self, items: Sequence[Any]) -> Any:
        return items[0]

    def shuffle(self, items: list[Any]) -> None:
        return None

    def spawn(self, substream_id: str) -> "FixedRandomSource":
        return FixedRandomSource()


def player_state(
    position: Position,
    *,
    skill_level: int = 3,
    side: Side = Side.HOME,
    index: int = 0,
    name: str | None = None,
    **attributes: float,
) -> PlayerState:
    return PlayerState(
        index=index,
        player_id=f"p{index}",
        name=name or f"{side.value}-{position.value}",
        position=position,
        skill_level=skill_level,
        side=side,
        attributes=resolve_attributes(skill_level, attributes),
    )


def make_team(
    name: str,
    skill_level: int = 3,
    positions: Sequence[Position] = STARTING_FIVE,
    **player_overrides: Any,
) -> TeamDescriptor:
    players = [
        PlayerDescriptor(name=f"{name} {p.value}{i}", position=p, skill_level=skill_level, **player_overrides)
        for i, p in enumerate(positions)
    ]
    return TeamDescriptor(name=name, players=players)


def team_payload(name: str, count: int = 5, skill_level: int = 3) -> dict[str, Any]:
    positions = [p.value for p in STARTING_FIVE]
    return {
        "name": name,
        "players": [
            {"name": f"{name} Player {i}", "position": positions[i % 5], "skillLevel": skill_level}
            for i in range(count)
        ],
    }
