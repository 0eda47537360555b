from __future__ import annotations

import re
from typing import Mapping

from hds.contracts import ActionKind, DiceRoll, DiceTerm, Position, RandomSource
from hds.core.errors import DiceNotationError

_TERM = re.compile(r"^(\d+)d(\d+)$", re.IGNORECASE)

NO_DICE = "none"

# Which positions may attempt each action and what they roll. ``None`` means
# the position cannot perform the action at all.
POSITION_DICE: Mapping[ActionKind, Mapping[Position, str | None]] = {
    ActionKind.TWO_POINT: {
        Position.PG: "1d4",
        Position.SG: "1d4",
        Position.SF: "1d4",
        Position.PF: "1d8",
        Position.C: "2d6",
    },
    ActionKind.THREE_POINT: {
        Position.PG: "1d3",
        Position.SG: "1d6",
        Position.SF: "1d6",
        Position.PF: None,
        Position.C: None,
    },
    ActionKind.REBOUND: {
        Position.PG: None,
        Position.SG: None,
        Position.SF: "1d6",
        Position.PF: "2d6",
        Position.C: "3d6",
    },
    ActionKind.ASSIST: {
        Position.PG: "1d10",
        Position.SG: "1d6",
        Position.SF: None,
        Position.PF: None,
        Position.C: None,
    },
    ActionKind.STEAL: {
        Position.PG: "1d4+1d6",
        Position.SG: "1d2+1d3",
        Position.SF: None,
        Position.PF: None,
        Position.C: None,
    },
    ActionKind.BLOCK: {
        Position.PG: None,
        Position.SG: None,
        Position.SF: None,
        Position.PF: "1d4+1d5",
        Position.C: "1d8+1d10",
    },
}


def parse_notation(notation: str) -> list[DiceTerm]:
    if not notation or not notation.strip():
        raise DiceNotationError("dice notation must not be empty")
    terms: list[DiceTerm] = []
    for part in notation.split("+"):
        match = _TERM.match(part.strip())
        if match is None:
            raise DiceNotationError(f"invalid dice notation: {notation!r}")
        quantity, sides = int(match.group(1)), int(match.group(2))
        if quantity < 1 or sides < 1:
            raise DiceNotationError(f"dice notation needs at least one die with one side: {notation!r}")
        terms.append(DiceTerm(quantity=quantity, sides=sides))
    return terms


def roll_dice(notation: str | None, random_source: RandomSource) -> DiceRoll:
    if not notation:
        return DiceRoll(rolls=[], total=0, notation=NO_DICE, can_perform=False)
    rolls: list[int] = []
    for term in parse_notation(notation):
        for _ in range(term.quantity):
            rolls.append(random_source.roll(term.sides))
    return DiceRoll(rolls=rolls, total=sum(rolls), notation=notation, can_perform=True)


def dice_for_action(kind: ActionKind, position: Position) -> str | None:
    table = POSITION_DICE.get(kind)
    if table is None:
        return None
    return table.get(Position(position))


def can_perform(kind: ActionKind, position: Position) -> bool:
    return dice_for_action(kind, position) is not None


def roll_for_action(kind: ActionKind, position: Position, random_source: RandomSource) -> DiceRoll:
    notation = dice_for_action(kind, position)
    if notation is None:
        return DiceRoll(
            rolls=[],
            total=0,
            notation=NO_DICE,
            can_perform=False,
            reason=f"{Position(position).value} cannot perform {kind.value}",
        )
    return roll_dice(notation, random_source)


def available_actions(position: Position) -> dict[ActionKind, str | None]:
    return {kind: table.get(Position(position)) for kind, table in POSITION_DICE.items()}


def dice_range(notation: str) -> tuple[int, int]:
    terms = parse_notation(notation)
    return sum(t.quantity for t in terms), sum(t.quantity * t.sides for t in terms)
