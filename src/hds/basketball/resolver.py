from __future__ import annotations

import math

from hds.contracts import (
    ActionKind,
    BlockResult,
    DribbleResult,
    PassResult,
    RandomSource,
    ReboundResult,
    ShotResult,
    ShotType,
    StealResult,
)
from hds.basketball.attributes import boosted
from hds.basketball.dice import dice_for_action, roll_for_action
from hds.basketball.models import PlayerState
from hds.basketball.probability import (
    check_success,
    dribble_success_percent,
    dribble_threshold,
    success_percentage,
    to_d20_scale,
)
from hds.core.randomness import gameplay_random


class ActionResolver:
    """Turns one contested action into a structured outcome.

    Every resolver checks the position dice table first. A position that cannot
    perform the action gets ``can_perform=False`` back before any randomness is
    drawn. Resolvers never touch player statistics; the match engine applies
    stat changes from the returned result.
    """

    TWO_POINT_BLOCK_CAP = 25.0
    THREE_POINT_BLOCK_CAP = 10.0
    DEFENSIVE_REBOUND_EDGE = 2
    PASS_STEAL_CAP = 30.0
    BLOCK_ATTEMPT_BASE = 15.0
    BLOCK_ATTEMPT_CAP = 50.0

    def __init__(self, random_source: RandomSource | None = None) -> None:
        self._random_source = random_source or gameplay_random()

    def resolve_two_pointer(self, shooter: PlayerState, defender: PlayerState, *, shooting_bonus: int = 0) -> ShotResult:
        return self._resolve_shot(
            ShotType.TWO,
            shooter,
            defender,
            shooting_code="shooting",
            defense_skill=defender.attributes.defense,
            block_chance=min(self.TWO_POINT_BLOCK_CAP, defender.attributes.blocking / 4),
            shooting_bonus=shooting_bonus,
        )

    def resolve_three_pointer(self, shooter: PlayerState, defender: PlayerState, *, shooting_bonus: int = 0) -> ShotResult:
        return self._resolve_shot(
            ShotType.THREE,
            shooter,
            defender,
            shooting_code="shooting3pt",
            defense_skill=defender.attributes.perimeter_defense,
            block_chance=min(self.THREE_POINT_BLOCK_CAP, defender.attributes.blocking / 10),
            shooting_bonus=shooting_bonus,
        )

    def resolve_shot(self, shot_type: ShotType, shooter: PlayerState, defender: PlayerState, *, shooting_bonus: int = 0) -> ShotResult:
        if shot_type is ShotType.TWO:
            return self.resolve_two_pointer(shooter, defender, shooting_bonus=shooting_bonus)
        return self.resolve_three_pointer(shooter, defender, shooting_bonus=shooting_bonus)

    def resolve_rebound_contest(self, offense: PlayerState, defense: PlayerState) -> ReboundResult:
        offense_roll = roll_for_action(ActionKind.REBOUND, offense.position, self._random_source)
        defense_roll = roll_for_action(ActionKind.REBOUND, defense.position, self._random_source)

        offense_total = offense_roll.total + math.floor(offense.attributes.rebounding / 10)
        defense_total = defense_roll.total + math.floor(defense.attributes.rebounding / 10) + self.DEFENSIVE_REBOUND_EDGE

        return ReboundResult(
            defense_wins=defense_total >= offense_total,
            offense_player=offense.name,
            defense_player=defense.name,
            offense_roll=offense_roll,
            defense_roll=defense_roll,
            offense_total=offense_total,
            defense_total=defense_total,
        )

    def resolve_pass(self, passer: PlayerState, receiver: PlayerState, defender: PlayerState) -> PassResult:
        if dice_for_action(ActionKind.ASSIST, passer.position) is None:
            return PassResult(
                can_perform=False,
                passer=passer.name,
                receiver=receiver.name,
                defender=defender.name,
                reason=f"{passer.position.value} cannot make a scoring pass",
            )

        success_percent = success_percentage(passer.attributes.passing, defender.attributes.stealing)
        steal_dice = roll_for_action(ActionKind.STEAL, defender.position, self._random_source)
        steal_chance = min(self.PASS_STEAL_CAP, (100 - success_percent) / 3 + steal_dice.total)

        if check_success(steal_chance, self._random_source):
            return PassResult(
                can_perform=True,
                passer=passer.name,
                receiver=receiver.name,
                defender=defender.name,
                completed=False,
                stolen=True,
                stealer=defender.name,
                success_percent=success_percent,
                steal_chance=steal_chance,
                steal_dice=steal_dice,
            )

        return PassResult(
            can_perform=True,
            passer=passer.name,
            receiver=receiver.name,
            defender=defender.name,
            completed=check_success(success_percent, self._random_source),
            success_percent=success_percent,
            steal_chance=steal_chance,
            steal_dice=steal_dice,
        )

    def resolve_steal(self, defender: PlayerState, ball_handler: PlayerState) -> StealResult:
        dice = roll_for_action(ActionKind.STEAL, defender.position, self._random_source)
        if not dice.can_perform:
            return StealResult(
                can_perform=False,
                stealer=defender.name,
                ball_handler=ball_handler.name,
                dice=dice,
                reason=dice.reason,
            )

        base = success_percentage(defender.attributes.stealing, ball_handler.attributes.dribbling)
        adjusted = min(100.0, base + dice.total)
        return StealResult(
            can_perform=True,
            stealer=defender.name,
            ball_handler=ball_handler.name,
            dice=dice,
            stolen=check_success(adjusted, self._random_source),
            success_percent=adjusted,
        )

    def resolve_block(self, defender: PlayerState, shooter: PlayerState) -> BlockResult:
        dice = roll_for_action(ActionKind.BLOCK, defender.position, self._random_source)
        if not dice.can_perform:
            return BlockResult(
                can_perform=False,
                blocker=defender.name,
                shooter=shooter.name,
                dice=dice,
                reason=dice.reason,
            )

        block_chance = min(
            self.BLOCK_ATTEMPT_CAP,
            self.BLOCK_ATTEMPT_BASE + defender.attributes.blocking / 5 + dice.total * 2,
        )
        return BlockResult(
            can_perform=True,
            blocker=defender.name,
            shooter=shooter.name,
            dice=dice,
            blocked=check_success(block_chance, self._random_source),
            block_chance=block_chance,
        )

    def resolve_dribble_contest(self, dribbler: PlayerState, defender: PlayerState) -> DribbleResult:
        dribble_skill = to_d20_scale(dribbler.attributes.dribbling)
        steal_skill = to_d20_scale(defender.attributes.stealing)
        threshold = dribble_threshold(dribble_skill, steal_skill)
        roll = self._random_source.roll(20)
        return DribbleResult(
            success=roll >= threshold,
            roll=roll,
            threshold=threshold,
            success_percent=dribble_success_percent(dribble_skill, steal_skill),
            dribbler=dribbler.name,
            defender=defender.name,
            dribble_skill=dribble_skill,
            steal_skill=steal_skill,
        )

    def _resolve_shot(
        self,
        shot_type: ShotType,
        shooter: PlayerState,
        defender: PlayerState,
        *,
        shooting_code: str,
        defense_skill: float,
        block_chance: float,
        shooting_bonus: int,
    ) -> ShotResult:
        kind = ActionKind.TWO_POINT if shot_type is ShotType.TWO else ActionKind.THREE_POINT
        dice = roll_for_action(kind, shooter.position, self._random_source)
        if not dice.can_perform:
            return ShotResult(
                shot_type=shot_type,
                can_perform=False,
                shooter=shooter.name,
                defender=defender.name,
                dice=dice,
                reason=f"{shooter.position.value} cannot attempt a {shot_type.value} shot",
            )

        shooting_skill = boosted(shooter.attributes, shooting_code, shooting_bonus)
        success_percent = success_percentage(shooting_skill, defense_skill)

        if check_success(block_chance, self._random_source):
            return ShotResult(
                shot_type=shot_type,
                can_perform=True,
                shooter=shooter.name,
                defender=defender.name,
                dice=dice,
                blocked=True,
                blocker=defender.name,
                success_percent=success_percent,
                block_chance=block_chance,
            )

        made = check_success(success_percent, self._random_source)
        return ShotResult(
            shot_type=shot_type,
            can_perform=True,
            shooter=shooter.name,
            defender=defender.name,
            dice=dice,
            made=made,
            points=shot_type.points if made else 0,
            success_percent=success_percent,
            block_chance=block_chance,
        )

