from __future__ import annotations

from hds.basketball.resolver import ActionResolver
from hds.contracts import ActionKind, Position, ShotType, Side
from tests.helpers import FixedRandomSource, player_state


def _pair(offense: Position, defense: Position, **defense_attrs):
    shooter = player_state(offense, index=0)
    defender = player_state(defense, side=Side.AWAY, index=1, **defense_attrs)
    return shooter, defender


def test_center_three_pointer_is_refused_without_randomness():
    rng = FixedRandomSource()
    shooter, defender = _pair(Position.C, Position.C)
    result = ActionResolver(rng).resolve_three_pointer(shooter, defender)
    assert result.can_perform is False
    assert result.kind is ActionKind.THREE_POINT
    assert result.reason
    assert rng.calls == 0
    assert shooter.stats.three_point_attempts == 0


def test_blocked_shot_never_rolls_make_or_miss():
    rng = FixedRandomSource(percents=[0.0])
    shooter, defender = _pair(Position.PG, Position.C)
    result = ActionResolver(rng).resolve_two_pointer(shooter, defender)
    assert result.blocked and not result.made
    assert result.blocker == defender.name
    assert result.block_chance == 10.0
    assert rng.percent_calls == 1
    assert rng.roll_calls == 1


def test_block_chance_caps_by_shot_type():
    shooter, defender = _pair(Position.SG, Position.C, blocking=99)
    resolver = ActionResolver(FixedRandomSource())
    assert resolver.resolve_two_pointer(shooter, defender).block_chance == 24.75
    assert resolver.resolve_three_pointer(shooter, defender).block_chance == 9.9


def test_made_shot_reports_points_and_percent():
    rng = FixedRandomSource(rolls=[3], percents=[50.0, 10.0])
    shooter, defender = _pair(Position.SG, Position.SF)
    result = ActionResolver(rng).resolve_three_pointer(shooter, defender)
    assert result.made and result.points == 3
    assert result.shot_type is ShotType.THREE
    assert result.dice.rolls == [3]
    assert result.success_percent == 20.0


def test_shooting_bonus_raises_success_chance():
    shooter, defender = _pair(Position.SF, Position.SF)
    resolver = ActionResolver(FixedRandomSource())
    plain = resolver.resolve_two_pointer(shooter, defender)
    boosted = resolver.resolve_two_pointer(shooter, defender, shooting_bonus=3)
    assert boosted.success_percent > plain.success_percent
    assert shooter.stats.points == 0


def test_rebound_tie_goes_to_defense():
    # SF 1d6 + 6 vs SF 1d6 + 6 + 2: offense needs to out-roll by three.
    offense, defense = _pair(Position.SF, Position.SF)
    result = ActionResolver(FixedRandomSource(rolls=[3, 1])).resolve_rebound_contest(offense, defense)
    assert result.offense_total == result.defense_total == 9
    assert result.defense_wins
    assert result.winner_player == defense.name

    result = ActionResolver(FixedRandomSource(rolls=[6, 1])).resolve_rebound_contest(offense, defense)
    assert result.offense_total == 12 and result.defense_total == 9
    assert not result.defense_wins


def test_guards_rebound_with_attribute_bonus_only():
    offense, defense = _pair(Position.PG, Position.C)
    rng = FixedRandomSource(rolls=[1, 1, 1])
    result = ActionResolver(rng).resolve_rebound_contest(offense, defense)
    assert result.offense_roll.can_perform is False
    assert result.offense_total == 6
    assert rng.roll_calls == 3


def test_pass_requires_assist_dice_for_passer():
    rng = FixedRandomSource()
    passer = player_state(Position.C, index=0)
    receiver = player_state(Position.PF, index=1)
    defender = player_state(Position.PG, side=Side.AWAY, index=2)
    result = ActionResolver(rng).resolve_pass(passer, receiver, defender)
    assert result.can_perform is False
    assert not result.turnover
    assert rng.calls == 0


def test_pass_interception_and_completion():
    passer = player_state(Position.PG, index=0)
    receiver = player_state(Position.SF, index=1)
    defender = player_state(Position.PG, side=Side.AWAY, index=2, stealing=99)

    stolen = ActionResolver(FixedRandomSource(rolls=[4, 6], percents=[0.0])).resolve_pass(passer, receiver, defender)
    assert stolen.stolen and not stolen.completed and stolen.turnover
    assert stolen.steal_chance == 30.0
    assert stolen.stealer == defender.name

    completed = ActionResolver(FixedRandomSource(rolls=[1, 1], percents=[99.0, 0.0])).resolve_pass(passer, receiver, defender)
    assert completed.completed and not completed.stolen
    assert completed.success_percent == 15.5


def test_steal_attempt_adds_dice_and_caps_at_hundred():
    defender = player_state(Position.PG, side=Side.AWAY, index=1, stealing=99)
    handler = player_state(Position.SG, index=0, dribbling=1)
    result = ActionResolver(FixedRandomSource(rolls=[4, 6], percents=[99.5])).resolve_steal(defender, handler)
    assert result.success_percent == 100.0
    assert result.stolen


def test_steal_and_block_refusals_follow_dice_table():
    rng = FixedRandomSource()
    forward = player_state(Position.SF, side=Side.AWAY, index=1)
    guard = player_state(Position.PG, index=0)
    resolver = ActionResolver(rng)
    assert resolver.resolve_steal(forward, guard).can_perform is False
    assert resolver.resolve_block(guard, forward).can_perform is False
    assert rng.calls == 0


def test_block_attempt_chance_formula():
    center = player_state(Position.C, side=Side.AWAY, index=1)
    shooter = player_state(Position.SG, index=0)
    result = ActionResolver(FixedRandomSource(rolls=[1, 1], percents=[99.0])).resolve_block(center, shooter)
    assert result.block_chance == 15 + 40 / 5 + 2 * 2
    assert not result.blocked
    capped = ActionResolver(FixedRandomSource(rolls=[8, 10])).resolve_block(center, shooter)
    assert capped.block_chance == 50.0


def test_dribble_contest_uses_one_d20():
    dribbler = player_state(Position.PG, index=0, dribbling=80)
    defender = player_state(Position.SG, side=Side.AWAY, index=1, stealing=10)
    rng = FixedRandomSource(rolls=[6])
    result = ActionResolver(rng).resolve_dribble_contest(dribbler, defender)
    assert result.threshold == 6
    assert result.success and result.outcome == "advance"
    assert result.success_percent == 75.0
    assert rng.roll_calls == 1
    failed = ActionResolver(FixedRandomSource(rolls=[5])).resolve_dribble_contest(dribbler, defender)
    assert not failed.success and failed.outcome == "turnover"
