"""Skill-versus-skill odds used by every contested action.

``success_percentage`` is the house formula for shots, passes and steals on the
1-99 attribute scale. The d20 helpers drive the dribble-versus-steal contest on
the 1-20 scale: the ball handler keeps the ball when a d20 roll meets the
threshold.
"""

from __future__ import annotations

from hds.contracts import RandomSource

D20_MIN_THRESHOLD = 1
D20_MAX_THRESHOLD = 21


def success_percentage(attack_skill: float, defense_skill: float) -> float:
    if attack_skill > defense_skill:
        percentage = 100 - ((2 * defense_skill - attack_skill) / 2)
    elif attack_skill < defense_skill:
        percentage = (2 * attack_skill - defense_skill) / 2
    else:
        percentage = 50.0
    return max(0.0, min(100.0, float(percentage)))


def check_success(success_percent: float, random_source: RandomSource) -> bool:
    return random_source.percent() < success_percent


def dribble_threshold(dribble_skill: int, steal_skill: int) -> int:
    threshold = 20 - (dribble_skill - steal_skill)
    return max(D20_MIN_THRESHOLD, min(D20_MAX_THRESHOLD, threshold))


def dribble_success_percent(dribble_skill: int, steal_skill: int) -> float:
    threshold = dribble_threshold(dribble_skill, steal_skill)
    percent = (21 - threshold) / 20 * 100
    return max(0.0, min(100.0, percent))


def dribble_difficulty(dribble_skill: int, steal_skill: int) -> str:
    percent = dribble_success_percent(dribble_skill, steal_skill)
    if percent >= 80:
        return "Easy"
    if percent >= 60:
        return "Moderate"
    if percent >= 40:
        return "Challenging"
    if percent >= 20:
        return "Difficult"
    return "Dangerous"


def is_safe_dribble(dribble_skill: int, steal_skill: int, safety_threshold: float = 60.0) -> bool:
    return dribble_success_percent(dribble_skill, steal_skill) >= safety_threshold


def to_d20_scale(attribute: float) -> int:
    return max(1, min(20, int(attribute) // 5))
