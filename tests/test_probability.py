from __future__ import annotations

import pytest

from hds.basketball.probability import (
    check_success,
    dribble_difficulty,
    dribble_success_percent,
    dribble_threshold,
    is_safe_dribble,
    success_percentage,
    to_d20_scale,
)
from tests.helpers import FixedRandomSource


@pytest.mark.parametrize(
    ("attack", "defense", "expected"),
    [(99, 51, 98), (51, 99, 2), (75, 75, 50), (85, 70, 72.5), (99, 99, 50), (1, 1, 50)],
)
def test_success_percentage_reference_values(attack, defense, expected):
    assert success_percentage(attack, defense) == pytest.approx(expected, abs=1.0)


def test_success_percentage_stays_in_range_over_attribute_scale():
    for attack in range(1, 100, 7):
        for defense in range(1, 100, 7):
            assert 0.0 <= success_percentage(attack, defense) <= 100.0


def test_success_percentage_is_pure():
    assert success_percentage(63, 41) == success_percentage(63, 41)
    assert dribble_threshold(12, 9) == dribble_threshold(12, 9)


def test_check_success_uses_strict_comparison():
    assert check_success(50.0, FixedRandomSource(percents=[49.999])) is True
    assert check_success(50.0, FixedRandomSource(percents=[50.0])) is False
    assert check_success(0.0, FixedRandomSource(percents=[0.0])) is False


@pytest.mark.parametrize(
    ("dribble", "steal", "threshold", "percent"),
    [(16, 2, 6, 75.0), (10, 10, 20, 5.0), (2, 18, 21, 0.0), (20, 5, 5, 80.0)],
)
def test_d20_threshold_reference_values(dribble, steal, threshold, percent):
    assert dribble_threshold(dribble, steal) == threshold
    assert dribble_success_percent(dribble, steal) == pytest.approx(percent)


def test_threshold_floor_always_succeeds():
    assert dribble_threshold(20, 1) == 1
    assert dribble_success_percent(20, 1) == 100.0


def test_dribble_difficulty_labels():
    assert dribble_difficulty(20, 5) == "Easy"
    assert dribble_difficulty(16, 2) == "Moderate"
    assert dribble_difficulty(10, 10) == "Dangerous"
    assert is_safe_dribble(16, 2)
    assert not is_safe_dribble(10, 10)


def test_d20_scale_clamps():
    assert to_d20_scale(1) == 1
    assert to_d20_scale(50) == 10
    assert to_d20_scale(99) == 19
    assert to_d20_scale(150) == 20
