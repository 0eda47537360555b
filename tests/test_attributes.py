from __future__ import annotations

import pytest

from hds.basketball.attributes import (
    attribute_catalog,
    attribute_codes,
    boosted,
    resolve_attributes,
    skill_base,
    validate_attributes,
)


def test_skill_level_bases():
    assert [skill_base(level) for level in range(1, 6)] == [30, 45, 60, 75, 90]
    with pytest.raises(ValueError):
        skill_base(6)


def test_resolved_attributes_apply_offsets_and_clamp():
    attrs = resolve_attributes(3)
    assert attrs.shooting == 60
    assert attrs.shooting3pt == 50
    assert attrs.blocking == 40
    assert attrs.stealing == 50
    assert attrs.passing == 65
    assert attrs.dribbling == 65
    top = resolve_attributes(5)
    assert top.passing == 95
    assert resolve_attributes(1).blocking == 10


def test_explicit_overrides_win_and_aliases_are_accepted():
    attrs = resolve_attributes(1, {"shooting": 88, "perimeterDefense": 70})
    assert attrs.shooting == 88
    assert attrs.perimeter_defense == 70
    assert attrs.defense == 30


def test_unknown_or_out_of_range_override_raises():
    with pytest.raises(ValueError):
        resolve_attributes(3, {"jumping": 50})
    with pytest.raises(ValueError):
        resolve_attributes(3, {"shooting": 120})


def test_boost_is_skill_steps_capped_at_99():
    attrs = resolve_attributes(3)
    assert boosted(attrs, "shooting", 3) == 99
    assert boosted(resolve_attributes(1), "shooting", 3) == 75
    assert boosted(attrs, "shooting", 0) == 60


def test_catalog_lists_nine_attributes():
    assert len(attribute_catalog()) == 9
    assert "perimeter_defense" in attribute_codes()


def test_validate_attributes_collects_issues():
    issues = validate_attributes("p1", 7, {"jumping": 5, "shooting": "high", "passing": 0})
    codes = sorted(i.code for i in issues)
    assert codes == ["ATTRIBUTE_OUT_OF_RANGE", "INVALID_ATTRIBUTE_TYPE", "SKILL_LEVEL_OUT_OF_RANGE", "UNKNOWN_ATTRIBUTE"]
    assert all(i.severity == "blocking" for i in issues)
    assert validate_attributes("p2", 3, {"shooting": 70}) == []
