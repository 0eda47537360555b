from __future__ import annotations

import pytest

from hds.basketball import TemplateNarrator
from hds.basketball.narration import TEMPLATES, format_template
from hds.contracts import NarrationTag
from hds.core import seeded_random
from tests.helpers import FixedRandomSource


def test_every_tag_has_templates():
    for tag in NarrationTag:
        assert TEMPLATES[tag], tag


def test_format_template_fills_known_keys_and_keeps_unknown():
    text = format_template("{player} scores {points} for {team}", {"player": "Ada", "points": 2})
    assert text == "Ada scores 2 for {team}"


def test_narrator_uses_its_random_source_to_pick_a_template():
    narrator = TemplateNarrator(FixedRandomSource())
    text = narrator.narrate(NarrationTag.SCORE_3PT, {"player": "Ada"})
    assert text == "THREE POINTER! Ada from downtown! GOOD!"
    assert narrator.lines == [("score3pt", text)]


def test_narrator_accepts_tag_values_as_strings():
    narrator = TemplateNarrator(FixedRandomSource())
    assert narrator.narrate("steal", {"defender": "Bo", "attacker": "Cy"}) == "STEAL! Bo takes it from Cy!"


def test_unknown_tag_is_bracketed():
    narrator = TemplateNarrator(FixedRandomSource())
    assert narrator.narrate("alleyOop", {}) == "[alleyOop]"
    assert narrator.lines == [("alleyOop", "[alleyOop]")]


def test_custom_templates_replace_defaults():
    narrator = TemplateNarrator(FixedRandomSource(), templates={NarrationTag.BLOCK: ["{defender} says no"]})
    assert narrator.narrate(NarrationTag.BLOCK, {"defender": "Bo"}) == "Bo says no"
    assert narrator.narrate(NarrationTag.STEAL, {}) == "[steal]"


def test_seeded_narration_is_reproducible():
    def lines(seed):
        narrator = TemplateNarrator(seeded_random(seed))
        return [narrator.narrate(NarrationTag.SCORE_2PT, {"player": "Ada", "team": "Hawks"}) for _ in range(10)]

    assert lines(4) == lines(4)
    assert all("Ada" in line for line in lines(4))


def test_clear_drops_history():
    narrator = TemplateNarrator(FixedRandomSource())
    narrator.narrate(NarrationTag.PASS, {"passer": "A", "receiver": "B"})
    narrator.clear()
    assert narrator.lines == []


@pytest.mark.parametrize("tag", [NarrationTag.MATCH_END, NarrationTag.QUARTER_END, NarrationTag.BLOWOUT])
def test_templates_render_without_leftover_placeholders(tag):
    data = {
        "winnerTeam": "Hawks",
        "loserTeam": "Owls",
        "winnerScore": 88,
        "loserScore": 80,
        "quarter": 2,
        "homeTeam": "Hawks",
        "awayTeam": "Owls",
        "homeScore": 40,
        "awayScore": 38,
        "team": "Hawks",
        "diff": 17,
    }
    for template in TEMPLATES[tag]:
        assert "{" not in format_template(template, data)
