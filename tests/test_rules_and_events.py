from __future__ import annotations

import pytest

from hds.basketball.rules import default_match_rules, rules_from_mapping
from hds.contracts import EventType, Side
from hds.core import EventBus, MatchEventLog


def test_default_rules_describe_a_hundred_round_match():
    rules = default_match_rules()
    rules.validate()
    assert rules.total_rounds == 100
    assert rules.court_width == 50 and rules.court_height == 30


def test_rules_from_mapping_overrides_known_keys():
    rules = rules_from_mapping({"rounds_per_quarter": 10, "shooting_foul_chance": 0.0})
    assert rules.total_rounds == 40
    assert rules.shooting_foul_chance == 0.0


@pytest.mark.parametrize(
    "config",
    [
        {"overtime": True},
        {"steal_attempt_chance": 1.5},
        {"court_width": 20},
        {"quarters": 0},
        {"blowout_margin": 3},
    ],
)
def test_rules_from_mapping_rejects_bad_config(config):
    with pytest.raises(ValueError):
        rules_from_mapping(config)


def test_event_log_sequences_and_publishes():
    bus = EventBus()
    seen = []
    bus.subscribe(seen.append)
    log = MatchEventLog(bus)
    for event_type in (EventType.MATCH_START, EventType.ROUND_END, EventType.ROUND_END):
        log.append(
            round_number=1,
            quarter=1,
            possession=Side.HOME,
            event_type=event_type,
            description=event_type.value,
            home_score=0,
            away_score=0,
        )
    assert [e.sequence for e in log] == [1, 2, 3]
    assert len(seen) == 3
    assert bus.emitted_count() == 3
    assert bus.emitted_count(EventType.ROUND_END) == 2
    assert bus.emitted_count("round_end") == 2
    assert [e.event_type for e in log.tail(1)] == [EventType.ROUND_END]
    assert len(log.of_type(EventType.MATCH_START)) == 1
