from .errors import (
    CourtBoundsError,
    DiceNotationError,
    EngineIntegrityError,
    build_forensic_artifact,
    integrity_error_from,
    persist_forensic_artifact,
)
from .events import EventBus, MatchEventLog
from .ids import make_id, now_utc, roster_player_id, slugify
from .randomness import PythonRandomSource, gameplay_random, seeded_random, weighted_choice

__all__ = [
    "CourtBoundsError",
    "DiceNotationError",
    "EngineIntegrityError",
    "EventBus",
    "MatchEventLog",
    "PythonRandomSource",
    "build_forensic_artifact",
    "gameplay_random",
    "integrity_error_from",
    "make_id",
    "now_utc",
    "persist_forensic_artifact",
    "roster_player_id",
    "seeded_random",
    "slugify",
    "weighted_choice",
]
