from .types import (
    SCORING_EVENT_TYPES,
    ActionKind,
    AttributeCatalogEntry,
    BlockResult,
    DiceRoll,
    DiceTerm,
    DribbleResult,
    EventType,
    ForensicArtifact,
    MatchEvent,
    MatchPhase,
    MatchSummary,
    NarrationTag,
    Narrator,
    PassResult,
    PlayerAttributes,
    PlayerBoxScore,
    PlayerDescriptor,
    PlayerStats,
    Position,
    RandomSource,
    ReboundResult,
    ShotResult,
    ShotType,
    ShotZone,
    Side,
    StealResult,
    TeamDescriptor,
    ValidationError,
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    "SCORING_EVENT_TYPES",
    "ActionKind",
    "AttributeCatalogEntry",
    "BlockResult",
    "DiceRoll",
    "DiceTerm",
    "DribbleResult",
    "EventType",
    "ForensicArtifact",
    "MatchEvent",
    "MatchPhase",
    "MatchSummary",
    "NarrationTag",
    "Narrator",
    "PassResult",
    "PlayerAttributes",
    "PlayerBoxScore",
    "PlayerDescriptor",
    "PlayerStats",
    "Position",
    "RandomSource",
    "ReboundResult",
    "ShotResult",
    "ShotType",
    "ShotZone",
    "Side",
    "StealResult",
    "TeamDescriptor",
    "ValidationError",
    "ValidationIssue",
    "ValidationResult",
]
