from __future__ import annotations

from typing import Mapping

from hds.contracts import AttributeCatalogEntry, PlayerAttributes, ValidationIssue

SKILL_LEVEL_MIN = 1
SKILL_LEVEL_MAX = 5
ATTRIBUTE_MIN = 1.0
ATTRIBUTE_MAX = 99.0
SKILL_BASE = 15.0
SKILL_STEP = 15.0

ATTRIBUTE_DEFS: list[tuple[str, float, str]] = [
    ("shooting", 0.0, "Two-point shooting"),
    ("shooting3pt", -10.0, "Three-point shooting"),
    ("defense", 0.0, "Interior defense against two-point attempts"),
    ("perimeter_defense", 0.0, "Perimeter defense against three-point attempts"),
    ("blocking", -20.0, "Shot blocking"),
    ("rebounding", 0.0, "Rebounding"),
    ("passing", 5.0, "Passing"),
    ("stealing", -10.0, "Stealing and on-ball marking"),
    ("dribbling", 5.0, "Ball handling"),
]

_codes = [code for code, _, _ in ATTRIBUTE_DEFS]
if len(_codes) != len(set(_codes)):
    raise ValueError("duplicate attribute code detected in ATTRIBUTE_DEFS")

# Accepted spellings for attribute overrides coming from roster setup payloads.
ATTRIBUTE_ALIASES: dict[str, str] = {
    "perimeterDefense": "perimeter_defense",
    "shooting3Pt": "shooting3pt",
    "shooting_3pt": "shooting3pt",
}


def attribute_catalog() -> list[AttributeCatalogEntry]:
    return [
        AttributeCatalogEntry(
            attribute_code=code,
            min_value=ATTRIBUTE_MIN,
            max_value=ATTRIBUTE_MAX,
            skill_offset=offset,
            description=desc,
        )
        for code, offset, desc in ATTRIBUTE_DEFS
    ]


def attribute_codes() -> list[str]:
    return list(_codes)


def canonical_attribute_code(name: str) -> str:
    return ATTRIBUTE_ALIASES.get(name, name)


def skill_base(skill_level: int) -> float:
    if skill_level < SKILL_LEVEL_MIN or skill_level > SKILL_LEVEL_MAX:
        raise ValueError(f"skill level must be within [{SKILL_LEVEL_MIN}, {SKILL_LEVEL_MAX}], got {skill_level}")
    return SKILL_BASE + SKILL_STEP * skill_level


def derived_attribute(skill_level: int, code: str) -> float:
    offsets = {c: offset for c, offset, _ in ATTRIBUTE_DEFS}
    if code not in offsets:
        raise ValueError(f"unknown attribute '{code}'")
    return _clamp(skill_base(skill_level) + offsets[code])


def resolve_attributes(skill_level: int, overrides: Mapping[str, float] | None = None) -> PlayerAttributes:
    """Merge skill-level defaults with explicit overrides, once, at match start."""
    values = {code: derived_attribute(skill_level, code) for code in _codes}
    for raw_name, raw_value in (overrides or {}).items():
        code = canonical_attribute_code(raw_name)
        if code not in values:
            raise ValueError(f"unknown attribute '{raw_name}'")
        value = float(raw_value)
        if value < ATTRIBUTE_MIN or value > ATTRIBUTE_MAX:
            raise ValueError(f"attribute '{raw_name}' out of range [{ATTRIBUTE_MIN}, {ATTRIBUTE_MAX}]: {value}")
        values[code] = value
    return PlayerAttributes(**values)


def boosted(attributes: PlayerAttributes, code: str, skill_levels: int) -> float:
    """Attribute value raised by a number of skill-level steps, capped at the scale maximum."""
    return _clamp(getattr(attributes, code) + SKILL_STEP * skill_levels)


def validate_attributes(entity_id: str, skill_level: object, overrides: Mapping[str, object]) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    if not isinstance(skill_level, int) or isinstance(skill_level, bool):
        issues.append(
            ValidationIssue(
                code="INVALID_SKILL_LEVEL_TYPE",
                severity="blocking",
                field_path="skill_level",
                entity_id=entity_id,
                message="skill level must be an integer",
            )
        )
    elif skill_level < SKILL_LEVEL_MIN or skill_level > SKILL_LEVEL_MAX:
        issues.append(
            ValidationIssue(
                code="SKILL_LEVEL_OUT_OF_RANGE",
                severity="blocking",
                field_path="skill_level",
                entity_id=entity_id,
                message=f"skill level out of range [{SKILL_LEVEL_MIN}, {SKILL_LEVEL_MAX}]",
            )
        )

    for raw_name, value in overrides.items():
        code = canonical_attribute_code(raw_name)
        if code not in _codes:
            issues.append(
                ValidationIssue(
                    code="UNKNOWN_ATTRIBUTE",
                    severity="blocking",
                    field_path=f"attributes.{raw_name}",
                    entity_id=entity_id,
                    message="attribute is not part of the catalog",
                )
            )
            continue
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            issues.append(
                ValidationIssue(
                    code="INVALID_ATTRIBUTE_TYPE",
                    severity="blocking",
                    field_path=f"attributes.{raw_name}",
                    entity_id=entity_id,
                    message="attribute must be numeric",
                )
            )
            continue
        if value < ATTRIBUTE_MIN or value > ATTRIBUTE_MAX:
            issues.append(
                ValidationIssue(
                    code="ATTRIBUTE_OUT_OF_RANGE",
                    severity="blocking",
                    field_path=f"attributes.{raw_name}",
                    entity_id=entity_id,
                    message=f"attribute out of range [{ATTRIBUTE_MIN}, {ATTRIBUTE_MAX}]",
                )
            )
    return issues


def _clamp(value: float) -> float:
    return max(ATTRIBUTE_MIN, min(ATTRIBUTE_MAX, value))
