from __future__ import annotations

from typing import Any, Iterable, Mapping

from hds.contracts import (
    PlayerDescriptor,
    Position,
    TeamDescriptor,
    ValidationError,
    ValidationIssue,
    ValidationResult,
)
from hds.basketball.attributes import validate_attributes
from hds.basketball.models import ON_COURT_COUNT
from hds.core.ids import roster_player_id, slugify

MAX_ROSTER_SIZE = 12
_POSITION_CODES = {p.value for p in Position}


class PreMatchValidator:
    def validate_match_input(self, home: TeamDescriptor, away: TeamDescriptor) -> ValidationResult:
        issues: list[ValidationIssue] = []
        issues.extend(self._validate_team(home))
        issues.extend(self._validate_team(away))

        if home.name.strip().lower() == away.name.strip().lower():
            issues.append(
                ValidationIssue(
                    code="DUPLICATE_TEAM_NAME",
                    severity="blocking",
                    field_path="away.name",
                    entity_id=away.name,
                    message="home and away teams must have different names",
                )
            )

        seen: dict[str, str] = {}
        for team in (home, away):
            for player_id in _player_ids(team):
                if player_id in seen:
                    issues.append(
                        ValidationIssue(
                            code="DUPLICATE_PLAYER_ID",
                            severity="blocking",
                            field_path="players.player_id",
                            entity_id=player_id,
                            message=f"player id already used by team '{seen[player_id]}'",
                        )
                    )
                else:
                    seen[player_id] = team.name
        return self._finalize(issues)

    def validate_team(self, team: TeamDescriptor) -> ValidationResult:
        return self._finalize(self._validate_team(team))

    def _finalize(self, issues: list[ValidationIssue]) -> ValidationResult:
        ordered = sorted(issues, key=lambda x: (x.severity, x.code, x.entity_id, x.field_path))
        blocking = [i for i in ordered if i.severity == "blocking"]
        if blocking:
            raise ValidationError(blocking)
        return ValidationResult(ok=True, issues=ordered)

    def _validate_team(self, team: TeamDescriptor) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        team_id = team.team_id or slugify(team.name)
        if not team.name or not team.name.strip():
            issues.append(
                ValidationIssue(
                    code="MISSING_TEAM_NAME",
                    severity="blocking",
                    field_path="name",
                    entity_id=team_id,
                    message="team name is required",
                )
            )
        if len(team.players) > MAX_ROSTER_SIZE:
            issues.append(
                ValidationIssue(
                    code="ROSTER_TOO_LARGE",
                    severity="blocking",
                    field_path="players",
                    entity_id=team_id,
                    message=f"roster has {len(team.players)} players, maximum is {MAX_ROSTER_SIZE}",
                )
            )
        if len(team.players) < ON_COURT_COUNT:
            issues.append(
                ValidationIssue(
                    code="NOT_ENOUGH_PLAYERS",
                    severity="blocking",
                    field_path="players",
                    entity_id=team_id,
                    message=f"roster has {len(team.players)} players, {ON_COURT_COUNT} are needed on court",
                )
            )

        for roster_index, (player, player_id) in enumerate(zip(team.players, _player_ids(team))):
            issues.extend(self._validate_player(player, player_id, roster_index))
        return issues

    def _validate_player(self, player: PlayerDescriptor, player_id: str, roster_index: int) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        if not player.name or not str(player.name).strip():
            issues.append(
                ValidationIssue(
                    code="MISSING_PLAYER_NAME",
                    severity="blocking",
                    field_path=f"players[{roster_index}].name",
                    entity_id=player_id,
                    message="player name is required",
                )
            )
        position = player.position.value if isinstance(player.position, Position) else player.position
        if position not in _POSITION_CODES:
            issues.append(
                ValidationIssue(
                    code="UNKNOWN_POSITION",
                    severity="blocking",
                    field_path=f"players[{roster_index}].position",
                    entity_id=player_id,
                    message=f"position '{position}' is not one of {sorted(_POSITION_CODES)}",
                )
            )
        issues.extend(validate_attributes(player_id, player.skill_level, player.attributes))
        return issues


def _player_ids(team: TeamDescriptor) -> list[str]:
    return [p.player_id or roster_player_id(team.name, p.name, i) for i, p in enumerate(team.players)]


def team_from_dict(payload: Mapping[str, Any]) -> TeamDescriptor:
    """Build a roster from a setup payload (``{"name": ..., "players": [...]}``).

    Keys follow the roster setup format: ``skillLevel`` and ``skill_level`` are
    both accepted. Values are not range-checked here; the validator does that.
    """
    if "name" not in payload:
        raise ValueError("team payload is missing 'name'")
    players_raw = payload.get("players", [])
    if not isinstance(players_raw, list):
        raise ValueError("team payload 'players' must be a list")
    players = [_player_from_dict(raw, i) for i, raw in enumerate(players_raw)]
    return TeamDescriptor(
        name=str(payload["name"]),
        players=players,
        team_id=payload.get("team_id") or payload.get("id"),
    )


def _player_from_dict(raw: Mapping[str, Any], roster_index: int) -> PlayerDescriptor:
    if not isinstance(raw, Mapping):
        raise ValueError(f"player entry {roster_index} must be an object")
    if "name" not in raw or "position" not in raw:
        raise ValueError(f"player entry {roster_index} needs 'name' and 'position'")
    attributes = raw.get("attributes") or {}
    if not isinstance(attributes, Mapping):
        raise ValueError(f"player entry {roster_index} 'attributes' must be an object")
    return PlayerDescriptor(
        name=str(raw["name"]),
        position=str(raw["position"]),
        skill_level=raw.get("skill_level", raw.get("skillLevel", 3)),
        attributes=dict(attributes),
        player_id=raw.get("player_id") or raw.get("id"),
    )


def teams_from_payload(payload: Mapping[str, Any] | Iterable[Mapping[str, Any]]) -> tuple[TeamDescriptor, TeamDescriptor]:
    if isinstance(payload, Mapping):
        if "home" not in payload or "away" not in payload:
            raise ValueError("match payload needs 'home' and 'away' teams")
        return team_from_dict(payload["home"]), team_from_dict(payload["away"])
    entries = list(payload)
    if len(entries) != 2:
        raise ValueError(f"expected exactly two teams, got {len(entries)}")
    return team_from_dict(entries[0]), team_from_dict(entries[1])
