from .court import Court, MoveResult
from .dice import POSITION_DICE, available_actions, can_perform, dice_for_action, parse_notation, roll_dice, roll_for_action
from .models import MatchRoster, PlayerState, TeamState
from .narration import TemplateNarrator
from .probability import check_success, dribble_success_percent, dribble_threshold, success_percentage
from .resolver import ActionResolver
from .rules import MatchRules, default_match_rules, rules_from_mapping
from .session import TIE, MatchEngine, build_match_roster
from .validation import PreMatchValidator, team_from_dict, teams_from_payload

__all__ = [
    "ActionResolver",
    "Court",
    "MatchEngine",
    "MatchRoster",
    "MatchRules",
    "MoveResult",
    "POSITION_DICE",
    "PlayerState",
    "PreMatchValidator",
    "TIE",
    "TeamState",
    "TemplateNarrator",
    "available_actions",
    "build_match_roster",
    "can_perform",
    "check_success",
    "default_match_rules",
    "dice_for_action",
    "dribble_success_percent",
    "dribble_threshold",
    "parse_notation",
    "roll_dice",
    "roll_for_action",
    "rules_from_mapping",
    "success_percentage",
    "team_from_dict",
    "teams_from_payload",
]
