from __future__ import annotations

import re
from typing import Any, Mapping

from hds.contracts import NarrationTag, RandomSource
from hds.core.randomness import gameplay_random

_PLACEHOLDER = re.compile(r"\{(\w+)\}")

TEMPLATES: dict[NarrationTag, list[str]] = {
    NarrationTag.MATCH_START: [
        "TIP OFF! {homeTeam} vs {awayTeam}!",
        "THE GAME BEGINS! {homeTeam} takes on {awayTeam}!",
        "IT'S GAME TIME! {homeTeam} versus {awayTeam}!",
    ],
    NarrationTag.MATCH_END: [
        "FINAL! {winnerTeam} wins {winnerScore} to {loserScore}!",
        "THAT'S THE GAME! {winnerTeam} takes it {winnerScore}-{loserScore}!",
        "IT'S OVER! {winnerTeam} victorious: {winnerScore} to {loserScore}!",
    ],
    NarrationTag.MATCH_TIE: [
        "IT'S A TIE! {score} all! What a game!",
        "FINAL! Tied at {score}!",
    ],
    NarrationTag.POSSESSION: [
        "{player} has the ball on offense.",
        "{player} brings it up for {team}.",
        "Ball in {player}'s hands.",
    ],
    NarrationTag.SCORE_2PT: [
        "BUCKET! {player} scores 2!",
        "SLAM DUNK by {player}! 2 points for {team}!",
        "{player} converts! 2 points on the board!",
        "NICE! {player} with the layup for 2!",
        "{player} in the paint! THROWS IT DOWN! 2 points!",
    ],
    NarrationTag.SCORE_2PT_FAST_BREAK: [
        "FAST BREAK! {player} goes coast to coast and SLAMS IT! 2 points!",
        "TRANSITION BUCKET! {player} finishes easy!",
        "WHAT SPEED! {player} completes the fast break! 2 points!",
        "STEAL AND SCORE! {player} won't miss that! 2 points!",
    ],
    NarrationTag.SCORE_3PT: [
        "THREE POINTER! {player} from downtown! GOOD!",
        "FROM THE PERIMETER! {player} drains it! 3 points!",
        "SPLASH by {player}! Nothing but net!",
        "PULLED UP FOR THREE! {player} HITS IT!",
        "FROM DEEP! {player} buries the three! 3 points!",
    ],
    NarrationTag.SCORE_3PT_FAST_BREAK: [
        "FAST BREAK THREE! {player} pulls up and DRAINS IT!",
        "TRANSITION THREE! {player} stops, pops, and... BANG! 3 points!",
        "WHAT CONFIDENCE! {player} hits the fast break three!",
    ],
    NarrationTag.MISS_2PT: [
        "{player} tries the layup but misses!",
        "The ball rattles out! {player} can't convert.",
        "{player} forces it and the ball bounces out!",
        "Shot attempt by {player}... no good!",
    ],
    NarrationTag.MISS_3PT: [
        "{player} shoots the three... won't go!",
        "{player}'s three-pointer hits the rim!",
        "{player} fires from deep but no luck!",
        "Three-pointer by {player}... MISSED!",
    ],
    NarrationTag.STEAL: [
        "STEAL! {defender} takes it from {attacker}!",
        "INTERCEPTION! {defender} reads the play and picks it off!",
        "{defender} with perfect timing! Ball recovered!",
        "GREAT DEFENSE! {defender} rips it from {attacker}!",
    ],
    NarrationTag.STEAL_ATTEMPT_FAIL: [
        "{defender} reaches but {attacker} protects the ball.",
        "{attacker} escapes {defender}'s pressure.",
        "Steal attempt by {defender}... unsuccessful!",
    ],
    NarrationTag.BLOCK: [
        "BLOCKED! {defender} swats {player}'s shot away!",
        "REJECTION! {defender} denies {player}!",
        "NOT IN MY HOUSE! {defender} blocks {player}!",
        "GET THAT OUT OF HERE! {defender} with the block on {player}!",
    ],
    NarrationTag.REBOUND_DEFENSE: [
        "DEFENSIVE REBOUND! {player} grabs the board!",
        "{player} goes up and secures the rebound!",
        "Rebound to {player}! Possession secured!",
        "{player} controls the glass! Defensive board!",
    ],
    NarrationTag.REBOUND_OFFENSE: [
        "OFFENSIVE REBOUND! {player} keeps the possession alive!",
        "SECOND CHANCE! {player} grabs the board!",
        "{player} fights for the rebound and gets it!",
        "Hustle play by {player}! Offensive rebound!",
    ],
    NarrationTag.PASS: [
        "{passer} passes to {receiver}!",
        "Ball from {passer} finds {receiver}!",
        "Great pass from {passer} to {receiver}!",
        "{passer} feeds {receiver}!",
    ],
    NarrationTag.ASSIST: [
        "ASSIST! {passer} sets up {player} perfectly!",
        "Beautiful pass from {passer}! {player} converts!",
        "{passer} with the court vision! Assist to {player}!",
    ],
    NarrationTag.TURNOVER: [
        "TURNOVER! {player} loses the ball!",
        "Mistake by {player}! Turnover!",
        "{player} gives it away! Possession changes!",
        "Bad pass by {player}! Ball goes the other way!",
    ],
    NarrationTag.FOUL: [
        "FOUL! {player} gets {attacker} on the arm!",
        "Whistle! {player} is called for the shooting foul on {attacker}.",
        "{attacker} draws contact from {player}! Free throws coming.",
    ],
    NarrationTag.FREE_THROW_MADE: [
        "{player} knocks down the free throw.",
        "Good from the line by {player}.",
        "{player} sinks it from the stripe.",
    ],
    NarrationTag.FREE_THROW_MISSED: [
        "{player} misses the free throw.",
        "Off the rim! {player} can't hit from the line.",
        "{player}'s free throw rims out.",
    ],
    NarrationTag.FAST_BREAK_START: [
        "FAST BREAK! {team} pushes the pace!",
        "{player} leads the break for {team}!",
        "QUICK OUTLET! {team} in transition!",
    ],
    NarrationTag.QUARTER_END: [
        "End of Q{quarter}! {homeTeam} {homeScore} - {awayScore} {awayTeam}",
        "Q{quarter} complete! Score: {homeScore} to {awayScore}",
    ],
    NarrationTag.CLOSE_GAME: [
        "CLOSE GAME! Only {diff} point(s) separating them!",
        "NAIL BITER! Just {diff} point(s) apart!",
    ],
    NarrationTag.BLOWOUT: [
        "{team} up by {diff} points!",
        "Total domination by {team}! {diff} point lead!",
    ],
}


def format_template(template: str, data: Mapping[str, Any]) -> str:
    """Fill ``{key}`` placeholders; keys missing from ``data`` are left as written."""
    return _PLACEHOLDER.sub(lambda m: str(data[m.group(1)]) if m.group(1) in data else m.group(0), template)


class TemplateNarrator:
    """Play-by-play commentary picked at random from fixed English templates.

    Give it its own random stream (``random_source.spawn("narration")``) so
    turning commentary on or off never changes how a seeded match plays out.
    """

    def __init__(
        self,
        random_source: RandomSource | None = None,
        templates: Mapping[NarrationTag, list[str]] | None = None,
    ) -> None:
        self._random_source = random_source or gameplay_random()
        self._templates = dict(templates or TEMPLATES)
        self.lines: list[tuple[str, str]] = []

    def narrate(self, event_type: NarrationTag | str, data: Mapping[str, Any]) -> str:
        tag = _as_tag(event_type)
        options = self._templates.get(tag) if tag is not None else None
        if not options:
            text = f"[{event_type.value if isinstance(event_type, NarrationTag) else event_type}]"
        else:
            text = format_template(self._random_source.choice(options), data)
        self.lines.append((tag.value if tag is not None else str(event_type), text))
        return text

    def clear(self) -> None:
        self.lines.clear()


def _as_tag(event_type: NarrationTag | str) -> NarrationTag | None:
    if isinstance(event_type, NarrationTag):
        return event_type
    try:
        return NarrationTag(event_type)
    except ValueError:
        return None
