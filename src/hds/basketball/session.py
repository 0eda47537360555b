from __future__ import annotations

import math
from typing import Any

from hds.contracts import (
    ActionKind,
    EventType,
    MatchEvent,
    MatchPhase,
    MatchSummary,
    NarrationTag,
    Narrator,
    PassResult,
    Position,
    RandomSource,
    ShotResult,
    ShotType,
    ShotZone,
    Side,
    TeamDescriptor,
)
from hds.basketball.attributes import resolve_attributes
from hds.basketball.court import Court
from hds.basketball.dice import can_perform
from hds.basketball.models import MatchRoster, PlayerState, TeamState
from hds.basketball.probability import check_success, success_percentage
from hds.basketball.resolver import ActionResolver
from hds.basketball.rules import (
    CARRIER_WEIGHTS,
    FAST_BREAK_THREE_TENDENCY,
    REBOUND_WEIGHTS,
    THREE_POINT_TENDENCY,
    MatchRules,
    default_match_rules,
)
from hds.basketball.validation import PreMatchValidator
from hds.core.errors import integrity_error_from
from hds.core.events import EventBus, MatchEventLog
from hds.core.ids import make_id, roster_player_id, slugify
from hds.core.randomness import gameplay_random, weighted_choice

TIE = "TIE"


def build_match_roster(home: TeamDescriptor, away: TeamDescriptor) -> MatchRoster:
    players: list[PlayerState] = []
    teams: dict[Side, TeamState] = {}
    for side, team in ((Side.HOME, home), (Side.AWAY, away)):
        indices: list[int] = []
        for roster_index, descriptor in enumerate(team.players):
            index = len(players)
            players.append(
                PlayerState(
                    index=index,
                    player_id=descriptor.player_id or roster_player_id(team.name, descriptor.name, roster_index),
                    name=descriptor.name,
                    position=Position(descriptor.position),
                    skill_level=descriptor.skill_level,
                    side=side,
                    attributes=resolve_attributes(descriptor.skill_level, descriptor.attributes),
                )
            )
            indices.append(index)
        teams[side] = TeamState(name=team.name, team_id=team.team_id or slugify(team.name), side=side, roster=indices)
    return MatchRoster(players, teams[Side.HOME], teams[Side.AWAY])


class MatchEngine:
    """Runs one match, possession by possession, from tip-off to the final score.

    The engine owns the roster, both teams and the court for the lifetime of the
    match. Players are referred to by their index in the match roster.
    """

    def __init__(
        self,
        home: TeamDescriptor,
        away: TeamDescriptor,
        *,
        random_source: RandomSource | None = None,
        rules: MatchRules | None = None,
        narrator: Narrator | None = None,
        event_bus: EventBus | None = None,
        validator: PreMatchValidator | None = None,
        match_id: str | None = None,
    ) -> None:
        self._rules = rules or default_match_rules()
        self._rules.validate()
        (validator or PreMatchValidator()).validate_match_input(home, away)

        self.match_id = match_id or make_id("match")
        self._random_source = random_source or gameplay_random()
        self._resolver = ActionResolver(self._random_source)
        self._narrator = narrator
        self._log = MatchEventLog(event_bus)
        self._roster = build_match_roster(home, away)
        self.court = Court(
            [p.position for p in self._roster.players],
            width=self._rules.court_width,
            height=self._rules.court_height,
        )
        self.court.setup_teams(self._roster.on_court(Side.HOME), self._roster.on_court(Side.AWAY))

        self.round = 0
        self.quarter = 1
        self.possession = Side.HOME
        self.phase = MatchPhase.PRE_MATCH
        self._halted = False
        self._causal: list[str] = []

    @property
    def rules(self) -> MatchRules:
        return self._rules

    @property
    def roster(self) -> MatchRoster:
        return self._roster

    @property
    def events(self) -> list[MatchEvent]:
        return self._log.snapshot()

    @property
    def home_score(self) -> int:
        return self._roster.team(Side.HOME).score

    @property
    def away_score(self) -> int:
        return self._roster.team(Side.AWAY).score

    def simulate_match(self) -> MatchSummary:
        if self.phase is MatchPhase.POST_MATCH:
            raise RuntimeError(f"match {self.match_id} has already been played")
        self._ensure_started()
        while self.quarter <= self._rules.quarters:
            self.simulate_quarter()

        winner = self.winner()
        self._emit(
            EventType.MATCH_END,
            "Match ended",
            {"home_score": self.home_score, "away_score": self.away_score, "winner": winner},
            *self._match_end_narration(winner),
        )
        self.phase = MatchPhase.POST_MATCH
        return self.summary()

    def simulate_quarter(self) -> None:
        self._ensure_started()
        if self.quarter > self._rules.quarters:
            raise RuntimeError(f"all {self._rules.quarters} quarters have been played")
        for _ in range(self._rules.rounds_per_quarter):
            self.simulate_round()

        home = self._roster.team(Side.HOME)
        away = self._roster.team(Side.AWAY)
        self._emit(
            EventType.QUARTER_END,
            f"End of Quarter {self.quarter}",
            {"home_score": home.score, "away_score": away.score},
            NarrationTag.QUARTER_END,
            {
                "quarter": self.quarter,
                "homeTeam": home.name,
                "homeScore": home.score,
                "awayTeam": away.name,
                "awayScore": away.score,
            },
        )

        diff = abs(home.score - away.score)
        if diff <= self._rules.close_game_margin:
            self._emit(
                EventType.CLOSE_GAME,
                f"Close game after Quarter {self.quarter}: {diff} point(s) apart",
                {"diff": diff},
                NarrationTag.CLOSE_GAME,
                {"diff": diff},
            )
        elif diff >= self._rules.blowout_margin:
            leader = home if home.score > away.score else away
            self._emit(
                EventType.BLOWOUT,
                f"{leader.name} leads by {diff} after Quarter {self.quarter}",
                {"diff": diff, "team": leader.name},
                NarrationTag.BLOWOUT,
                {"team": leader.name, "diff": diff},
            )
        self.quarter += 1

    def simulate_round(self) -> None:
        self._ensure_started()
        if self.quarter > self._rules.quarters:
            raise RuntimeError(f"all {self._rules.quarters} quarters have been played")
        self.round += 1
        self._causal = []
        try:
            self._play_round()
        except ValueError as exc:
            self._halted = True
            raise integrity_error_from(
                exc,
                engine_scope="match_engine",
                error_code="ROUND_INTEGRITY_VIOLATION",
                state_snapshot=self._integrity_snapshot(),
                identifiers={"match_id": self.match_id, "round": str(self.round)},
                causal_fragment=self._causal,
            ) from exc
        self._emit(
            EventType.ROUND_END,
            f"End of round {self.round}",
            {"home_score": self.home_score, "away_score": self.away_score, "next_possession": self.possession.value},
        )

    def winner(self) -> str:
        if self.home_score > self.away_score:
            return self._roster.team(Side.HOME).name
        if self.away_score > self.home_score:
            return self._roster.team(Side.AWAY).name
        return TIE

    def summary(self) -> MatchSummary:
        return MatchSummary(
            match_id=self.match_id,
            home_team=self._roster.team(Side.HOME).name,
            away_team=self._roster.team(Side.AWAY).name,
            home_score=self.home_score,
            away_score=self.away_score,
            winner=self.winner(),
            total_rounds=self.round,
            events=self._log.snapshot(),
            home_stats=self._roster.box_scores(Side.HOME),
            away_stats=self._roster.box_scores(Side.AWAY),
        )

    def state(self) -> dict[str, Any]:
        return {
            "match_id": self.match_id,
            "phase": self.phase.value,
            "round": self.round,
            "quarter": self.quarter,
            "possession": self.possession.value,
            "home_score": self.home_score,
            "away_score": self.away_score,
            "court": self.court.snapshot(),
            "last_events": self._log.tail(5),
        }

    # -- round flow --------------------------------------------------------

    def _play_round(self) -> None:
        offense = self.possession
        carrier = self._ball_carrier(offense)
        self._advance(carrier, offense)

        defender = self._nearest_defender(carrier)
        if (
            self.court.distance(carrier.index, defender.index) <= self._rules.steal_proximity
            and self._random_source.rand() < self._rules.steal_attempt_chance
        ):
            contest = self._resolver.resolve_dribble_contest(carrier, defender)
            self._emit(
                EventType.DRIBBLE_CONTEST,
                f"{carrier.name} (dribble {contest.dribble_skill}) vs {defender.name} (steal {contest.steal_skill})",
                {
                    "roll": contest.roll,
                    "threshold": contest.threshold,
                    "dribble_skill": contest.dribble_skill,
                    "steal_skill": contest.steal_skill,
                    "success_percent": contest.success_percent,
                    "success": contest.success,
                },
                NarrationTag.STEAL_ATTEMPT_FAIL if contest.success else None,
                {"defender": defender.name, "attacker": carrier.name},
            )
            if not contest.success:
                self._steal(carrier, defender, reason="dribble_steal")
                return

        shooter = carrier
        passer: PlayerState | None = None
        attempt = self._maybe_pass(carrier, offense)
        if attempt is not None:
            result, receiver, pass_defender = attempt
            if result.stolen:
                self._steal(carrier, pass_defender, reason="interception")
                return
            if not result.completed:
                carrier.stats.turnovers += 1
                self._emit(
                    EventType.TURNOVER,
                    f"{carrier.name}'s pass to {receiver.name} goes out of bounds",
                    {"reason": "bad_pass", "player": carrier.name, "success_percent": result.success_percent},
                    NarrationTag.TURNOVER,
                    {"player": carrier.name},
                )
                self._change_possession("turnover")
                return
            self.court.set_ball_possession(receiver.index)
            self._emit(
                EventType.PASS_COMPLETED,
                f"{carrier.name} passes to {receiver.name}",
                {
                    "passer": carrier.name,
                    "receiver": receiver.name,
                    "success_percent": result.success_percent,
                    "steal_chance": result.steal_chance,
                },
                NarrationTag.PASS,
                {"passer": carrier.name, "receiver": receiver.name},
            )
            shooter, passer = receiver, carrier

        self._take_shot(shooter, self._shot_type(shooter, offense), passer=passer)

    def _ball_carrier(self, offense: Side) -> PlayerState:
        on_court = self._roster.on_court(offense)
        current = self.court.ball_possession
        if current is not None and current in on_court:
            carrier = self._roster.player(current)
        else:
            index = weighted_choice(
                self._random_source,
                [(i, CARRIER_WEIGHTS[self._roster.player(i).position]) for i in on_court],
            )
            self.court.set_ball_possession(index)
            carrier = self._roster.player(index)
        team = self._roster.team(offense)
        self._emit(
            EventType.BALL_CARRIER,
            f"{carrier.name} has the ball for {team.name}",
            {"player": carrier.name, "position": carrier.position.value},
            NarrationTag.POSSESSION,
            {"player": carrier.name, "team": team.name},
        )
        return carrier

    def _advance(self, carrier: PlayerState, offense: Side) -> None:
        target_x, target_y = self.court.basket_for(offense is Side.HOME)
        start = self.court.position_of(carrier.index)
        steps = 1 + math.ceil(carrier.skill_level / 2)
        blocked = 0
        for _ in range(steps):
            if self.court.move_player(carrier.index, target_x, target_y).blocked:
                blocked += 1
        end = self.court.position_of(carrier.index)
        self._emit(
            EventType.MOVEMENT,
            f"{carrier.name} advances up the court",
            {
                "player": carrier.name,
                "steps": steps,
                "blocked_steps": blocked,
                "from": [round(start[0], 1), round(start[1], 1)],
                "to": [round(end[0], 1), round(end[1], 1)],
            },
        )

    def _maybe_pass(self, carrier: PlayerState, offense: Side) -> tuple[PassResult, PlayerState, PlayerState] | None:
        if not can_perform(ActionKind.ASSIST, carrier.position):
            return None
        options = self.court.get_passing_options(carrier.index, self._roster.on_court(offense), self._rules.pass_range)
        if not options:
            return None
        if self._random_source.rand() >= self._rules.pass_attempt_chance:
            return None

        attacking_right = offense is Side.HOME
        # Look for the open teammate closest to the rim; passing order breaks ties.
        target = min(options, key=lambda option: self.court.distance_to_basket(option[0], attacking_right))[0]
        receiver = self._roster.player(target)
        defender = self._nearest_defender(receiver)
        return self._resolver.resolve_pass(carrier, receiver, defender), receiver, defender

    def _shot_type(self, shooter: PlayerState, offense: Side) -> ShotType:
        zone = self.court.get_shooting_distance(shooter.index, offense is Side.HOME)
        if zone is ShotZone.THREE:
            return ShotType.THREE
        if zone is ShotZone.MID and self._random_source.rand() < THREE_POINT_TENDENCY[shooter.position]:
            return ShotType.THREE
        return ShotType.TWO

    def _steal(self, victim: PlayerState, stealer: PlayerState, *, reason: str) -> None:
        victim.stats.turnovers += 1
        stealer.stats.steals += 1
        self._emit(
            EventType.TURNOVER,
            f"{stealer.name} steals from {victim.name}!",
            {"reason": reason, "player": victim.name, "stealer": stealer.name},
            NarrationTag.STEAL,
            {"defender": stealer.name, "attacker": victim.name},
        )
        self._fast_break(stealer)

    def _fast_break(self, player: PlayerState) -> None:
        # The formation is not reset; the break starts from where the ball was won.
        self.possession = player.side
        self.court.set_ball_possession(player.index)
        team = self._roster.team(player.side)
        self._emit(
            EventType.POSSESSION_CHANGE,
            f"Possession goes to {team.name}",
            {"reason": "steal", "team": team.name},
        )
        self._emit(
            EventType.FAST_BREAK,
            f"{player.name} on the fast break!",
            {"player": player.name, "team": team.name},
            NarrationTag.FAST_BREAK_START,
            {"team": team.name, "player": player.name},
        )
        if self._random_source.rand() < FAST_BREAK_THREE_TENDENCY[player.position]:
            shot_type = ShotType.THREE
        else:
            shot_type = ShotType.TWO
        self._take_shot(player, shot_type, fast_break=True)

    def _take_shot(
        self,
        shooter: PlayerState,
        shot_type: ShotType,
        *,
        fast_break: bool = False,
        passer: PlayerState | None = None,
    ) -> None:
        defender = self._nearest_defender(shooter)
        bonus = self._rules.fast_break_skill_bonus if fast_break else 0
        result = self._resolver.resolve_shot(shot_type, shooter, defender, shooting_bonus=bonus)
        if not result.can_perform and shot_type is ShotType.THREE:
            result = self._resolver.resolve_two_pointer(shooter, defender, shooting_bonus=bonus)
        if not result.can_perform:
            raise ValueError(f"{shooter.name} ({shooter.position.value}) has no shot available: {result.reason}")

        shooter.record_shot(result.shot_type, result.made)
        team = self._roster.team(shooter.side)
        details = _shot_details(result, fast_break)

        if result.made:
            team.add_points(result.points)
            if passer is not None:
                passer.stats.assists += 1
                details["assist"] = passer.name
            tag, data = self._score_narration(result, shooter, team.name, fast_break, passer)
            self._emit(
                EventType.FAST_BREAK_SCORE if fast_break else EventType.SHOT_MADE,
                f"{shooter.name} {'scores on the fast break' if fast_break else 'makes a ' + result.shot_type.value}! (+{result.points})",
                details,
                tag,
                data,
            )
            self._change_possession("score")
            return

        if result.blocked:
            defender.stats.blocks += 1
            self._emit(
                EventType.SHOT_BLOCKED,
                f"{defender.name} blocks {shooter.name}'s {result.shot_type.value}!",
                details,
                NarrationTag.BLOCK,
                {"defender": defender.name, "player": shooter.name},
            )
            self._rebound(shooter)
            return

        self._emit(
            EventType.FAST_BREAK_MISS if fast_break else EventType.SHOT_MISSED,
            f"{shooter.name} misses the {'fast break ' if fast_break else ''}{result.shot_type.value}",
            details,
            NarrationTag.MISS_2PT if result.shot_type is ShotType.TWO else NarrationTag.MISS_3PT,
            {"player": shooter.name},
        )
        if self._random_source.rand() < self._rules.shooting_foul_chance:
            self._shooting_foul(shooter, defender, result.shot_type)
            return
        self._rebound(shooter)

    def _shooting_foul(self, shooter: PlayerState, defender: PlayerState, shot_type: ShotType) -> None:
        defender.record_foul()
        attempts = shot_type.points
        self._emit(
            EventType.SHOOTING_FOUL,
            f"{defender.name} fouls {shooter.name} on the shot ({attempts} free throws)",
            {"fouler": defender.name, "shooter": shooter.name, "fouls": defender.foul_count, "free_throws": attempts},
            NarrationTag.FOUL,
            {"player": defender.name, "attacker": shooter.name},
        )
        if defender.foul_count >= self._rules.foul_limit:
            self._foul_out(defender)

        team = self._roster.team(shooter.side)
        success_percent = success_percentage(shooter.attributes.shooting, self._rules.free_throw_difficulty)
        made = False
        for attempt in range(1, attempts + 1):
            made = check_success(success_percent, self._random_source)
            shooter.record_free_throw(made)
            if made:
                team.add_points(1)
            self._emit(
                EventType.FREE_THROW_MADE if made else EventType.FREE_THROW_MISSED,
                f"{shooter.name} {'makes' if made else 'misses'} free throw {attempt} of {attempts}",
                {"attempt": attempt, "of": attempts, "success_percent": success_percent},
                NarrationTag.FREE_THROW_MADE if made else NarrationTag.FREE_THROW_MISSED,
                {"player": shooter.name, "team": team.name},
            )
        if made:
            self._change_possession("free_throws")
        else:
            self._rebound(shooter)

    def _foul_out(self, player: PlayerState) -> None:
        bench = self._roster.bench(player.side)
        if not bench:
            return
        substitute = self._roster.player(bench[0])
        player.active = False
        self.court.substitute(player.index, substitute.index)
        self._emit(
            EventType.FOUL_OUT,
            f"{player.name} fouls out, {substitute.name} checks in",
            {"player": player.name, "substitute": substitute.name, "fouls": player.foul_count},
        )

    def _rebound(self, shooter: PlayerState) -> None:
        offense = shooter.side
        offense_player = self._roster.player(self._pick_rebounder(offense))
        defense_player = self._roster.player(self._pick_rebounder(offense.other))
        result = self._resolver.resolve_rebound_contest(offense_player, defense_player)
        details = {
            "offense_player": offense_player.name,
            "defense_player": defense_player.name,
            "offense_total": result.offense_total,
            "defense_total": result.defense_total,
            "offense_rolls": list(result.offense_roll.rolls),
            "defense_rolls": list(result.defense_roll.rolls),
        }

        if result.defense_wins:
            defense_player.record_rebound(offensive=False)
            self._emit(
                EventType.DEFENSIVE_REBOUND,
                f"{defense_player.name} grabs the rebound!",
                details,
                NarrationTag.REBOUND_DEFENSE,
                {"player": defense_player.name, "team": self._roster.team(offense.other).name},
            )
            self._change_possession("defensive_rebound")
            return

        offense_player.record_rebound(offensive=True)
        self.court.set_ball_possession(offense_player.index)
        self._emit(
            EventType.OFFENSIVE_REBOUND,
            f"{offense_player.name} gets the offensive rebound!",
            details,
            NarrationTag.REBOUND_OFFENSE,
            {"player": offense_player.name, "team": self._roster.team(offense).name},
        )

    def _pick_rebounder(self, side: Side) -> int:
        return weighted_choice(
            self._random_source,
            [(i, REBOUND_WEIGHTS[self._roster.player(i).position]) for i in self._roster.on_court(side)],
        )

    def _change_possession(self, reason: str) -> None:
        self.possession = self.possession.other
        self.court.reset_positions()
        self._emit(
            EventType.POSSESSION_CHANGE,
            f"Possession goes to {self._roster.team(self.possession).name}",
            {"reason": reason, "team": self._roster.team(self.possession).name},
        )

    def _nearest_defender(self, player: PlayerState) -> PlayerState:
        index = self.court.get_nearest_opponent(player.index, self._roster.on_court(player.side.other))
        if index is None:
            raise ValueError(f"no defender on court against {player.name}")
        return self._roster.player(index)

    # -- bookkeeping -------------------------------------------------------

    def _ensure_started(self) -> None:
        if self._halted:
            raise RuntimeError(f"match {self.match_id} was halted by an integrity failure")
        if self.phase is MatchPhase.POST_MATCH:
            raise RuntimeError(f"match {self.match_id} has already been played")
        if self.phase is MatchPhase.PRE_MATCH:
            self.phase = MatchPhase.IN_PROGRESS
            home = self._roster.team(Side.HOME).name
            away = self._roster.team(Side.AWAY).name
            self._emit(
                EventType.MATCH_START,
                "Match started",
                {"home_team": home, "away_team": away},
                NarrationTag.MATCH_START,
                {"homeTeam": home, "awayTeam": away},
            )

    def _emit(
        self,
        event_type: EventType,
        description: str,
        details: dict[str, Any] | None = None,
        narration_tag: NarrationTag | None = None,
        narration_data: dict[str, Any] | None = None,
    ) -> MatchEvent:
        narration = None
        if self._narrator is not None and narration_tag is not None:
            narration = self._narrator.narrate(narration_tag, narration_data or {})
        self._causal.append(event_type.value)
        return self._log.append(
            round_number=self.round,
            quarter=min(self.quarter, self._rules.quarters),
            possession=self.possession,
            event_type=event_type,
            description=description,
            details=details,
            home_score=self.home_score,
            away_score=self.away_score,
            narration=narration,
        )

    def _score_narration(
        self,
        result: ShotResult,
        shooter: PlayerState,
        team_name: str,
        fast_break: bool,
        passer: PlayerState | None,
    ) -> tuple[NarrationTag, dict[str, Any]]:
        data: dict[str, Any] = {"player": shooter.name, "team": team_name, "points": result.points}
        if passer is not None:
            data["passer"] = passer.name
            return NarrationTag.ASSIST, data
        if result.shot_type is ShotType.TWO:
            return (NarrationTag.SCORE_2PT_FAST_BREAK if fast_break else NarrationTag.SCORE_2PT), data
        return (NarrationTag.SCORE_3PT_FAST_BREAK if fast_break else NarrationTag.SCORE_3PT), data

    def _match_end_narration(self, winner: str) -> tuple[NarrationTag, dict[str, Any]]:
        home = self._roster.team(Side.HOME)
        away = self._roster.team(Side.AWAY)
        if winner == TIE:
            return NarrationTag.MATCH_TIE, {"score": home.score}
        won, lost = (home, away) if home.score > away.score else (away, home)
        return NarrationTag.MATCH_END, {
            "winnerTeam": won.name,
            "loserTeam": lost.name,
            "winnerScore": won.score,
            "loserScore": lost.score,
        }

    def _integrity_snapshot(self) -> dict[str, Any]:
        return {
            "match_id": self.match_id,
            "round": self.round,
            "quarter": self.quarter,
            "possession": self.possession.value,
            "home_score": self.home_score,
            "away_score": self.away_score,
        }


def _shot_details(result: ShotResult, fast_break: bool) -> dict[str, Any]:
    return {
        "shot_type": result.shot_type.value,
        "shooter": result.shooter,
        "defender": result.defender,
        "dice": result.dice.notation,
        "rolls": list(result.dice.rolls),
        "dice_total": result.dice.total,
        "success_percent": result.success_percent,
        "block_chance": result.block_chance,
        "points": result.points,
        "blocked": result.blocked,
        "fast_break": fast_break,
    }
