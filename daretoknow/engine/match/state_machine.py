"""Phase transitions for a single match."""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from daretoknow.engine.content.models import Option
from daretoknow.engine.content.selector import PromptSelector
from daretoknow.engine.models import Match, Tournament
from daretoknow.engine.results import CommandResult
from daretoknow.engine.types import Difficulty, MatchPhase, PromptKind, Strategy
from .scoring import ScoreDelta, round_delta
from .timer import MatchTimer

logger = logging.getLogger(__name__)


@dataclass
class MatchRules:
    """Tournament settings a match needs while it is played."""

    buzzer_enabled: bool = True
    question_time: int = 30
    dare_time: int = 60

    @classmethod
    def from_tournament(cls, tournament: Tournament) -> "MatchRules":
        return cls(
            buzzer_enabled=tournament.buzzer_enabled,
            question_time=tournament.default_question_time,
            dare_time=tournament.default_dare_time,
        )


class MatchStateMachine:
    """Drives one match from IDLE to FINISHED.

    Every transition checks the phase it expects first. A command arriving in
    any other phase returns an IGNORED result and leaves the match untouched,
    so stale buttons on a client cannot corrupt the match. Binding a machine
    also binds the shared timer to its match.
    """

    def __init__(
        self,
        match: Match,
        rules: MatchRules,
        selector: PromptSelector,
        timer: MatchTimer,
        on_finished: Callable[[Match], None] | None = None,
    ):
        self.match = match
        self.rules = rules
        self.selector = selector
        self.timer = timer
        self.on_finished = on_finished
        timer.bind(match)

    # --- Opening: buzzer decides who takes the first turn ---

    def start(self) -> CommandResult:
        if ignored := self._expect("start", MatchPhase.IDLE):
            return ignored
        if not self.match.has_real_teams:
            return CommandResult.ignored("Match is still waiting for teams")

        self.match.phase = MatchPhase.BUZZER
        self.match.buzzer_locked = False
        self.match.buzzer_winner_id = None
        self.match.current_prompt = None
        logger.info(
            f"Match {self.match.id} started: "
            f"{self.match.team_a.name} vs {self.match.team_b.name}"
        )
        return CommandResult.ok(self.match)

    def buzz(self, team_id: str) -> CommandResult:
        if ignored := self._expect("buzz", MatchPhase.BUZZER):
            return ignored
        if not self.rules.buzzer_enabled:
            return CommandResult.ignored("Buzzer is disabled")
        if self.match.buzzer_locked:
            return CommandResult.ignored("Buzzer already taken")
        if self.match.team(team_id) is None:
            return CommandResult.ignored(f"Team {team_id} is not in this match")

        self.match.buzzer_locked = True
        self.match.buzzer_winner_id = team_id
        if self.match.timer_running:
            self.timer.stop()
        return CommandResult.ok(self.match)

    def judge_buzzer(self, winner_team_id: str | None) -> CommandResult:
        """Hand the first turn to a team, or re-open a locked buzzer."""
        if ignored := self._expect("judge_buzzer", MatchPhase.BUZZER):
            return ignored

        if self.rules.buzzer_enabled and not self.match.buzzer_locked:
            return CommandResult.ignored("Nobody has buzzed yet")

        if winner_team_id is None:
            if not self.rules.buzzer_enabled:
                return CommandResult.ignored("A starting team must be picked")
            # Wrong answer: open the buzzer again
            self.match.buzzer_locked = False
            self.match.buzzer_winner_id = None
            return CommandResult.ok(self.match)

        if self.match.team(winner_team_id) is None:
            return CommandResult.ignored(f"Team {winner_team_id} is not in this match")

        self.match.current_turn_team_id = winner_team_id
        self.match.answering_team_id = None
        self.match.current_round = 1
        self._enter_category_select()
        return CommandResult.ok(self.match)

    # --- One round ---

    def select_option(self, category: str, difficulty: Difficulty) -> CommandResult:
        if ignored := self._expect("select_option", MatchPhase.CATEGORY_SELECT):
            return ignored

        self.match.selected_option = Option(category=category, difficulty=difficulty)
        self.match.phase = MatchPhase.STRATEGY_SELECT
        return CommandResult.ok(self.match)

    def select_strategy(self, strategy: Strategy) -> CommandResult:
        if ignored := self._expect("select_strategy", MatchPhase.STRATEGY_SELECT):
            return ignored
        option = self.match.selected_option
        if option is None:
            return CommandResult.ignored("No category selected")

        kind = PromptKind.for_strategy(strategy)
        prompt = self.selector.select(option, kind)
        if prompt is None:
            return CommandResult.rejected(f"No {kind.value} prompt available")

        self.match.selected_strategy = strategy
        self.match.current_prompt = prompt
        self.match.current_prompt_kind = kind
        # The turn holder always takes the prompt; challenge framing is
        # resolved at scoring time from the prompt itself.
        self.match.answering_team_id = self.match.current_turn_team_id

        if strategy == Strategy.TRUTH:
            if self.rules.question_time > 0:
                self.timer.start(self.rules.question_time)
            self.match.phase = MatchPhase.ANSWER_SELECT
        else:
            self.match.phase = MatchPhase.REVEAL
        return CommandResult.ok(self.match)

    def select_answer(self, answer: str) -> CommandResult:
        if ignored := self._expect("select_answer", MatchPhase.ANSWER_SELECT):
            return ignored

        self.match.selected_answer = answer
        if self.match.current_prompt is not None:
            self.match.is_answer_correct = self.match.current_prompt.is_correct(answer)
        self.timer.stop()
        self.match.phase = MatchPhase.ANSWER_APPROVAL
        return CommandResult.ok(self.match)

    def approve_answer(self, approved: bool) -> CommandResult:
        """GM confirms the auto-graded answer; a veto can only deny points."""
        if ignored := self._expect("approve_answer", MatchPhase.ANSWER_APPROVAL):
            return ignored

        correct = approved and bool(self.match.is_answer_correct)
        self._apply(self._delta(correct))
        self.match.phase = MatchPhase.SCORING
        return CommandResult.ok(self.match)

    def confirm_reveal(self) -> CommandResult:
        if ignored := self._expect("confirm_reveal", MatchPhase.REVEAL):
            return ignored

        if self.match.current_prompt_kind == PromptKind.DARE and self.rules.dare_time > 0:
            self.timer.start(self.rules.dare_time)
        self.match.phase = MatchPhase.ACTION
        return CommandResult.ok(self.match)

    def score_action(self, success: bool) -> CommandResult:
        if ignored := self._expect("score_action", MatchPhase.ACTION):
            return ignored

        if self.match.current_prompt_kind == PromptKind.DARE:
            self._apply(self._delta(success))
        self.match.is_answer_correct = success
        self.timer.stop()
        self.match.phase = MatchPhase.SCORING
        return CommandResult.ok(self.match)

    def next_round(self) -> CommandResult:
        if ignored := self._expect("next_round", MatchPhase.SCORING):
            return ignored

        self.match.current_round += 1
        if self.match.current_round > self.match.total_rounds:
            self._finish()
            return CommandResult.ok(self.match)

        self.match.current_turn_team_id = self.match.opponent_id(
            self.match.current_turn_team_id
        )
        self.timer.stop()
        self.match.timer = None
        self._enter_category_select()
        return CommandResult.ok(self.match)

    # --- Termination and adjustments ---

    def end(self) -> CommandResult:
        """Force-resolve the match on current scores."""
        if self.match.is_finished:
            return CommandResult.ignored("Match already finished")
        self._finish()
        return CommandResult.ok(self.match)

    def update_rounds(self, rounds: int) -> CommandResult:
        if self.match.is_finished:
            return CommandResult.ignored("Match already finished")
        if rounds < 1:
            return CommandResult.rejected("A match needs at least one round")
        if rounds < self.match.current_round:
            return CommandResult.rejected(
                f"Round {self.match.current_round} is already being played"
            )

        self.match.total_rounds = rounds
        return CommandResult.ok(self.match)

    # --- Internals ---

    def _expect(self, command: str, phase: MatchPhase) -> CommandResult | None:
        if self.match.phase == phase:
            return None
        logger.debug(
            f"Ignoring {command} for match {self.match.id}: "
            f"phase is {self.match.phase.value}, expected {phase.value}"
        )
        return CommandResult.ignored(
            f"{command} not expected in phase {self.match.phase.value}"
        )

    def _enter_category_select(self) -> None:
        self.match.answering_team_id = None
        self.match.selected_option = None
        self.match.selected_strategy = None
        self.match.selected_answer = None
        self.match.is_answer_correct = None
        self.match.current_prompt = None
        self.match.current_prompt_kind = None
        self.match.available_options = self.selector.offer_options()
        self.match.phase = MatchPhase.CATEGORY_SELECT

    def _performer_id(self) -> str:
        turn_team_id = self.match.current_turn_team_id or self.match.team_a.id
        prompt = self.match.current_prompt
        if (
            prompt is not None
            and prompt.challenge_opponent
            and self.match.current_prompt_kind == PromptKind.DARE
        ):
            return self.match.opponent_id(turn_team_id)
        return self.match.answering_team_id or turn_team_id

    def _delta(self, success: bool) -> ScoreDelta:
        kind = self.match.current_prompt_kind or PromptKind.QUESTION
        prompt = self.match.current_prompt
        return round_delta(
            kind,
            prompt.points if prompt else None,
            self.match.current_turn_team_id or self.match.team_a.id,
            self._performer_id(),
            success,
        )

    def _apply(self, delta: ScoreDelta) -> None:
        for team_id, points in delta.items():
            team = self.match.team(team_id)
            if team is not None:
                team.score += points

    def _finish(self) -> None:
        self.timer.stop()
        winner = self.match.leader()
        self.match.winner_id = winner.id
        self.match.phase = MatchPhase.FINISHED
        self.match.buzzer_locked = False
        self.match.buzzer_winner_id = None
        self.match.timer_running = False
        logger.info(
            f"Match {self.match.id} finished: {winner.name} wins "
            f"({self.match.team_a.score}-{self.match.team_b.score})"
        )
        if self.on_finished is not None:
            self.on_finished(self.match)
