"""Single-elimination bracket generation and winner advancement."""

import logging
import random

from daretoknow.engine.models import Match, Team
from daretoknow.engine.types import MatchPhase

logger = logging.getLogger(__name__)

GAME_CODE_MIN = 100000
GAME_CODE_MAX = 999999


class BracketManager:
    """Builds the match tree for a roster and moves winners through it."""

    def __init__(self, rng: random.Random | None = None):
        self._rng = rng or random.Random()

    def generate_bracket(self, teams: list[Team], total_rounds: int) -> list[Match]:
        """Generate the complete bracket for a roster.

        Teams are paired in roster order. Every later level pairs the previous
        level's matches two at a time into placeholder matches; an unpaired
        match is carried up to the next level as is. The loop stops when one
        match is left, which is the final.

        Args:
            teams: Roster in seeding order.
            total_rounds: Rounds per match.

        Returns:
            All matches, first round first, final last.
        """
        if len(teams) % 2:
            logger.warning(
                f"Odd roster size ({len(teams)}): "
                f"{teams[-1].name} is left out of the bracket"
            )

        first_round = [
            self._new_match(
                teams[i].fresh_copy(), teams[i + 1].fresh_copy(), total_rounds, 1
            )
            for i in range(0, len(teams) - 1, 2)
        ]
        matches = list(first_round)

        level = first_round
        while len(level) > 1:
            next_level: list[Match] = []
            for i in range(0, len(level) - 1, 2):
                left, right = level[i], level[i + 1]
                parent = self._new_match(
                    Team.placeholder(),
                    Team.placeholder(),
                    total_rounds,
                    max(left.bracket_round, right.bracket_round) + 1,
                )
                left.next_match_id = parent.id
                right.next_match_id = parent.id
                next_level.append(parent)
                matches.append(parent)
            if len(level) % 2:
                next_level.append(level[-1])
            level = next_level

        logger.info(f"Generated bracket: {len(matches)} matches for {len(teams)} teams")
        return matches

    def advance_winner(
        self, matches: list[Match], match: Match, winner: Team
    ) -> Match | None:
        """Place the winner into the first open slot of the downstream match."""
        if match.next_match_id is None:
            return None

        target = self.find_match(matches, match.next_match_id)
        if target is None:
            logger.error(
                f"Match {match.id} points to missing match {match.next_match_id}"
            )
            return None

        if target.team_a.is_placeholder:
            target.team_a = winner.fresh_copy()
        elif target.team_b.is_placeholder:
            target.team_b = winner.fresh_copy()
        else:
            logger.warning(f"Match {target.id} has no open slot for {winner.name}")
            return None

        logger.info(f"{winner.name} advanced to match {target.id}")
        return target

    @staticmethod
    def find_match(matches: list[Match], match_id: str | None) -> Match | None:
        return next((m for m in matches if m.id == match_id), None)

    @staticmethod
    def is_playable(match: Match) -> bool:
        """Not started yet and both slots hold real teams."""
        return match.phase == MatchPhase.IDLE and match.has_real_teams

    def _new_match(
        self, team_a: Team, team_b: Team, total_rounds: int, bracket_round: int
    ) -> Match:
        return Match(
            game_code=str(self._rng.randint(GAME_CODE_MIN, GAME_CODE_MAX)),
            team_a=team_a,
            team_b=team_b,
            total_rounds=total_rounds,
            bracket_round=bracket_round,
        )
