"""Point rules for a resolved round.

Rules never subtract points. A delta maps team id to the points it gains.

- TRUTH (self-answer): a correct answer earns the turn holder the full value.
- DARE performed by the turn holder: success earns the full value.
- DARE pushed to the opponent (challenge framing): success earns the
  performer half the value, failure earns the challenger half instead.
"""

from daretoknow.engine.types import PromptKind

FALLBACK_POINTS = 100

type ScoreDelta = dict[str, int]


def truth_delta(points: int, turn_team_id: str, correct: bool) -> ScoreDelta:
    if not correct:
        return {}
    return {turn_team_id: points}


def dare_delta(
    points: int, turn_team_id: str, performer_id: str, success: bool
) -> ScoreDelta:
    if performer_id == turn_team_id:
        return {performer_id: points} if success else {}

    half = points // 2
    if success:
        return {performer_id: half}
    return {turn_team_id: half}


def round_delta(
    kind: PromptKind,
    points: int | None,
    turn_team_id: str,
    performer_id: str,
    success: bool,
) -> ScoreDelta:
    """Dispatch on the prompt kind."""
    value = points if points else FALLBACK_POINTS
    if kind == PromptKind.QUESTION:
        return truth_delta(value, turn_team_id, success)
    return dare_delta(value, turn_team_id, performer_id, success)
