"""Shared types and enums for the tournament engine."""

from collections.abc import Callable
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


# Outbound publication: (event name, JSON-compatible payload)
type EventSink = Callable[[str, Any], None]


class WireModel(BaseModel):
    """Base for models broadcast to clients (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def snapshot(self) -> dict[str, Any]:
        """JSON-compatible dump with wire aliases."""
        return self.model_dump(mode="json", by_alias=True)


class TournamentStatus(Enum):
    """Tournament lifecycle."""

    REGISTRATION = "REGISTRATION"
    ACTIVE = "ACTIVE"
    FINISHED = "FINISHED"


class MatchPhase(Enum):
    """Phases of a single match."""

    IDLE = "IDLE"
    BUZZER = "BUZZER"
    CATEGORY_SELECT = "CATEGORY_SELECT"
    STRATEGY_SELECT = "STRATEGY_SELECT"
    ANSWER_SELECT = "ANSWER_SELECT"  # Turn holder picks from multiple choice
    ANSWER_APPROVAL = "ANSWER_APPROVAL"  # GM confirms the graded answer
    REVEAL = "REVEAL"
    ACTION = "ACTION"  # Dare being performed, GM judges
    SCORING = "SCORING"
    FINISHED = "FINISHED"


class Strategy(Enum):
    """Risk choice made by the turn holder."""

    TRUTH = "TRUTH"
    DARE = "DARE"


class PromptKind(Enum):
    """Self-answerable question or performed challenge."""

    QUESTION = "question"
    DARE = "dare"

    @classmethod
    def for_strategy(cls, strategy: Strategy) -> "PromptKind":
        return cls.QUESTION if strategy == Strategy.TRUTH else cls.DARE


class Difficulty(Enum):
    """Fixed three-level difficulty scale."""

    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


# Point value used when a prompt row carries none
DEFAULT_POINTS = {
    Difficulty.EASY: 100,
    Difficulty.MEDIUM: 200,
    Difficulty.HARD: 300,
}
