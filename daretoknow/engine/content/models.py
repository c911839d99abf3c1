"""Prompt and category data models."""

from typing import Any

from pydantic import Field, field_validator, model_validator

from daretoknow.engine.types import DEFAULT_POINTS, Difficulty, PromptKind, WireModel

# Spreadsheet exports use TRUTH/DARE for the prompt kind
_KIND_ALIASES = {
    "TRUTH": PromptKind.QUESTION.value,
    "QUESTION": PromptKind.QUESTION.value,
    "DARE": PromptKind.DARE.value,
}


class Category(WireModel):
    """A prompt category."""

    id: str
    name: str


class Option(WireModel):
    """A category/difficulty pair offered to the turn holder."""

    category: str
    difficulty: Difficulty


class Prompt(WireModel):
    """A single truth question or dare challenge."""

    id: str
    category: str
    kind: PromptKind
    difficulty: Difficulty = Difficulty.EASY
    points: int = Field(default=0, description="0 means derive from difficulty")
    text: str
    choices: list[str] = Field(default_factory=list)
    correct_answer: str | None = None
    challenge_opponent: bool = Field(
        default=False, description="Dare is performed by the opposing team"
    )

    @field_validator("kind", mode="before")
    @classmethod
    def normalize_kind(cls, v: Any) -> Any:
        if isinstance(v, str):
            return _KIND_ALIASES.get(v.strip().upper(), v.strip().lower())
        return v

    @field_validator("difficulty", mode="before")
    @classmethod
    def normalize_difficulty(cls, v: Any) -> Any:
        if isinstance(v, str):
            normalized = v.strip().upper()
            return normalized if normalized in Difficulty.__members__ else "EASY"
        return v

    @field_validator("choices", mode="before")
    @classmethod
    def split_choices(cls, v: Any) -> Any:
        if isinstance(v, str):
            return [c.strip() for c in v.split("|") if c.strip()]
        return v

    @model_validator(mode="after")
    def apply_default_points(self) -> "Prompt":
        if self.points <= 0:
            self.points = DEFAULT_POINTS[self.difficulty]
        return self

    @property
    def is_question(self) -> bool:
        return self.kind == PromptKind.QUESTION

    def is_correct(self, answer: str) -> bool | None:
        """Grade an answer; None when the prompt has no known correct choice."""
        if not self.correct_answer:
            return None
        return answer.strip().lower() == self.correct_answer.strip().lower()
