"""Tournament, team and match data models."""

import uuid

from pydantic import Field, computed_field

from daretoknow.engine.content.models import Option, Prompt
from daretoknow.engine.types import (
    MatchPhase,
    PromptKind,
    Strategy,
    TournamentStatus,
    WireModel,
)

PLACEHOLDER_TEAM_ID = "TBD"
DEFAULT_TEAM_COLOR = "#3b82f6"


def new_id() -> str:
    return str(uuid.uuid4())


class TeamMember(WireModel):
    """A player on a team."""

    id: str = Field(default_factory=new_id)
    name: str
    role: str | None = None


class Team(WireModel):
    """A registered team. Score is match-scoped."""

    id: str = Field(default_factory=new_id)
    name: str
    score: int = 0
    members: list[TeamMember] = Field(default_factory=list)
    color: str = DEFAULT_TEAM_COLOR
    image: str | None = None

    @classmethod
    def placeholder(cls) -> "Team":
        """Sentinel occupying a slot until a winner advances into it."""
        return cls(id=PLACEHOLDER_TEAM_ID, name="TBD", color="#333")

    @property
    def is_placeholder(self) -> bool:
        return self.id == PLACEHOLDER_TEAM_ID

    def fresh_copy(self) -> "Team":
        """Deep copy with the score reset, as placed into a match slot."""
        return self.model_copy(update={"score": 0}, deep=True)


class Match(WireModel):
    """One bracket slot: a best-score bout between two teams."""

    id: str = Field(default_factory=new_id)
    game_code: str
    team_a: Team
    team_b: Team
    phase: MatchPhase = MatchPhase.IDLE
    current_turn_team_id: str | None = None
    answering_team_id: str | None = None
    buzzer_locked: bool = False
    buzzer_winner_id: str | None = None
    selected_option: Option | None = None
    selected_strategy: Strategy | None = None
    selected_answer: str | None = None
    is_answer_correct: bool | None = None
    current_prompt: Prompt | None = None
    current_prompt_kind: PromptKind | None = None
    available_options: list[Option] = Field(default_factory=list)
    timer: int | None = None
    timer_running: bool = False
    winner_id: str | None = None
    current_round: int = 0
    total_rounds: int = 10
    next_match_id: str | None = None
    bracket_round: int = 1

    @computed_field
    @property
    def selected_category(self) -> str | None:
        return self.selected_option.category if self.selected_option else None

    @property
    def has_real_teams(self) -> bool:
        return not (self.team_a.is_placeholder or self.team_b.is_placeholder)

    @property
    def is_finished(self) -> bool:
        return self.phase == MatchPhase.FINISHED

    def team(self, team_id: str | None) -> Team | None:
        """The team in this match with the given id."""
        for team in (self.team_a, self.team_b):
            if team_id is not None and team.id == team_id:
                return team
        return None

    def opponent_id(self, team_id: str | None) -> str:
        """Id of the other team (team_a when team_id is not team_a)."""
        return self.team_b.id if team_id == self.team_a.id else self.team_a.id

    def leader(self) -> Team:
        """Higher-scoring team; ties go to team_a."""
        return self.team_b if self.team_b.score > self.team_a.score else self.team_a


class Tournament(WireModel):
    """Complete tournament information."""

    id: str = Field(default_factory=new_id)
    name: str
    teams: list[Team] = Field(default_factory=list)
    matches: list[Match] = Field(default_factory=list)
    current_match_id: str | None = None
    status: TournamentStatus = TournamentStatus.REGISTRATION
    max_teams: int
    min_teams: int = 2
    min_members_per_team: int = 1
    default_question_time: int = 30
    default_dare_time: int = 60
    default_rounds_per_match: int = 10
    buzzer_enabled: bool = True
    champion_id: str | None = None

    def find_team(self, team_id: str) -> Team | None:
        return next((t for t in self.teams if t.id == team_id), None)

    def find_match(self, match_id: str | None) -> Match | None:
        return next((m for m in self.matches if m.id == match_id), None)

    def color_taken(self, color: str, exclude_team_id: str | None = None) -> bool:
        return any(
            t.color == color and t.id != exclude_team_id for t in self.teams
        )


class ValidationResult(WireModel):
    """Outcome of the tournament start check."""

    is_valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class JoinCodeResult(WireModel):
    """Answer to a player presenting a game code."""

    success: bool
    error: str | None = None
    match: Match | None = None


class StandingEntry(WireModel):
    """One line of the tournament leaderboard."""

    team_id: str
    name: str
    color: str
    image: str | None = None
    matches_played: int = 0
    matches_won: int = 0
    total_points: int = 0
    furthest_round: int = 0


class TournamentSummary(WireModel):
    """Leaderboard view of a tournament."""

    id: str
    name: str
    status: TournamentStatus
    champion_id: str | None = None
    standings: list[StandingEntry] = Field(default_factory=list)
