"""Payload models for inbound WebSocket commands."""

from pydantic import Field

from daretoknow.engine.models import Team
from daretoknow.engine.types import Difficulty, Strategy, WireModel


class CreateTournamentRequest(WireModel):
    name: str
    max_teams: int | None = None
    default_rounds_per_game: int | None = None
    buzzer_enabled: bool | None = None


class UpdateTournamentRequest(WireModel):
    name: str
    max_teams: int


class UpdateSettingsRequest(WireModel):
    min_teams: int
    min_members_per_team: int
    default_rounds_per_game: int | None = None
    buzzer_enabled: bool | None = None


class RandomizeTeamsRequest(WireModel):
    names: list[str] = Field(default_factory=list)


class SetTeamsRequest(WireModel):
    teams: list[Team] = Field(default_factory=list)


class RegisterTeamRequest(WireModel):
    name: str
    color: str | None = None
    image: str | None = None


class TeamRequest(WireModel):
    team_id: str


class UpdateTeamRequest(TeamRequest):
    name: str


class AddMemberRequest(TeamRequest):
    member_name: str
    role: str | None = None


class UpdateMemberRequest(TeamRequest):
    member_id: str
    name: str
    role: str | None = None


class RemoveMemberRequest(TeamRequest):
    member_id: str


class TeamColorRequest(TeamRequest):
    color: str


class TeamImageRequest(TeamRequest):
    image: str | None = None


class CheckCodeRequest(WireModel):
    code: str


class UpdateRoundsRequest(WireModel):
    rounds: int


class BuzzerRequest(WireModel):
    team_id: str


class JudgeBuzzerRequest(WireModel):
    winner_team_id: str | None = None


class SelectOptionRequest(WireModel):
    category: str
    difficulty: Difficulty


class SelectStrategyRequest(WireModel):
    strategy: Strategy


class SelectAnswerRequest(WireModel):
    answer: str


class ApproveAnswerRequest(WireModel):
    approved: bool


class ScoreActionRequest(WireModel):
    success: bool


class StartTimerRequest(WireModel):
    duration: int


class AddTimeRequest(WireModel):
    seconds: int
