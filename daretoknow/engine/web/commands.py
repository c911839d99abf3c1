"""Routes inbound commands to the tournament manager."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ValidationError

from daretoknow.engine.models import DEFAULT_TEAM_COLOR, Match
from daretoknow.engine.results import CommandResult
from daretoknow.engine.tournaments import TournamentError, TournamentManager
from daretoknow.engine.types import EventSink, WireModel
from .command_requests import (
    AddMemberRequest,
    AddTimeRequest,
    ApproveAnswerRequest,
    BuzzerRequest,
    CheckCodeRequest,
    CreateTournamentRequest,
    JudgeBuzzerRequest,
    RandomizeTeamsRequest,
    RegisterTeamRequest,
    RemoveMemberRequest,
    ScoreActionRequest,
    SelectAnswerRequest,
    SelectOptionRequest,
    SelectStrategyRequest,
    SetTeamsRequest,
    StartTimerRequest,
    TeamColorRequest,
    TeamImageRequest,
    TeamRequest,
    UpdateMemberRequest,
    UpdateRoundsRequest,
    UpdateSettingsRequest,
    UpdateTeamRequest,
    UpdateTournamentRequest,
)

logger = logging.getLogger(__name__)

TOURNAMENT_STATE = "tournament:state"
MATCH_STATE = "match:state"
ERROR = "error"


@dataclass(frozen=True)
class CommandRoute:
    """How one command is parsed, applied and answered."""

    handler: Callable[[Any], CommandResult]
    payload: type[BaseModel] | None = None
    # Requester-only response event; None means broadcast state on success
    reply: str | None = None


class CommandDispatcher:
    """Parses command payloads, applies them and publishes the outcome.

    Successful state changes are broadcast through ``publish``. Read-only
    queries and domain errors go back to the requester through the
    ``respond`` sink passed to :meth:`dispatch`.
    """

    def __init__(self, manager: TournamentManager, publish: EventSink):
        self.manager = manager
        self.publish = publish
        self.routes: dict[str, CommandRoute] = self._build_routes()

    def dispatch(
        self, command: str, payload: dict[str, Any] | None, respond: EventSink
    ) -> CommandResult:
        route = self.routes.get(command)
        if route is None:
            result = CommandResult.rejected(f"Unknown command: {command}")
            respond(ERROR, result.reason)
            return result

        try:
            request = (
                route.payload.model_validate(payload or {}) if route.payload else None
            )
        except ValidationError as e:
            logger.warning(f"Invalid payload for {command}: {e}")
            result = CommandResult.rejected(f"Invalid payload for {command}")
            respond(ERROR, result.reason)
            return result

        result = route.handler(request)

        if result.is_rejected:
            logger.info(f"Rejected {command}: {result.reason}")
            respond(ERROR, result.reason)
        elif result.is_ignored:
            logger.debug(f"Ignored {command}: {result.reason}")
        elif route.reply is not None:
            respond(route.reply, _snapshot(result.value))
        else:
            self.publish_state(result.value if isinstance(result.value, Match) else None)
        return result

    def publish_state(self, match: Match | None = None) -> None:
        """Broadcast the tournament and the given (or current) match."""
        tournament = self.manager.tournament
        self.publish(TOURNAMENT_STATE, tournament.snapshot() if tournament else None)
        match = match or self.manager.current_match()
        self.publish(MATCH_STATE, match.snapshot() if match else None)

    # --- Handlers ---

    def _build_routes(self) -> dict[str, CommandRoute]:
        m = self.manager
        game = self._game

        return {
            # Reads
            "tournament:get_state": CommandRoute(
                lambda _: CommandResult.ok(m.tournament), reply=TOURNAMENT_STATE
            ),
            "match:get_state": CommandRoute(
                lambda _: CommandResult.ok(m.current_match()), reply=MATCH_STATE
            ),
            "tournament:validate": CommandRoute(
                lambda _: CommandResult.ok(m.validate_tournament_start()),
                reply="tournament:validation",
            ),
            "tournament:summary": CommandRoute(
                lambda _: _apply(m.summary), reply="tournament:summary"
            ),
            "game:check_code": CommandRoute(
                lambda r: CommandResult.ok(m.check_join_code(r.code)),
                CheckCodeRequest,
                reply="game:code_result",
            ),
            # Tournament lifecycle and settings
            "tournament:create": CommandRoute(
                lambda r: _apply(
                    m.create_tournament,
                    r.name,
                    r.max_teams,
                    r.default_rounds_per_game,
                    r.buzzer_enabled,
                ),
                CreateTournamentRequest,
            ),
            "tournament:update": CommandRoute(
                lambda r: _apply(m.update_tournament, r.name, r.max_teams),
                UpdateTournamentRequest,
            ),
            "tournament:update_settings": CommandRoute(
                lambda r: _apply(
                    m.update_tournament_settings,
                    r.min_teams,
                    r.min_members_per_team,
                    r.default_rounds_per_game,
                    r.buzzer_enabled,
                ),
                UpdateSettingsRequest,
            ),
            "tournament:start": CommandRoute(lambda _: _apply(m.start_tournament)),
            "tournament:next_match": CommandRoute(self._next_match),
            "tournament:end": CommandRoute(lambda _: _apply(m.end_tournament)),
            "tournament:randomize": CommandRoute(
                lambda r: _apply(m.randomize_teams, r.names), RandomizeTeamsRequest
            ),
            "tournament:set_teams": CommandRoute(
                lambda r: _apply(m.set_teams, r.teams), SetTeamsRequest
            ),
            # Roster
            "team:register": CommandRoute(
                lambda r: _apply(
                    m.register_team, r.name, r.color or DEFAULT_TEAM_COLOR, r.image
                ),
                RegisterTeamRequest,
            ),
            "team:update": CommandRoute(
                lambda r: _apply(m.update_team, r.team_id, r.name), UpdateTeamRequest
            ),
            "team:delete": CommandRoute(
                lambda r: _apply(m.delete_team, r.team_id), TeamRequest
            ),
            "team:add_member": CommandRoute(
                lambda r: _apply(m.add_team_member, r.team_id, r.member_name, r.role),
                AddMemberRequest,
            ),
            "team:update_member": CommandRoute(
                lambda r: _apply(
                    m.update_team_member, r.team_id, r.member_id, r.name, r.role
                ),
                UpdateMemberRequest,
            ),
            "team:remove_member": CommandRoute(
                lambda r: _apply(m.remove_team_member, r.team_id, r.member_id),
                RemoveMemberRequest,
            ),
            "team:update_color": CommandRoute(
                lambda r: _apply(m.update_team_color, r.team_id, r.color),
                TeamColorRequest,
            ),
            "team:update_image": CommandRoute(
                lambda r: _apply(m.update_team_image, r.team_id, r.image),
                TeamImageRequest,
            ),
            # Match flow
            "match:start": CommandRoute(lambda _: game("start")),
            "match:end": CommandRoute(lambda _: game("end")),
            "match:update_rounds": CommandRoute(
                lambda r: game("update_rounds", r.rounds), UpdateRoundsRequest
            ),
            "game:buzzer": CommandRoute(
                lambda r: game("buzz", r.team_id), BuzzerRequest
            ),
            "game:judge_buzzer": CommandRoute(
                lambda r: game("judge_buzzer", r.winner_team_id), JudgeBuzzerRequest
            ),
            "game:select_option": CommandRoute(
                lambda r: game("select_option", r.category, r.difficulty),
                SelectOptionRequest,
            ),
            "game:select_strategy": CommandRoute(
                lambda r: game("select_strategy", r.strategy), SelectStrategyRequest
            ),
            "game:select_answer": CommandRoute(
                lambda r: game("select_answer", r.answer), SelectAnswerRequest
            ),
            "game:approve_answer": CommandRoute(
                lambda r: game("approve_answer", r.approved), ApproveAnswerRequest
            ),
            "game:confirm_reveal": CommandRoute(lambda _: game("confirm_reveal")),
            "game:score_action": CommandRoute(
                lambda r: game("score_action", r.success), ScoreActionRequest
            ),
            "game:next_round": CommandRoute(lambda _: game("next_round")),
            # Timer
            "timer:start": CommandRoute(
                lambda r: m.start_timer(r.duration), StartTimerRequest
            ),
            "timer:stop": CommandRoute(lambda _: m.stop_timer()),
            "timer:add": CommandRoute(lambda r: m.add_time(r.seconds), AddTimeRequest),
        }

    def _game(self, name: str, *args: Any) -> CommandResult:
        return self.manager.match_command(name, *args)

    def _next_match(self, _: Any) -> CommandResult:
        try:
            match = self.manager.start_next_match()
        except TournamentError as e:
            return CommandResult.rejected(str(e))
        if match is None:
            return CommandResult.ignored("No playable match left")
        return CommandResult.ok(match)


def _apply(operation: Callable[..., Any], *args: Any) -> CommandResult:
    """Run a roster/lifecycle operation, turning domain errors into rejections."""
    try:
        return CommandResult.ok(operation(*args))
    except TournamentError as e:
        return CommandResult.rejected(str(e))


def _snapshot(value: Any) -> Any:
    return value.snapshot() if isinstance(value, WireModel) else value
