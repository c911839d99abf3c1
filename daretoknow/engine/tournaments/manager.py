"""Tournament lifecycle, roster management and match orchestration."""

import colorsys
import logging
import random
from typing import Any

from daretoknow.engine.config import GameConfig
from daretoknow.engine.content import ContentProvider, PromptSelector
from daretoknow.engine.match import (
    LoopScheduler,
    MatchRules,
    MatchStateMachine,
    MatchTimer,
    Scheduler,
)
from daretoknow.engine.models import (
    DEFAULT_TEAM_COLOR,
    JoinCodeResult,
    Match,
    StandingEntry,
    Team,
    TeamMember,
    Tournament,
    TournamentSummary,
    ValidationResult,
)
from daretoknow.engine.results import CommandResult
from daretoknow.engine.types import EventSink, MatchPhase, TournamentStatus
from .bracket import BracketManager
from .exceptions import (
    CapacityExceeded,
    DuplicateColor,
    InvalidCapacity,
    MemberNotFound,
    NoTournament,
    StartValidationFailed,
    TeamNotFound,
    TournamentError,
    TournamentLocked,
)

logger = logging.getLogger(__name__)

# Palettes rotated through by randomize_teams
TEAM_COLORS = [
    "#FF5733",
    "#33FF57",
    "#3357FF",
    "#F033FF",
    "#FF33A8",
    "#33FFF5",
    "#F5FF33",
    "#FF8C33",
    "#8C33FF",
    "#33FF8C",
    "#FF3333",
    "#3333FF",
    "#33FF33",
    "#FFFF33",
    "#00FFFF",
    "#FF00FF",
]
TEAM_ICONS = [
    "🦁",
    "🐯",
    "🐻",
    "🦅",
    "🐺",
    "🦊",
    "🐉",
    "🦈",
    "🦄",
    "🐲",
    "🦖",
    "🦕",
    "🐙",
    "🦑",
    "🦇",
    "🦉",
]

RANDOMIZE_FALLBACK_TEAMS = 4

# Hue step past the fixed palette, in turns of the color wheel
EXTRA_COLOR_HUE_STEP = 0.618033988749895


def team_colors(count: int) -> list[str]:
    """Return count distinct colors: the palette first, then stepped hues."""
    colors = TEAM_COLORS[:count]
    seen = set(colors)
    hue = 0.0
    while len(colors) < count:
        hue = (hue + EXTRA_COLOR_HUE_STEP) % 1.0
        channels = colorsys.hsv_to_rgb(hue, 0.75, 0.95)
        color = "#" + "".join(f"{round(c * 255):02X}" for c in channels)
        if color not in seen:
            seen.add(color)
            colors.append(color)
    return colors

# Transitions reachable through match_command
GAMEPLAY_COMMANDS = frozenset(
    {
        "start",
        "buzz",
        "judge_buzzer",
        "select_option",
        "select_strategy",
        "select_answer",
        "approve_answer",
        "confirm_reveal",
        "score_action",
        "next_round",
        "end",
        "update_rounds",
    }
)


def _discard_event(event: str, payload: Any) -> None:
    pass


class TournamentManager:
    """Owns one tournament and drives its currently active match.

    Roster and settings operations raise ``TournamentError`` subclasses before
    touching any state. Gameplay operations return a ``CommandResult``.
    """

    def __init__(
        self,
        content: ContentProvider,
        config: GameConfig | None = None,
        sink: EventSink | None = None,
        scheduler: Scheduler | None = None,
        rng: random.Random | None = None,
    ):
        self.config = config or GameConfig()
        self._rng = rng or random.Random()
        self.selector = PromptSelector(
            content, options_per_round=self.config.options_per_round, rng=self._rng
        )
        self.timer = MatchTimer(
            sink or _discard_event,
            scheduler or LoopScheduler(),
            interval=self.config.timer_interval,
        )
        self.bracket = BracketManager(rng=self._rng)
        self.tournament: Tournament | None = None
        self._machine: MatchStateMachine | None = None

    # --- Tournament lifecycle ---

    def create_tournament(
        self,
        name: str,
        max_teams: int | None = None,
        rounds_per_match: int | None = None,
        buzzer_enabled: bool | None = None,
    ) -> Tournament:
        """Start a fresh tournament in registration, replacing any previous one."""
        if max_teams is None:
            max_teams = self.config.default_max_teams
        if max_teams < 2:
            raise InvalidCapacity(max_teams)
        rounds = rounds_per_match or self.config.default_rounds_per_match
        if rounds < 1:
            raise TournamentError("A match needs at least one round")

        self.timer.cancel()
        self.timer.bind(None)
        self._machine = None

        self.tournament = Tournament(
            name=name,
            max_teams=max_teams,
            default_question_time=self.config.default_question_time,
            default_dare_time=self.config.default_dare_time,
            default_rounds_per_match=rounds,
            buzzer_enabled=(
                self.config.default_buzzer_enabled
                if buzzer_enabled is None
                else buzzer_enabled
            ),
        )
        logger.info(
            f"Created tournament '{name}' (max {self.tournament.max_teams} teams, "
            f"{rounds} rounds per match)"
        )
        return self.tournament

    def validate_tournament_start(self) -> ValidationResult:
        """Check whether the tournament can start. Never mutates."""
        tournament = self.tournament
        if tournament is None:
            return ValidationResult(is_valid=False, errors=[str(NoTournament())])

        errors: list[str] = []
        warnings: list[str] = []

        min_teams = max(tournament.min_teams, 2)
        if len(tournament.teams) < min_teams:
            errors.append(
                f"Need at least {min_teams} teams (currently {len(tournament.teams)})"
            )

        for team in tournament.teams:
            if len(team.members) < tournament.min_members_per_team:
                errors.append(
                    f'Team "{team.name}" needs at least '
                    f"{tournament.min_members_per_team} members "
                    f"(currently {len(team.members)})"
                )

        colors = [team.color for team in tournament.teams]
        if len(colors) != len(set(colors)):
            errors.append("Some teams have duplicate colors")

        if len(tournament.teams) % 2:
            warnings.append(
                f'Odd number of teams: "{tournament.teams[-1].name}" '
                "will be left out of the bracket"
            )
        if tournament.status != TournamentStatus.REGISTRATION:
            errors.append(
                f"Tournament is {tournament.status.value}; only a tournament in "
                "registration can start"
            )

        return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)

    def start_tournament(self) -> Tournament:
        """Build the bracket and activate the first playable match."""
        tournament = self._require()
        if tournament.status != TournamentStatus.REGISTRATION:
            raise TournamentLocked(tournament.status.value)
        validation = self.validate_tournament_start()
        if not validation.is_valid:
            raise StartValidationFailed(validation.errors)

        self.timer.cancel()
        self.timer.bind(None)
        self._machine = None

        tournament.matches = self.bracket.generate_bracket(
            tournament.teams, tournament.default_rounds_per_match
        )
        tournament.status = TournamentStatus.ACTIVE
        tournament.current_match_id = None
        tournament.champion_id = None
        logger.info(
            f"Tournament '{tournament.name}' started with {len(tournament.teams)} teams"
        )

        self.start_next_match()
        return tournament

    def start_next_match(self) -> Match | None:
        """Make the first playable match current, if there is one."""
        tournament = self._require()
        for match in tournament.matches:
            if match.id == tournament.current_match_id:
                continue
            if self.bracket.is_playable(match):
                self._activate(match)
                logger.info(
                    f"Next match {match.id} (code {match.game_code}): "
                    f"{match.team_a.name} vs {match.team_b.name}"
                )
                return match
        return None

    def end_tournament(self) -> Tournament:
        tournament = self._require()
        self.timer.stop()
        tournament.status = TournamentStatus.FINISHED
        logger.info(f"Tournament '{tournament.name}' finished")
        return tournament

    def current_match(self) -> Match | None:
        if self.tournament is None:
            return None
        return self.tournament.find_match(self.tournament.current_match_id)

    def check_join_code(self, code: str) -> JoinCodeResult:
        """Tell a player whether a code opens the active match."""
        match = self.current_match()
        if match is None:
            return JoinCodeResult(success=False, error="No active match found")
        if match.game_code != code.strip():
            return JoinCodeResult(success=False, error="Invalid game code")
        return JoinCodeResult(success=True, match=match)

    # --- Settings ---

    def update_tournament_settings(
        self,
        min_teams: int,
        min_members_per_team: int,
        rounds_per_match: int | None = None,
        buzzer_enabled: bool | None = None,
    ) -> Tournament:
        tournament = self._require()
        if min_teams < 2:
            raise TournamentError("A tournament needs at least 2 teams")
        if min_members_per_team < 0:
            raise TournamentError("Minimum members per team cannot be negative")
        if rounds_per_match is not None and rounds_per_match < 1:
            raise TournamentError("A match needs at least one round")

        tournament.min_teams = min_teams
        tournament.min_members_per_team = min_members_per_team
        if rounds_per_match is not None:
            tournament.default_rounds_per_match = rounds_per_match
        if buzzer_enabled is not None:
            tournament.buzzer_enabled = buzzer_enabled
            if self._machine is not None:
                self._machine.rules.buzzer_enabled = buzzer_enabled
        return tournament

    def update_tournament(self, name: str, max_teams: int) -> Tournament:
        tournament = self._require()
        if max_teams < 2:
            raise InvalidCapacity(max_teams)
        if max_teams < len(tournament.teams):
            raise InvalidCapacity(max_teams, len(tournament.teams))

        tournament.name = name
        tournament.max_teams = max_teams
        return tournament

    # --- Roster ---

    def register_team(
        self, name: str, color: str = DEFAULT_TEAM_COLOR, image: str | None = None
    ) -> Team:
        tournament = self._require_registration()
        if len(tournament.teams) >= tournament.max_teams:
            raise CapacityExceeded(tournament.max_teams)
        if tournament.color_taken(color):
            raise DuplicateColor(color)

        team = Team(name=name, color=color, image=image)
        tournament.teams.append(team)
        logger.info(
            f"Registered team {name} "
            f"({len(tournament.teams)}/{tournament.max_teams})"
        )
        return team

    def randomize_teams(self, names: list[str]) -> list[Team]:
        """Shuffle players into max_teams fresh teams. Replaces the roster."""
        tournament = self._require_registration()
        if tournament.max_teams < 2:
            tournament.max_teams = RANDOMIZE_FALLBACK_TEAMS
        team_count = tournament.max_teams
        colors = team_colors(team_count)

        teams = [
            Team(
                name=f"Team {i + 1}",
                color=colors[i],
                image=TEAM_ICONS[i % len(TEAM_ICONS)],
            )
            for i in range(team_count)
        ]

        pool = [name.strip() for name in names if name.strip()]
        self._rng.shuffle(pool)
        for i, player in enumerate(pool):
            teams[i % team_count].members.append(TeamMember(name=player, role="Member"))

        tournament.teams = teams
        logger.info(f"Randomized {len(pool)} players into {team_count} teams")
        return teams

    def set_teams(self, teams: list[Team]) -> list[Team]:
        """Replace the roster wholesale."""
        tournament = self._require_registration()
        if len(teams) > tournament.max_teams:
            raise CapacityExceeded(tournament.max_teams)
        seen: set[str] = set()
        for team in teams:
            if team.color in seen:
                raise DuplicateColor(team.color)
            seen.add(team.color)

        tournament.teams = [team.fresh_copy() for team in teams]
        return tournament.teams

    def update_team(self, team_id: str, name: str) -> Team:
        team = self._team(team_id)
        team.name = name
        return team

    def delete_team(self, team_id: str) -> None:
        tournament = self._require_registration()
        team = self._team(team_id)
        tournament.teams.remove(team)
        logger.info(f"Deleted team {team.name}")

    def add_team_member(
        self, team_id: str, name: str, role: str | None = None
    ) -> TeamMember:
        team = self._team(team_id)
        member = TeamMember(name=name, role=role)
        team.members.append(member)
        return member

    def update_team_member(
        self, team_id: str, member_id: str, name: str, role: str | None = None
    ) -> TeamMember:
        member = self._member(self._team(team_id), member_id)
        member.name = name
        if role is not None:
            member.role = role
        return member

    def remove_team_member(self, team_id: str, member_id: str) -> None:
        team = self._team(team_id)
        team.members.remove(self._member(team, member_id))

    def update_team_color(self, team_id: str, color: str) -> Team:
        tournament = self._require()
        team = self._team(team_id)
        if tournament.color_taken(color, exclude_team_id=team_id):
            raise DuplicateColor(color)
        team.color = color
        return team

    def update_team_image(self, team_id: str, image: str | None) -> Team:
        team = self._team(team_id)
        team.image = image
        return team

    # --- Gameplay ---

    def match_command(self, name: str, *args: Any) -> CommandResult:
        """Apply a transition to the active match."""
        if name not in GAMEPLAY_COMMANDS:
            return CommandResult.rejected(f"Unknown match command: {name}")
        if ignored := self._gameplay_guard(name):
            return ignored
        return getattr(self._machine, name)(*args)

    def start_timer(self, duration: int) -> CommandResult:
        if ignored := self._gameplay_guard("start_timer"):
            return ignored
        if duration < 0:
            return CommandResult.rejected("Timer duration cannot be negative")
        self.timer.start(duration)
        return CommandResult.ok(self.current_match())

    def stop_timer(self) -> CommandResult:
        if ignored := self._gameplay_guard("stop_timer"):
            return ignored
        self.timer.stop()
        return CommandResult.ok(self.current_match())

    def add_time(self, seconds: int) -> CommandResult:
        if ignored := self._gameplay_guard("add_time"):
            return ignored
        if not self.timer.add(seconds):
            return CommandResult.ignored("Timer is not set")
        return CommandResult.ok(self.current_match())

    # --- Leaderboard ---

    def summary(self) -> TournamentSummary:
        """Standings across every match each team has played."""
        tournament = self._require()
        standings = []
        for team in tournament.teams:
            entry = StandingEntry(
                team_id=team.id, name=team.name, color=team.color, image=team.image
            )
            for match in tournament.matches:
                slot = match.team(team.id)
                if slot is None:
                    continue
                entry.furthest_round = max(entry.furthest_round, match.bracket_round)
                if match.phase == MatchPhase.FINISHED:
                    entry.matches_played += 1
                    entry.total_points += slot.score
                    if match.winner_id == team.id:
                        entry.matches_won += 1
            standings.append(entry)

        standings.sort(
            key=lambda e: (
                e.team_id != tournament.champion_id,
                -e.furthest_round,
                -e.matches_won,
                -e.total_points,
            )
        )
        return TournamentSummary(
            id=tournament.id,
            name=tournament.name,
            status=tournament.status,
            champion_id=tournament.champion_id,
            standings=standings,
        )

    # --- Internals ---

    def _require(self) -> Tournament:
        if self.tournament is None:
            raise NoTournament()
        return self.tournament

    def _require_registration(self) -> Tournament:
        tournament = self._require()
        if tournament.status != TournamentStatus.REGISTRATION:
            raise TournamentLocked(tournament.status.value)
        return tournament

    def _team(self, team_id: str) -> Team:
        team = self._require().find_team(team_id)
        if team is None:
            raise TeamNotFound(team_id)
        return team

    @staticmethod
    def _member(team: Team, member_id: str) -> TeamMember:
        member = next((m for m in team.members if m.id == member_id), None)
        if member is None:
            raise MemberNotFound(member_id)
        return member

    def _gameplay_guard(self, command: str) -> CommandResult | None:
        tournament = self.tournament
        if tournament is None:
            reason = "No tournament created"
        elif tournament.status != TournamentStatus.ACTIVE:
            reason = f"Tournament is {tournament.status.value}"
        elif self._machine is None or self.current_match() is None:
            reason = "No active match"
        else:
            return None
        logger.debug(f"Ignoring {command}: {reason}")
        return CommandResult.ignored(reason)

    def _activate(self, match: Match) -> None:
        tournament = self._require()
        tournament.current_match_id = match.id
        self._machine = MatchStateMachine(
            match,
            MatchRules.from_tournament(tournament),
            self.selector,
            self.timer,
            on_finished=self._on_match_finished,
        )

    def _on_match_finished(self, match: Match) -> None:
        tournament = self._require()
        winner = match.team(match.winner_id)
        if winner is None:
            logger.error(f"Match {match.id} finished without a winner")
            return

        if match.next_match_id is None:
            tournament.champion_id = winner.id
            logger.info(f"{winner.name} won the final of '{tournament.name}'")
        else:
            self.bracket.advance_winner(tournament.matches, match, winner)

        if self.start_next_match() is not None:
            return

        tournament.current_match_id = None
        self._machine = None
        if not any(self.bracket.is_playable(m) for m in tournament.matches):
            self.end_tournament()
