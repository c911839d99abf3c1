"""Tests for the tournament orchestrator."""

import random

import pytest

from daretoknow.engine.match import TIMER_END
from daretoknow.engine.tournaments import (
    CapacityExceeded,
    DuplicateColor,
    InvalidCapacity,
    MemberNotFound,
    NoTournament,
    StartValidationFailed,
    TeamNotFound,
    TournamentError,
    TournamentLocked,
    TournamentManager,
)
from daretoknow.engine.types import Difficulty, MatchPhase, Strategy, TournamentStatus

COLORS = ["#FF5733", "#33FF57", "#3357FF", "#F033FF", "#FF33A8", "#33FFF5"]


def register_teams(manager: TournamentManager, count: int) -> None:
    for i in range(count):
        team = manager.register_team(f"Team {i + 1}", COLORS[i])
        manager.add_team_member(team.id, f"Player {i + 1}")


def play_to_end(manager: TournamentManager) -> None:
    """Open the current match and end it on level scores."""
    match = manager.current_match()
    assert match is not None
    assert manager.match_command("start").is_ok
    assert manager.match_command("buzz", match.team_a.id).is_ok
    assert manager.match_command("judge_buzzer", match.team_a.id).is_ok
    assert manager.match_command("end").is_ok


def test_create_tournament_defaults(manager) -> None:
    """New tournaments start in registration with configured defaults."""
    tournament = manager.create_tournament("Spring Cup", max_teams=4)

    assert tournament.status == TournamentStatus.REGISTRATION
    assert tournament.min_teams == 2
    assert tournament.min_members_per_team == 1
    assert tournament.default_question_time == 30
    assert tournament.default_dare_time == 60
    assert tournament.default_rounds_per_match == 10
    assert tournament.buzzer_enabled is True
    assert tournament.matches == []


def test_create_replaces_previous_tournament(manager) -> None:
    """Only one tournament exists per manager."""
    manager.create_tournament("Old", max_teams=4)
    register_teams(manager, 2)

    tournament = manager.create_tournament("New", max_teams=6, rounds_per_match=3)

    assert manager.tournament is tournament
    assert tournament.teams == []
    assert tournament.default_rounds_per_match == 3


def test_operations_without_tournament_fail(manager) -> None:
    """Roster operations need a tournament."""
    with pytest.raises(NoTournament):
        manager.register_team("Lions", "#FF5733")
    with pytest.raises(NoTournament):
        manager.start_tournament()
    assert manager.match_command("start").is_ignored
    assert manager.validate_tournament_start().is_valid is False


def test_register_team_respects_capacity(manager) -> None:
    """A full roster rejects new teams without changing it."""
    manager.create_tournament("Cup", max_teams=2)
    register_teams(manager, 2)

    with pytest.raises(CapacityExceeded):
        manager.register_team("Extra", "#000000")
    assert len(manager.tournament.teams) == 2


def test_duplicate_colors_are_rejected(manager) -> None:
    """Registration and color changes keep colors unique."""
    manager.create_tournament("Cup", max_teams=4)
    lions = manager.register_team("Lions", "#FF5733")
    tigers = manager.register_team("Tigers", "#33FF57")

    with pytest.raises(DuplicateColor):
        manager.register_team("Bears", "#FF5733")
    with pytest.raises(DuplicateColor):
        manager.update_team_color(tigers.id, "#FF5733")

    assert tigers.color == "#33FF57"
    assert manager.update_team_color(lions.id, "#FF5733").color == "#FF5733"


def test_colors_stay_unique_under_random_edits(manager) -> None:
    """No sequence of registrations and recolors produces a shared color."""
    rng = random.Random(11)
    palette = ["#111111", "#222222", "#333333", "#444444"]
    manager.create_tournament("Cup", max_teams=6)

    for step in range(60):
        teams = manager.tournament.teams
        try:
            if not teams or rng.random() < 0.3:
                manager.register_team(f"Team {step}", rng.choice(palette))
            else:
                manager.update_team_color(rng.choice(teams).id, rng.choice(palette))
        except TournamentError:
            pass
        colors = [t.color for t in manager.tournament.teams]
        assert len(colors) == len(set(colors))


def test_randomize_teams_distributes_round_robin(manager) -> None:
    """Nine players over four teams gives sizes 3, 2, 2, 2."""
    manager.create_tournament("Cup", max_teams=4)
    names = [f"Player {i}" for i in range(9)]

    teams = manager.randomize_teams(names)

    assert len(teams) == 4
    assert sorted(len(t.members) for t in teams) == [2, 2, 2, 3]
    assert sorted(m.name for t in teams for m in t.members) == sorted(names)
    assert all(m.role == "Member" for t in teams for m in t.members)
    assert [t.name for t in teams] == ["Team 1", "Team 2", "Team 3", "Team 4"]
    assert len({t.color for t in teams}) == 4
    assert all(t.image for t in teams)


def test_randomize_with_tiny_capacity_uses_four_teams(manager) -> None:
    """An unset capacity falls back to four teams."""
    manager.create_tournament("Cup", max_teams=2)
    manager.tournament.max_teams = 0

    teams = manager.randomize_teams(["a", "b"])

    assert len(teams) == 4
    assert manager.tournament.max_teams == 4


def test_randomize_large_roster_keeps_colors_unique(manager) -> None:
    """Rosters bigger than the palette still get one color per team."""
    manager.create_tournament("Cup", max_teams=24)

    teams = manager.randomize_teams([f"Player {i}" for i in range(48)])

    assert len(teams) == 24
    assert len({t.color for t in teams}) == 24
    assert all(t.color.startswith("#") and len(t.color) == 7 for t in teams)


@pytest.mark.parametrize("max_teams", [1, 0, -3])
def test_capacity_must_fit_two_teams(manager, max_teams: int) -> None:
    """Creating or resizing below two teams is rejected."""
    with pytest.raises(InvalidCapacity):
        manager.create_tournament("Cup", max_teams=max_teams)
    assert manager.tournament is None

    manager.create_tournament("Cup", max_teams=4)
    with pytest.raises(InvalidCapacity):
        manager.update_tournament("Cup", max_teams)
    assert manager.tournament.max_teams == 4



def test_set_teams_validates_before_replacing(manager, team_a, team_b) -> None:
    """Bulk replacement checks capacity and colors first."""
    manager.create_tournament("Cup", max_teams=2)
    register_teams(manager, 1)
    team_b.color = team_a.color

    with pytest.raises(DuplicateColor):
        manager.set_teams([team_a, team_b])
    assert [t.name for t in manager.tournament.teams] == ["Team 1"]

    team_b.color = "#33FF57"
    team_a.score = 99
    replaced = manager.set_teams([team_a, team_b])
    assert [t.name for t in replaced] == ["Lions", "Tigers"]
    assert replaced[0].score == 0


def test_update_tournament_capacity_floor(manager) -> None:
    """Capacity cannot fall below the registered roster."""
    manager.create_tournament("Cup", max_teams=4)
    register_teams(manager, 3)

    with pytest.raises(InvalidCapacity):
        manager.update_tournament("Cup", 2)

    tournament = manager.update_tournament("Summer Cup", 3)
    assert tournament.name == "Summer Cup"
    assert tournament.max_teams == 3


def test_update_settings(manager) -> None:
    """Settings change minimums, rounds and buzzer mode."""
    manager.create_tournament("Cup", max_teams=4)

    tournament = manager.update_tournament_settings(3, 2, 5, False)

    assert tournament.min_teams == 3
    assert tournament.min_members_per_team == 2
    assert tournament.default_rounds_per_match == 5
    assert tournament.buzzer_enabled is False
    with pytest.raises(TournamentError):
        manager.update_tournament_settings(2, 1, 0)


def test_team_and_member_editing(manager) -> None:
    """Members can be added, renamed and removed; unknown ids fail."""
    manager.create_tournament("Cup", max_teams=4)
    team = manager.register_team("Lions", "#FF5733")

    member = manager.add_team_member(team.id, "Ana", "Captain")
    manager.update_team_member(team.id, member.id, "Ana B")
    manager.update_team(team.id, "Big Lions")
    manager.update_team_image(team.id, "🦁")

    assert team.name == "Big Lions"
    assert team.image == "🦁"
    assert team.members[0].name == "Ana B"
    assert team.members[0].role == "Captain"

    with pytest.raises(MemberNotFound):
        manager.remove_team_member(team.id, "missing")
    with pytest.raises(TeamNotFound):
        manager.update_team("missing", "Nobody")

    manager.remove_team_member(team.id, member.id)
    assert team.members == []
    manager.delete_team(team.id)
    assert manager.tournament.teams == []


def test_validation_reports_errors_and_warnings(manager) -> None:
    """Start validation lists every problem without mutating."""
    manager.create_tournament("Cup", max_teams=4)
    manager.register_team("Lions", "#FF5733")

    result = manager.validate_tournament_start()

    assert result.is_valid is False
    assert "Need at least 2 teams (currently 1)" in result.errors
    assert 'Team "Lions" needs at least 1 members (currently 0)' in result.errors
    assert any("Odd number of teams" in w for w in result.warnings)
    assert manager.tournament.status == TournamentStatus.REGISTRATION


def test_start_fails_with_validation_errors(manager) -> None:
    """An invalid roster cannot start."""
    manager.create_tournament("Cup", max_teams=4)
    manager.register_team("Lions", "#FF5733")

    with pytest.raises(StartValidationFailed) as exc_info:
        manager.start_tournament()

    assert "Need at least 2 teams (currently 1)" in exc_info.value.errors
    assert manager.tournament.status == TournamentStatus.REGISTRATION
    assert manager.tournament.matches == []


def test_start_builds_bracket_and_selects_first_match(manager) -> None:
    """Starting activates the first playable match and locks the roster."""
    manager.create_tournament("Cup", max_teams=4)
    register_teams(manager, 4)

    tournament = manager.start_tournament()

    assert tournament.status == TournamentStatus.ACTIVE
    assert len(tournament.matches) == 3
    assert tournament.current_match_id == tournament.matches[0].id
    assert manager.timer.match is tournament.matches[0]
    with pytest.raises(TournamentLocked):
        manager.register_team("Late", "#FFFFFF")


def test_finished_tournament_cannot_restart(manager) -> None:
    """Ending is terminal: a second start raises and keeps the old bracket."""
    manager.create_tournament("Cup", max_teams=2)
    register_teams(manager, 2)
    tournament = manager.start_tournament()
    matches = list(tournament.matches)
    manager.end_tournament()

    assert not manager.validate_tournament_start().is_valid
    with pytest.raises(TournamentLocked):
        manager.start_tournament()
    assert tournament.status == TournamentStatus.FINISHED
    assert tournament.matches == matches


def test_active_tournament_cannot_restart(manager) -> None:
    """Starting again mid-play leaves the bracket and current match alone."""
    manager.create_tournament("Cup", max_teams=4)
    register_teams(manager, 4)
    tournament = manager.start_tournament()
    current = tournament.current_match_id

    with pytest.raises(TournamentLocked):
        manager.start_tournament()
    assert tournament.status == TournamentStatus.ACTIVE
    assert tournament.current_match_id == current



def test_start_next_match_skips_current(manager) -> None:
    """The next match is the first playable one that is not current."""
    manager.create_tournament("Cup", max_teams=4)
    register_teams(manager, 4)
    tournament = manager.start_tournament()

    match = manager.start_next_match()

    assert match is tournament.matches[1]
    assert tournament.current_match_id == match.id


def test_join_code(manager) -> None:
    """Codes are checked against the active match only."""
    assert manager.check_join_code("123456").error == "No active match found"

    manager.create_tournament("Cup", max_teams=2)
    register_teams(manager, 2)
    manager.start_tournament()
    match = manager.current_match()

    assert manager.check_join_code("000000").error == "Invalid game code"
    result = manager.check_join_code(match.game_code)
    assert result.success is True
    assert result.match is match


def test_gameplay_ignored_outside_active_tournament(manager) -> None:
    """Match commands before the start are stale, not errors."""
    manager.create_tournament("Cup", max_teams=4)

    assert manager.match_command("start").is_ignored
    assert manager.start_timer(10).is_ignored
    assert manager.match_command("explode").is_rejected


def test_timer_commands_drive_active_match(manager, scheduler, events) -> None:
    """Timer commands act on the current match and expire through the sink."""
    manager.create_tournament("Cup", max_teams=2)
    register_teams(manager, 2)
    manager.start_tournament()
    match = manager.current_match()

    assert manager.start_timer(2).is_ok
    assert manager.add_time(1).is_ok
    assert match.timer == 3
    scheduler.advance(3)

    assert events[-1] == (TIMER_END, None)
    assert manager.stop_timer().is_ok
    assert match.timer_running is False


def test_full_tournament_crowns_final_winner(manager) -> None:
    """Winners advance through the bracket and the final decides the champion."""
    manager.create_tournament("Cup", max_teams=4, rounds_per_match=1)
    register_teams(manager, 4)
    tournament = manager.start_tournament()
    first, second, final = tournament.matches

    play_to_end(manager)
    assert first.winner_id == first.team_a.id
    assert final.team_a.id == first.team_a.id
    assert manager.current_match() is second

    play_to_end(manager)
    assert final.team_b.id == second.team_a.id
    assert manager.current_match() is final

    play_to_end(manager)
    assert tournament.champion_id == final.team_a.id
    assert tournament.status == TournamentStatus.FINISHED
    assert tournament.current_match_id is None
    assert manager.match_command("start").is_ignored


def test_summary_ranks_champion_first(manager) -> None:
    """Standings count every finished match a team played."""
    manager.create_tournament("Cup", max_teams=2, rounds_per_match=1)
    register_teams(manager, 2)
    tournament = manager.start_tournament()
    match = tournament.matches[0]

    manager.match_command("start")
    manager.match_command("buzz", match.team_b.id)
    manager.match_command("judge_buzzer", match.team_b.id)
    manager.match_command("select_option", "Science", Difficulty.EASY)
    manager.match_command("select_strategy", Strategy.TRUTH)
    manager.match_command("select_answer", match.current_prompt.correct_answer)
    manager.match_command("approve_answer", True)
    manager.match_command("next_round")

    assert match.phase == MatchPhase.FINISHED
    summary = manager.summary()
    assert summary.champion_id == match.team_b.id
    assert summary.status == TournamentStatus.FINISHED

    top, runner_up = summary.standings
    assert top.team_id == match.team_b.id
    assert (top.matches_played, top.matches_won, top.total_points) == (1, 1, 100)
    assert (runner_up.matches_won, runner_up.total_points) == (0, 0)
