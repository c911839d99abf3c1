"""Domain validation errors raised by the tournament orchestrator."""


class TournamentError(ValueError):
    """Base class for errors reported back to the issuing caller."""


class NoTournament(TournamentError):
    def __init__(self) -> None:
        super().__init__("No tournament created")


class CapacityExceeded(TournamentError):
    def __init__(self, max_teams: int) -> None:
        super().__init__(f"Tournament full ({max_teams} teams)")


class DuplicateColor(TournamentError):
    def __init__(self, color: str) -> None:
        super().__init__(f"Color already in use: {color}")


class TeamNotFound(TournamentError):
    def __init__(self, team_id: str) -> None:
        super().__init__(f"Team not found: {team_id}")


class MemberNotFound(TournamentError):
    def __init__(self, member_id: str) -> None:
        super().__init__(f"Member not found: {member_id}")


class InvalidCapacity(TournamentError):
    def __init__(self, max_teams: int, team_count: int | None = None) -> None:
        if team_count is None:
            message = f"A tournament needs room for at least 2 teams (got {max_teams})"
        else:
            message = (
                f"Cannot reduce max teams to {max_teams} "
                f"below current team count ({team_count})"
            )
        super().__init__(message)


class TournamentLocked(TournamentError):
    """Roster changes or a restart after registration has closed."""

    def __init__(self, status: str) -> None:
        super().__init__(f"Not allowed while tournament is {status}")


class StartValidationFailed(TournamentError):
    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__(", ".join(errors))
