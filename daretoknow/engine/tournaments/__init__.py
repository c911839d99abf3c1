"""Tournament orchestration: roster, bracket and match flow."""

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
from .manager import TournamentManager

__all__ = [
    "BracketManager",
    "TournamentManager",
    "CapacityExceeded",
    "DuplicateColor",
    "InvalidCapacity",
    "MemberNotFound",
    "NoTournament",
    "StartValidationFailed",
    "TeamNotFound",
    "TournamentError",
    "TournamentLocked",
]
