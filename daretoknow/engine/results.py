"""Tagged results returned by engine commands."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class CommandStatus(Enum):
    """Outcome of a command."""

    OK = "ok"
    IGNORED = "ignored"  # Stale or out-of-order; state untouched
    REJECTED = "rejected"  # Domain error; state untouched


@dataclass(frozen=True)
class CommandResult:
    """Result of applying one command to the engine."""

    status: CommandStatus
    value: Any = None
    reason: str | None = None

    @classmethod
    def ok(cls, value: Any = None) -> "CommandResult":
        return cls(CommandStatus.OK, value=value)

    @classmethod
    def ignored(cls, reason: str) -> "CommandResult":
        return cls(CommandStatus.IGNORED, reason=reason)

    @classmethod
    def rejected(cls, reason: str) -> "CommandResult":
        return cls(CommandStatus.REJECTED, reason=reason)

    @property
    def is_ok(self) -> bool:
        return self.status == CommandStatus.OK

    @property
    def is_ignored(self) -> bool:
        return self.status == CommandStatus.IGNORED

    @property
    def is_rejected(self) -> bool:
        return self.status == CommandStatus.REJECTED
