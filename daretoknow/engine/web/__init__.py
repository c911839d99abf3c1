"""WebSocket and REST transport for the tournament engine."""

from .app import create_app
from .commands import CommandDispatcher
from .connection_manager import ConnectionManager

__all__ = ["create_app", "CommandDispatcher", "ConnectionManager"]
