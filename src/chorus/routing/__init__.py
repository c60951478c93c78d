from .commands import COMMAND_PATTERN, ParsedCommand, parse_command
from .history import build_history_view, conversation_log
from .routes import (
    FanOutRoute,
    GroupRoute,
    RouteDecision,
    SinglePersonaRoute,
    resolve_route,
)

__all__ = [
    "COMMAND_PATTERN",
    "ParsedCommand",
    "parse_command",
    "build_history_view",
    "conversation_log",
    "FanOutRoute",
    "GroupRoute",
    "RouteDecision",
    "SinglePersonaRoute",
    "resolve_route",
]
