"""
Chorus: multi-model companion chat orchestration.

Routes each user message to a single persona, a fan-out across several
models, or a multi-persona group conversation. Each subpackage hides one
design decision (vendor, voices, catalog, routing, persistence).
"""

__version__ = "0.1.0"

from .chat import ChatService, TurnOutcome
from .config import RouterConfig
from .errors import (
    ChatNotFoundError,
    ChorusError,
    CredentialMissing,
    EmptyMessageError,
    GenerationFailed,
    UnsupportedInputCombination,
)
from .routing import parse_command, resolve_route

__all__ = [
    "ChatService",
    "TurnOutcome",
    "RouterConfig",
    "ChatNotFoundError",
    "ChorusError",
    "CredentialMissing",
    "EmptyMessageError",
    "GenerationFailed",
    "UnsupportedInputCombination",
    "parse_command",
    "resolve_route",
]
