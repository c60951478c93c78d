"""The per-turn chat service."""

from .models import TURN_FAILED_MESSAGE, TurnOutcome
from .service import ChatService

__all__ = [
    "TURN_FAILED_MESSAGE",
    "TurnOutcome",
    "ChatService",
]
