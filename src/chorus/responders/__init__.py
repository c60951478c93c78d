"""Responders turn a routed user message into AI output.

Each responder hides one conversation mode: a single persona, a multi-model
fan-out, a group transcript, memory synthesis or a two-model battle.
"""

from .base import Responder
from .battle import BattleResponder
from .fanout import FanOutRouter
from .group import (
    GroupOrchestrator,
    paced_reveals,
    parse_transcript,
    plan_reveals,
    reveal,
    typing_delay_ms,
)
from .language import LanguageDetector
from .memory import MemorySynthesizer, render_memory_section
from .models import (
    BattleResult,
    BatchEntry,
    BatchReply,
    FanOutResult,
    GroupResult,
    GroupTurn,
    MemoryProfile,
    PersonaReply,
    PersonaResult,
    RevealEvent,
    TranscriptParse,
    TranscriptTurn,
)
from .persona import PersonaResponder

__all__ = [
    "Responder",
    "BattleResponder",
    "FanOutRouter",
    "GroupOrchestrator",
    "paced_reveals",
    "parse_transcript",
    "plan_reveals",
    "reveal",
    "typing_delay_ms",
    "LanguageDetector",
    "MemorySynthesizer",
    "render_memory_section",
    "BattleResult",
    "BatchEntry",
    "BatchReply",
    "FanOutResult",
    "GroupResult",
    "GroupTurn",
    "MemoryProfile",
    "PersonaReply",
    "PersonaResult",
    "RevealEvent",
    "TranscriptParse",
    "TranscriptTurn",
    "PersonaResponder",
]
