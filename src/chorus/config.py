"""Runtime configuration for the routing core.

The core never reads the process environment itself; a ``RouterConfig`` value is
built once (usually by ``RouterConfig.from_env`` in the CLI) and passed into the
responders explicitly.
"""

import os
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field


class LogLevel:
    """Numeric log levels for debug-callback filtering (lower is more verbose)."""

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40

    _LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

    @classmethod
    def name(cls, level: int) -> str:
        for label in cls._LEVELS:
            if getattr(cls, label) == level:
                return label
        return "UNKNOWN"

    @classmethod
    def from_string(cls, level_str: str) -> int:
        """Parse a level name case-insensitively; unknown names mean DEBUG."""
        label = level_str.upper()
        return getattr(cls, label) if label in cls._LEVELS else cls.DEBUG


# Group reveal timing (milliseconds)
TYPING_MS_PER_CHAR = 50
MIN_TYPING_DELAY_MS = 500
MAX_TYPING_DELAY_MS = 4000
INTER_TURN_PAUSE_MS = 500

# Number of history entries each responder sees
HISTORY_WINDOW = 6


class RouterConfig(BaseModel):
    """Explicit configuration for responders and the chat service."""

    model_config = ConfigDict(frozen=True)

    gemini_api_key: str | None = Field(default=None, description="Google AI API key")
    grok_api_key: str | None = Field(default=None, description="xAI API key for the externally routed model")

    chat_model: str = Field(default="gemini-2.5-flash", description="Model for batch simulation and summaries")
    persona_model: str = Field(default="gemini-2.5-pro", description="Model for persona and group turns")
    fast_model: str = Field(default="gemini-2.5-flash", description="Model for language detection")
    tts_model: str = Field(default="gemini-2.5-flash-preview-tts", description="Text-to-speech model")
    grok_model: str = Field(default="grok-3", description="Model name sent to the xAI endpoint")
    grok_base_url: str = Field(default="https://api.x.ai/v1")

    default_voice: str = Field(default="Umbriel")
    fanout_default_ids: tuple[str, ...] = Field(default=("chat-gpt", "gemini", "claude"))
    history_window: int = Field(default=HISTORY_WINDOW, ge=1)

    typing_ms_per_char: int = Field(default=TYPING_MS_PER_CHAR, ge=0)
    min_typing_delay_ms: int = Field(default=MIN_TYPING_DELAY_MS, ge=0)
    max_typing_delay_ms: int = Field(default=MAX_TYPING_DELAY_MS, ge=0)
    inter_turn_pause_ms: int = Field(default=INTER_TURN_PAUSE_MS, ge=0)

    store_backend: Literal["memory", "sqlite"] = Field(default="sqlite", description="Chat store used by the CLI")
    db_path: str = Field(default="./chorus.db", description="SQLite database file")

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "RouterConfig":
        """Build a config from environment variables.

        Environment variables:
            GEMINI_API_KEY: Google AI API key
            GROK_API_KEY: xAI API key (absence is a per-model error, not fatal)
            CHORUS_CHAT_MODEL, CHORUS_PERSONA_MODEL, CHORUS_FAST_MODEL,
            CHORUS_TTS_MODEL, CHORUS_GROK_MODEL: model overrides
            CHORUS_DEFAULT_VOICE: fallback TTS voice
            CHORUS_STORE, CHORUS_DB_PATH: chat store backend and SQLite file
        """
        if dotenv:
            load_dotenv()

        overrides = {
            "chat_model": os.getenv("CHORUS_CHAT_MODEL"),
            "persona_model": os.getenv("CHORUS_PERSONA_MODEL"),
            "fast_model": os.getenv("CHORUS_FAST_MODEL"),
            "tts_model": os.getenv("CHORUS_TTS_MODEL"),
            "grok_model": os.getenv("CHORUS_GROK_MODEL"),
            "default_voice": os.getenv("CHORUS_DEFAULT_VOICE"),
            "store_backend": (os.getenv("CHORUS_STORE") or "").lower(),
            "db_path": os.getenv("CHORUS_DB_PATH"),
        }

        return cls(
            gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
            grok_api_key=os.getenv("GROK_API_KEY") or None,
            **{key: value for key, value in overrides.items() if value},
        )
