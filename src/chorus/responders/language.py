"""Language detection for the user's prompt."""

from ..llm import HistoryItem
from ..prompts import render_prompt
from .base import Responder


class LanguageDetector(Responder):
    """Detects the language of a prompt with one short generation call.

    The result is passed to every reply of a turn so that all models answer
    in the same language. Detection failures are not fatal: the turn goes on
    without a language directive.
    """

    component = "language"

    async def detect(self, text: str) -> str | None:
        """Return a language name such as "English", or None when unknown."""
        if not text.strip():
            return None

        try:
            result = await self._llm.generate(
                [HistoryItem(role="user", content=render_prompt("language", text=text))],
                model=self._config.fast_model,
                temperature=0.0,
            )
        except Exception as e:
            self._debug("warning", f"Language detection failed: {e}")
            return None

        language = result.text.strip().strip('".').strip()
        if not language:
            return None
        self._debug("debug", f"Detected language: {language}")
        return language
