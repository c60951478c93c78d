from abc import ABC, abstractmethod


class SpeechSynthesizer(ABC):
    """Abstract text-to-speech capability.

    Hides which TTS vendor is used and how raw audio is packaged. Both methods
    return a ``data:audio/...;base64,...`` URI.
    """

    @abstractmethod
    async def synthesize(self, text: str, voice: str) -> str:
        """Speak ``text`` in a single voice."""
        pass

    @abstractmethod
    async def synthesize_dialogue(
        self,
        turns: list[tuple[str, str]],
        voices: dict[str, str],
    ) -> str:
        """Speak an ordered list of ``(speaker, text)`` turns.

        Args:
            turns: Dialogue lines in speaking order
            voices: Voice name per speaker
        """
        pass
