"""Text-to-speech for persona replies and group transcripts."""

from .base import SpeechSynthesizer
from .gemini import GeminiSpeechSynthesizer, pcm_to_wav_data_uri
from .voices import (
    VOICES,
    Voice,
    is_valid_voice,
    voice_for_emotion,
    voice_for_speaker,
)

__all__ = [
    "SpeechSynthesizer",
    "GeminiSpeechSynthesizer",
    "pcm_to_wav_data_uri",
    "VOICES",
    "Voice",
    "is_valid_voice",
    "voice_for_emotion",
    "voice_for_speaker",
]
