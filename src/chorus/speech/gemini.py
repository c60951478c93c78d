"""Gemini text-to-speech synthesizer.

The TTS model returns raw 16-bit PCM at 24 kHz; it is wrapped in a WAV container
and returned as a base64 data URI.
"""

import base64
import io
import wave
from typing import Any

from google import genai
from google.genai import types

from ..errors import GenerationFailed
from .base import SpeechSynthesizer
from .voices import is_valid_voice

# Gemini multi-speaker TTS accepts exactly this many speakers
MULTI_SPEAKER_LIMIT = 2


def pcm_to_wav_data_uri(
    pcm: bytes,
    channels: int = 1,
    rate: int = 24000,
    sample_width: int = 2
) -> str:
    """Wrap raw PCM frames in a WAV container and encode as a data URI."""
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav_file:
        wav_file.setnchannels(channels)
        wav_file.setsampwidth(sample_width)
        wav_file.setframerate(rate)
        wav_file.writeframes(pcm)
    return "data:audio/wav;base64," + base64.b64encode(buffer.getvalue()).decode("ascii")


def _prebuilt(voice: str) -> types.VoiceConfig:
    return types.VoiceConfig(
        prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=voice)
    )


class GeminiSpeechSynthesizer(SpeechSynthesizer):
    """Speech synthesis with the Gemini TTS preview models.

    Hidden design decisions:
    - Voice name validation with fallback to a default voice
    - Single vs multi-speaker speech config
    - PCM to WAV packaging
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gemini-2.5-flash-preview-tts",
        default_voice: str = "Algenib",
        client: genai.Client | None = None,
        **client_kwargs: Any
    ):
        """Initialize the synthesizer.

        Args:
            api_key: Google AI API key (ignored when ``client`` is given)
            model: TTS model name
            default_voice: Voice used when a requested voice is unknown
            client: Existing GenAI client to share with a GeminiProvider
            **client_kwargs: Additional kwargs for Client
        """
        if client is None:
            if not api_key:
                raise TypeError("GeminiSpeechSynthesizer requires 'api_key' or 'client'")
            client = genai.Client(api_key=api_key, **client_kwargs)
        self._client = client
        self._model = model
        self._default_voice = default_voice

    def resolve_voice(self, voice: str | None) -> str:
        """Return ``voice`` if the TTS model knows it, else the default voice."""
        if voice and is_valid_voice(voice):
            return voice
        return self._default_voice

    async def _speak(self, prompt: str, speech_config: types.SpeechConfig) -> str:
        response = await self._client.aio.models.generate_content(
            model=self._model,
            contents=prompt,
            config=types.GenerateContentConfig(
                response_modalities=["AUDIO"],
                speech_config=speech_config,
            ),
        )

        if response.candidates and response.candidates[0].content:
            for part in response.candidates[0].content.parts or []:
                if part.inline_data and part.inline_data.data:
                    return pcm_to_wav_data_uri(part.inline_data.data)

        raise GenerationFailed("No audio returned from the TTS model.")

    async def synthesize(self, text: str, voice: str) -> str:
        """Speak ``text`` in a single prebuilt voice."""
        return await self._speak(
            text,
            types.SpeechConfig(voice_config=_prebuilt(self.resolve_voice(voice))),
        )

    async def synthesize_dialogue(
        self,
        turns: list[tuple[str, str]],
        voices: dict[str, str],
    ) -> str:
        """Speak a dialogue.

        Speakers are renamed ``Speaker1``, ``Speaker2``... in the TTS prompt. With
        exactly two speakers each gets its own voice; otherwise the dialogue is
        narrated in the first speaker's voice.
        """
        if not turns:
            raise ValueError("Cannot synthesize an empty dialogue")

        speakers = list(dict.fromkeys(speaker for speaker, _ in turns))
        labels = {speaker: f"Speaker{index + 1}" for index, speaker in enumerate(speakers)}
        prompt = "\n".join(f"{labels[speaker]}: {text}" for speaker, text in turns)

        if len(speakers) == MULTI_SPEAKER_LIMIT:
            speech_config = types.SpeechConfig(
                multi_speaker_voice_config=types.MultiSpeakerVoiceConfig(
                    speaker_voice_configs=[
                        types.SpeakerVoiceConfig(
                            speaker=labels[speaker],
                            voice_config=_prebuilt(self.resolve_voice(voices.get(speaker))),
                        )
                        for speaker in speakers
                    ]
                )
            )
        else:
            narrator = self.resolve_voice(voices.get(speakers[0]))
            speech_config = types.SpeechConfig(voice_config=_prebuilt(narrator))

        return await self._speak(prompt, speech_config)
