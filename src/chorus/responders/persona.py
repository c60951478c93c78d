"""Single-persona responder.

Answers in character with one structured generation call, picks the reply
voice from the detected user emotion and optionally speaks the reply.
"""

from collections.abc import Sequence

from ..config import RouterConfig
from ..errors import GenerationFailed
from ..llm import Attachment, GenerationProvider, HistoryItem
from ..prompts import render_prompt
from ..registry import ModelDescriptor
from ..speech import SpeechSynthesizer, voice_for_emotion
from .base import Responder
from .memory import render_memory_section
from .models import MemoryProfile, PersonaReply, PersonaResult


def _attachment_note(attachment: Attachment | None) -> str:
    if attachment is None or attachment.is_empty:
        return ""
    if attachment.file is not None:
        return f"The user attached a file named '{attachment.file.name}'. Use it as context."
    return f"The user shared a URL ({attachment.url}). Use its content as context."


class PersonaResponder(Responder):
    """Generates in-character replies for one persona.

    Hidden design decisions:
    - System prompt assembly (persona instructions, memory, social cues)
    - Structured output contract (PersonaReply)
    - Emotion to voice mapping
    - Speech synthesis failures degrade to a text-only reply
    """

    component = "persona"

    def __init__(
        self,
        llm: GenerationProvider,
        config: RouterConfig | None = None,
        synthesizer: SpeechSynthesizer | None = None,
    ) -> None:
        super().__init__(llm, config)
        self._synthesizer = synthesizer

    def build_system_prompt(
        self,
        persona: ModelDescriptor,
        memory: MemoryProfile | None = None,
        last_reaction: str | None = None,
        last_feedback: str | None = None,
    ) -> str:
        return render_prompt(
            "persona",
            persona_name=persona.name,
            persona_prompt=persona.persona_prompt,
            memory_section=render_memory_section(memory),
            last_reaction=last_reaction or "none",
            last_feedback=last_feedback or "none",
        )

    async def respond(
        self,
        persona: ModelDescriptor,
        prompt: str,
        history: Sequence[HistoryItem] = (),
        attachment: Attachment | None = None,
        memory: MemoryProfile | None = None,
        last_reaction: str | None = None,
        last_feedback: str | None = None,
    ) -> PersonaResult:
        """Answer a prompt in character.

        Args:
            persona: Registry entry (or custom persona) answering
            prompt: User message with any /command removed
            history: This persona's view of the conversation
            attachment: Optional file/URL context
            memory: The user's memory profile, if one exists
            last_reaction: Emoji the user put on the persona's previous reply
            last_feedback: like/dislike the user gave the previous reply

        Returns:
            PersonaResult with the reply, the voice and the audio (if spoken)

        Raises:
            GenerationFailed: If the model does not return a valid reply
        """
        system = self.build_system_prompt(persona, memory, last_reaction, last_feedback)
        turn = render_prompt(
            "persona_turn",
            prompt=prompt,
            attachment_note=_attachment_note(attachment),
        )

        self._debug("debug", f"{persona.id}: {len(history)} history items")

        result = await self._llm.generate(
            [*history, HistoryItem(role="user", content=turn)],
            system=system,
            model=self._config.persona_model,
            output_schema=PersonaReply,
            attachment=attachment,
        )

        reply = result.output
        if reply is None or not reply.final_answer.strip():
            raise GenerationFailed(f"{persona.name} did not return a valid reply.")

        voice = voice_for_emotion(reply.emotion, persona.voice or self._config.default_voice)
        self._debug("info", f"{persona.id}: emotion={reply.emotion}, intent={reply.intent}, voice={voice}")

        audio = None
        if self._synthesizer is not None:
            try:
                audio = await self._synthesizer.synthesize(reply.final_answer, voice)
            except Exception as e:
                self._debug("warning", f"Speech synthesis failed for {persona.id}: {e}")

        return PersonaResult(
            model_id=persona.id,
            persona_name=persona.name,
            reply=reply,
            voice=voice,
            audio_data_uri=audio,
        )
