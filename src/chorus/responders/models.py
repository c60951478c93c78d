"""Data structures produced by the responders."""

from pydantic import BaseModel, Field

from ..registry import Participant
from ..store.models import ModelResponse


class PersonaReply(BaseModel):
    """Structured output contract of a persona generation call."""

    final_answer: str = Field(description="The in-character reply to the user")
    emotion: str = Field(
        description="Detected user emotion (e.g. curious, happy, frustrated, sad, neutral, "
                    "romantic, flirty, playful, angry, contemplative, confused, overwhelmed)"
    )
    intent: str = Field(
        description="Detected user intent (e.g. seeking information, venting, problem-solving, "
                    "casual conversation, roleplaying)"
    )
    detected_language: str = Field(description="Language name of the user's prompt, e.g. English")
    emoji_reaction: str | None = Field(
        default=None,
        description="A single emoji reacting to the user's prompt"
    )


class PersonaResult(BaseModel):
    """A persona turn: the reply plus the voice it was spoken in."""

    model_id: str
    persona_name: str
    reply: PersonaReply
    voice: str
    audio_data_uri: str | None = None


class BatchEntry(BaseModel):
    model_id: str = Field(description="Id of the simulated model, e.g. 'chat-gpt'")
    content: str = Field(description="The simulated model's response")


class BatchReply(BaseModel):
    """Structured output of the batched multi-model simulation call."""

    responses: list[BatchEntry] = Field(default_factory=list)


class FanOutResult(BaseModel):
    """Outcome of a fan-out turn.

    Attributes:
        responses: One entry per requested id that produced data, in request order
        summary: Smart summary, present only with two or more non-error responses
        detected_language: Language every reply was asked to use
        dropped: Requested ids for which no response came back
    """

    responses: list[ModelResponse] = Field(default_factory=list)
    summary: str | None = None
    detected_language: str | None = None
    dropped: int = 0

    @property
    def successful(self) -> list[ModelResponse]:
        return [r for r in self.responses if not r.is_error]


class TranscriptTurn(BaseModel):
    """One ``Speaker: text`` line of a group transcript."""

    speaker: str
    text: str


class TranscriptParse(BaseModel):
    turns: list[TranscriptTurn] = Field(default_factory=list)
    discarded_lines: int = 0


class GroupTurn(BaseModel):
    """A transcript turn attributed to a participating persona."""

    participant: Participant
    text: str


class RevealEvent(BaseModel):
    """When a group turn becomes visible, relative to the start of the reveal.

    Attributes:
        turn: The turn being revealed
        typing_delay_ms: How long the speaker "types" before the reveal
        reveal_at_ms: Offset of the reveal from the start of the sequence
    """

    turn: GroupTurn
    typing_delay_ms: int
    reveal_at_ms: int

    @property
    def speaker(self) -> str:
        return self.turn.participant.name


class GroupResult(BaseModel):
    """Outcome of one group-conversation generation call."""

    turns: list[GroupTurn] = Field(default_factory=list)
    transcript: str = ""
    audio_data_uri: str | None = None
    discarded_lines: int = 0
    unknown_speaker_turns: int = 0


class MemoryProfile(BaseModel):
    """Long-term memory of a user, synthesized from past conversations."""

    personality_traits: list[str] = Field(default_factory=list)
    key_interests: list[str] = Field(default_factory=list)
    recent_goals: list[str] = Field(default_factory=list)
    emotional_summary: str = ""
    relationship_with_ai: str = ""


class BattleResult(BaseModel):
    model_a_id: str
    model_b_id: str
    response_a: str
    response_b: str
