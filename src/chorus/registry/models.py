from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ModelKind(str, Enum):
    """Whether an entry is queried for comparison or embodied as a persona."""

    MODEL = "model"      # Standard model, answered through the fan-out router
    PERSONA = "persona"  # Roleplay persona, answered by the single-persona responder


class ModelDescriptor(BaseModel):
    """A model or persona the user can talk to."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Stable identifier used in /commands")
    name: str = Field(description="Display name")
    description: str = Field(default="")
    persona_prompt: str = Field(description="Roleplay prompt embedded in generation calls")
    kind: ModelKind = Field(default=ModelKind.MODEL)
    voice: str | None = Field(default=None, description="Preferred TTS voice")

    @property
    def is_persona(self) -> bool:
        return self.kind == ModelKind.PERSONA


class CustomPersona(BaseModel):
    """A user-defined persona living in a single chat."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    instructions: str

    def to_descriptor(self) -> ModelDescriptor:
        """View this persona as a registry entry of kind persona."""
        return ModelDescriptor(
            id=self.id,
            name=self.name,
            description="Custom persona",
            persona_prompt=self.instructions,
            kind=ModelKind.PERSONA,
        )


class Participant(BaseModel):
    """A persona taking part in a group conversation."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    instructions: str
    voice: str | None = None
