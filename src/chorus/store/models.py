"""Records exchanged with the persistence layer.

These models define chats and their messages independent of the storage
backend used.
"""

from datetime import datetime, timezone
from typing import Any, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..errors import is_error_content
from ..llm.models import Attachment
from ..registry.models import CustomPersona


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Author(BaseModel):
    """Who wrote a message: a user, or an AI identified by model/persona id."""

    model_config = ConfigDict(frozen=True)

    uid: str
    name: str
    avatar: str | None = None


class ModelResponse(BaseModel):
    """One reply from one queried model."""

    model_config = ConfigDict(frozen=True)

    model_id: str
    content: str
    image_url: str | None = None
    chart_data: dict[str, Any] | None = None
    audio_data_uri: str | None = None

    @property
    def is_error(self) -> bool:
        """True when the content is a per-model error marker."""
        return is_error_content(self.content)


class ChatMessage(BaseModel):
    """A message in a chat.

    Assistant messages take exactly one shape: persona/group reply
    (``is_persona_response`` with ``content``), fan-out reply (``responses``
    with empty ``content``) or smart summary (``is_summary``). Only
    ``feedback``, ``user_reaction`` and ``ai_reaction`` change after writing.
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    role: Literal["user", "assistant"]
    content: str = ""
    author: Author
    responses: list[ModelResponse] | None = None
    is_summary: bool = False
    is_persona_response: bool = False
    persona_name: str | None = None
    audio_data_uri: str | None = None
    attachment: Attachment | None = None
    detected_language: str | None = None
    feedback: Literal["like", "dislike"] | None = None
    user_reaction: str | None = None
    ai_reaction: str | None = None
    created_at: datetime = Field(default_factory=_now)

    @model_validator(mode="after")
    def _check_shape(self) -> "ChatMessage":
        shapes = sum((self.is_persona_response, bool(self.responses), self.is_summary))
        if shapes > 1:
            raise ValueError(
                "A message is either a persona reply, a fan-out reply or a summary, not several"
            )
        if self.responses and self.content:
            raise ValueError("Fan-out messages keep their content in 'responses'")
        return self

    def response_for(self, model_id: str) -> ModelResponse | None:
        """Find the fan-out entry for a model id."""
        for response in self.responses or []:
            if response.model_id == model_id:
                return response
        return None


class Chat(BaseModel):
    """Chat metadata the routing layer reads to pick a responder path."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    title: str = "New chat"
    members: list[str] = Field(default_factory=list, description="Human member uids")
    ai_members: list[str] = Field(default_factory=list, description="Registry ids taking part in a group chat")
    custom_personas: list[CustomPersona] = Field(default_factory=list)
    default_model_id: str | None = None
    expires_at: datetime | None = None
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)

    @property
    def ai_member_count(self) -> int:
        return len(self.ai_members) + len(self.custom_personas)

    @property
    def is_group(self) -> bool:
        return self.ai_member_count >= 2
