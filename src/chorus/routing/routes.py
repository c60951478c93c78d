"""Route decision: which responder answers a user message."""

from collections.abc import Sequence
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from ..registry import (
    AGGREGATE_MODEL_ID,
    DEFAULT_FANOUT_IDS,
    CustomPersona,
    Participant,
    group_participants,
    is_persona_id,
)


class GroupRoute(BaseModel):
    """Answer with one multi-speaker transcript from all AI members."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["group"] = "group"
    participants: list[Participant]


class SinglePersonaRoute(BaseModel):
    """Answer in character as one persona."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["persona"] = "persona"
    model_id: str


class FanOutRoute(BaseModel):
    """Ask one or more standard models and keep each reply separate."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["fan_out"] = "fan_out"
    model_ids: list[str]


RouteDecision = Annotated[
    GroupRoute | SinglePersonaRoute | FanOutRoute,
    Field(discriminator="kind"),
]


def resolve_route(
    command: str | None,
    default_model_id: str | None,
    ai_members: Sequence[str] = (),
    custom_personas: Sequence[CustomPersona] = (),
    fanout_default_ids: Sequence[str] = DEFAULT_FANOUT_IDS,
) -> GroupRoute | SinglePersonaRoute | FanOutRoute:
    """Decide which responder path handles a message.

    Args:
        command: Directive parsed from the message, if any
        default_model_id: The chat's default model
        ai_members: Registry ids of the chat's AI members
        custom_personas: The chat's custom personas
        fanout_default_ids: Models asked when nothing specific is requested

    Returns:
        GroupRoute when the chat has two or more AI members (regardless of
        command); SinglePersonaRoute when the resolved id is a persona;
        FanOutRoute otherwise. Unknown ids go to the fan-out path, where they
        become a "model not found" error entry.
    """
    if len(ai_members) + len(custom_personas) >= 2:
        return GroupRoute(participants=group_participants(ai_members, custom_personas))

    resolved = command or default_model_id
    if resolved is None and len(ai_members) + len(custom_personas) == 1:
        resolved = ai_members[0] if ai_members else custom_personas[0].id

    if is_persona_id(resolved, custom_personas):
        return SinglePersonaRoute(model_id=resolved)

    if resolved is None or resolved == AGGREGATE_MODEL_ID:
        return FanOutRoute(model_ids=list(fanout_default_ids))

    return FanOutRoute(model_ids=[resolved])
