from pydantic import BaseModel, Field

from ..responders.models import FanOutResult, GroupResult, PersonaResult
from ..routing import RouteDecision
from ..store.models import ChatMessage

# Shown in place of a reply when a turn fails as a whole
TURN_FAILED_MESSAGE = "Sorry, an error occurred while processing your request. Please try again later."


class TurnOutcome(BaseModel):
    """Everything one user turn produced.

    Attributes:
        route: The responder path that handled the message
        user_message: The stored user message
        replies: Assistant messages appended to the chat, in append order
        persona: Persona result (single-persona path only)
        fanout: Fan-out result (fan-out path only)
        group: Group result (group path only)
    """

    route: RouteDecision
    user_message: ChatMessage
    replies: list[ChatMessage] = Field(default_factory=list)
    persona: PersonaResult | None = None
    fanout: FanOutResult | None = None
    group: GroupResult | None = None
