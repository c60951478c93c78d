"""Bounded, per-participant views of a chat's history.

Every responder path builds its history through this module so the same
windowing rule applies everywhere. Views are tuples: a snapshot taken before
any async call, never mutated while a turn is in flight.
"""

from collections.abc import Iterable

from ..config import HISTORY_WINDOW
from ..llm.models import HistoryItem
from ..registry import AGGREGATE_MODEL_ID
from ..store.models import ChatMessage


def _assistant_content(message: ChatMessage, participant_id: str) -> str | None:
    """The part of an assistant message that belongs to a participant."""
    if message.is_persona_response:
        return message.content if message.author.uid == participant_id else None
    if message.is_summary:
        return message.content if participant_id == AGGREGATE_MODEL_ID else None
    response = message.response_for(participant_id)
    if response is not None and not response.is_error:
        return response.content
    return None


def build_history_view(
    messages: Iterable[ChatMessage],
    participant_id: str,
    limit: int = HISTORY_WINDOW,
) -> tuple[HistoryItem, ...]:
    """History as one participant saw it, most recent ``limit`` entries.

    User turns are always kept. Assistant turns are kept only when they belong
    to the participant: its persona replies, its entry in a fan-out reply, or
    smart summaries for the aggregate model.
    """
    view: list[HistoryItem] = []
    for message in messages:
        if message.role == "user":
            view.append(HistoryItem(role="user", content=message.content, author_name=message.author.name))
            continue
        content = _assistant_content(message, participant_id)
        if content is not None:
            view.append(HistoryItem(role="assistant", content=content, author_name=message.author.name))

    if limit <= 0:
        return ()
    return tuple(view[-limit:])


def conversation_log(messages: Iterable[ChatMessage]) -> tuple[HistoryItem, ...]:
    """Full history with author names, for group transcripts.

    Fan-out replies, which carry no top-level content, are left out.
    """
    return tuple(
        HistoryItem(
            role=message.role,
            content=message.content,
            author_name=message.author.name or ("User" if message.role == "user" else "AI"),
        )
        for message in messages
        if message.content
    )
