"""In-memory chat store.

Simple dict-based storage for session-only use and tests.
Data is lost when the application exits.
"""

from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from ..errors import ChatNotFoundError
from .base import ChatStore, MessageListener, apply_message_changes
from .listeners import ListenerRegistry
from .models import Chat, ChatMessage


class InMemoryChatStore(ChatStore):
    """In-memory chat store (session-only).

    Suitable for single-session use or testing.
    """

    def __init__(self) -> None:
        self._chats: dict[str, Chat] = {}
        self._messages: dict[str, list[ChatMessage]] = {}
        self._listeners = ListenerRegistry()

    async def connect(self) -> None:
        """Initialize store (no-op for in-memory)."""
        pass

    async def disconnect(self) -> None:
        """Close store (no-op for in-memory)."""
        pass

    async def get_chat(self, chat_id: str) -> Chat:
        if chat_id not in self._chats:
            raise ChatNotFoundError(chat_id)
        return self._chats[chat_id]

    async def save_chat(self, chat: Chat) -> None:
        self._chats[chat.id] = chat
        self._messages.setdefault(chat.id, [])

    async def update_default_model(self, chat_id: str, model_id: str) -> Chat:
        chat = await self.get_chat(chat_id)
        updated = chat.model_copy(update={
            "default_model_id": model_id,
            "updated_at": datetime.now(timezone.utc),
        })
        self._chats[chat_id] = updated
        return updated

    async def append_message(self, chat_id: str, message: ChatMessage) -> ChatMessage:
        chat = await self.get_chat(chat_id)
        self._messages[chat_id].append(message)
        self._listeners.notify(chat_id, self._messages[chat_id], chat)
        return message

    async def update_message(self, chat_id: str, message_id: str, **changes: Any) -> ChatMessage:
        chat = await self.get_chat(chat_id)
        messages = self._messages[chat_id]
        for index, message in enumerate(messages):
            if message.id == message_id:
                messages[index] = apply_message_changes(message, changes)
                self._listeners.notify(chat_id, messages, chat)
                return messages[index]
        raise KeyError(message_id)

    async def list_messages(self, chat_id: str) -> list[ChatMessage]:
        await self.get_chat(chat_id)
        return list(self._messages[chat_id])

    async def list_chats(self) -> list[Chat]:
        return sorted(self._chats.values(), key=lambda chat: chat.updated_at, reverse=True)

    def listen(self, chat_id: str, callback: MessageListener) -> Callable[[], None]:
        return self._listeners.add(chat_id, callback)

    @property
    def backend_type(self) -> str:
        return "memory"
