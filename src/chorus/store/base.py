"""Abstract base class for chat stores.

This module defines the interface of the persistence layer the chat service
appends turns to. The abstraction hides:
- Storage format (JSON, SQLite, etc.)
- Persistence mechanism (file, database, in-memory)
- Connection management
- How listeners are notified
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from .models import Chat, ChatMessage

MessageListener = Callable[[list[ChatMessage], Chat], None]

# The only message fields that may change after a message is written
MUTABLE_MESSAGE_FIELDS = frozenset({"feedback", "user_reaction", "ai_reaction"})


def check_mutable_fields(changes: dict[str, Any]) -> None:
    """Reject updates to message fields that are immutable once written."""
    illegal = set(changes) - MUTABLE_MESSAGE_FIELDS
    if illegal:
        raise ValueError(f"Message fields cannot be changed after writing: {sorted(illegal)}")


def apply_message_changes(message: ChatMessage, changes: dict[str, Any]) -> ChatMessage:
    """Return ``message`` with ``changes`` applied and the result re-validated.

    Raises:
        ValueError: If a field is immutable or a value is invalid
            (pydantic's ``ValidationError`` is a ``ValueError``)
    """
    check_mutable_fields(changes)
    return ChatMessage.model_validate({**message.model_dump(), **changes})


class ChatStore(ABC):
    """Abstract chat store.

    Provides a unified interface for storing chats and their messages across
    different storage backends. The store is the sole serializer of message
    order within a chat.
    """

    @abstractmethod
    async def connect(self) -> None:
        """Initialize the store."""

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the store gracefully."""

    @abstractmethod
    async def get_chat(self, chat_id: str) -> Chat:
        """Retrieve chat metadata.

        Raises:
            ChatNotFoundError: If the chat does not exist
        """

    @abstractmethod
    async def save_chat(self, chat: Chat) -> None:
        """Create or replace chat metadata."""

    @abstractmethod
    async def update_default_model(self, chat_id: str, model_id: str) -> Chat:
        """Set the model used when a message carries no /command."""

    @abstractmethod
    async def append_message(self, chat_id: str, message: ChatMessage) -> ChatMessage:
        """Append a message and notify listeners."""

    @abstractmethod
    async def update_message(self, chat_id: str, message_id: str, **changes: Any) -> ChatMessage:
        """Change the mutable fields of a written message.

        Raises:
            ValueError: If an immutable field is in ``changes``
            KeyError: If the message does not exist
        """

    @abstractmethod
    async def list_messages(self, chat_id: str) -> list[ChatMessage]:
        """All messages of a chat in append order."""

    @abstractmethod
    async def list_chats(self) -> list[Chat]:
        """All chats, most recently updated first."""

    @abstractmethod
    def listen(self, chat_id: str, callback: MessageListener) -> Callable[[], None]:
        """Register a listener called with the full message list on every change.

        Returns:
            Function that removes the listener
        """

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Get the backend type identifier."""
