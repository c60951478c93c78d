"""Chat persistence for chorus.

The store is an external collaborator of the routing core: the chat service only
reads chat metadata and appends the turns it produces.
"""

from .base import MUTABLE_MESSAGE_FIELDS, ChatStore, MessageListener
from .factory import create_chat_store
from .in_memory import InMemoryChatStore
from .models import Author, Chat, ChatMessage, ModelResponse

__all__ = [
    "MUTABLE_MESSAGE_FIELDS",
    "ChatStore",
    "MessageListener",
    "create_chat_store",
    "InMemoryChatStore",
    "Author",
    "Chat",
    "ChatMessage",
    "ModelResponse",
]
