from collections import defaultdict
from collections.abc import Callable

from .base import MessageListener
from .models import Chat, ChatMessage


class ListenerRegistry:
    """In-process listener bookkeeping shared by the store backends."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[MessageListener]] = defaultdict(list)

    def add(self, chat_id: str, callback: MessageListener) -> Callable[[], None]:
        self._listeners[chat_id].append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners.get(chat_id, []):
                self._listeners[chat_id].remove(callback)

        return unsubscribe

    def notify(self, chat_id: str, messages: list[ChatMessage], chat: Chat) -> None:
        for callback in list(self._listeners.get(chat_id, [])):
            callback(list(messages), chat)
