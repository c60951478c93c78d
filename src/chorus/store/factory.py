from pathlib import Path

from ..config import RouterConfig
from .base import ChatStore
from .in_memory import InMemoryChatStore
from .sqlite import SQLiteChatStore


def create_chat_store(
    backend: str | None = None,
    config: RouterConfig | None = None,
    path: str | Path | None = None,
) -> ChatStore:
    """Build the chat store named by ``backend``.

    Anything not given explicitly comes from ``config``: the backend from
    ``store_backend`` and the SQLite file from ``db_path``. ``path`` is ignored
    by the in-memory backend.

    Raises:
        ValueError: If the backend is neither ``memory`` nor ``sqlite``
    """
    config = config or RouterConfig()
    name = (backend or config.store_backend).lower()

    if name == "memory":
        return InMemoryChatStore()
    if name == "sqlite":
        return SQLiteChatStore(path or config.db_path)
    raise ValueError(f"Unsupported chat store backend: {backend}. Supported backends: memory, sqlite")
