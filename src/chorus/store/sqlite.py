"""SQLite chat store.

Chats and messages are kept as pydantic JSON documents in a single database
file, accessed through aiosqlite.
"""

from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import aiosqlite

from ..errors import ChatNotFoundError
from .base import ChatStore, MessageListener, apply_message_changes, check_mutable_fields
from .listeners import ListenerRegistry
from .models import Chat, ChatMessage

SCHEMA = """
CREATE TABLE IF NOT EXISTS chats (
    chat_id TEXT PRIMARY KEY,
    data TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS messages (
    seq INTEGER PRIMARY KEY AUTOINCREMENT,
    message_id TEXT NOT NULL UNIQUE,
    chat_id TEXT NOT NULL REFERENCES chats(chat_id) ON DELETE CASCADE,
    data TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_messages_chat ON messages(chat_id, seq);
"""

_UPSERT_CHAT = """
INSERT INTO chats (chat_id, data, updated_at) VALUES (?, ?, ?)
ON CONFLICT(chat_id) DO UPDATE SET data = excluded.data, updated_at = excluded.updated_at
"""


class SQLiteChatStore(ChatStore):
    """SQLite-backed chat store.

    Message order is the autoincrement ``seq`` of the messages table.
    Listeners are notified in-process after each commit.
    """

    def __init__(self, path: str | Path = "./chorus.db"):
        self._path = Path(path)
        self._db: aiosqlite.Connection | None = None
        self._listeners = ListenerRegistry()

    async def connect(self) -> None:
        """Open the database file and create the tables if needed."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._db = await aiosqlite.connect(self._path)
        await self._db.execute("PRAGMA foreign_keys = ON")
        await self._db.executescript(SCHEMA)
        await self._db.commit()

    async def disconnect(self) -> None:
        if self._db is not None:
            await self._db.close()
            self._db = None

    async def _write(self, sql: str, params: tuple[Any, ...]) -> None:
        await self._db.execute(sql, params)
        await self._db.commit()

    async def _documents(self, sql: str, params: tuple[Any, ...] = ()) -> list[str]:
        async with self._db.execute(sql, params) as cursor:
            return [row[0] for row in await cursor.fetchall()]

    async def _changed(self, chat: Chat) -> None:
        self._listeners.notify(chat.id, await self.list_messages(chat.id), chat)

    async def get_chat(self, chat_id: str) -> Chat:
        found = await self._documents("SELECT data FROM chats WHERE chat_id = ?", (chat_id,))
        if not found:
            raise ChatNotFoundError(chat_id)
        return Chat.model_validate_json(found[0])

    async def save_chat(self, chat: Chat) -> None:
        await self._write(_UPSERT_CHAT, (chat.id, chat.model_dump_json(), chat.updated_at.isoformat()))

    async def update_default_model(self, chat_id: str, model_id: str) -> Chat:
        chat = await self.get_chat(chat_id)
        updated = chat.model_copy(update={
            "default_model_id": model_id,
            "updated_at": datetime.now(timezone.utc),
        })
        await self.save_chat(updated)
        return updated

    async def append_message(self, chat_id: str, message: ChatMessage) -> ChatMessage:
        chat = await self.get_chat(chat_id)
        await self._write(
            "INSERT INTO messages (message_id, chat_id, data) VALUES (?, ?, ?)",
            (message.id, chat_id, message.model_dump_json()),
        )
        await self._changed(chat)
        return message

    async def update_message(self, chat_id: str, message_id: str, **changes: Any) -> ChatMessage:
        check_mutable_fields(changes)
        chat = await self.get_chat(chat_id)

        found = await self._documents(
            "SELECT data FROM messages WHERE chat_id = ? AND message_id = ?",
            (chat_id, message_id),
        )
        if not found:
            raise KeyError(message_id)

        updated = apply_message_changes(ChatMessage.model_validate_json(found[0]), changes)
        await self._write(
            "UPDATE messages SET data = ? WHERE message_id = ?",
            (updated.model_dump_json(), message_id),
        )
        await self._changed(chat)
        return updated

    async def list_messages(self, chat_id: str) -> list[ChatMessage]:
        await self.get_chat(chat_id)
        documents = await self._documents(
            "SELECT data FROM messages WHERE chat_id = ? ORDER BY seq",
            (chat_id,),
        )
        return [ChatMessage.model_validate_json(doc) for doc in documents]

    async def list_chats(self) -> list[Chat]:
        """All chats, most recently updated first."""
        documents = await self._documents("SELECT data FROM chats ORDER BY updated_at DESC")
        return [Chat.model_validate_json(doc) for doc in documents]

    def listen(self, chat_id: str, callback: MessageListener) -> Callable[[], None]:
        return self._listeners.add(chat_id, callback)

    @property
    def backend_type(self) -> str:
        return "sqlite"

    @property
    def db_path(self) -> Path:
        return self._path
