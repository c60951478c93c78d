"""Pytest configuration and shared fixtures."""
import os
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import pytest
from pydantic import BaseModel

from chorus.config import RouterConfig
from chorus.llm import Attachment, GenerationProvider, GenerationResult, HistoryItem
from chorus.speech import SpeechSynthesizer
from chorus.store import Author, Chat, InMemoryChatStore


@dataclass
class GenerationCall:
    """One recorded call to a ScriptedProvider."""

    messages: list[HistoryItem]
    system: str | None
    model: str | None
    output_schema: type[BaseModel] | None
    attachment: Attachment | None

    @property
    def prompt(self) -> str:
        return self.messages[-1].content if self.messages else ""


Handler = Callable[[GenerationCall], Any]


class ScriptedProvider(GenerationProvider):
    """Generation provider whose replies come from a handler function.

    The handler receives the GenerationCall and returns a string (plain text),
    a pydantic model (structured output), a GenerationResult, or an exception
    instance to raise.
    """

    def __init__(self, handler: Handler | None = None):
        self.calls: list[GenerationCall] = []
        self.closed = False
        self._handler = handler

    def calls_with_schema(self, schema: type[BaseModel] | None) -> list[GenerationCall]:
        return [call for call in self.calls if call.output_schema is schema]

    async def generate(
        self,
        messages: list[HistoryItem],
        system: str | None = None,
        model: str | None = None,
        temperature: float = 0.7,
        output_schema: type[BaseModel] | None = None,
        attachment: Attachment | None = None,
        **kwargs: Any
    ) -> GenerationResult:
        call = GenerationCall(list(messages), system, model, output_schema, attachment)
        self.calls.append(call)

        outcome = self._handler(call) if self._handler else ""
        if isinstance(outcome, BaseException):
            raise outcome
        if isinstance(outcome, GenerationResult):
            return outcome
        if isinstance(outcome, BaseModel):
            return GenerationResult(text=outcome.model_dump_json(), output=outcome, model=model or "scripted")
        return GenerationResult(text=outcome or "", model=model or "scripted")

    async def close(self) -> None:
        self.closed = True


class RecordingSynthesizer(SpeechSynthesizer):
    """Speech synthesizer that records requests and returns fake data URIs."""

    def __init__(self, fail: bool = False):
        self.spoken: list[tuple[str, str]] = []
        self.dialogues: list[tuple[list[tuple[str, str]], dict[str, str]]] = []
        self._fail = fail

    async def synthesize(self, text: str, voice: str) -> str:
        if self._fail:
            raise RuntimeError("TTS unavailable")
        self.spoken.append((text, voice))
        return f"data:audio/wav;base64,{voice}"

    async def synthesize_dialogue(self, turns: list[tuple[str, str]], voices: dict[str, str]) -> str:
        if self._fail:
            raise RuntimeError("TTS unavailable")
        self.dialogues.append((turns, voices))
        return "data:audio/wav;base64,dialogue"


class LogRecorder:
    """Debug callback collecting (level, component, message) tuples."""

    def __init__(self):
        self.records: list[tuple[str, str, str]] = []

    def __call__(self, level: str, component: str, message: str) -> None:
        self.records.append((level, component, message))

    def levels(self, component: str | None = None) -> list[str]:
        return [level for level, comp, _ in self.records if component in (None, comp)]


async def no_sleep(_seconds: float) -> None:
    return None


@pytest.fixture
def config():
    """Router configuration with both vendor keys set."""
    return RouterConfig(gemini_api_key="test-gemini", grok_api_key="test-grok")


@pytest.fixture
def log():
    return LogRecorder()


@pytest.fixture
def synthesizer():
    return RecordingSynthesizer()


@pytest.fixture
def user():
    return Author(uid="user-1", name="Asha")


@pytest.fixture
async def store():
    """Connected in-memory chat store."""
    chat_store = InMemoryChatStore()
    await chat_store.connect()
    yield chat_store
    await chat_store.disconnect()


@pytest.fixture
async def chat(store):
    """A plain one-to-one chat without a default model."""
    new_chat = Chat(title="Test chat", members=["user-1"])
    await store.save_chat(new_chat)
    return new_chat


@pytest.fixture(scope="session")
def api_keys():
    """Return API keys from environment."""
    return {
        "gemini": os.getenv("GEMINI_API_KEY"),
        "grok": os.getenv("GROK_API_KEY"),
    }
