"""Chat service: one user turn from raw text to stored replies.

Parses the /command, resolves the route, calls the responder for that route
and appends the produced messages to the chat store.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, Literal

from ..config import RouterConfig
from ..errors import EmptyMessageError
from ..llm import Attachment
from ..registry import (
    AGGREGATE_MODEL_ID,
    FLAGSHIP_PERSONA_ID,
    is_persona_id,
    resolve_persona,
)
from ..responders import (
    FanOutRouter,
    GroupOrchestrator,
    MemoryProfile,
    MemorySynthesizer,
    PersonaResponder,
    RevealEvent,
    reveal,
)
from ..routing import (
    FanOutRoute,
    GroupRoute,
    SinglePersonaRoute,
    build_history_view,
    conversation_log,
    parse_command,
    resolve_route,
)
from ..store import Author, Chat, ChatMessage, ChatStore
from .models import TURN_FAILED_MESSAGE, TurnOutcome

SUMMARY_AUTHOR = Author(uid=AGGREGATE_MODEL_ID, name="Xora Smart Summary")
FANOUT_AUTHOR = Author(uid="ai", name="AI")
ERROR_AUTHOR = Author(uid="ai", name="Error")


def _last_assistant(messages: list[ChatMessage]) -> ChatMessage | None:
    for message in reversed(messages):
        if message.role == "assistant":
            return message
    return None


class ChatService:
    """Runs chat turns against a store and a set of responders.

    Hidden design decisions:
    - Order of side effects within a turn
    - Which history each responder sees
    - Memory profile caching per chat
    - What the user sees when a turn fails
    """

    def __init__(
        self,
        store: ChatStore,
        persona: PersonaResponder,
        fanout: FanOutRouter,
        group: GroupOrchestrator,
        memory: MemorySynthesizer | None = None,
        config: RouterConfig | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the service.

        Args:
            store: Chat persistence
            persona: Single-persona responder
            fanout: Multi-model fan-out router
            group: Group conversation orchestrator
            memory: Memory synthesizer for the flagship persona (optional)
            config: Router configuration
            sleep: Awaitable sleep used for the group reveal pacing
        """
        self._store = store
        self._persona = persona
        self._fanout = fanout
        self._group = group
        self._memory = memory
        self._config = config or RouterConfig()
        self._sleep = sleep
        self._memory_cache: dict[str, MemoryProfile | None] = {}
        self._debug_callback: Any | None = None

    def set_debug_callback(self, callback: Any) -> None:
        """Set debug callback for this service and every responder it uses."""
        self._debug_callback = callback
        for responder in (self._persona, self._fanout, self._group, self._memory):
            if responder is not None:
                responder.set_debug_callback(callback)

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "chat", message)

    async def send_message(
        self,
        chat_id: str,
        text: str,
        author: Author,
        attachment: Attachment | None = None,
        on_speaking: Callable[[str | None], None] | None = None,
    ) -> TurnOutcome:
        """Process one user turn.

        Args:
            chat_id: Target chat
            text: Raw message text, possibly starting with /<model-id>
            author: The sending user
            attachment: Optional file/URL context
            on_speaking: Called with a persona name while it "types" in a
                group chat, and with None when its message lands

        Returns:
            TurnOutcome describing the route and the stored messages

        Raises:
            EmptyMessageError: If nothing is left to send after the command
            ChatNotFoundError: If the chat does not exist
            Exception: Whatever made the whole turn fail (after the error
                message has been appended)
        """
        parsed = parse_command(text)
        has_attachment = attachment is not None and not attachment.is_empty
        content = parsed.clean_content
        if not content:
            if not has_attachment:
                raise EmptyMessageError("Message is empty")
            content = attachment.describe()

        chat = await self._store.get_chat(chat_id)
        previous = await self._store.list_messages(chat_id)

        user_message = await self._store.append_message(chat_id, ChatMessage(
            role="user",
            content=content,
            author=author,
            attachment=attachment if has_attachment else None,
        ))

        command = parsed.command
        if command and not chat.is_group and not is_persona_id(command, chat.custom_personas):
            chat = await self._store.update_default_model(chat_id, command)
            self._debug("info", f"Default model of {chat_id} set to {command}")

        route = resolve_route(
            command,
            chat.default_model_id,
            chat.ai_members,
            chat.custom_personas,
            self._config.fanout_default_ids,
        )
        self._debug("info", f"Route: {route.kind}")

        outcome = TurnOutcome(route=route, user_message=user_message)
        try:
            if isinstance(route, GroupRoute):
                await self._group_turn(chat, route, content, previous, outcome, on_speaking)
            elif isinstance(route, SinglePersonaRoute):
                await self._persona_turn(chat, route, content, previous, attachment, outcome)
            else:
                await self._fanout_turn(chat, route, content, previous, attachment, outcome)
        except Exception as e:
            self._debug("error", f"Turn failed in {chat_id}: {e}")
            await self._append_failure(chat_id, outcome)
            raise

        return outcome

    async def _append(self, chat_id: str, message: ChatMessage, outcome: TurnOutcome) -> None:
        outcome.replies.append(await self._store.append_message(chat_id, message))

    async def _append_failure(self, chat_id: str, outcome: TurnOutcome) -> None:
        await self._append(
            chat_id,
            ChatMessage(role="assistant", content=TURN_FAILED_MESSAGE, author=ERROR_AUTHOR),
            outcome,
        )

    async def _memory_for(self, chat: Chat, previous: list[ChatMessage], user_name: str) -> MemoryProfile | None:
        """Memory profile of the chat's user, synthesized once per chat from its history."""
        if self._memory is None or not previous:
            return None
        if chat.id not in self._memory_cache:
            try:
                profile = await self._memory.synthesize(list(conversation_log(previous)), user_name)
            except Exception as e:
                self._debug("warning", f"Memory synthesis failed for {chat.id}: {e}")
                profile = None
            self._memory_cache[chat.id] = profile
        return self._memory_cache[chat.id]

    async def _persona_turn(
        self,
        chat: Chat,
        route: SinglePersonaRoute,
        content: str,
        previous: list[ChatMessage],
        attachment: Attachment | None,
        outcome: TurnOutcome,
    ) -> None:
        persona = resolve_persona(route.model_id, chat.custom_personas)
        history = build_history_view(previous, persona.id, self._config.history_window)
        last = _last_assistant(previous)
        memory = None
        if persona.id == FLAGSHIP_PERSONA_ID:
            memory = await self._memory_for(chat, previous, outcome.user_message.author.name)

        result = await self._persona.respond(
            persona,
            content,
            history,
            attachment=attachment,
            memory=memory,
            last_reaction=last.user_reaction if last else None,
            last_feedback=last.feedback if last else None,
        )
        outcome.persona = result

        await self._append(chat.id, ChatMessage(
            role="assistant",
            content=result.reply.final_answer,
            author=Author(uid=persona.id, name=persona.name),
            is_persona_response=True,
            persona_name=persona.name,
            audio_data_uri=result.audio_data_uri,
            detected_language=result.reply.detected_language,
        ), outcome)

        if result.reply.emoji_reaction:
            outcome.user_message = await self._store.update_message(
                chat.id, outcome.user_message.id, ai_reaction=result.reply.emoji_reaction
            )

    async def _fanout_turn(
        self,
        chat: Chat,
        route: FanOutRoute,
        content: str,
        previous: list[ChatMessage],
        attachment: Attachment | None,
        outcome: TurnOutcome,
    ) -> None:
        viewer = route.model_ids[0] if len(route.model_ids) == 1 else AGGREGATE_MODEL_ID
        history = build_history_view(previous, viewer, self._config.history_window)

        result = await self._fanout.route(content, route.model_ids, history, attachment)
        outcome.fanout = result

        if not result.responses:
            self._debug("error", f"Fan-out in {chat.id} produced no responses")
            await self._append_failure(chat.id, outcome)
            return

        await self._append(chat.id, ChatMessage(
            role="assistant",
            author=FANOUT_AUTHOR,
            responses=result.responses,
            detected_language=result.detected_language,
        ), outcome)

        if result.summary:
            await self._append(chat.id, ChatMessage(
                role="assistant",
                content=result.summary,
                author=SUMMARY_AUTHOR,
                is_summary=True,
                detected_language=result.detected_language,
            ), outcome)

    async def _group_turn(
        self,
        chat: Chat,
        route: GroupRoute,
        content: str,
        previous: list[ChatMessage],
        outcome: TurnOutcome,
        on_speaking: Callable[[str | None], None] | None,
    ) -> None:
        result = await self._group.converse(content, route.participants, conversation_log(previous))
        outcome.group = result
        if not result.turns:
            self._debug("error", f"Group turn in {chat.id} produced no messages ({len(route.participants)} participants)")
            await self._append_failure(chat.id, outcome)
            return
        remaining = len(result.turns)

        async def deliver(event: RevealEvent) -> None:
            nonlocal remaining
            remaining -= 1
            await self._append(chat.id, ChatMessage(
                role="assistant",
                content=event.turn.text,
                author=Author(uid=event.turn.participant.id, name=event.turn.participant.name),
                is_persona_response=True,
                persona_name=event.turn.participant.name,
                audio_data_uri=result.audio_data_uri if remaining == 0 else None,
            ), outcome)

        await reveal(result.turns, deliver, on_speaking, self._config, self._sleep)

    async def set_feedback(
        self,
        chat_id: str,
        message_id: str,
        feedback: Literal["like", "dislike"] | None,
    ) -> ChatMessage:
        """Record (or clear) the user's like/dislike on a message."""
        return await self._store.update_message(chat_id, message_id, feedback=feedback)

    async def set_reaction(
        self,
        chat_id: str,
        message_id: str,
        emoji: str | None,
        by_ai: bool = False,
    ) -> ChatMessage:
        """Set the user's (or the AI's) emoji reaction on a message."""
        field = "ai_reaction" if by_ai else "user_reaction"
        return await self._store.update_message(chat_id, message_id, **{field: emoji})
