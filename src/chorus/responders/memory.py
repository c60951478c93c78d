"""Long-term memory synthesis from past conversations."""

from collections.abc import Sequence

from ..errors import GenerationFailed
from ..llm import HistoryItem
from ..prompts import render_prompt
from .base import Responder
from .models import MemoryProfile


class MemorySynthesizer(Responder):
    """Condenses a user's conversation history into a MemoryProfile.

    The profile is later rendered into the persona system prompt so the
    companion can refer back to the user's goals, interests and mood.
    """

    component = "memory"

    async def synthesize(self, history: Sequence[HistoryItem], user_name: str = "the user") -> MemoryProfile:
        """Build a memory profile.

        Args:
            history: Conversation turns, oldest first
            user_name: How the user is referred to in the prompt

        Returns:
            MemoryProfile (empty when there is no history)

        Raises:
            GenerationFailed: If the model returns no valid profile
        """
        if not history:
            return MemoryProfile()

        transcript = "\n".join(
            f"{item.author_name or ('User' if item.role == 'user' else 'AI')}: {item.content}"
            for item in history
        )

        result = await self._llm.generate(
            [HistoryItem(role="user", content=transcript)],
            system=render_prompt("memory", user_name=user_name),
            model=self._config.chat_model,
            output_schema=MemoryProfile,
        )

        if result.output is None:
            raise GenerationFailed("Could not synthesize a memory profile.")

        profile = result.output
        self._debug(
            "info",
            f"Memory profile: {len(profile.personality_traits)} traits, "
            f"{len(profile.key_interests)} interests, {len(profile.recent_goals)} goals"
        )
        return profile


def render_memory_section(profile: MemoryProfile | None) -> str:
    """The memory block of the persona system prompt ("" when nothing is known)."""
    if profile is None or profile == MemoryProfile():
        return ""
    return "\n" + render_prompt(
        "memory_section",
        emotional_summary=profile.emotional_summary or "unknown",
        recent_goal=profile.recent_goals[0] if profile.recent_goals else "none shared yet",
        key_interests=", ".join(profile.key_interests) or "unknown",
        personality_traits=", ".join(profile.personality_traits) or "unknown",
        relationship=profile.relationship_with_ai or "still getting to know each other",
    ) + "\n"
