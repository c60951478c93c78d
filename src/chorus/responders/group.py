"""Group conversation orchestrator.

One generation call writes a multi-speaker transcript for all AI members of
a group chat. The transcript is parsed into turns and revealed one by one
with a typing delay proportional to each message's length.
"""

import asyncio
import re
from collections.abc import AsyncIterator, Awaitable, Callable, Sequence

from ..config import RouterConfig
from ..llm import GenerationProvider, HistoryItem
from ..prompts import render_prompt
from ..registry import Participant
from ..speech import SpeechSynthesizer, voice_for_speaker
from .base import Responder
from .models import GroupResult, GroupTurn, RevealEvent, TranscriptParse, TranscriptTurn

# "Name: message", the name being everything before the first colon
TRANSCRIPT_LINE = re.compile(r"^([^:]+):\s*(.*)$")

# Markdown emphasis models like to put around speaker names
_NAME_DECORATION = re.compile(r"^[\s*_#>-]+|[\s*_]+$")


def parse_transcript(text: str) -> TranscriptParse:
    """Split a transcript into ``Speaker: text`` turns.

    Each non-empty line must match ``Name: message`` with a non-empty name and
    message. Other lines are discarded and counted.
    """
    turns = []
    discarded = 0
    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue
        match = TRANSCRIPT_LINE.match(line)
        if match is None:
            discarded += 1
            continue
        speaker = _NAME_DECORATION.sub("", match.group(1)).strip()
        message = match.group(2).strip()
        if not speaker or not message:
            discarded += 1
            continue
        turns.append(TranscriptTurn(speaker=speaker, text=message))
    return TranscriptParse(turns=turns, discarded_lines=discarded)


def typing_delay_ms(text: str, config: RouterConfig | None = None) -> int:
    """Simulated typing time: ``len * ms_per_char`` clamped to [min, max]."""
    config = config or RouterConfig()
    delay = len(text) * config.typing_ms_per_char
    return max(config.min_typing_delay_ms, min(delay, config.max_typing_delay_ms))


def plan_reveals(turns: Sequence[GroupTurn], config: RouterConfig | None = None) -> list[RevealEvent]:
    """Compute when each turn is revealed, relative to the first typing start.

    Turns are revealed strictly in order. Between a reveal and the next
    speaker's typing there is a fixed pause.
    """
    config = config or RouterConfig()
    events = []
    clock = 0
    for index, turn in enumerate(turns):
        if index:
            clock += config.inter_turn_pause_ms
        delay = typing_delay_ms(turn.text, config)
        clock += delay
        events.append(RevealEvent(turn=turn, typing_delay_ms=delay, reveal_at_ms=clock))
    return events


async def paced_reveals(
    events: Sequence[RevealEvent],
    config: RouterConfig | None = None,
    on_speaking: Callable[[str | None], None] | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> AsyncIterator[RevealEvent]:
    """Yield reveal events at their scheduled time.

    ``on_speaking`` is called with the speaker's name while they "type" and
    with None right before their message is yielded.
    """
    config = config or RouterConfig()
    for index, event in enumerate(events):
        if index:
            await sleep(config.inter_turn_pause_ms / 1000)
        if on_speaking:
            on_speaking(event.speaker)
        await sleep(event.typing_delay_ms / 1000)
        if on_speaking:
            on_speaking(None)
        yield event


def _find_participant(name: str, participants: Sequence[Participant]) -> Participant | None:
    for participant in participants:
        if participant.name == name:
            return participant
    lowered = name.lower()
    for participant in participants:
        if participant.name.lower() == lowered:
            return participant
    return None


class GroupOrchestrator(Responder):
    """Writes the AI side of a group chat with a single generation call.

    Hidden design decisions:
    - Moderator prompt listing every participant
    - Transcript parsing and speaker attribution
    - Voice assignment per speaker
    - Dialogue audio as an optional extra
    """

    component = "group"

    def __init__(
        self,
        llm: GenerationProvider,
        config: RouterConfig | None = None,
        synthesizer: SpeechSynthesizer | None = None,
    ) -> None:
        super().__init__(llm, config)
        self._synthesizer = synthesizer

    def assign_voices(self, participants: Sequence[Participant]) -> dict[str, str]:
        """Voice per participant name; registry voices win, the rest are hashed."""
        taken = frozenset(p.voice for p in participants if p.voice)
        return {
            p.name: voice_for_speaker(p.name, p.voice, taken)
            for p in participants
        }

    async def converse(
        self,
        message: str,
        participants: Sequence[Participant],
        history: Sequence[HistoryItem] = (),
    ) -> GroupResult:
        """Generate the next transcript lines of a group chat.

        Args:
            message: Latest user message
            participants: AI members of the chat
            history: Full conversation log with author names

        Returns:
            GroupResult with the attributed turns. A transcript that yields no
            turns, or an empty participant list, produces an empty result
            rather than an error.

        Raises:
            Exception: Whatever the generation provider raises
        """
        if not participants:
            self._debug("warning", "Group conversation has no participants, nothing to generate")
            return GroupResult()

        system = render_prompt(
            "group",
            personas="\n".join(f"- {p.name}: {p.instructions}" for p in participants),
        )
        log = "\n".join(
            f"{item.author_name or ('User' if item.role == 'user' else 'AI')}: {item.content}"
            for item in history
        )
        turn = render_prompt("group_turn", history=log or "(no messages yet)", message=message)

        result = await self._llm.generate(
            [HistoryItem(role="user", content=turn)],
            system=system,
            model=self._config.persona_model,
            temperature=0.8,
        )

        parsed = parse_transcript(result.text)
        turns = []
        unknown = 0
        for line in parsed.turns:
            participant = _find_participant(line.speaker, participants)
            if participant is None:
                unknown += 1
                continue
            turns.append(GroupTurn(participant=participant, text=line.text))

        if parsed.discarded_lines or unknown:
            self._debug(
                "warning",
                f"Transcript: {parsed.discarded_lines} malformed lines, {unknown} turns by unknown speakers"
            )
        if not turns:
            self._debug("warning", "Transcript produced no turns")
            return GroupResult(
                transcript=result.text,
                discarded_lines=parsed.discarded_lines,
                unknown_speaker_turns=unknown,
            )

        self._debug("info", f"Transcript: {len(turns)} turns from {len({t.participant.id for t in turns})} speakers")

        audio = None
        if self._synthesizer is not None:
            try:
                audio = await self._synthesizer.synthesize_dialogue(
                    [(t.participant.name, t.text) for t in turns],
                    self.assign_voices(participants),
                )
            except Exception as e:
                self._debug("warning", f"Dialogue synthesis failed: {e}")

        return GroupResult(
            turns=turns,
            transcript=result.text,
            audio_data_uri=audio,
            discarded_lines=parsed.discarded_lines,
            unknown_speaker_turns=unknown,
        )


async def reveal(
    turns: Sequence[GroupTurn],
    on_message: Callable[[RevealEvent], Awaitable[None]],
    on_speaking: Callable[[str | None], None] | None = None,
    config: RouterConfig | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> int:
    """Deliver turns one at a time, waiting for each delivery to finish.

    Returns:
        Number of turns delivered
    """
    delivered = 0
    async for event in paced_reveals(plan_reveals(turns, config), config, on_speaking, sleep):
        await on_message(event)
        delivered += 1
    return delivered
