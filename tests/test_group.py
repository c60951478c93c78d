"""Unit tests for the group conversation orchestrator."""
import pytest
from conftest import RecordingSynthesizer, ScriptedProvider
from hypothesis import given
from hypothesis import strategies as st

from chorus.config import RouterConfig
from chorus.llm import HistoryItem
from chorus.registry import Participant
from chorus.responders import (
    GroupOrchestrator,
    GroupTurn,
    paced_reveals,
    parse_transcript,
    plan_reveals,
    reveal,
    typing_delay_ms,
)

ALICE = Participant(id="alice", name="Alice", instructions="Optimist.", voice="Achernar")
BOB = Participant(id="bob", name="Bob", instructions="Skeptic.")


def turn(participant: Participant, text: str) -> GroupTurn:
    return GroupTurn(participant=participant, text=text)


class SleepRecorder:
    """Fake sleep that records durations and keeps a virtual clock."""

    def __init__(self):
        self.durations: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.durations.append(seconds)

    @property
    def elapsed_ms(self) -> int:
        return round(sum(self.durations) * 1000)


class TestParseTranscript:
    """Tests for parse_transcript."""

    def test_speaker_lines(self):
        """Test well-formed lines become turns in order."""
        parsed = parse_transcript("Alice: Hi!\nBob: Hey there.\nAlice: How's it going?")

        assert [(t.speaker, t.text) for t in parsed.turns] == [
            ("Alice", "Hi!"),
            ("Bob", "Hey there."),
            ("Alice", "How's it going?"),
        ]
        assert parsed.discarded_lines == 0

    def test_malformed_lines_counted(self):
        """Test lines without a speaker are discarded and counted."""
        parsed = parse_transcript("Scene opens.\n\nAlice: Hi!\nBob:\n: orphan text")

        assert [t.speaker for t in parsed.turns] == ["Alice"]
        assert parsed.discarded_lines == 3

    def test_colon_inside_message(self):
        """Test only the first colon separates speaker and message."""
        parsed = parse_transcript("Bob: Note: it is 10:30")

        assert parsed.turns[0].speaker == "Bob"
        assert parsed.turns[0].text == "Note: it is 10:30"

    def test_markdown_names(self):
        """Test bold speaker names are unwrapped."""
        parsed = parse_transcript("**Alice**: hello")

        assert parsed.turns[0].speaker == "Alice"

    def test_empty_transcript(self):
        """Test an empty transcript has no turns."""
        parsed = parse_transcript("")

        assert parsed.turns == []
        assert parsed.discarded_lines == 0

    @given(st.lists(st.tuples(
        st.text(alphabet=st.characters(categories=["L"]), min_size=1, max_size=10),
        st.text(alphabet=st.characters(categories=["L", "N"]), min_size=1, max_size=30),
    ), max_size=10))
    def test_lines_round_trip(self, lines):
        """Property test: every well-formed line yields exactly one turn."""
        parsed = parse_transcript("\n".join(f"{speaker}: {text}" for speaker, text in lines))

        assert [(t.speaker, t.text) for t in parsed.turns] == lines


class TestRevealTiming:
    """Tests for typing delays and reveal scheduling."""

    @pytest.mark.parametrize(
        ("length", "delay"),
        [(0, 500), (5, 500), (10, 500), (20, 1000), (80, 4000), (500, 4000)],
    )
    def test_typing_delay_clamped(self, length, delay):
        """Test the delay is 50 ms per character within [500, 4000]."""
        assert typing_delay_ms("x" * length) == delay

    @given(st.text(max_size=200))
    def test_typing_delay_bounds(self, text):
        """Property test: delay always within bounds."""
        assert 500 <= typing_delay_ms(text) <= 4000

    def test_plan_for_two_turns(self):
        """Test a 10-char and a 200-char turn reveal at 500 and 5000 ms."""
        events = plan_reveals([turn(ALICE, "a" * 10), turn(BOB, "b" * 200)])

        assert [e.typing_delay_ms for e in events] == [500, 4000]
        assert [e.reveal_at_ms for e in events] == [500, 5000]
        assert [e.speaker for e in events] == ["Alice", "Bob"]

    def test_custom_timing(self):
        """Test timing constants come from the config."""
        config = RouterConfig(typing_ms_per_char=10, min_typing_delay_ms=100, inter_turn_pause_ms=0)

        events = plan_reveals([turn(ALICE, "a" * 20), turn(BOB, "b")], config)

        assert [e.reveal_at_ms for e in events] == [200, 300]

    @given(st.lists(st.text(min_size=1, max_size=120), min_size=1, max_size=6))
    def test_total_duration(self, texts):
        """Property test: last reveal = sum of delays + 500 ms per gap."""
        turns = [turn(ALICE, t) for t in texts]
        events = plan_reveals(turns)

        expected = sum(typing_delay_ms(t) for t in texts) + 500 * (len(texts) - 1)
        assert events[-1].reveal_at_ms == expected
        assert [e.reveal_at_ms for e in events] == sorted(e.reveal_at_ms for e in events)

    async def test_paced_reveals_sleep_and_indicator(self):
        """Test the stream sleeps the schedule and toggles the speaking indicator."""
        sleep = SleepRecorder()
        speaking: list[str | None] = []
        events = plan_reveals([turn(ALICE, "a" * 10), turn(BOB, "b" * 200)])

        revealed = [e async for e in paced_reveals(events, on_speaking=speaking.append, sleep=sleep)]

        assert [e.speaker for e in revealed] == ["Alice", "Bob"]
        assert sleep.durations == [0.5, 0.5, 4.0]
        assert sleep.elapsed_ms == events[-1].reveal_at_ms
        assert speaking == ["Alice", None, "Bob", None]

    async def test_reveal_delivers_in_order(self):
        """Test reveal awaits each delivery before the next turn."""
        sleep = SleepRecorder()
        delivered: list[tuple[str, int]] = []

        async def on_message(event):
            delivered.append((event.turn.text, len(sleep.durations)))

        count = await reveal([turn(ALICE, "one"), turn(BOB, "two"), turn(ALICE, "three")], on_message, sleep=sleep)

        assert count == 3
        assert [text for text, _ in delivered] == ["one", "two", "three"]
        # typing sleep before the first, pause + typing before each later turn
        assert [slept for _, slept in delivered] == [1, 3, 5]

    async def test_reveal_nothing(self):
        """Test zero turns reveal nothing and never sleep."""
        sleep = SleepRecorder()

        async def on_message(event):
            raise AssertionError("no turns expected")

        assert await reveal([], on_message, sleep=sleep) == 0
        assert sleep.durations == []


class TestGroupOrchestrator:
    """Tests for GroupOrchestrator.converse."""

    async def test_single_call_transcript(self, config, synthesizer):
        """Test one generation call produces attributed turns and audio."""
        llm = ScriptedProvider(lambda call: "Alice: Great idea!\nBob: I doubt it.\nAlice: Hear me out.")
        orchestrator = GroupOrchestrator(llm, config, synthesizer)

        result = await orchestrator.converse("Should we go?", [ALICE, BOB])

        assert len(llm.calls) == 1
        assert [(t.participant.id, t.text) for t in result.turns] == [
            ("alice", "Great idea!"),
            ("bob", "I doubt it."),
            ("alice", "Hear me out."),
        ]
        assert result.audio_data_uri == "data:audio/wav;base64,dialogue"
        turns, voices = synthesizer.dialogues[0]
        assert turns[0] == ("Alice", "Great idea!")
        assert voices["Alice"] == "Achernar"
        assert voices["Bob"] != "Achernar"

    async def test_prompt_lists_personas_and_history(self, config):
        """Test the moderator prompt carries personas, history and the message."""
        llm = ScriptedProvider(lambda call: "Alice: ok")
        orchestrator = GroupOrchestrator(llm, config)
        history = [HistoryItem(role="user", content="earlier", author_name="Asha")]

        await orchestrator.converse("new topic", [ALICE, BOB], history)

        call = llm.calls[0]
        assert "- Alice: Optimist." in call.system
        assert "- Bob: Skeptic." in call.system
        assert "Asha: earlier" in call.prompt
        assert '"User: new topic"' in call.prompt

    async def test_unknown_speakers_dropped(self, config, log):
        """Test turns by speakers outside the chat are dropped and logged."""
        llm = ScriptedProvider(lambda call: "Alice: hi\nNarrator: meanwhile\nbob: lowercase still counts")
        orchestrator = GroupOrchestrator(llm, config)
        orchestrator.set_debug_callback(log)

        result = await orchestrator.converse("hello", [ALICE, BOB])

        assert [t.participant.id for t in result.turns] == ["alice", "bob"]
        assert result.unknown_speaker_turns == 1
        assert "warning" in log.levels("group")

    async def test_unparseable_transcript_degrades(self, config, synthesizer):
        """Test a transcript without turns yields an empty result, not an error."""
        llm = ScriptedProvider(lambda call: "I'm sorry, I can't write that.")
        orchestrator = GroupOrchestrator(llm, config, synthesizer)

        result = await orchestrator.converse("hello", [ALICE, BOB])

        assert result.turns == []
        assert result.discarded_lines == 1
        assert synthesizer.dialogues == []

    async def test_audio_failure_degrades(self, config):
        """Test a speech failure keeps the turns."""
        llm = ScriptedProvider(lambda call: "Alice: hi\nBob: yo")
        orchestrator = GroupOrchestrator(llm, config, RecordingSynthesizer(fail=True))

        result = await orchestrator.converse("hello", [ALICE, BOB])

        assert len(result.turns) == 2
        assert result.audio_data_uri is None

    async def test_generation_error_propagates(self, config):
        """Test a failed generation call is a total failure."""
        orchestrator = GroupOrchestrator(ScriptedProvider(lambda call: RuntimeError("down")), config)

        with pytest.raises(RuntimeError):
            await orchestrator.converse("hello", [ALICE, BOB])

    async def test_no_participants_makes_no_call(self, config, log):
        """Test an empty participant list returns an empty result without generating."""
        llm = ScriptedProvider(lambda call: "Alice: hi")
        orchestrator = GroupOrchestrator(llm, config)
        orchestrator.set_debug_callback(log)

        result = await orchestrator.converse("hello", [])

        assert result.turns == []
        assert llm.calls == []
        assert "warning" in log.levels("group")
