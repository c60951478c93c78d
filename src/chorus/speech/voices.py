"""Voice catalog and deterministic voice selection."""

from pydantic import BaseModel, ConfigDict


class Voice(BaseModel):
    """A prebuilt TTS voice offered to users and personas."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    gender: str
    description: str


VOICES: tuple[Voice, ...] = (
    Voice(id="Umbriel", name="Umbriel", gender="Female", description="A warm, engaging, and friendly voice."),
    Voice(id="Algenib", name="Algenib", gender="Male", description="A clear, professional, and articulate voice."),
    Voice(id="Achernar", name="Achernar", gender="Male", description="A bright, energetic, and youthful voice."),
    Voice(id="Erinome", name="Erinome", gender="Female", description="A calm, soothing voice, ideal for storytelling."),
    Voice(id="Schedar", name="Schedar", gender="Male", description="A crisp, confident, and direct voice."),
    Voice(id="Zubenelgenubi", name="Zubenelgenubi", gender="Male", description="A deep, authoritative, and narrative voice."),
)

# Every prebuilt voice name the TTS model accepts (lowercase)
VALID_VOICE_NAMES = frozenset({
    "achernar", "achird", "algenib", "algieba", "alnilam", "aoede", "autonoe",
    "callirrhoe", "charon", "despina", "enceladus", "erinome", "fenrir",
    "gacrux", "iapetus", "kore", "laomedeia", "leda", "orus", "puck",
    "pulcherrima", "rasalgethi", "sadachbia", "sadaltager", "schedar",
    "sulafat", "umbriel", "vindemiatrix", "zephyr", "zubenelgenubi",
})

_EMOTION_VOICES = {
    "sad": "Erinome",
    "contemplative": "Erinome",
    "overwhelmed": "Erinome",
    "happy": "Achernar",
    "playful": "Achernar",
    "frustrated": "Zubenelgenubi",
    "angry": "Zubenelgenubi",
    "romantic": "Umbriel",
    "flirty": "Umbriel",
}


def is_valid_voice(name: str) -> bool:
    """Check whether the TTS model knows a voice name (case-insensitive)."""
    return name.lower() in VALID_VOICE_NAMES


def voice_for_emotion(emotion: str | None, default_voice: str) -> str:
    """Map a detected user emotion to the voice the reply is spoken in.

    sad/contemplative/overwhelmed are calm (Erinome), happy/playful bright
    (Achernar), frustrated/angry deep (Zubenelgenubi), romantic/flirty warm
    (Umbriel). Anything else keeps the persona's default voice.
    """
    if not emotion:
        return default_voice
    return _EMOTION_VOICES.get(emotion.strip().lower(), default_voice)


def _stable_hash(text: str) -> int:
    """32-bit string hash, stable across processes (unlike ``hash``)."""
    value = 0
    for char in text:
        value = ((value << 5) - value + ord(char)) & 0xFFFFFFFF
    if value >= 2**31:
        value -= 2**32
    return value


def voice_for_speaker(
    speaker: str,
    assigned_voice: str | None,
    taken_voices: set[str] | frozenset[str] = frozenset(),
) -> str:
    """Pick a voice for a group-chat speaker.

    A voice assigned in the registry wins. Otherwise the speaker name is hashed
    onto the voices not already taken by other participants (all voices when
    every voice is taken), so the same speaker always gets the same voice.
    """
    if assigned_voice:
        return assigned_voice

    available = [v.id for v in VOICES]
    unassigned = [v for v in available if v not in taken_voices]
    pool = unassigned or available
    return pool[abs(_stable_hash(speaker)) % len(pool)]
