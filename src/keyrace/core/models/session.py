from __future__ import annotations

from datetime import datetime

import msgspec

from keyrace.core.models.enums import Difficulty, SessionStatus, TypingMode


class Mistake(msgspec.Struct, frozen=True, array_like=True):
    """One wrong character, as typed. Never removed once logged."""

    position: int
    expected: str
    actual: str
    timestamp: datetime


class CursorPosition(msgspec.Struct, frozen=True):
    index: int = 0
    word_index: int = 0
    char_index: int = 0
    at_word_boundary: bool = False


class LiveStats(msgspec.Struct, frozen=True):
    """Estimate shown while typing. Final figures live in TypingResults."""

    wpm: int = 0
    accuracy: int = 100
    correct_chars: int = 0
    mistakes: int = 0
    elapsed_seconds: float = 0.0
    progress: float = 0.0


class TypingResults(msgspec.Struct, frozen=True):
    net_wpm: int
    gross_wpm: float
    peak_wpm: float
    accuracy: float
    correct_chars: int
    incorrect_chars: int
    characters_typed: int
    correct_words: int
    incorrect_words: int
    total_words: int
    mistakes: int
    consistency: int
    duration_seconds: float
    finger_utilization: dict[str, float] = msgspec.field(default_factory=dict)


class Session(msgspec.Struct, frozen=True):
    """Snapshot of one timed attempt.

    Sessions are immutable: every engine operation returns a new snapshot
    built with ``msgspec.structs.replace``. ``target_text`` never changes after
    creation; ``transcript`` is whatever the input box currently holds.
    """

    id: str
    target_text: str
    duration_seconds: float
    time_left: float
    created_at: datetime
    user_id: str | None = None
    mode: TypingMode = TypingMode.NORMAL
    language: str = "en"
    difficulty: Difficulty = Difficulty.MEDIUM
    layout_id: str | None = None
    transcript: str = ""
    status: SessionStatus = SessionStatus.IDLE
    start_time: datetime | None = None
    paused_at: datetime | None = None
    paused_seconds: float = 0.0
    completed_at: datetime | None = None
    cursor: CursorPosition = msgspec.field(default_factory=CursorPosition)
    mistakes: tuple[Mistake, ...] = ()
    live_stats: LiveStats = msgspec.field(default_factory=LiveStats)
    results: TypingResults | None = None

    @property
    def is_anonymous(self) -> bool:
        return self.user_id is None


class SessionSummary(msgspec.Struct, frozen=True):
    id: str
    user_id: str | None
    status: SessionStatus
    created_at: datetime
    language: str


_encoder = msgspec.json.Encoder()
_decoder = msgspec.json.Decoder(Session)


def encode_session(session: Session) -> bytes:
    return _encoder.encode(session)


def decode_session(data: bytes) -> Session:
    return _decoder.decode(data)


