from __future__ import annotations

from enum import StrEnum


class SessionStatus(StrEnum):
    IDLE = "idle"
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    ABANDONED = "abandoned"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionStatus.COMPLETED, SessionStatus.ABANDONED)


class TypingMode(StrEnum):
    NORMAL = "normal"
    PRACTICE = "practice"
    COMPETITION = "competition"


class Difficulty(StrEnum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class TextType(StrEnum):
    WORDS = "words"
    SENTENCES = "sentences"
    CHARACTERS = "characters"
