"""Domain models for keyrace."""

from keyrace.core.models.documents import KeyboardLayout, TextCorpus
from keyrace.core.models.enums import Difficulty, SessionStatus, TextType, TypingMode
from keyrace.core.models.session import (
    CursorPosition,
    LiveStats,
    Mistake,
    Session,
    SessionSummary,
    TypingResults,
)

__all__ = [
    "CursorPosition",
    "Difficulty",
    "KeyboardLayout",
    "LiveStats",
    "Mistake",
    "Session",
    "SessionStatus",
    "SessionSummary",
    "TextCorpus",
    "TextType",
    "TypingMode",
    "TypingResults",
]
