from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import Protocol, runtime_checkable

from keyrace.core.models.documents import KeyboardLayout
from keyrace.core.models.enums import Difficulty, TextType
from keyrace.core.models.session import Session, SessionSummary, TypingResults


@runtime_checkable
class TextProvider(Protocol):
    """Supplies target text. Raises ContentUnavailable rather than returning ''."""

    def generate(
        self,
        language: str,
        difficulty: Difficulty,
        text_type: TextType,
        length: int,
        layout_id: str | None = None,
        user_id: str | None = None,
    ) -> str: ...


@runtime_checkable
class LayoutRegistry(Protocol):
    """Read-only keyboard layout lookups. ``None``/empty means "use a default"."""

    def find_by_id(self, layout_id: str) -> KeyboardLayout | None: ...

    def get_available_layouts(self, language: str) -> Sequence[KeyboardLayout]: ...

    def get_user_preferred_layout(self, user_id: str, language: str) -> str | None: ...


@runtime_checkable
class SessionStorage(Protocol):
    """Protocol for persisting session snapshots between input events."""

    def save(self, session: Session) -> Path | None: ...

    def find_by_id(self, session_id: str) -> Session | None: ...

    def update(self, session: Session) -> Path | None: ...

    def list_sessions(self, user_id: str | None = None) -> Sequence[SessionSummary]: ...


@runtime_checkable
class StatisticsSink(Protocol):
    """Receives final results keyed by user for later aggregation."""

    def record(
        self,
        user_id: str,
        session_id: str,
        results: TypingResults,
        recorded_at: datetime,
    ) -> None: ...
