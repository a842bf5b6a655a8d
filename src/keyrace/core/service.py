"""Use cases that wire the engine to its collaborators.

Each call loads a session snapshot, hands it to the engine, and writes the
returned snapshot back. Configuration arrives as explicit arguments only.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

import attrs
import structlog

from keyrace.core.engine import TypingEngine
from keyrace.core.errors import LayoutUnavailable, SessionNotFound
from keyrace.core.models.documents import KeyboardLayout
from keyrace.core.models.enums import Difficulty, SessionStatus, TextType, TypingMode
from keyrace.core.models.session import Session, SessionSummary
from keyrace.core.protocols import LayoutRegistry, SessionStorage, StatisticsSink, TextProvider

log: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


@attrs.frozen(slots=True)
class StartRequest:
    """Everything needed to create a session; nothing is read from ambient state."""

    language: str = "en"
    difficulty: Difficulty = attrs.field(default=Difficulty.MEDIUM, converter=Difficulty)
    text_type: TextType = attrs.field(default=TextType.WORDS, converter=TextType)
    duration_seconds: float = attrs.field(default=60.0, validator=attrs.validators.gt(0))
    length: int = attrs.field(default=200, validator=attrs.validators.gt(0))
    mode: TypingMode = attrs.field(default=TypingMode.NORMAL, converter=TypingMode)
    layout_id: str | None = None
    user_id: str | None = None
    text: str | None = None


@attrs.frozen(slots=True)
class StartedSession:
    session: Session
    layout: KeyboardLayout


class TypingSessionService:
    def __init__(
        self,
        storage: SessionStorage,
        text_provider: TextProvider,
        layouts: LayoutRegistry,
        sink: StatisticsSink | None = None,
        engine: TypingEngine | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._storage = storage
        self._text_provider = text_provider
        self._layouts = layouts
        self._sink = sink
        self._engine = engine or TypingEngine()
        self._clock = clock

    def _load(self, session_id: str) -> Session:
        session = self._storage.find_by_id(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    def _resolve_layout(self, request: StartRequest) -> KeyboardLayout:
        layout_id = request.layout_id
        if layout_id is None and request.user_id:
            layout_id = self._layouts.get_user_preferred_layout(request.user_id, request.language)
        if layout_id is not None:
            layout = self._layouts.find_by_id(layout_id)
            if layout is not None:
                return layout
            if request.layout_id is not None:
                raise LayoutUnavailable(f"Keyboard layout not found: {layout_id}")
            log.warning("preferred_layout_missing", layout_id=layout_id, user_id=request.user_id)
        available = list(self._layouts.get_available_layouts(request.language))
        if not available:
            raise LayoutUnavailable(
                f"No keyboard layout available for language: {request.language}"
            )
        return available[0]

    def get(self, session_id: str) -> Session:
        return self._load(session_id)

    def list_sessions(self, user_id: str | None = None) -> list[SessionSummary]:
        return list(self._storage.list_sessions(user_id))

    def start_session(self, request: StartRequest) -> StartedSession:
        layout = self._resolve_layout(request)
        if request.text:
            text = request.text
        else:
            text = self._text_provider.generate(
                language=request.language,
                difficulty=request.difficulty,
                text_type=request.text_type,
                length=request.length,
                layout_id=layout.id,
                user_id=request.user_id,
            )
        session = self._engine.create(
            text,
            request.duration_seconds,
            layout_id=layout.id,
            user_id=request.user_id,
            mode=request.mode,
            language=request.language,
            difficulty=request.difficulty,
            created_at=self._clock(),
        )
        self._storage.save(session)
        log.info("session_started", session_id=session.id, layout_id=layout.id)
        return StartedSession(session=session, layout=layout)

    def process_input(
        self, session_id: str, transcript: str, timestamp: datetime | None = None
    ) -> Session:
        session = self._load(session_id)
        updated = self._engine.process_input(session, transcript, timestamp or self._clock())
        if updated is not session:
            self._storage.update(updated)
        return updated

    def refresh(self, session_id: str, timestamp: datetime | None = None) -> Session:
        session = self._load(session_id)
        updated = self._engine.refresh(session, timestamp or self._clock())
        if updated is not session:
            self._storage.update(updated)
        return updated

    def pause(self, session_id: str, timestamp: datetime | None = None) -> Session:
        updated = self._engine.pause(self._load(session_id), timestamp or self._clock())
        self._storage.update(updated)
        return updated

    def resume(self, session_id: str, timestamp: datetime | None = None) -> Session:
        updated = self._engine.resume(self._load(session_id), timestamp or self._clock())
        self._storage.update(updated)
        return updated

    def abandon(self, session_id: str, timestamp: datetime | None = None) -> Session:
        updated = self._engine.abandon(self._load(session_id), timestamp or self._clock())
        self._storage.update(updated)
        return updated

    def complete(
        self,
        session_id: str,
        timestamp: datetime | None = None,
        final_input: str | None = None,
    ) -> Session:
        session = self._load(session_id)
        if session.status == SessionStatus.COMPLETED and session.results is not None:
            return session
        layout = self._layouts.find_by_id(session.layout_id) if session.layout_id else None
        updated = self._engine.complete(
            session,
            timestamp or self._clock(),
            final_input=final_input,
            layout_rows=layout.rows if layout else None,
        )
        self._storage.update(updated)
        self._record(updated)
        return updated

    def _record(self, session: Session) -> None:
        if self._sink is None or session.results is None:
            return
        if session.mode == TypingMode.PRACTICE or session.user_id is None:
            log.debug("results_not_recorded", session_id=session.id, mode=session.mode.value)
            return
        self._sink.record(
            user_id=session.user_id,
            session_id=session.id,
            results=session.results,
            recorded_at=session.completed_at or self._clock(),
        )
