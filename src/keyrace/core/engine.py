from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime
from uuid import uuid4

import structlog
from msgspec.structs import replace

from keyrace.core.errors import ContentUnavailable, InvalidStateTransition, SessionNotActive
from keyrace.core.models.enums import Difficulty, SessionStatus, TypingMode
from keyrace.core.models.session import Session
from keyrace.core.scoring import (
    compute_live_stats,
    compute_results,
    detect_mistakes,
    is_complete,
    locate_cursor,
)
from keyrace.core.state import SessionClock, ensure_transition

log: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def _time_left(session: Session, clock: SessionClock, timestamp: datetime) -> float:
    # A late-arriving earlier timestamp must not hand time back.
    return min(session.time_left, clock.time_left(session.duration_seconds, timestamp))


class TypingEngine:
    """Drives one typing session through explicit state transitions.

    The engine keeps no session state: each operation takes the current
    snapshot and returns a new one. Persisting it is the caller's job.
    """

    def create(
        self,
        target_text: str,
        duration_seconds: float,
        *,
        layout_id: str | None = None,
        user_id: str | None = None,
        mode: TypingMode = TypingMode.NORMAL,
        language: str = "en",
        difficulty: Difficulty = Difficulty.MEDIUM,
        created_at: datetime | None = None,
    ) -> Session:
        if not target_text:
            raise ContentUnavailable("Target text must not be empty")
        if duration_seconds <= 0:
            raise ValueError("Session duration must be positive.")
        session = Session(
            id=uuid4().hex,
            target_text=target_text,
            duration_seconds=float(duration_seconds),
            time_left=float(duration_seconds),
            created_at=created_at or datetime.now(UTC),
            user_id=user_id,
            mode=mode,
            language=language,
            difficulty=difficulty,
            layout_id=layout_id,
        )
        log.info(
            "session_created",
            session_id=session.id,
            layout_id=layout_id,
            characters=len(target_text),
        )
        return session

    def process_input(self, session: Session, transcript: str, timestamp: datetime) -> Session:
        if session.status.is_terminal:
            raise SessionNotActive(f"Session {session.id} is already {session.status.value}")
        if session.status == SessionStatus.PAUSED:
            raise SessionNotActive(f"Session {session.id} is paused")

        status = session.status
        start_time = session.start_time
        if status == SessionStatus.IDLE:
            if not transcript:
                return session
            ensure_transition(session, SessionStatus.ACTIVE)
            status = SessionStatus.ACTIVE
            start_time = timestamp

        target = session.target_text
        new_mistakes = detect_mistakes(session.transcript, transcript, target, timestamp)
        mistakes = session.mistakes + new_mistakes
        clock = SessionClock(start_time=start_time, paused_seconds=session.paused_seconds)
        elapsed = clock.elapsed_seconds(timestamp)
        time_left = _time_left(session, clock, timestamp)

        completed_at = None
        if is_complete(target, transcript, time_left):
            status = SessionStatus.COMPLETED
            completed_at = timestamp

        updated = replace(
            session,
            transcript=transcript,
            status=status,
            start_time=start_time,
            completed_at=completed_at,
            time_left=time_left,
            cursor=locate_cursor(target, transcript),
            mistakes=mistakes,
            live_stats=compute_live_stats(target, transcript, len(mistakes), elapsed),
        )
        log.debug(
            "input_processed",
            session_id=session.id,
            typed=len(transcript),
            new_mistakes=len(new_mistakes),
            time_left=round(time_left, 2),
        )
        if completed_at is not None:
            log.info(
                "session_finished",
                session_id=session.id,
                reason="time" if time_left <= 0 else "text",
            )
        return updated

    def refresh(self, session: Session, timestamp: datetime) -> Session:
        """Timer tick: recount ``time_left`` and finish the session once it runs out."""
        if session.status != SessionStatus.ACTIVE:
            return session
        time_left = _time_left(session, SessionClock.of(session), timestamp)
        if time_left > 0:
            return replace(session, time_left=time_left)
        log.info("session_finished", session_id=session.id, reason="time")
        return replace(
            session,
            time_left=0.0,
            status=SessionStatus.COMPLETED,
            completed_at=timestamp,
        )

    def pause(self, session: Session, timestamp: datetime) -> Session:
        ensure_transition(session, SessionStatus.PAUSED)
        time_left = _time_left(session, SessionClock.of(session), timestamp)
        if time_left <= 0:
            return self.refresh(session, timestamp)
        log.info("session_paused", session_id=session.id, time_left=round(time_left, 2))
        return replace(
            session,
            status=SessionStatus.PAUSED,
            paused_at=timestamp,
            time_left=time_left,
        )

    def resume(self, session: Session, timestamp: datetime) -> Session:
        if session.status.is_terminal:
            raise SessionNotActive(f"Session {session.id} is already {session.status.value}")
        if session.status != SessionStatus.PAUSED:
            raise InvalidStateTransition(
                f"cannot resume a session that is {session.status.value}"
            )
        clock = SessionClock.of(session).resumed(timestamp)
        log.info("session_resumed", session_id=session.id, paused_seconds=clock.paused_seconds)
        return replace(
            session,
            status=SessionStatus.ACTIVE,
            paused_at=None,
            paused_seconds=clock.paused_seconds,
        )

    def abandon(self, session: Session, timestamp: datetime) -> Session:
        ensure_transition(session, SessionStatus.ABANDONED)
        clock = SessionClock.of(session)
        log.info("session_abandoned", session_id=session.id, typed=len(session.transcript))
        return replace(
            session,
            status=SessionStatus.ABANDONED,
            paused_at=None,
            time_left=_time_left(session, clock, timestamp),
        )

    def complete(
        self,
        session: Session,
        timestamp: datetime,
        final_input: str | None = None,
        layout_rows: Sequence[str] | None = None,
    ) -> Session:
        """Score the session once; repeated calls return the stored results."""
        if session.status == SessionStatus.COMPLETED and session.results is not None:
            log.debug("completion_already_recorded", session_id=session.id)
            return session
        if session.status == SessionStatus.ABANDONED:
            raise SessionNotActive(f"Session {session.id} was abandoned")

        transcript = session.transcript
        mistakes = session.mistakes
        if final_input is not None and final_input != transcript:
            if session.status == SessionStatus.COMPLETED:
                raise SessionNotActive(f"Session {session.id} no longer accepts input")
            mistakes = mistakes + detect_mistakes(
                transcript, final_input, session.target_text, timestamp
            )
            transcript = final_input

        completed_at = session.completed_at or timestamp
        clock = SessionClock.of(session)
        elapsed = clock.elapsed_seconds(completed_at)
        results = compute_results(
            session.target_text, transcript, mistakes, elapsed, layout_rows=layout_rows
        )
        cursor = session.cursor
        live_stats = session.live_stats
        if transcript != session.transcript:
            cursor = locate_cursor(session.target_text, transcript)
            live_stats = compute_live_stats(
                session.target_text, transcript, len(mistakes), elapsed
            )
        updated = replace(
            session,
            transcript=transcript,
            mistakes=mistakes,
            status=SessionStatus.COMPLETED,
            completed_at=completed_at,
            paused_at=None,
            time_left=_time_left(session, clock, completed_at),
            cursor=cursor,
            live_stats=live_stats,
            results=results,
        )
        log.info(
            "session_completed",
            session_id=session.id,
            net_wpm=results.net_wpm,
            accuracy=results.accuracy,
            mistakes=results.mistakes,
        )
        return updated
