from __future__ import annotations

from datetime import datetime

import attrs

from keyrace.core.errors import InvalidStateTransition, SessionNotActive
from keyrace.core.models.enums import SessionStatus
from keyrace.core.models.session import Session

_TRANSITIONS: dict[SessionStatus, frozenset[SessionStatus]] = {
    SessionStatus.IDLE: frozenset(
        {SessionStatus.ACTIVE, SessionStatus.COMPLETED, SessionStatus.ABANDONED}
    ),
    SessionStatus.ACTIVE: frozenset(
        {SessionStatus.PAUSED, SessionStatus.COMPLETED, SessionStatus.ABANDONED}
    ),
    SessionStatus.PAUSED: frozenset(
        {SessionStatus.ACTIVE, SessionStatus.COMPLETED, SessionStatus.ABANDONED}
    ),
    SessionStatus.COMPLETED: frozenset(),
    SessionStatus.ABANDONED: frozenset(),
}


def can_transition(current: SessionStatus, target: SessionStatus) -> bool:
    return target in _TRANSITIONS[current]


def ensure_transition(session: Session, target: SessionStatus) -> None:
    """Raise the matching error kind if ``session`` cannot move to ``target``."""
    current = session.status
    if current.is_terminal:
        raise SessionNotActive(f"Session {session.id} is already {current.value}")
    if can_transition(current, target):
        return
    if current == SessionStatus.IDLE and target == SessionStatus.PAUSED:
        raise InvalidStateTransition("cannot pause a session that has not started")
    raise InvalidStateTransition(f"cannot move session from {current.value} to {target.value}")


@attrs.frozen(slots=True)
class SessionClock:
    """Active typing time for a session.

    ``start_time`` is fixed at the first keystroke and never rewritten; time
    spent paused is tracked separately so the countdown freezes while paused.
    """

    start_time: datetime | None
    paused_seconds: float = 0.0
    paused_at: datetime | None = None

    @classmethod
    def of(cls, session: Session) -> SessionClock:
        return cls(
            start_time=session.start_time,
            paused_seconds=session.paused_seconds,
            paused_at=session.paused_at,
        )

    def elapsed_seconds(self, timestamp: datetime) -> float:
        if self.start_time is None:
            return 0.0
        end = self.paused_at if self.paused_at is not None else timestamp
        return max(0.0, (end - self.start_time).total_seconds() - self.paused_seconds)

    def time_left(self, duration_seconds: float, timestamp: datetime) -> float:
        return max(0.0, duration_seconds - self.elapsed_seconds(timestamp))

    def resumed(self, timestamp: datetime) -> SessionClock:
        if self.paused_at is None:
            return self
        extra = max(0.0, (timestamp - self.paused_at).total_seconds())
        return SessionClock(
            start_time=self.start_time,
            paused_seconds=self.paused_seconds + extra,
            paused_at=None,
        )
