"""Named failure kinds raised by the engine and its orchestration layer.

Callers branch on the class (or on ``code``) rather than on message text.
"""

from __future__ import annotations


class KeyraceError(Exception):
    """Base exception for all keyrace errors."""

    def __init__(self, message: str, code: str = "KEYRACE_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(message)


class SessionNotFound(KeyraceError):
    """Raised when a session id is unknown to the session store."""

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"Session not found: {session_id}", code="SESSION_NOT_FOUND")


class InvalidStateTransition(KeyraceError):
    """Raised when an operation is not allowed from the session's current status."""

    def __init__(self, message: str, code: str = "INVALID_STATE_TRANSITION") -> None:
        super().__init__(message, code=code)


class SessionNotActive(InvalidStateTransition):
    """Raised when input or a mutation reaches a paused or finished session."""

    def __init__(self, message: str = "Session is not accepting input") -> None:
        super().__init__(message, code="SESSION_NOT_ACTIVE")


class ContentUnavailable(KeyraceError):
    """Raised when no target text can be produced for the requested parameters."""

    def __init__(self, message: str = "No content available") -> None:
        super().__init__(message, code="CONTENT_UNAVAILABLE")


class LayoutUnavailable(KeyraceError):
    """Raised when no keyboard layout can be resolved for a session."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="LAYOUT_UNAVAILABLE")
