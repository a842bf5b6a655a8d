"""Shared result summary for reporters."""

from __future__ import annotations

from keyrace.core.models.session import Session, TypingResults


def require_results(session: Session) -> TypingResults:
    if session.results is None:
        raise ValueError(f"Session {session.id} has no results; complete it first.")
    return session.results


def summarize(session: Session) -> dict[str, object]:
    """Flatten the headline figures of a completed session.

    Returns a dict with keys: net_wpm, gross_wpm, peak_wpm, accuracy,
    consistency, words, mistakes, duration_seconds
    """
    results = require_results(session)
    return {
        "net_wpm": results.net_wpm,
        "gross_wpm": results.gross_wpm,
        "peak_wpm": results.peak_wpm,
        "accuracy": results.accuracy,
        "consistency": results.consistency,
        "words": f"{results.correct_words}/{results.total_words}",
        "mistakes": results.mistakes,
        "duration_seconds": results.duration_seconds,
    }


def mistake_rows(session: Session) -> list[dict[str, object]]:
    return [
        {
            "position": mistake.position,
            "expected": mistake.expected,
            "actual": mistake.actual,
            "timestamp": mistake.timestamp.isoformat(),
        }
        for mistake in session.mistakes
    ]
