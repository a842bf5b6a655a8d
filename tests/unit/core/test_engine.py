from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from msgspec.structs import replace

from keyrace.core.engine import TypingEngine
from keyrace.core.errors import ContentUnavailable, InvalidStateTransition, SessionNotActive
from keyrace.core.models.enums import SessionStatus
from keyrace.core.models.session import Session

T0 = datetime(2024, 5, 1, 12, 0, 0, tzinfo=UTC)
TEXT = "quick brown foxes jump hi"


def at(seconds: float) -> datetime:
    return T0 + timedelta(seconds=seconds)


@pytest.fixture
def engine() -> TypingEngine:
    return TypingEngine()


@pytest.fixture
def session(engine) -> Session:
    return engine.create(TEXT, 120, layout_id="qwerty", user_id="ada", created_at=T0)


def test_create_starts_idle(session):
    assert session.status == SessionStatus.IDLE
    assert len(session.id) == 32
    assert session.time_left == 120.0
    assert session.start_time is None
    assert session.transcript == ""


def test_create_rejects_empty_text(engine):
    with pytest.raises(ContentUnavailable):
        engine.create("", 60)


def test_create_rejects_non_positive_duration(engine):
    with pytest.raises(ValueError, match="duration"):
        engine.create(TEXT, 0)


def test_first_input_activates_and_sets_start_time(engine, session):
    updated = engine.process_input(session, "q", at(0))
    assert updated.status == SessionStatus.ACTIVE
    assert updated.start_time == at(0)
    assert updated.transcript == "q"
    assert session.transcript == ""


def test_empty_input_on_idle_session_is_a_no_op(engine, session):
    assert engine.process_input(session, "", at(5)) is session


def test_input_updates_cursor_and_live_stats(engine, session):
    active = engine.process_input(session, "q", at(0))
    updated = engine.process_input(active, "quick ", at(30))
    assert updated.cursor.word_index == 1
    assert updated.cursor.at_word_boundary
    assert updated.live_stats.correct_chars == 6
    assert updated.live_stats.elapsed_seconds == 30.0
    assert updated.time_left == 90.0


def test_time_left_only_decreases(engine, session):
    active = engine.process_input(session, "q", at(0))
    later = engine.process_input(active, "qu", at(10))
    latest = engine.process_input(later, "qui", at(20))
    assert active.time_left >= later.time_left >= latest.time_left


def test_earlier_timestamp_does_not_restore_time(engine):
    session = engine.create(TEXT, 60, created_at=T0)
    active = engine.process_input(session, "q", at(0))
    later = engine.process_input(active, "qu", at(30))
    out_of_order = engine.process_input(later, "qui", at(10))
    assert later.time_left == 30.0
    assert out_of_order.time_left <= 30.0
    assert engine.refresh(out_of_order, at(5)).time_left <= 30.0
    assert engine.pause(out_of_order, at(5)).time_left <= 30.0


def test_input_after_time_runs_out_completes(engine, session):
    active = engine.process_input(session, "q", at(0))
    finished = engine.process_input(active, "qu", at(125))
    assert finished.status == SessionStatus.COMPLETED
    assert finished.time_left == 0.0
    assert finished.completed_at == at(125)
    assert finished.results is None


def test_refresh_completes_expired_session(engine, session):
    active = engine.process_input(session, "q", at(0))
    ticking = engine.refresh(active, at(60))
    assert ticking.status == SessionStatus.ACTIVE
    assert ticking.time_left == 60.0
    expired = engine.refresh(active, at(121))
    assert expired.status == SessionStatus.COMPLETED
    assert expired.time_left == 0.0


def test_refresh_ignores_inactive_sessions(engine, session):
    assert engine.refresh(session, at(500)) is session


def test_completion_is_idempotent(engine, session):
    active = engine.process_input(session, "q", at(0))
    finished = engine.process_input(active, TEXT, at(30))
    first = engine.complete(finished, at(31))
    second = engine.complete(first, at(90))
    assert first.results == second.results
    assert second is first


def test_mistake_log_is_monotonic_and_bounded(engine, session):
    inputs = ["x", "xu", "x", "", "qx", "quick bxown", "quick b", "quick brown foxes jump hizzz"]
    current = engine.process_input(session, inputs[0], at(0))
    seen = len(current.mistakes)
    for offset, text in enumerate(inputs[1:], start=1):
        if current.status.is_terminal:
            break
        current = engine.process_input(current, text, at(offset))
        assert len(current.mistakes) >= seen
        seen = len(current.mistakes)
    assert all(mistake.position < len(TEXT) for mistake in current.mistakes)


def test_live_accuracy_stays_in_bounds(engine, session):
    current = engine.process_input(session, "zzzz", at(0))
    current = engine.process_input(current, "z", at(1))
    current = engine.process_input(current, "zq", at(2))
    assert 0 <= current.live_stats.accuracy <= 100
    finished = engine.complete(current, at(3))
    assert finished.results is not None
    assert 0 <= finished.results.accuracy <= 100


def test_net_wpm_clamped_with_many_mistakes(engine):
    session = engine.create("abcdefghij", 60, created_at=T0)
    current = engine.process_input(session, "z", at(0))
    current = engine.process_input(current, "zzzzzzzzz", at(1))
    finished = engine.complete(current, at(2))
    assert finished.results is not None
    assert finished.results.net_wpm == 0


def test_equal_length_wrong_text_is_not_complete(engine):
    session = engine.create("cat sat", 60, created_at=T0)
    active = engine.process_input(session, "c", at(0))
    typed = engine.process_input(active, "cat sam", at(5))
    assert typed.status == SessionStatus.ACTIVE
    expired = engine.process_input(typed, "cat sam", at(61))
    assert expired.status == SessionStatus.COMPLETED


def test_clean_minute_scores_five_wpm(engine, session):
    active = engine.process_input(session, "q", at(0))
    finished = engine.process_input(active, TEXT, at(60))
    assert finished.status == SessionStatus.COMPLETED
    scored = engine.complete(finished, at(61))
    results = scored.results
    assert results is not None
    assert results.correct_chars == 25
    assert results.net_wpm == 5
    assert results.accuracy == 100.0
    assert results.consistency == 100
    assert results.duration_seconds == 60.0


def test_pause_rejects_input_until_resumed(engine, session):
    active = engine.process_input(session, "q", at(0))
    paused = engine.pause(active, at(10))
    assert paused.status == SessionStatus.PAUSED
    with pytest.raises(SessionNotActive):
        engine.process_input(paused, "qu", at(20))
    resumed = engine.resume(paused, at(40))
    updated = engine.process_input(resumed, "qu", at(50))
    assert updated.start_time == at(0)
    # 50s wall clock minus 30s paused.
    assert updated.live_stats.elapsed_seconds == 20.0
    assert updated.time_left == 100.0


def test_pause_freezes_countdown(engine, session):
    active = engine.process_input(session, "q", at(0))
    paused = engine.pause(active, at(10))
    assert paused.time_left == 110.0
    assert engine.refresh(paused, at(500)) is paused


def test_backspace_keeps_logged_mistakes(engine, session):
    current = engine.process_input(session, "x", at(0))
    assert len(current.mistakes) == 1
    current = engine.process_input(current, "", at(1))
    current = engine.process_input(current, "q", at(2))
    assert len(current.mistakes) == 1
    assert current.mistakes[0].actual == "x"
    finished = engine.complete(current, at(3), final_input=TEXT)
    assert finished.results is not None
    assert finished.results.correct_chars == 25
    assert finished.results.mistakes == 1


def test_pause_on_idle_session_raises(engine, session):
    with pytest.raises(InvalidStateTransition, match="has not started"):
        engine.pause(session, at(0))


def test_pause_twice_raises(engine, session):
    paused = engine.pause(engine.process_input(session, "q", at(0)), at(1))
    with pytest.raises(InvalidStateTransition):
        engine.pause(paused, at(2))


def test_resume_requires_paused_session(engine, session):
    active = engine.process_input(session, "q", at(0))
    with pytest.raises(InvalidStateTransition):
        engine.resume(active, at(1))


def test_pause_after_time_is_up_completes(engine, session):
    active = engine.process_input(session, "q", at(0))
    finished = engine.pause(active, at(200))
    assert finished.status == SessionStatus.COMPLETED


def test_input_after_completion_is_rejected(engine, session):
    finished = engine.complete(engine.process_input(session, "q", at(0)), at(5))
    with pytest.raises(SessionNotActive):
        engine.process_input(finished, "qu", at(6))


def test_abandon_is_terminal(engine, session):
    abandoned = engine.abandon(engine.process_input(session, "q", at(0)), at(5))
    assert abandoned.status == SessionStatus.ABANDONED
    with pytest.raises(SessionNotActive):
        engine.abandon(abandoned, at(6))
    with pytest.raises(SessionNotActive):
        engine.complete(abandoned, at(6))
    with pytest.raises(SessionNotActive):
        engine.resume(abandoned, at(6))


def test_complete_idle_session_scores_zero(engine, session):
    finished = engine.complete(session, at(0))
    assert finished.status == SessionStatus.COMPLETED
    assert finished.results is not None
    assert finished.results.net_wpm == 0
    assert finished.results.accuracy == 100.0


def test_complete_paused_session_uses_active_time(engine, session):
    active = engine.process_input(session, "quick", at(0))
    paused = engine.pause(active, at(30))
    finished = engine.complete(paused, at(300))
    assert finished.results is not None
    assert finished.results.duration_seconds == 30.0
    assert finished.paused_at is None


def test_final_input_on_completed_session_must_match(engine, session):
    finished = engine.process_input(engine.process_input(session, "q", at(0)), TEXT, at(10))
    with pytest.raises(SessionNotActive):
        engine.complete(finished, at(11), final_input="quick")
    scored = engine.complete(finished, at(11), final_input=TEXT)
    assert scored.results is not None
    assert engine.complete(scored, at(12), final_input="quick") is scored


def test_finger_utilization_uses_layout_rows(engine, session):
    finished = engine.process_input(engine.process_input(session, "q", at(0)), TEXT, at(10))
    scored = engine.complete(finished, at(11), layout_rows=["qwertyuiop"])
    assert scored.results is not None
    assert scored.results.finger_utilization["left-pinky"] > 0


def test_snapshots_are_immutable(session):
    with pytest.raises(AttributeError):
        session.transcript = "nope"  # type: ignore[misc]
    assert replace(session, transcript="x").transcript == "x"
