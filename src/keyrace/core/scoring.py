"""Pure scoring functions for typing sessions.

Nothing in this module raises on odd inputs: zero or negative elapsed time
degrades every rate to 0 so that completion can always persist a result.
"""

from __future__ import annotations

import math
import statistics
from collections.abc import Sequence
from datetime import datetime

from keyrace.core.models.session import CursorPosition, LiveStats, Mistake, TypingResults

CHARS_PER_WORD = 5

QWERTY_ROWS = ("1234567890-=", "qwertyuiop[]", "asdfghjkl;'", "zxcvbnm,./")

# Column index within a physical row -> finger, for a standard touch-typing split.
_COLUMN_FINGERS = (
    "left-pinky",
    "left-ring",
    "left-middle",
    "left-index",
    "left-index",
    "right-index",
    "right-index",
    "right-middle",
    "right-ring",
)
_FINGERS = (
    "left-pinky",
    "left-ring",
    "left-middle",
    "left-index",
    "right-index",
    "right-middle",
    "right-ring",
    "right-pinky",
    "thumbs",
    "unknown",
)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def count_correct_chars(target: str, transcript: str) -> int:
    return sum(1 for expected, actual in zip(target, transcript) if expected == actual)


def detect_mistakes(
    previous: str, current: str, target: str, timestamp: datetime
) -> tuple[Mistake, ...]:
    """Mistakes in the part of ``current`` that grew past ``previous``.

    Shrinking input (backspace) yields nothing; positions beyond the target
    are not mistakes, they are simply overflow.
    """
    end = min(len(current), len(target))
    return tuple(
        Mistake(position=index, expected=target[index], actual=current[index], timestamp=timestamp)
        for index in range(len(previous), end)
        if current[index] != target[index]
    )


def locate_cursor(target: str, transcript: str) -> CursorPosition:
    index = len(transcript)
    words = target.split(" ")
    start = 0
    for word_index, word in enumerate(words):
        end = start + len(word)
        if index <= end:
            char_index = index - start
            return CursorPosition(
                index=index,
                word_index=word_index,
                char_index=char_index,
                at_word_boundary=char_index == 0 and word_index > 0,
            )
        start = end + 1
    last = len(words) - 1
    return CursorPosition(index=index, word_index=last, char_index=len(words[last]))


def compute_live_stats(
    target: str, transcript: str, mistake_count: int, elapsed_seconds: float
) -> LiveStats:
    correct = count_correct_chars(target, transcript)
    minutes = elapsed_seconds / 60
    wpm = round_half_up(correct / CHARS_PER_WORD / minutes) if minutes > 0 else 0
    typed = len(transcript)
    if typed:
        accuracy = min(100, max(0, round_half_up(100 * (typed - mistake_count) / typed)))
    else:
        accuracy = 100
    progress = min(100.0, 100 * typed / len(target)) if target else 100.0
    return LiveStats(
        wpm=wpm,
        accuracy=accuracy,
        correct_chars=correct,
        mistakes=mistake_count,
        elapsed_seconds=round(max(0.0, elapsed_seconds), 3),
        progress=round(progress, 2),
    )


def is_complete(target: str, transcript: str, time_left: float) -> bool:
    # Exact match only: a full-length transcript with typos is not finished.
    return time_left <= 0 or transcript == target


def compare_words(target: str, transcript: str) -> tuple[int, int]:
    correct = incorrect = 0
    for expected, actual in zip(target.split(), transcript.split()):
        if expected == actual:
            correct += 1
        else:
            incorrect += 1
    return correct, incorrect


def consistency_score(mistakes: Sequence[Mistake]) -> int:
    """100 minus the coefficient of variation of the gaps between mistakes."""
    if len(mistakes) < 2:
        return 100
    intervals = [
        (later.timestamp - earlier.timestamp).total_seconds()
        for earlier, later in zip(mistakes, mistakes[1:])
    ]
    mean = statistics.fmean(intervals)
    if mean <= 0:
        return 100
    cv = statistics.pstdev(intervals) / mean
    return max(0, min(100, round_half_up(100 - 100 * cv)))


def estimate_peak_wpm(gross_wpm: float, net_wpm: int, mistake_count: int) -> float:
    multiplier = 1.3 if mistake_count < 5 else 1.2
    return round(max(gross_wpm * multiplier, float(net_wpm)), 2)


def finger_map_from_rows(rows: Sequence[str]) -> dict[str, str]:
    mapping: dict[str, str] = {" ": "thumbs"}
    for row in rows:
        for column, key in enumerate(row):
            finger = _COLUMN_FINGERS[column] if column < len(_COLUMN_FINGERS) else "right-pinky"
            mapping.setdefault(key.lower(), finger)
    return mapping


def finger_utilization(text: str, rows: Sequence[str] | None = None) -> dict[str, float]:
    """Share of ``text`` typed by each finger, in percent (2 d.p.)."""
    counts = dict.fromkeys(_FINGERS, 0)
    if not text:
        return {finger: 0.0 for finger in counts}
    mapping = finger_map_from_rows(rows or QWERTY_ROWS)
    for char in text.lower():
        counts[mapping.get(char, "unknown")] += 1
    return {finger: round(100 * count / len(text), 2) for finger, count in counts.items()}


def compute_results(
    target: str,
    transcript: str,
    mistakes: Sequence[Mistake],
    elapsed_seconds: float,
    layout_rows: Sequence[str] | None = None,
) -> TypingResults:
    correct_chars = count_correct_chars(target, transcript)
    correct_words, incorrect_words = compare_words(target, transcript)
    mistake_count = len(mistakes)

    if elapsed_seconds > 0:
        minutes = elapsed_seconds / 60
        gross_wpm = correct_chars / CHARS_PER_WORD / minutes
        net_wpm = round_half_up(max(0.0, gross_wpm - mistake_count / minutes))
        peak_wpm = estimate_peak_wpm(gross_wpm, net_wpm, mistake_count)
    else:
        gross_wpm = 0.0
        net_wpm = 0
        peak_wpm = 0.0

    typed = len(transcript)
    accuracy = round(100 * correct_chars / typed, 2) if typed else 100.0

    return TypingResults(
        net_wpm=net_wpm,
        gross_wpm=round(gross_wpm, 2),
        peak_wpm=peak_wpm,
        accuracy=accuracy,
        correct_chars=correct_chars,
        incorrect_chars=typed - correct_chars,
        characters_typed=typed,
        correct_words=correct_words,
        incorrect_words=incorrect_words,
        total_words=len(target.split()),
        mistakes=mistake_count,
        consistency=consistency_score(mistakes),
        duration_seconds=round(max(0.0, elapsed_seconds), 2),
        finger_utilization=finger_utilization(transcript, layout_rows),
    )
