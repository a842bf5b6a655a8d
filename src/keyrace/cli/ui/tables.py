from __future__ import annotations

from collections.abc import Sequence

from rich.console import Console
from rich.table import Table

from keyrace.adapters.storage.results_store import ResultRecord
from keyrace.core.models.documents import KeyboardLayout
from keyrace.core.models.session import Session, SessionSummary, TypingResults


def render_results(results: TypingResults, console: Console) -> None:
    table = Table(title="Typing Results")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Net WPM", str(results.net_wpm))
    table.add_row("Gross WPM", f"{results.gross_wpm:.1f}")
    table.add_row("Peak WPM", f"{results.peak_wpm:.1f}")
    table.add_row("Accuracy", f"{results.accuracy:.2f}%")
    table.add_row("Consistency", f"{results.consistency}%")
    table.add_row("Words", f"{results.correct_words}/{results.total_words}")
    table.add_row("Mistakes", str(results.mistakes))
    table.add_row("Duration", f"{results.duration_seconds:.1f}s")
    console.print(table)


def render_session(session: Session, console: Console) -> None:
    stats = session.live_stats
    table = Table(title="Session")
    table.add_column("Field")
    table.add_column("Value", no_wrap=True)
    table.add_row("ID", session.id)
    table.add_row("Status", session.status.value)
    table.add_row("User", session.user_id or "anonymous")
    table.add_row("Mode", session.mode.value)
    table.add_row("Language", session.language)
    table.add_row("Layout", session.layout_id or "-")
    table.add_row("Time left", f"{session.time_left:.1f}s")
    table.add_row("Progress", f"{stats.progress:.0f}%")
    table.add_row("Live WPM", str(stats.wpm))
    table.add_row("Live accuracy", f"{stats.accuracy}%")
    table.add_row("Mistakes", str(len(session.mistakes)))
    console.print(table)
    if session.results is not None:
        render_results(session.results, console)


def render_sessions(summaries: Sequence[SessionSummary], console: Console) -> None:
    table = Table(title="Sessions")
    table.add_column("ID", no_wrap=True)
    table.add_column("User")
    table.add_column("Language")
    table.add_column("Status")
    table.add_column("Created")
    for summary in summaries:
        table.add_row(
            summary.id,
            summary.user_id or "anonymous",
            summary.language,
            summary.status.value,
            summary.created_at.strftime("%Y-%m-%d %H:%M"),
        )
    console.print(table)


def render_layouts(
    layouts: Sequence[KeyboardLayout], console: Console, preferred: str | None = None
) -> None:
    table = Table(title="Keyboard Layouts")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Variant")
    table.add_column("Default")
    table.add_column("Preferred")
    for layout in layouts:
        table.add_row(
            layout.id,
            layout.name,
            layout.variant,
            "yes" if layout.is_default else "",
            "yes" if layout.id == preferred else "",
        )
    console.print(table)


def render_history(records: Sequence[ResultRecord], console: Console) -> None:
    table = Table(title="Results History")
    table.add_column("Recorded")
    table.add_column("Session")
    table.add_column("WPM", justify="right")
    table.add_column("Accuracy", justify="right")
    table.add_column("Consistency", justify="right")
    for record in records:
        table.add_row(
            record.recorded_at.strftime("%Y-%m-%d %H:%M"),
            record.session_id[:8],
            str(record.results.net_wpm),
            f"{record.results.accuracy:.2f}%",
            f"{record.results.consistency}%",
        )
    console.print(table)
