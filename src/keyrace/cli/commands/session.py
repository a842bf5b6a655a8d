from __future__ import annotations

from pathlib import Path

import structlog
import typer
from rich.console import Console
from rich.markup import escape

from keyrace.cli.commands.common import build_workspace, domain_errors, fail
from keyrace.cli.ui.tables import render_results, render_session, render_sessions
from keyrace.core.models.enums import Difficulty, SessionStatus, TextType, TypingMode
from keyrace.core.service import StartRequest
from keyrace.core.utils import is_session_id, parse_timestamp

log: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def build_request(
    language: str,
    difficulty: Difficulty,
    text_type: TextType,
    duration: float,
    length: int,
    mode: TypingMode,
    layout_id: str | None,
    user_id: str | None,
    text: str | None,
) -> StartRequest:
    try:
        return StartRequest(
            language=language,
            difficulty=difficulty,
            text_type=text_type,
            duration_seconds=duration,
            length=length,
            mode=mode,
            layout_id=layout_id,
            user_id=user_id,
            text=text,
        )
    except ValueError as exc:
        raise ValueError(f"Invalid session options: {exc}") from exc


def _check_id(session_id: str, console: Console) -> None:
    if not is_session_id(session_id):
        raise fail(console, f"Invalid session id: {session_id}")


def start_command(
    request_options: dict[str, object],
    data_dir: Path | None = None,
    config_dir: Path | None = None,
    seed: int | None = None,
    corpus_files: list[Path] | None = None,
    layout_files: list[Path] | None = None,
) -> None:
    console = Console()
    with domain_errors(console):
        request = build_request(**request_options)  # type: ignore[arg-type]
        workspace = build_workspace(
            data_dir,
            config_dir,
            seed=seed,
            corpus_files=corpus_files or (),
            layout_files=layout_files or (),
        )
        started = workspace.service.start_session(request)
    session = started.session
    console.print(f"[green]Started session {session.id}[/green]")
    console.print(f"Layout: {started.layout.name} | Duration: {session.duration_seconds:.0f}s")
    console.print(escape(session.target_text))


def type_command(
    session_id: str,
    transcript: str,
    at: str | None = None,
    data_dir: Path | None = None,
    config_dir: Path | None = None,
) -> None:
    console = Console()
    _check_id(session_id, console)
    with domain_errors(console):
        timestamp = parse_timestamp(at)
        workspace = build_workspace(data_dir, config_dir)
        session = workspace.service.process_input(session_id, transcript, timestamp)
        if session.status == SessionStatus.COMPLETED:
            session = workspace.service.complete(session_id, timestamp)
    if session.results is not None:
        console.print("[green]Session completed.[/green]")
        render_results(session.results, console)
        return
    stats = session.live_stats
    console.print(
        f"{stats.wpm} wpm | {stats.accuracy}% accuracy | {stats.progress:.0f}% | "
        f"{session.time_left:.1f}s left | {len(session.mistakes)} mistakes"
    )


def pause_command(
    session_id: str,
    at: str | None = None,
    data_dir: Path | None = None,
    config_dir: Path | None = None,
) -> None:
    console = Console()
    _check_id(session_id, console)
    with domain_errors(console):
        timestamp = parse_timestamp(at)
        workspace = build_workspace(data_dir, config_dir)
        session = workspace.service.pause(session_id, timestamp)
    if session.status == SessionStatus.COMPLETED:
        with domain_errors(console):
            session = workspace.service.complete(session_id, timestamp)
        console.print("[yellow]Time was up; session completed instead of paused.[/yellow]")
        if session.results is not None:
            render_results(session.results, console)
        return
    console.print(
        f"[yellow]Paused session {session.id} with {session.time_left:.1f}s left.[/yellow]"
    )


def resume_command(
    session_id: str,
    at: str | None = None,
    data_dir: Path | None = None,
    config_dir: Path | None = None,
) -> None:
    console = Console()
    _check_id(session_id, console)
    with domain_errors(console):
        workspace = build_workspace(data_dir, config_dir)
        session = workspace.service.resume(session_id, parse_timestamp(at))
    console.print(
        f"[green]Resumed session {session.id} with {session.time_left:.1f}s left.[/green]"
    )


def complete_command(
    session_id: str,
    final_input: str | None = None,
    at: str | None = None,
    data_dir: Path | None = None,
    config_dir: Path | None = None,
) -> None:
    console = Console()
    _check_id(session_id, console)
    with domain_errors(console):
        workspace = build_workspace(data_dir, config_dir)
        existing = workspace.service.get(session_id)
        if existing.status == SessionStatus.COMPLETED and existing.results is not None:
            console.print("[yellow]Session already completed.[/yellow]")
            render_results(existing.results, console)
            return
        session = workspace.service.complete(session_id, parse_timestamp(at), final_input)
    console.print("[green]Session completed.[/green]")
    if session.results is not None:
        render_results(session.results, console)


def abandon_command(
    session_id: str,
    at: str | None = None,
    data_dir: Path | None = None,
    config_dir: Path | None = None,
) -> None:
    console = Console()
    _check_id(session_id, console)
    with domain_errors(console):
        workspace = build_workspace(data_dir, config_dir)
        session = workspace.service.abandon(session_id, parse_timestamp(at))
    console.print(f"[yellow]Abandoned session {session.id}.[/yellow]")


def show_command(
    session_id: str,
    data_dir: Path | None = None,
    config_dir: Path | None = None,
) -> None:
    console = Console()
    _check_id(session_id, console)
    with domain_errors(console):
        workspace = build_workspace(data_dir, config_dir)
        session = workspace.service.get(session_id)
    render_session(session, console)


def sessions_command(
    user_id: str | None = None,
    data_dir: Path | None = None,
    config_dir: Path | None = None,
) -> None:
    console = Console()
    with domain_errors(console):
        workspace = build_workspace(data_dir, config_dir)
        summaries = workspace.service.list_sessions(user_id)
    if not summaries:
        console.print("No sessions found.")
        raise typer.Exit(0)
    render_sessions(summaries, console)
