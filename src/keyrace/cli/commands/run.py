from __future__ import annotations

from pathlib import Path

import structlog
import typer
from rich.console import Console

from keyrace.cli.commands.common import Workspace, build_workspace, domain_errors, fail
from keyrace.cli.commands.session import build_request
from keyrace.cli.ui.prompts import (
    ABANDON_COMMAND,
    PAUSE_COMMAND,
    QUIT_COMMAND,
    append_chunk,
    ask_line,
    show_target,
    wait_for_resume,
)
from keyrace.cli.ui.tables import render_results
from keyrace.core.models.enums import SessionStatus
from keyrace.core.models.session import Session

log: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def _open_session(
    workspace: Workspace,
    request_options: dict[str, object],
    resume: bool,
    console: Console,
) -> Session:
    if not resume:
        request = build_request(**request_options)  # type: ignore[arg-type]
        started = workspace.service.start_session(request)
        console.print(
            f"[green]Started session {started.session.id}[/green] ({started.layout.name})"
        )
        return started.session

    user_id = request_options.get("user_id")
    session = workspace.store.find_latest_open(user_id if isinstance(user_id, str) else None)
    if session is None:
        raise fail(console, "No open session found to resume.")
    if session.status == SessionStatus.PAUSED:
        session = workspace.service.resume(session.id)
    console.print(
        f"[yellow]Resuming session {session.id} ({session.time_left:.0f}s left)[/yellow]"
    )
    return session


def _leave(workspace: Workspace, session: Session, console: Console) -> None:
    if session.status == SessionStatus.ACTIVE:
        session = workspace.service.pause(session.id)
    console.print(f"\n[yellow]Session {session.id} saved ({session.status.value}).[/yellow]")
    console.print("[yellow]Resume later with: keyrace run --resume[/yellow]")


def run_command(
    request_options: dict[str, object],
    resume: bool = False,
    data_dir: Path | None = None,
    config_dir: Path | None = None,
    seed: int | None = None,
    corpus_files: list[Path] | None = None,
    layout_files: list[Path] | None = None,
) -> None:
    console = Console()
    with domain_errors(console):
        workspace = build_workspace(
            data_dir,
            config_dir,
            seed=seed,
            corpus_files=corpus_files or (),
            layout_files=layout_files or (),
        )
        session = _open_session(workspace, request_options, resume, console)
    service = workspace.service
    show_target(session, console)

    with domain_errors(console):
        try:
            while not session.status.is_terminal:
                session = service.refresh(session.id)
                if session.status == SessionStatus.COMPLETED:
                    console.print("[yellow]Time is up.[/yellow]")
                    break
                line = ask_line(session, console)
                command = line.strip()
                if command == PAUSE_COMMAND:
                    if session.status != SessionStatus.ACTIVE:
                        console.print("[dim]Nothing to pause yet.[/dim]")
                        continue
                    session = service.pause(session.id)
                    if session.status == SessionStatus.PAUSED:
                        wait_for_resume(console)
                        session = service.resume(session.id)
                    continue
                if command == QUIT_COMMAND:
                    _leave(workspace, session, console)
                    raise typer.Exit(0)
                if command == ABANDON_COMMAND:
                    service.abandon(session.id)
                    console.print(f"[yellow]Abandoned session {session.id}.[/yellow]")
                    raise typer.Exit(0)
                if not line:
                    continue
                session = service.process_input(
                    session.id, append_chunk(session.transcript, line)
                )
        except (KeyboardInterrupt, EOFError):
            _leave(workspace, service.get(session.id), console)
            raise typer.Exit(0) from None

        session = service.complete(session.id)
    log.debug("run_finished", session_id=session.id)
    console.print(f"[green]Session {session.id} completed.[/green]")
    if session.results is not None:
        render_results(session.results, console)
