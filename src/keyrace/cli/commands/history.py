from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from keyrace.cli.commands.common import build_workspace, domain_errors
from keyrace.cli.ui.tables import render_history


def history_command(
    user_id: str,
    data_dir: Path | None = None,
    config_dir: Path | None = None,
) -> None:
    console = Console()
    with domain_errors(console):
        records = build_workspace(data_dir, config_dir).results.history(user_id)
    if not records:
        console.print(f"No recorded results for {user_id}.")
        raise typer.Exit(0)
    render_history(records, console)
    best = max(record.results.net_wpm for record in records)
    console.print(f"[bold]Best:[/bold] {best} wpm over {len(records)} sessions")
