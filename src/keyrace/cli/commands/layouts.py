from __future__ import annotations

from pathlib import Path

from rich.console import Console

from keyrace.cli.commands.common import build_workspace, domain_errors, fail
from keyrace.cli.ui.tables import render_layouts


def layouts_command(
    language: str,
    user_id: str | None = None,
    data_dir: Path | None = None,
    config_dir: Path | None = None,
) -> None:
    console = Console()
    with domain_errors(console):
        workspace = build_workspace(data_dir, config_dir)
        layouts = workspace.layouts.get_available_layouts(language)
        preferred = (
            workspace.layouts.get_user_preferred_layout(user_id, language) if user_id else None
        )
    if not layouts:
        raise fail(console, f"No keyboard layouts for language: {language}")
    render_layouts(layouts, console, preferred=preferred)


def prefer_command(
    layout_id: str,
    user_id: str,
    language: str,
    data_dir: Path | None = None,
    config_dir: Path | None = None,
) -> None:
    console = Console()
    with domain_errors(console):
        workspace = build_workspace(data_dir, config_dir)
        workspace.layouts.set_user_preferred_layout(user_id, language, layout_id)
    console.print(f"[green]{user_id} now types {language} on {layout_id}.[/green]")
