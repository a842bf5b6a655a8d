from __future__ import annotations

import platform
from pathlib import Path

from rich.console import Console

from keyrace import __version__
from keyrace.cli.commands.common import build_workspace, domain_errors
from keyrace.config import DEFAULT_LANGUAGE


def info_command(data_dir: Path | None = None, config_dir: Path | None = None) -> None:
    console = Console()
    with domain_errors(console):
        workspace = build_workspace(data_dir, config_dir)
        sessions = workspace.store.list_sessions()
        layouts = workspace.layouts.get_available_layouts(DEFAULT_LANGUAGE)

    console.print(f"[bold]keyrace version:[/bold] {__version__}")
    console.print(f"[bold]Python:[/bold] {platform.python_version()}")
    console.print(f"[bold]Data directory:[/bold] {workspace.data_dir}")
    console.print(f"[bold]Config directory:[/bold] {workspace.config_dir}")
    console.print(f"[bold]Stored sessions:[/bold] {len(sessions)}")
    console.print(f"[bold]Languages:[/bold] {', '.join(workspace.provider.languages)}")
    layout_ids = ", ".join(layout.id for layout in layouts)
    console.print(f"[bold]Layouts ({DEFAULT_LANGUAGE}):[/bold] {layout_ids}")
