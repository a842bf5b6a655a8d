from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from keyrace.adapters.loaders.yaml_loader import YamlCorpusLoader, YamlLayoutLoader

_LOADERS = {"corpus": YamlCorpusLoader, "layouts": YamlLayoutLoader}


def validate_command(path: Path, kind: str) -> None:
    console = Console()
    loader_cls = _LOADERS.get(kind)
    if loader_cls is None:
        console.print(f"[red]Unknown document kind: {kind}. Use corpus or layouts.[/red]")
        raise typer.Exit(code=1)
    try:
        issues = loader_cls().validate(path)
    except (OSError, ValueError) as exc:
        console.print(f"[red]Failed to read {kind} file: {exc}[/red]")
        raise typer.Exit(code=1) from exc
    if issues:
        console.print(f"[red]{kind.capitalize()} validation failed:[/red]")
        for issue in issues:
            location = issue.path or kind
            console.print(f"- {location}: {issue.message}")
        raise typer.Exit(code=1)
    console.print(f"[green]{kind.capitalize()} file is valid.[/green]")
