from __future__ import annotations

from pathlib import Path

from rich.console import Console

from keyrace.adapters.reporters.base import ReporterBase
from keyrace.adapters.reporters.html import HtmlReporter
from keyrace.adapters.reporters.json import JsonReporter
from keyrace.adapters.reporters.markdown import MarkdownReporter
from keyrace.cli.commands.common import build_workspace, domain_errors, fail
from keyrace.core.utils import atomic_write_bytes, is_session_id

FORMATS: dict[str, type[ReporterBase]] = {
    "html": HtmlReporter,
    "json": JsonReporter,
    "md": MarkdownReporter,
    "markdown": MarkdownReporter,
}


def _make_reporter(format: str, template_path: Path | None, console: Console) -> ReporterBase:
    reporter_cls = FORMATS.get(format.lower())
    if reporter_cls is None:
        choices = ", ".join(sorted(FORMATS))
        raise fail(console, f"Unsupported format: {format}. Use one of: {choices}.")
    if reporter_cls is HtmlReporter:
        return HtmlReporter(template_path)
    if template_path is not None:
        raise fail(console, "--template only applies to html reports.")
    return reporter_cls()


def _check_output(output_path: Path, overwrite: bool, console: Console) -> None:
    if output_path.is_dir():
        raise fail(console, f"Output path is a directory: {output_path}")
    if output_path.exists() and not overwrite:
        raise fail(console, f"{output_path} already exists. Use --overwrite to replace it.")
    if not output_path.parent.is_dir():
        raise fail(console, f"Output directory does not exist: {output_path.parent}")


def report_command(
    session_id: str,
    format: str,
    output_path: Path | None,
    overwrite: bool,
    template_path: Path | None = None,
    data_dir: Path | None = None,
    config_dir: Path | None = None,
) -> None:
    console = Console()
    if not is_session_id(session_id):
        raise fail(console, f"Invalid session id: {session_id}")
    reporter = _make_reporter(format, template_path, console)
    if output_path is None:
        output_path = Path(f"keyrace-{session_id}.{reporter.file_extension}")
    _check_output(output_path, overwrite, console)

    with domain_errors(console):
        session = build_workspace(data_dir, config_dir).service.get(session_id)
        atomic_write_bytes(output_path, reporter.generate(session))
    console.print(f"[green]Report written to {output_path}[/green]")
