"""Shared wiring for CLI commands."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path

import attrs
import structlog
import typer
from rich.console import Console
from rich.markup import escape

from keyrace import config
from keyrace.adapters.layouts.registry import YamlLayoutRegistry
from keyrace.adapters.storage.preferences import PreferencesStore
from keyrace.adapters.storage.results_store import ResultsStore
from keyrace.adapters.storage.session_store import SessionStore
from keyrace.adapters.text.provider import CorpusTextProvider
from keyrace.core.errors import KeyraceError
from keyrace.core.service import TypingSessionService

log: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


@attrs.frozen
class Workspace:
    data_dir: Path
    config_dir: Path
    store: SessionStore
    results: ResultsStore
    preferences: PreferencesStore
    layouts: YamlLayoutRegistry
    provider: CorpusTextProvider
    service: TypingSessionService


def build_workspace(
    data_dir: Path | None = None,
    config_dir: Path | None = None,
    seed: int | None = None,
    corpus_files: Sequence[Path] = (),
    layout_files: Sequence[Path] = (),
) -> Workspace:
    data_root = data_dir or config.default_data_dir()
    config_root = config_dir or config.default_config_dir()
    store = SessionStore(config.sessions_dir(data_root))
    results = ResultsStore(config.results_path(data_root))
    preferences = PreferencesStore(config.preferences_path(config_root))
    if layout_files:
        layouts = YamlLayoutRegistry.with_extra_files(layout_files, preferences=preferences)
    else:
        layouts = YamlLayoutRegistry(preferences=preferences)
    if corpus_files:
        provider = CorpusTextProvider.with_extra_files(corpus_files, layouts=layouts, seed=seed)
    else:
        provider = CorpusTextProvider(layouts=layouts, seed=seed)
    service = TypingSessionService(
        storage=store,
        text_provider=provider,
        layouts=layouts,
        sink=results,
    )
    log.debug("workspace_ready", data_dir=str(data_root), config_dir=str(config_root))
    return Workspace(
        data_dir=data_root,
        config_dir=config_root,
        store=store,
        results=results,
        preferences=preferences,
        layouts=layouts,
        provider=provider,
        service=service,
    )


def fail(console: Console, message: str) -> typer.Exit:
    console.print(f"[red]{escape(message)}[/red]")
    return typer.Exit(code=1)


@contextmanager
def domain_errors(console: Console) -> Iterator[None]:
    """Turn keyrace and input errors into a red message and exit code 1."""
    try:
        yield
    except KeyraceError as exc:
        log.error("command_failed", code=exc.code, error=exc.message)
        raise fail(console, exc.message) from exc
    except (OSError, ValueError) as exc:
        log.error("command_failed", error=str(exc))
        raise fail(console, str(exc)) from exc
