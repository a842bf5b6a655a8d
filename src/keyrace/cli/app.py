"""CLI app with deferred heavy imports."""

from pathlib import Path

import typer

from keyrace.config import DEFAULT_DURATION_SECONDS, DEFAULT_LANGUAGE, DEFAULT_TEXT_LENGTH
from keyrace.core.models.enums import Difficulty, TextType, TypingMode

app = typer.Typer(
    name="keyrace",
    help="keyrace - Timed typing practice in the terminal",
    no_args_is_help=True,
    add_completion=False,
)

DATA_DIR = typer.Option(None, "--data-dir", help="Override data directory (sessions, results)")
CONFIG_DIR = typer.Option(None, "--config-dir", help="Override config directory (preferences)")
AT = typer.Option(None, "--at", help="ISO-8601 event time (defaults to now)")
USER = typer.Option(None, "--user", "-u", help="User id; omit for an anonymous session")
CORPUS = typer.Option(None, "--corpus", exists=True, readable=True, help="Extra corpus YAML")
LAYOUT_FILE = typer.Option(
    None, "--layout-file", exists=True, readable=True, help="Extra layouts YAML"
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    json_logs: bool = typer.Option(False, "--json-logs", help="Log events as JSON lines"),
) -> None:
    from keyrace.logging import configure_logging

    configure_logging(verbose=verbose, json_output=json_logs)


def _request_options(
    language: str,
    difficulty: Difficulty,
    text_type: TextType,
    duration: float,
    length: int,
    mode: TypingMode,
    layout: str | None,
    user: str | None,
    text: str | None,
) -> dict[str, object]:
    return {
        "language": language,
        "difficulty": difficulty,
        "text_type": text_type,
        "duration": duration,
        "length": length,
        "mode": mode,
        "layout_id": layout,
        "user_id": user,
        "text": text,
    }


@app.command()
def start(
    language: str = typer.Option(DEFAULT_LANGUAGE, "--language", "-l"),
    difficulty: Difficulty = typer.Option(Difficulty.MEDIUM, "--difficulty", "-d"),
    text_type: TextType = typer.Option(TextType.WORDS, "--text-type", "-t"),
    duration: float = typer.Option(DEFAULT_DURATION_SECONDS, "--duration", help="Seconds"),
    length: int = typer.Option(DEFAULT_TEXT_LENGTH, "--length", help="Approximate characters"),
    mode: TypingMode = typer.Option(TypingMode.NORMAL, "--mode", "-m"),
    layout: str | None = typer.Option(None, "--layout", help="Keyboard layout id"),
    user: str | None = USER,
    text: str | None = typer.Option(None, "--text", help="Type this text instead of a corpus"),
    seed: int | None = typer.Option(None, "--seed", help="Seed for reproducible text"),
    corpus: list[Path] | None = CORPUS,
    layout_file: list[Path] | None = LAYOUT_FILE,
    data_dir: Path | None = DATA_DIR,
    config_dir: Path | None = CONFIG_DIR,
) -> None:
    """Create a new typing session and print its target text."""
    from keyrace.cli.commands.session import start_command

    start_command(
        _request_options(
            language, difficulty, text_type, duration, length, mode, layout, user, text
        ),
        data_dir=data_dir,
        config_dir=config_dir,
        seed=seed,
        corpus_files=corpus,
        layout_files=layout_file,
    )


@app.command("type")
def type_(
    session_id: str = typer.Argument(...),
    transcript: str = typer.Argument(..., help="Everything typed so far"),
    at: str | None = AT,
    data_dir: Path | None = DATA_DIR,
    config_dir: Path | None = CONFIG_DIR,
) -> None:
    """Submit the current input for a session."""
    from keyrace.cli.commands.session import type_command

    type_command(session_id, transcript, at=at, data_dir=data_dir, config_dir=config_dir)


@app.command()
def pause(
    session_id: str = typer.Argument(...),
    at: str | None = AT,
    data_dir: Path | None = DATA_DIR,
    config_dir: Path | None = CONFIG_DIR,
) -> None:
    from keyrace.cli.commands.session import pause_command

    pause_command(session_id, at=at, data_dir=data_dir, config_dir=config_dir)


@app.command()
def resume(
    session_id: str = typer.Argument(...),
    at: str | None = AT,
    data_dir: Path | None = DATA_DIR,
    config_dir: Path | None = CONFIG_DIR,
) -> None:
    from keyrace.cli.commands.session import resume_command

    resume_command(session_id, at=at, data_dir=data_dir, config_dir=config_dir)


@app.command()
def complete(
    session_id: str = typer.Argument(...),
    final_input: str | None = typer.Option(None, "--input", help="Final transcript"),
    at: str | None = AT,
    data_dir: Path | None = DATA_DIR,
    config_dir: Path | None = CONFIG_DIR,
) -> None:
    """Finish a session and print its results."""
    from keyrace.cli.commands.session import complete_command

    complete_command(
        session_id, final_input=final_input, at=at, data_dir=data_dir, config_dir=config_dir
    )


@app.command()
def abandon(
    session_id: str = typer.Argument(...),
    at: str | None = AT,
    data_dir: Path | None = DATA_DIR,
    config_dir: Path | None = CONFIG_DIR,
) -> None:
    from keyrace.cli.commands.session import abandon_command

    abandon_command(session_id, at=at, data_dir=data_dir, config_dir=config_dir)


@app.command()
def show(
    session_id: str = typer.Argument(...),
    data_dir: Path | None = DATA_DIR,
    config_dir: Path | None = CONFIG_DIR,
) -> None:
    from keyrace.cli.commands.session import show_command

    show_command(session_id, data_dir=data_dir, config_dir=config_dir)


@app.command()
def sessions(
    user: str | None = USER,
    data_dir: Path | None = DATA_DIR,
    config_dir: Path | None = CONFIG_DIR,
) -> None:
    from keyrace.cli.commands.session import sessions_command

    sessions_command(user_id=user, data_dir=data_dir, config_dir=config_dir)


@app.command()
def run(
    language: str = typer.Option(DEFAULT_LANGUAGE, "--language", "-l"),
    difficulty: Difficulty = typer.Option(Difficulty.MEDIUM, "--difficulty", "-d"),
    text_type: TextType = typer.Option(TextType.WORDS, "--text-type", "-t"),
    duration: float = typer.Option(DEFAULT_DURATION_SECONDS, "--duration", help="Seconds"),
    length: int = typer.Option(DEFAULT_TEXT_LENGTH, "--length", help="Approximate characters"),
    mode: TypingMode = typer.Option(TypingMode.NORMAL, "--mode", "-m"),
    layout: str | None = typer.Option(None, "--layout", help="Keyboard layout id"),
    user: str | None = USER,
    text: str | None = typer.Option(None, "--text", help="Type this text instead of a corpus"),
    seed: int | None = typer.Option(None, "--seed", help="Seed for reproducible text"),
    resume: bool = typer.Option(False, "--resume", help="Continue the latest open session"),
    corpus: list[Path] | None = CORPUS,
    layout_file: list[Path] | None = LAYOUT_FILE,
    data_dir: Path | None = DATA_DIR,
    config_dir: Path | None = CONFIG_DIR,
) -> None:
    """Type a session interactively, line by line."""
    from keyrace.cli.commands.run import run_command

    run_command(
        _request_options(
            language, difficulty, text_type, duration, length, mode, layout, user, text
        ),
        resume=resume,
        data_dir=data_dir,
        config_dir=config_dir,
        seed=seed,
        corpus_files=corpus,
        layout_files=layout_file,
    )


@app.command()
def report(
    session_id: str = typer.Argument(...),
    format: str = typer.Option("html", "--format", "-f"),
    output: Path | None = typer.Option(None, "--output", "-o"),
    overwrite: bool = typer.Option(False, "--overwrite"),
    template: Path | None = typer.Option(
        None,
        "--template",
        exists=True,
        readable=True,
        help="Custom Jinja2 template for HTML reports",
    ),
    data_dir: Path | None = DATA_DIR,
    config_dir: Path | None = CONFIG_DIR,
) -> None:
    from keyrace.cli.commands.report import report_command

    report_command(
        session_id=session_id,
        format=format,
        output_path=output,
        overwrite=overwrite,
        template_path=template,
        data_dir=data_dir,
        config_dir=config_dir,
    )


@app.command()
def layouts(
    language: str = typer.Option(DEFAULT_LANGUAGE, "--language", "-l"),
    user: str | None = USER,
    data_dir: Path | None = DATA_DIR,
    config_dir: Path | None = CONFIG_DIR,
) -> None:
    """List keyboard layouts for a language."""
    from keyrace.cli.commands.layouts import layouts_command

    layouts_command(language, user_id=user, data_dir=data_dir, config_dir=config_dir)


@app.command()
def prefer(
    layout_id: str = typer.Argument(...),
    user: str = typer.Option(..., "--user", "-u"),
    language: str = typer.Option(DEFAULT_LANGUAGE, "--language", "-l"),
    data_dir: Path | None = DATA_DIR,
    config_dir: Path | None = CONFIG_DIR,
) -> None:
    """Remember a user's preferred layout for a language."""
    from keyrace.cli.commands.layouts import prefer_command

    prefer_command(layout_id, user, language, data_dir=data_dir, config_dir=config_dir)


@app.command()
def history(
    user: str = typer.Option(..., "--user", "-u"),
    data_dir: Path | None = DATA_DIR,
    config_dir: Path | None = CONFIG_DIR,
) -> None:
    from keyrace.cli.commands.history import history_command

    history_command(user, data_dir=data_dir, config_dir=config_dir)


@app.command()
def validate(
    path: Path = typer.Argument(..., exists=True, readable=True),
    kind: str = typer.Option("corpus", "--kind", "-k", help="corpus or layouts"),
) -> None:
    from keyrace.cli.commands.validate import validate_command

    validate_command(path, kind)


@app.command()
def info(
    data_dir: Path | None = DATA_DIR,
    config_dir: Path | None = CONFIG_DIR,
) -> None:
    from keyrace.cli.commands.info import info_command

    info_command(data_dir=data_dir, config_dir=config_dir)
