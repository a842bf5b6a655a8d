from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt

from keyrace.core.models.session import Session

PAUSE_COMMAND = ":pause"
QUIT_COMMAND = ":quit"
ABANDON_COMMAND = ":abandon"


def show_target(session: Session, console: Console) -> None:
    console.print(f"\n[bold]Type the following text[/bold] ({session.duration_seconds:.0f}s):")
    console.print(escape(session.target_text))
    console.print(
        f"[dim]Enter text line by line. Commands: {PAUSE_COMMAND}, "
        f"{QUIT_COMMAND} (save and exit), {ABANDON_COMMAND}.[/dim]"
    )


def ask_line(session: Session, console: Console) -> str:
    """Prompt for the next chunk of typed text, showing the live figures."""
    stats = session.live_stats
    prompt = (
        f"[dim]{session.time_left:.0f}s left | {stats.wpm} wpm | "
        f"{stats.accuracy}% | {stats.progress:.0f}%[/dim]"
    )
    return Prompt.ask(prompt, default="", show_default=False, console=console)


def wait_for_resume(console: Console) -> None:
    Prompt.ask("Paused. Press enter to resume", default="", show_default=False, console=console)


def append_chunk(transcript: str, chunk: str) -> str:
    if not transcript or transcript.endswith(" "):
        return transcript + chunk
    return f"{transcript} {chunk}"
