from __future__ import annotations

from keyrace.adapters.reporters.base import ReporterBase
from keyrace.adapters.reporters.stats import mistake_rows, require_results, summarize
from keyrace.core.models.session import Session


def _escape_cell(value: str) -> str:
    if value == " ":
        return "(space)"
    return value.replace("|", "\\|")


class MarkdownReporter(ReporterBase):
    content_type = "text/markdown"
    file_extension = "md"

    def generate(self, session: Session) -> bytes:
        results = require_results(session)
        summary = summarize(session)
        lines = [
            f"# Typing session {session.id}",
            "",
            f"Language: {session.language}",
            f"Difficulty: {session.difficulty.value}",
            f"Mode: {session.mode.value}",
            f"Layout: {session.layout_id or 'unknown'}",
            "",
            "## Results",
            "",
            "| Metric | Value |",
            "| --- | --- |",
        ]
        for key, value in summary.items():
            lines.append(f"| {key.replace('_', ' ')} | {value} |")

        if results.finger_utilization:
            lines.extend(["", "## Finger utilization", "", "| Finger | Share (%) |", "| --- | --- |"])
            for finger, share in results.finger_utilization.items():
                lines.append(f"| {finger} | {share} |")

        rows = mistake_rows(session)
        if rows:
            lines.extend(
                ["", "## Mistakes", "", "| Position | Expected | Typed |", "| --- | --- | --- |"]
            )
            for row in rows:
                lines.append(
                    "| "
                    + " | ".join(
                        [
                            str(row["position"]),
                            _escape_cell(str(row["expected"])),
                            _escape_cell(str(row["actual"])),
                        ]
                    )
                    + " |"
                )

        lines.append("")
        return "\n".join(lines).encode("utf-8")
