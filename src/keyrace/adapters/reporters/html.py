from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, PackageLoader, select_autoescape

from keyrace.adapters.reporters.base import ReporterBase
from keyrace.adapters.reporters.stats import mistake_rows, require_results, summarize
from keyrace.core.models.session import Session

BUNDLED_TEMPLATE = "report.html.j2"


def _environment(loader: PackageLoader | FileSystemLoader) -> Environment:
    # Custom templates may use any suffix; escape them all.
    return Environment(
        loader=loader,
        autoescape=select_autoescape(enabled_extensions=("html", "j2"), default=True),
    )


@lru_cache(maxsize=1)
def _bundled_environment() -> Environment:
    return _environment(PackageLoader("keyrace", "templates"))


class HtmlReporter(ReporterBase):
    """Standalone HTML page for one completed session.

    A custom template gets the same context as the bundled one: ``session``,
    ``results``, ``summary``, ``mistakes`` and ``fingers``.
    """

    content_type = "text/html"
    file_extension = "html"

    def __init__(self, template_path: Path | None = None) -> None:
        self._template_path = template_path

    def _render(self, **context: object) -> str:
        if self._template_path is None:
            template = _bundled_environment().get_template(BUNDLED_TEMPLATE)
        else:
            env = _environment(FileSystemLoader(self._template_path.parent))
            template = env.get_template(self._template_path.name)
        return template.render(**context)

    def generate(self, session: Session) -> bytes:
        results = require_results(session)
        page = self._render(
            session=session,
            results=results,
            summary=summarize(session),
            mistakes=mistake_rows(session),
            fingers=sorted(results.finger_utilization.items()),
        )
        return page.encode("utf-8")
