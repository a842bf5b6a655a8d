"""Result report generators."""

from keyrace.adapters.reporters.html import HtmlReporter
from keyrace.adapters.reporters.json import JsonReporter
from keyrace.adapters.reporters.markdown import MarkdownReporter

__all__ = ["HtmlReporter", "JsonReporter", "MarkdownReporter"]
