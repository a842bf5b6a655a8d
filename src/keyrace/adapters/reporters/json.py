from __future__ import annotations

import msgspec

from keyrace.adapters.reporters.base import ReporterBase
from keyrace.adapters.reporters.stats import summarize
from keyrace.core.models.session import Session


class JsonReporter(ReporterBase):
    content_type = "application/json"
    file_extension = "json"

    def __init__(self) -> None:
        self._encoder = msgspec.json.Encoder()

    def generate(self, session: Session) -> bytes:
        payload = {
            "session": msgspec.to_builtins(session),
            "summary": summarize(session),
        }
        return self._encoder.encode(payload)
