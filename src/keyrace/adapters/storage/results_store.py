from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path

import msgspec
import structlog

from keyrace.core.models.session import TypingResults
from keyrace.core.utils import atomic_write_bytes

log: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

CORRUPT_SUFFIX = ".corrupt"
_UNDECODABLE = (msgspec.DecodeError, ValueError, TypeError)


class ResultRecord(msgspec.Struct, frozen=True):
    user_id: str
    session_id: str
    recorded_at: datetime
    results: TypingResults


class ResultsStore:
    """Statistics sink backed by a single JSON file of result records."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._encoder = msgspec.json.Encoder()
        self._decoder = msgspec.json.Decoder(list[ResultRecord])

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> list[ResultRecord]:
        if not self._path.exists():
            return []
        try:
            return self._decoder.decode(self._path.read_bytes())
        except (OSError, *_UNDECODABLE):
            log.warning("results_unreadable", path=str(self._path))
            return []

    def _load_for_update(self) -> list[ResultRecord]:
        """Records to rewrite; an undecodable file is moved aside, never overwritten."""
        if not self._path.exists():
            return []
        data = self._path.read_bytes()
        try:
            return self._decoder.decode(data)
        except _UNDECODABLE:
            corrupt = self._path.with_name(self._path.name + CORRUPT_SUFFIX)
            os.replace(self._path, corrupt)
            log.warning("results_moved_aside", path=str(self._path), moved_to=str(corrupt))
            return []

    def record(
        self,
        user_id: str,
        session_id: str,
        results: TypingResults,
        recorded_at: datetime,
    ) -> None:
        records = [
            record for record in self._load_for_update() if record.session_id != session_id
        ]
        records.append(
            ResultRecord(
                user_id=user_id,
                session_id=session_id,
                recorded_at=recorded_at,
                results=results,
            )
        )
        atomic_write_bytes(self._path, self._encoder.encode(records))
        log.debug("results_recorded", user_id=user_id, session_id=session_id)

    def history(self, user_id: str) -> list[ResultRecord]:
        records = [record for record in self._load() if record.user_id == user_id]
        records.sort(key=lambda record: record.recorded_at)
        return records
