from __future__ import annotations

import time
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

import msgspec
import structlog

from keyrace.core.errors import SessionNotFound
from keyrace.core.models.enums import SessionStatus
from keyrace.core.models.session import Session, SessionSummary, decode_session, encode_session
from keyrace.core.utils import atomic_write_bytes, is_session_id

log: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

INDEX_FILE = "session-index.json"

_OPEN_STATUSES = frozenset({SessionStatus.IDLE, SessionStatus.ACTIVE, SessionStatus.PAUSED})
_UNREADABLE = (OSError, msgspec.DecodeError, ValueError, TypeError)


class SessionIndexEntry(msgspec.Struct):
    id: str
    user_id: str | None
    language: str
    status: SessionStatus
    created_at: datetime
    updated_at: float

    @classmethod
    def of(cls, session: Session, updated_at: float) -> SessionIndexEntry:
        return cls(
            id=session.id,
            user_id=session.user_id,
            language=session.language,
            status=session.status,
            created_at=session.created_at,
            updated_at=updated_at,
        )

    def summary(self) -> SessionSummary:
        return SessionSummary(
            id=self.id,
            user_id=self.user_id,
            status=self.status,
            created_at=self.created_at,
            language=self.language,
        )

    def belongs_to(self, user_id: str | None) -> bool:
        return user_id is None or self.user_id == user_id


class SessionStore:
    """Sessions as ``session-<id>.json`` files next to an index of summaries.

    The index is a cache: when it is missing or corrupt it is rebuilt by
    decoding every session file. Writes are last-write-wins.
    """

    def __init__(self, base_dir: Path) -> None:
        base_dir.mkdir(parents=True, exist_ok=True)
        self._base_dir = base_dir
        self._encoder = msgspec.json.Encoder()
        self._index_decoder = msgspec.json.Decoder(list[SessionIndexEntry])

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    @property
    def index_path(self) -> Path:
        return self._base_dir / INDEX_FILE

    def path_for(self, session_id: str) -> Path | None:
        """File holding ``session_id``, or None when the id is malformed."""
        if not is_session_id(session_id):
            return None
        return self._base_dir / f"session-{session_id}.json"

    def _read_index(self) -> dict[str, SessionIndexEntry] | None:
        if not self.index_path.exists():
            return None
        try:
            entries = self._index_decoder.decode(self.index_path.read_bytes())
        except _UNREADABLE:
            log.info("session_index_rebuild", base_dir=str(self._base_dir))
            return None
        return {entry.id: entry for entry in entries}

    def _write_index(self, entries: Iterable[SessionIndexEntry]) -> None:
        try:
            atomic_write_bytes(self.index_path, self._encoder.encode(list(entries)))
        except OSError:
            log.warning("session_index_write_failed", base_dir=str(self._base_dir))

    def _rebuild_index(self) -> dict[str, SessionIndexEntry]:
        entries: dict[str, SessionIndexEntry] = {}
        for path in sorted(self._base_dir.glob("session-*.json")):
            if path.name == INDEX_FILE:
                continue
            try:
                session = decode_session(path.read_bytes())
            except _UNREADABLE:
                log.warning("session_file_skipped", path=str(path))
                continue
            entries[session.id] = SessionIndexEntry.of(session, path.stat().st_mtime)
        return entries

    def _index(self) -> dict[str, SessionIndexEntry]:
        entries = self._read_index()
        if entries is None:
            entries = self._rebuild_index()
            self._write_index(entries.values())
        return entries

    def save(self, session: Session) -> Path:
        path = self.path_for(session.id)
        if path is None:
            raise ValueError(f"Invalid session id: {session.id}")
        atomic_write_bytes(path, encode_session(session))
        entries = self._index()
        entries[session.id] = SessionIndexEntry.of(session, time.time())
        self._write_index(entries.values())
        return path

    def update(self, session: Session) -> Path:
        path = self.path_for(session.id)
        if path is None or not path.exists():
            raise SessionNotFound(session.id)
        return self.save(session)

    def find_by_id(self, session_id: str) -> Session | None:
        path = self.path_for(session_id)
        if path is None or not path.exists():
            return None
        try:
            return decode_session(path.read_bytes())
        except _UNREADABLE:
            log.warning("session_unreadable", session_id=session_id)
            return None

    def list_sessions(self, user_id: str | None = None) -> list[SessionSummary]:
        """Summaries for ``user_id`` (every user when None), newest first."""
        entries = [entry for entry in self._index().values() if entry.belongs_to(user_id)]
        entries.sort(key=lambda entry: entry.created_at, reverse=True)
        return [entry.summary() for entry in entries]

    def find_latest_open(self, user_id: str | None = None) -> Session | None:
        """Most recently touched session that can still take input."""
        open_entries = [
            entry
            for entry in self._index().values()
            if entry.status in _OPEN_STATUSES and entry.belongs_to(user_id)
        ]
        for entry in sorted(open_entries, key=lambda entry: entry.updated_at, reverse=True):
            session = self.find_by_id(entry.id)
            if session is not None:
                return session
        return None
