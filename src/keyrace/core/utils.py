from __future__ import annotations

import os
import re
import tempfile
from datetime import UTC, datetime
from pathlib import Path

_SESSION_ID = re.compile(r"[a-f0-9]{32}")


def is_session_id(value: str) -> bool:
    return bool(_SESSION_ID.fullmatch(value))


def parse_timestamp(value: str | None) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC, ``None`` means now."""
    if not value:
        return datetime.now(UTC)
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as exc:
        raise ValueError(f"Invalid timestamp: {value}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """Write ``data`` to a sibling temp file, then rename it over ``path``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
    ) as handle:
        temp_path = Path(handle.name)
    try:
        temp_path.write_bytes(data)
        os.replace(temp_path, path)
    except OSError:
        temp_path.unlink(missing_ok=True)
        raise
