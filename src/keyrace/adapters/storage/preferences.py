from __future__ import annotations

from pathlib import Path
from time import time

import msgspec

from keyrace.core.utils import atomic_write_bytes


class Preferences(msgspec.Struct):
    # user id -> language -> layout id
    layouts: dict[str, dict[str, str]] = msgspec.field(default_factory=dict)
    updated_at: float = 0.0


class PreferencesStore:
    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Preferences:
        if not self._path.exists():
            return Preferences()
        try:
            return msgspec.json.decode(self._path.read_bytes(), type=Preferences)
        except (OSError, msgspec.DecodeError, TypeError, ValueError):
            return Preferences()

    def preferred_layout(self, user_id: str, language: str) -> str | None:
        return self.load().layouts.get(user_id, {}).get(language)

    def set_preferred_layout(self, user_id: str, language: str, layout_id: str) -> None:
        preferences = self.load()
        preferences.layouts.setdefault(user_id, {})[language] = layout_id
        preferences.updated_at = time()
        atomic_write_bytes(self._path, msgspec.json.encode(preferences))
