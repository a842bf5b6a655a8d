from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from keyrace.adapters.loaders.yaml_loader import YamlLayoutLoader, read_resource
from keyrace.adapters.storage.preferences import PreferencesStore
from keyrace.core.errors import LayoutUnavailable
from keyrace.core.models.documents import KeyboardLayout


def builtin_layouts() -> list[KeyboardLayout]:
    return YamlLayoutLoader().load_bytes(read_resource("keyrace.data", "layouts.yaml"))


class YamlLayoutRegistry:
    def __init__(
        self,
        layouts: Iterable[KeyboardLayout] | None = None,
        preferences: PreferencesStore | None = None,
    ) -> None:
        self._layouts: dict[str, KeyboardLayout] = {}
        for layout in layouts if layouts is not None else builtin_layouts():
            if layout.id in self._layouts:
                raise ValueError(f"Duplicate keyboard layout id: {layout.id}")
            self._layouts[layout.id] = layout
        self._preferences = preferences

    @classmethod
    def with_extra_files(
        cls, paths: Iterable[Path], preferences: PreferencesStore | None = None
    ) -> YamlLayoutRegistry:
        loader = YamlLayoutLoader()
        layouts = builtin_layouts()
        for path in paths:
            layouts.extend(loader.load(path))
        return cls(layouts=layouts, preferences=preferences)

    def find_by_id(self, layout_id: str) -> KeyboardLayout | None:
        return self._layouts.get(layout_id)

    def get_available_layouts(self, language: str) -> list[KeyboardLayout]:
        matches = [layout for layout in self._layouts.values() if layout.language == language]
        # Defaults first, then by name, so index 0 is the fallback choice.
        matches.sort(key=lambda layout: (not layout.is_default, layout.name))
        return matches

    def get_user_preferred_layout(self, user_id: str, language: str) -> str | None:
        if self._preferences is None:
            return None
        return self._preferences.preferred_layout(user_id, language)

    def set_user_preferred_layout(self, user_id: str, language: str, layout_id: str) -> None:
        layout = self.find_by_id(layout_id)
        if layout is None:
            raise LayoutUnavailable(f"Keyboard layout not found: {layout_id}")
        if layout.language != language:
            raise LayoutUnavailable(
                f"Keyboard layout {layout_id} is for {layout.language}, not {language}"
            )
        if self._preferences is None:
            raise ValueError("No preferences store configured.")
        self._preferences.set_preferred_layout(user_id, language, layout_id)
