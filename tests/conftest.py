from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path

import pytest

from keyrace.core.errors import ContentUnavailable, SessionNotFound
from keyrace.core.models.documents import KeyboardLayout, TextCorpus
from keyrace.core.models.enums import Difficulty, TextType
from keyrace.core.models.session import Session, SessionSummary, TypingResults

T0 = datetime(2024, 5, 1, 12, 0, 0, tzinfo=UTC)

# 25 characters, 5 words.
FIVE_WORDS = "quick brown foxes jump hi"


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    """Automatically add markers based on test location.

    - tests/unit/ -> @pytest.mark.unit
    - tests/integration/ -> @pytest.mark.integration
    - tests/e2e/ -> @pytest.mark.e2e
    """
    for item in items:
        path = str(item.fspath)
        # Skip if already has the marker (manually specified)
        existing_markers = {m.name for m in item.iter_markers()}

        if "/unit/" in path and "unit" not in existing_markers:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in path and "integration" not in existing_markers:
            item.add_marker(pytest.mark.integration)
        elif "/e2e/" in path and "e2e" not in existing_markers:
            item.add_marker(pytest.mark.e2e)


class InMemoryStorage:
    def __init__(self) -> None:
        self.sessions: dict[str, Session] = {}
        self.writes = 0

    def save(self, session: Session) -> Path | None:
        self.sessions[session.id] = session
        self.writes += 1
        return None

    def find_by_id(self, session_id: str) -> Session | None:
        return self.sessions.get(session_id)

    def update(self, session: Session) -> Path | None:
        if session.id not in self.sessions:
            raise SessionNotFound(session.id)
        return self.save(session)

    def list_sessions(self, user_id: str | None = None) -> Sequence[SessionSummary]:
        return [
            SessionSummary(
                id=session.id,
                user_id=session.user_id,
                status=session.status,
                created_at=session.created_at,
                language=session.language,
            )
            for session in self.sessions.values()
            if user_id is None or session.user_id == user_id
        ]


class FixedTextProvider:
    def __init__(self, text: str = FIVE_WORDS) -> None:
        self.text = text
        self.calls: list[dict[str, object]] = []

    def generate(
        self,
        language: str,
        difficulty: Difficulty,
        text_type: TextType,
        length: int,
        layout_id: str | None = None,
        user_id: str | None = None,
    ) -> str:
        self.calls.append({"language": language, "layout_id": layout_id, "length": length})
        if not self.text:
            raise ContentUnavailable(f"No content for {language}")
        return self.text


class StaticLayouts:
    def __init__(
        self,
        layouts: Sequence[KeyboardLayout],
        preferred: dict[tuple[str, str], str] | None = None,
    ) -> None:
        self._layouts = {layout.id: layout for layout in layouts}
        self._preferred = preferred or {}

    def find_by_id(self, layout_id: str) -> KeyboardLayout | None:
        return self._layouts.get(layout_id)

    def get_available_layouts(self, language: str) -> Sequence[KeyboardLayout]:
        return [layout for layout in self._layouts.values() if layout.language == language]

    def get_user_preferred_layout(self, user_id: str, language: str) -> str | None:
        return self._preferred.get((user_id, language))


class RecordingSink:
    def __init__(self) -> None:
        self.records: list[tuple[str, str, TypingResults, datetime]] = []

    def record(
        self,
        user_id: str,
        session_id: str,
        results: TypingResults,
        recorded_at: datetime,
    ) -> None:
        self.records.append((user_id, session_id, results, recorded_at))


@pytest.fixture
def qwerty() -> KeyboardLayout:
    return KeyboardLayout(
        id="qwerty",
        name="QWERTY",
        language="en",
        rows=["1234567890-=", "qwertyuiop[]", "asdfghjkl;'", "zxcvbnm,./"],
        is_default=True,
    )


@pytest.fixture
def dvorak() -> KeyboardLayout:
    return KeyboardLayout(
        id="dvorak",
        name="Dvorak",
        language="en",
        rows=["1234567890[]", "',.pyfgcrl/=", "aoeuidhtns-", ";qjkxbmwvz"],
    )


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def text_provider() -> FixedTextProvider:
    return FixedTextProvider()


@pytest.fixture
def layouts(qwerty, dvorak) -> StaticLayouts:
    return StaticLayouts([qwerty, dvorak], preferred={("ada", "en"): "dvorak"})


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def small_corpus() -> TextCorpus:
    return TextCorpus(
        language="en",
        name="Tiny",
        words={
            Difficulty.EASY: ["cat", "dog", "sun"],
            Difficulty.MEDIUM: ["apple", "queen", "zebra"],
        },
        sentences={Difficulty.EASY: ["the cat sat", "a dog ran"]},
        characters="asdf jkl",
    )


@pytest.fixture
def idle_session() -> Session:
    return Session(
        id="a" * 32,
        target_text=FIVE_WORDS,
        duration_seconds=120.0,
        time_left=120.0,
        created_at=T0,
        user_id="ada",
        layout_id="qwerty",
    )


@pytest.fixture
def corpus_data() -> dict[str, object]:
    return {
        "corpus": {
            "language": "en",
            "name": "Tiny",
            "words": {"easy": ["cat", "dog"], "hard": ["rhythm"]},
            "sentences": {"easy": ["the cat sat"]},
            "characters": "asdf",
        }
    }


@pytest.fixture
def layouts_data() -> dict[str, object]:
    return {
        "layouts": [
            {
                "id": "qwerty",
                "name": "QWERTY",
                "language": "en",
                "rows": ["qwertyuiop", "asdfghjkl", "zxcvbnm"],
                "is_default": True,
            }
        ]
    }


@pytest.fixture
def make_layouts() -> type[StaticLayouts]:
    return StaticLayouts


@pytest.fixture
def make_text_provider() -> type[FixedTextProvider]:
    return FixedTextProvider
