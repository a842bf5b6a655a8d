from __future__ import annotations

import random
from collections.abc import Iterable
from pathlib import Path

import structlog

from keyrace.adapters.loaders.yaml_loader import YamlCorpusLoader, read_resource
from keyrace.core.errors import ContentUnavailable
from keyrace.core.models.documents import TextCorpus
from keyrace.core.models.enums import Difficulty, TextType
from keyrace.core.protocols import LayoutRegistry

log: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

BUILTIN_CORPORA = ("english.yaml", "lisu.yaml", "myanmar.yaml")

# Pseudo-word size range for character drills.
_DRILL_MIN = 2
_DRILL_MAX = 5


def builtin_corpora() -> list[TextCorpus]:
    loader = YamlCorpusLoader()
    return [
        loader.load_bytes(read_resource("keyrace.data.corpora", name)) for name in BUILTIN_CORPORA
    ]


class CorpusTextProvider:
    """Builds target text by sampling a language corpus.

    When a layout registry is supplied, words that cannot be typed on the
    requested layout are dropped from the pool; if that leaves nothing, the
    unfiltered pool is used.
    """

    def __init__(
        self,
        corpora: Iterable[TextCorpus] | None = None,
        layouts: LayoutRegistry | None = None,
        seed: int | None = None,
    ) -> None:
        self._corpora = {corpus.language: corpus for corpus in (corpora or builtin_corpora())}
        self._layouts = layouts
        self._random = random.Random(seed)

    @classmethod
    def with_extra_files(
        cls,
        paths: Iterable[Path],
        layouts: LayoutRegistry | None = None,
        seed: int | None = None,
    ) -> CorpusTextProvider:
        loader = YamlCorpusLoader()
        corpora = builtin_corpora() + [loader.load(path) for path in paths]
        return cls(corpora=corpora, layouts=layouts, seed=seed)

    @property
    def languages(self) -> list[str]:
        return sorted(self._corpora)

    def _typeable(self, pool: list[str], layout_id: str | None) -> list[str]:
        if self._layouts is None or layout_id is None:
            return pool
        layout = self._layouts.find_by_id(layout_id)
        if layout is None:
            return pool
        keys = layout.keys
        filtered = [entry for entry in pool if set(entry.lower().replace(" ", "")) <= keys]
        if not filtered:
            log.debug("layout_filter_empty", layout_id=layout_id, pool_size=len(pool))
            return pool
        return filtered

    def _drill_word(self, characters: list[str]) -> str:
        size = self._random.randint(_DRILL_MIN, _DRILL_MAX)
        return "".join(self._random.choice(characters) for _ in range(size))

    def generate(
        self,
        language: str,
        difficulty: Difficulty,
        text_type: TextType,
        length: int,
        layout_id: str | None = None,
        user_id: str | None = None,
    ) -> str:
        if length <= 0:
            raise ValueError("Requested text length must be positive.")
        corpus = self._corpora.get(language)
        if corpus is None:
            raise ContentUnavailable(f"No corpus for language: {language}")
        pool = self._typeable(corpus.pool(Difficulty(difficulty), TextType(text_type)), layout_id)
        if not pool:
            raise ContentUnavailable(
                f"No {text_type} content for language {language} at difficulty {difficulty}"
            )

        parts: list[str] = []
        size = 0
        while size < length:
            if text_type == TextType.CHARACTERS:
                part = self._drill_word(pool)
            else:
                part = self._random.choice(pool)
            parts.append(part)
            size += len(part) + (1 if len(parts) > 1 else 0)
        text = " ".join(parts)
        log.debug(
            "text_generated",
            language=language,
            text_type=str(text_type),
            characters=len(text),
            user_id=user_id,
        )
        return text
