from __future__ import annotations

from pathlib import Path

import pytest

from keyrace.adapters.layouts.registry import YamlLayoutRegistry
from keyrace.adapters.text.provider import CorpusTextProvider
from keyrace.core.errors import ContentUnavailable
from keyrace.core.models.documents import KeyboardLayout
from keyrace.core.models.enums import Difficulty, TextType


def test_generate_words_reaches_length(small_corpus):
    provider = CorpusTextProvider(corpora=[small_corpus], seed=7)
    text = provider.generate("en", Difficulty.EASY, TextType.WORDS, 20)
    assert len(text) >= 20
    assert set(text.split()) <= {"cat", "dog", "sun"}
    assert "  " not in text


def test_generate_is_reproducible_with_seed(small_corpus):
    first = CorpusTextProvider(corpora=[small_corpus], seed=3)
    second = CorpusTextProvider(corpora=[small_corpus], seed=3)
    args = ("en", Difficulty.MEDIUM, TextType.WORDS, 40)
    assert first.generate(*args) == second.generate(*args)


def test_generate_sentences(small_corpus):
    provider = CorpusTextProvider(corpora=[small_corpus], seed=1)
    text = provider.generate("en", Difficulty.EASY, TextType.SENTENCES, 5)
    assert text in {"the cat sat", "a dog ran"}


def test_generate_character_drills(small_corpus):
    provider = CorpusTextProvider(corpora=[small_corpus], seed=1)
    text = provider.generate("en", Difficulty.HARD, TextType.CHARACTERS, 30)
    assert set(text.replace(" ", "")) <= set("asdfjkl")
    assert all(2 <= len(word) <= 5 for word in text.split())


def test_generate_unknown_language(small_corpus):
    provider = CorpusTextProvider(corpora=[small_corpus])
    with pytest.raises(ContentUnavailable):
        provider.generate("fr", Difficulty.EASY, TextType.WORDS, 10)


def test_generate_empty_pool(small_corpus):
    provider = CorpusTextProvider(corpora=[small_corpus])
    with pytest.raises(ContentUnavailable):
        provider.generate("en", Difficulty.HARD, TextType.WORDS, 10)


def test_generate_rejects_non_positive_length(small_corpus):
    provider = CorpusTextProvider(corpora=[small_corpus])
    with pytest.raises(ValueError):
        provider.generate("en", Difficulty.EASY, TextType.WORDS, 0)


def test_generate_filters_to_layout_keys(small_corpus):
    home_row = KeyboardLayout(id="home", name="Home", language="en", rows=["acdgnostu"])
    provider = CorpusTextProvider(
        corpora=[small_corpus], layouts=YamlLayoutRegistry(layouts=[home_row]), seed=5
    )
    text = provider.generate("en", Difficulty.EASY, TextType.WORDS, 30, layout_id="home")
    assert set(text.split()) <= {"cat", "dog", "sun"}
    medium = provider.generate("en", Difficulty.MEDIUM, TextType.WORDS, 30, layout_id="home")
    # No medium word fits the layout, so the full pool is used.
    assert set(medium.split()) <= {"apple", "queen", "zebra"}


def test_generate_drops_untypeable_words(small_corpus):
    limited = KeyboardLayout(id="limited", name="Limited", language="en", rows=["catdo"])
    provider = CorpusTextProvider(
        corpora=[small_corpus], layouts=YamlLayoutRegistry(layouts=[limited]), seed=2
    )
    text = provider.generate("en", Difficulty.EASY, TextType.WORDS, 30, layout_id="limited")
    assert set(text.split()) == {"cat"}


def test_builtin_corpus_generates_text():
    provider = CorpusTextProvider(seed=11)
    assert provider.languages == ["en", "lis", "my"]
    text = provider.generate("en", Difficulty.MEDIUM, TextType.WORDS, 100)
    assert len(text) >= 100


def test_with_extra_files_adds_languages(tmp_path: Path):
    path = tmp_path / "german.yaml"
    path.write_text(
        "corpus:\n  language: de\n  name: Deutsch\n  words:\n    easy: [hund, katze]\n",
        encoding="utf-8",
    )
    provider = CorpusTextProvider.with_extra_files([path], seed=1)
    assert provider.languages == ["de", "en", "lis", "my"]
    text = provider.generate("de", Difficulty.EASY, TextType.WORDS, 10)
    assert set(text.split()) <= {"hund", "katze"}
