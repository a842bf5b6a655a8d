from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from keyrace.core.models.enums import Difficulty, TextType


class TextCorpus(BaseModel):
    """Word, sentence and character pools for one language."""

    model_config = ConfigDict(extra="forbid")

    language: str
    name: str
    words: dict[Difficulty, list[str]] = Field(default_factory=dict)
    sentences: dict[Difficulty, list[str]] = Field(default_factory=dict)
    characters: str = ""

    def pool(self, difficulty: Difficulty, text_type: TextType) -> list[str]:
        if text_type == TextType.CHARACTERS:
            return [char for char in self.characters if not char.isspace()]
        source = self.sentences if text_type == TextType.SENTENCES else self.words
        return [entry for entry in source.get(difficulty, []) if entry.strip()]


class KeyboardLayout(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str
    name: str
    language: str
    variant: str = "standard"
    rows: list[str]
    is_default: bool = False

    @field_validator("rows")
    @classmethod
    def _rows_not_empty(cls, rows: list[str]) -> list[str]:
        if not any(row.strip() for row in rows):
            raise ValueError("layout must define at least one non-empty row")
        return rows

    @property
    def keys(self) -> frozenset[str]:
        return frozenset(char for row in self.rows for char in row if not char.isspace())


class CorpusDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    corpus: TextCorpus

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> "CorpusDocument":
        return cls.model_validate(raw)


class LayoutsDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    layouts: list[KeyboardLayout] = Field(default_factory=list)

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> "LayoutsDocument":
        return cls.model_validate(raw)
