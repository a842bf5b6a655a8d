from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import fastjsonschema  # type: ignore[import-untyped]
from fastjsonschema import JsonSchemaException


@dataclass(frozen=True)
class ValidationIssue:
    path: str
    message: str


_STRING_LIST: dict[str, object] = {"type": "array", "items": {"type": "string"}}

_DIFFICULTY_POOLS: dict[str, object] = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "easy": _STRING_LIST,
        "medium": _STRING_LIST,
        "hard": _STRING_LIST,
    },
}

CORPUS_SCHEMA: dict[str, object] = {
    "type": "object",
    "required": ["corpus"],
    "additionalProperties": False,
    "properties": {
        "corpus": {
            "type": "object",
            "required": ["language", "name"],
            "additionalProperties": False,
            "properties": {
                "language": {"type": "string", "minLength": 1},
                "name": {"type": "string"},
                "words": _DIFFICULTY_POOLS,
                "sentences": _DIFFICULTY_POOLS,
                "characters": {"type": "string"},
            },
        }
    },
}

LAYOUTS_SCHEMA: dict[str, object] = {
    "type": "object",
    "required": ["layouts"],
    "additionalProperties": False,
    "properties": {
        "layouts": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["id", "name", "language", "rows"],
                "additionalProperties": False,
                "properties": {
                    "id": {"type": "string", "minLength": 1},
                    "name": {"type": "string"},
                    "language": {"type": "string", "minLength": 1},
                    "variant": {"type": "string"},
                    "rows": _STRING_LIST,
                    "is_default": {"type": "boolean"},
                },
            },
        }
    },
}

_validators: dict[str, Callable[[Any], Any]] = {
    "corpus": fastjsonschema.compile(CORPUS_SCHEMA),
    "layouts": fastjsonschema.compile(LAYOUTS_SCHEMA),
}


def validate_payload(payload: dict[str, object], kind: str) -> list[ValidationIssue]:
    validator = _validators.get(kind)
    if validator is None:
        raise ValueError(f"Unknown document kind: {kind}")
    try:
        validator(payload)
    except JsonSchemaException as exc:
        path = ".".join(str(part) for part in exc.path) if exc.path else ""
        return [ValidationIssue(path=path, message=exc.message)]
    return []
