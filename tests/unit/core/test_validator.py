from __future__ import annotations

import pytest

from keyrace.core.validator import validate_payload


def test_validate_payload_accepts_corpus(corpus_data):
    assert validate_payload(corpus_data, "corpus") == []


def test_validate_payload_accepts_layouts(layouts_data):
    assert validate_payload(layouts_data, "layouts") == []


def test_validate_payload_rejects_missing_root():
    issues = validate_payload({"name": "bad"}, "corpus")
    assert issues


def test_validate_payload_rejects_extra_fields(corpus_data):
    payload = dict(corpus_data)
    payload["extra"] = "nope"
    assert validate_payload(payload, "corpus")


def test_validate_payload_rejects_unknown_difficulty(corpus_data):
    corpus = dict(corpus_data["corpus"])
    corpus["words"] = {"impossible": ["x"]}
    assert validate_payload({"corpus": corpus}, "corpus")


def test_validate_payload_rejects_layout_without_rows(layouts_data):
    layout = dict(layouts_data["layouts"][0])
    del layout["rows"]
    issues = validate_payload({"layouts": [layout]}, "layouts")
    assert issues
    assert "rows" in issues[0].message


def test_validate_payload_unknown_kind():
    with pytest.raises(ValueError, match="Unknown document kind"):
        validate_payload({}, "lessons")
