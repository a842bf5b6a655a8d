from __future__ import annotations

from importlib import resources
from pathlib import Path
from typing import cast

from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from keyrace.core.models.documents import (
    CorpusDocument,
    KeyboardLayout,
    LayoutsDocument,
    TextCorpus,
)
from keyrace.core.validator import ValidationIssue, validate_payload


def read_resource(package: str, name: str) -> bytes:
    return resources.files(package).joinpath(name).read_bytes()


def _format_issues(issues: list[ValidationIssue]) -> str:
    return "; ".join(f"{issue.path or 'document'}: {issue.message}" for issue in issues)


class _YamlDocumentLoader:
    kind = ""
    document_type: type[CorpusDocument] | type[LayoutsDocument]

    def __init__(self) -> None:
        self._yaml = YAML(typ="safe")

    def _parse_bytes(self, data: bytes) -> dict[str, object]:
        try:
            parsed = self._yaml.load(data.decode("utf-8"))
        except (UnicodeDecodeError, YAMLError) as exc:
            raise ValueError(f"Could not parse {self.kind} YAML: {exc}") from exc
        if not isinstance(parsed, dict):
            raise ValueError(f"{self.kind.capitalize()} YAML must be a mapping at the top level.")
        return parsed

    def _validate_raw(self, raw: dict[str, object]) -> list[ValidationIssue]:
        issues = validate_payload(raw, self.kind)
        if issues:
            return issues
        try:
            self.document_type.from_raw(raw)
        except ValidationError as exc:
            for error in exc.errors():
                path_str = ".".join(str(part) for part in error.get("loc", ()))
                issues.append(ValidationIssue(path=path_str, message=error.get("msg", "")))
        return issues

    def validate(self, path: Path) -> list[ValidationIssue]:
        return self._validate_raw(self._parse_bytes(path.read_bytes()))

    def _document(self, data: bytes) -> CorpusDocument | LayoutsDocument:
        raw = self._parse_bytes(data)
        issues = self._validate_raw(raw)
        if issues:
            raise ValueError(f"{self.kind.capitalize()} validation failed: {_format_issues(issues)}")
        return self.document_type.from_raw(raw)


class YamlCorpusLoader(_YamlDocumentLoader):
    kind = "corpus"
    document_type = CorpusDocument

    def load_bytes(self, data: bytes) -> TextCorpus:
        return cast(CorpusDocument, self._document(data)).corpus

    def load(self, path: Path) -> TextCorpus:
        return self.load_bytes(path.read_bytes())


class YamlLayoutLoader(_YamlDocumentLoader):
    kind = "layouts"
    document_type = LayoutsDocument

    def load_bytes(self, data: bytes) -> list[KeyboardLayout]:
        return cast(LayoutsDocument, self._document(data)).layouts

    def load(self, path: Path) -> list[KeyboardLayout]:
        return self.load_bytes(path.read_bytes())
